##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
SQLite implementation of the [`DatabaseDriver`][backends.driver.DatabaseDriver] interface.

The driver expects a connection that does not open transactions implicitly
(`isolation_level=None`, or `autocommit=True` on Python 3.12+), which is how
[`SQLiteConnection`][backends.sqlite.sqlite_connection.SQLiteConnection] opens
them. Transactions are then controlled explicitly with `BEGIN`, `COMMIT`, and
`ROLLBACK`.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Sequence

from tabula.backends.driver import DatabaseDriver
from tabula.exceptions import DriverError


LOG = logging.getLogger(__name__)


class SQLiteDriver(DatabaseDriver):
    """
    A `DatabaseDriver` backed by a `sqlite3.Connection`.

    Every `sqlite3.Error` raised by the connection is re-raised as a
    [`DriverError`][exceptions.DriverError].

    Attributes:
        conn (sqlite3.Connection): The wrapped connection.

    Methods:
        execute: Execute a statement that returns no rows.
        insert: Insert one row and return its row id.
        update: Update the rows matching a where clause.
        delete: Delete the rows matching a where clause.
        query: Run a query and return every resulting row.
        begin_transaction: Start a transaction.
        mark_successful: Flag the current transaction to be committed.
        end_transaction: Commit or roll back the current transaction.
        close: Close the wrapped connection.
    """

    def __init__(self, conn: sqlite3.Connection):
        """
        Wrap an open connection.

        Args:
            conn: The connection to wrap. Its row factory is set to `sqlite3.Row`.
        """
        self.conn: sqlite3.Connection = conn
        self.conn.row_factory = sqlite3.Row
        self._in_transaction: bool = False
        self._successful: bool = False

    def _run(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Execute a statement, translating SQLite errors into `DriverError`."""
        LOG.debug(f"SQLite statement: {sql}")
        if params:
            LOG.debug(f"SQLite params: {list(params)}")
        try:
            return self.conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            raise DriverError(f"SQLite rejected '{sql}': {exc}") from exc

    def execute(self, sql: str):
        """
        Execute a statement that returns no rows.

        Args:
            sql: The statement to execute.
        """
        self._run(sql)

    def insert(self, table: str, values: Dict[str, Any]) -> int:
        """
        Insert one row.

        Args:
            table: The table to insert into.
            values: The storage values keyed by column name. When empty, a
                row of column defaults is inserted.

        Returns:
            The row id of the new row.
        """
        if values:
            columns = ", ".join(values.keys())
            placeholders = ", ".join("?" for _ in values)
            sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        else:
            sql = f"INSERT INTO {table} DEFAULT VALUES"
        return self._run(sql, list(values.values())).lastrowid

    def update(self, table: str, values: Dict[str, Any], where_clause: str, params: Sequence[Any]) -> int:
        """
        Update the rows matching a where clause.

        Args:
            table: The table to update.
            values: The new storage values keyed by column name.
            where_clause: A `WHERE` clause (without the keyword) using `?` placeholders.
            params: The values for the placeholders in `where_clause`.

        Returns:
            The number of rows updated.
        """
        if not values:
            LOG.warning(f"Nothing to update in {table}: no columns besides the identity column")
            return 0

        set_str = ", ".join(f"{column} = ?" for column in values)
        sql = f"UPDATE {table} SET {set_str}"
        if where_clause:
            sql += f" WHERE {where_clause}"
        return self._run(sql, list(values.values()) + list(params)).rowcount

    def delete(self, table: str, where_clause: str, params: Sequence[Any]) -> int:
        """
        Delete the rows matching a where clause.

        Args:
            table: The table to delete from.
            where_clause: A `WHERE` clause (without the keyword) using `?` placeholders.
            params: The values for the placeholders in `where_clause`.

        Returns:
            The number of rows deleted.
        """
        sql = f"DELETE FROM {table}"
        if where_clause:
            sql += f" WHERE {where_clause}"
        return self._run(sql, params).rowcount

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """
        Run a query and read the whole result.

        Args:
            sql: The query to run.
            params: The values for the `?` placeholders in `sql`.

        Returns:
            Every resulting row.
        """
        cursor = self._run(sql, params)
        try:
            return cursor.fetchall()
        except sqlite3.Error as exc:
            raise DriverError(f"SQLite failed while reading the result of '{sql}': {exc}") from exc
        finally:
            cursor.close()

    def begin_transaction(self):
        """
        Start a transaction.

        Raises:
            (exceptions.DriverError): If a transaction is already active.
        """
        if self._in_transaction:
            raise DriverError("A transaction is already active on this connection; nesting is not supported.")
        self._run("BEGIN")
        self._in_transaction = True
        self._successful = False

    def mark_successful(self):
        """
        Flag the current transaction so that `end_transaction` commits it.

        Raises:
            (exceptions.DriverError): If no transaction is active.
        """
        if not self._in_transaction:
            raise DriverError("No active transaction to mark as successful.")
        self._successful = True

    def end_transaction(self):
        """
        Commit the current transaction if it was marked successful, otherwise roll it back.

        Raises:
            (exceptions.DriverError): If no transaction is active or the commit fails.
        """
        if not self._in_transaction:
            raise DriverError("No active transaction to end.")

        try:
            if self._successful:
                self._run("COMMIT")
            else:
                self._run("ROLLBACK")
        except DriverError:
            if self.conn.in_transaction:
                LOG.warning("Ending the transaction failed; rolling back.")
                try:
                    self.conn.execute("ROLLBACK")
                except sqlite3.Error as exc:
                    LOG.error(f"Rolling back after the failed transaction end also failed: {exc}")
            raise
        finally:
            self._in_transaction = False
            self._successful = False

    def close(self):
        """Close the wrapped connection."""
        self.conn.close()
