##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
This module defines the abstract base class for all database drivers used by Tabula.

The `DatabaseDriver` class outlines the minimal interface that the repository
relies on. Implementations are expected to raise
[`DriverError`][exceptions.DriverError] when the database rejects a statement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Sequence


class DatabaseDriver(ABC):
    """
    Base class for all database drivers supported by Tabula.

    Methods:
        execute: Execute a statement that returns no rows (e.g. DDL).
        insert: Insert one row and return its row id.
        update: Update the rows matching a where clause.
        delete: Delete the rows matching a where clause.
        query: Run a query and return every resulting row.
        begin_transaction: Start a transaction.
        mark_successful: Flag the current transaction to be committed.
        end_transaction: Commit the transaction if it was marked successful, otherwise roll it back.
    """

    @abstractmethod
    def execute(self, sql: str):
        """
        Execute a statement that returns no rows.

        Args:
            sql: The statement to execute.
        """
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement an `execute` method.")

    @abstractmethod
    def insert(self, table: str, values: Dict[str, Any]) -> int:
        """
        Insert a row built from a column to value mapping.

        Args:
            table: The table to insert into.
            values: The storage values keyed by column name.

        Returns:
            The row id of the new row.
        """
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement an `insert` method.")

    @abstractmethod
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
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement an `update` method.")

    @abstractmethod
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
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement a `delete` method.")

    @abstractmethod
    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Mapping[str, Any]]:
        """
        Run a query and read the whole result.

        Args:
            sql: The query to run.
            params: The values for the `?` placeholders in `sql`.

        Returns:
            Every resulting row. Each row supports `keys()` and lookup by column
            name or by position.
        """
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement a `query` method.")

    @abstractmethod
    def begin_transaction(self):
        """Start a transaction."""
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement a `begin_transaction` method.")

    @abstractmethod
    def mark_successful(self):
        """Flag the current transaction so that `end_transaction` commits it."""
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement a `mark_successful` method.")

    @abstractmethod
    def end_transaction(self):
        """Commit the current transaction if it was marked successful, otherwise roll it back."""
        raise NotImplementedError("Subclasses of `DatabaseDriver` must implement an `end_transaction` method.")
