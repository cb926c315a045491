##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
SQLite connection context manager.

This module defines the `SQLiteConnection` class, which opens a configured
SQLite connection, wraps it in a [`SQLiteDriver`][backends.sqlite.sqlite_driver.SQLiteDriver],
and guarantees the connection is closed on exit.
"""

import logging
import sqlite3
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from tabula.backends.sqlite.sqlite_driver import SQLiteDriver


LOG = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class SQLiteConnection:
    """
    Context manager for establishing and safely closing a SQLite database connection.

    Connections are opened with:
    - autocommit behaviour, so transactions are only started by the driver's
      `begin_transaction`
    - WAL mode for better concurrency
    - Foreign key constraint enforcement
    - Dictionary-style row access via `sqlite3.Row`

    Attributes:
        db_path (str): The database file to open, or `:memory:`.
        driver (SQLiteDriver): The driver for the active connection.

    Methods:
        __enter__:
            Opens and configures the SQLite connection when entering the context.

        __exit__:
            Closes the SQLite connection when exiting the context, handling any exceptions.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the SQLiteConnection context manager.

        Args:
            db_path: The database file to open. Defaults to the `database.path`
                setting of the configuration.
        """
        self.db_path: Optional[str] = db_path
        self.driver: Optional[SQLiteDriver] = None

    def __enter__(self) -> SQLiteDriver:
        """
        Enters the runtime context related to this object and creates a sqlite connection.

        Returns:
            A driver for the new connection.
        """
        if self.db_path is None:
            from tabula.config.configfile import get_config  # pylint: disable=import-outside-toplevel

            self.db_path = get_config()["database"]["path"]

        if self.db_path != MEMORY_DB:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        connection_kwargs = {"check_same_thread": False}
        if sys.version_info < (3, 12):  # Autocommit wasn't added until python 3.12
            connection_kwargs["isolation_level"] = None
        else:
            connection_kwargs["autocommit"] = True

        LOG.debug(f"Opening SQLite database at {self.db_path}")
        conn = sqlite3.connect(self.db_path, **connection_kwargs)

        # Enable WAL mode for better concurrent access
        conn.execute("PRAGMA journal_mode=WAL")
        # Enable foreign key constraints
        conn.execute("PRAGMA foreign_keys=ON")

        # This enables name-based access to columns
        conn.row_factory = sqlite3.Row

        self.driver = SQLiteDriver(conn)
        return self.driver

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        """
        Exits the runtime context and performs cleanup.

        This method closes the connection if it's still open.

        Args:
            exc_type: The exception type raised, if any.
            exc_value: The exception instance raised, if any.
            traceback: The traceback object, if an exception was raised.
        """
        if self.driver:
            self.driver.close()
