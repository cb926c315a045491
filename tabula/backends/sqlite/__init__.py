##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
SQLite driver for Tabula.

Modules:
    sqlite_connection: Provides a context-managed SQLite connection with safe configuration.
    sqlite_driver: Implements the `DatabaseDriver` interface on a `sqlite3.Connection`.
"""

from tabula.backends.sqlite.sqlite_connection import SQLiteConnection
from tabula.backends.sqlite.sqlite_driver import SQLiteDriver


__all__ = ["SQLiteConnection", "SQLiteDriver"]
