##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Tests for the `sqlite_connection.py` module.
"""

import os
import sqlite3
import sys
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from tabula.backends.sqlite.sqlite_connection import MEMORY_DB, SQLiteConnection
from tabula.backends.sqlite.sqlite_driver import SQLiteDriver
from tests.fixture_types import FixtureDict


@pytest.fixture
def mock_sqlite_components(mocker: MockerFixture) -> FixtureDict[str, MagicMock]:
    """
    Fixture to patch all external dependencies used by SQLiteConnection.

    Args:
        mocker: PyTest mocker fixture.

    Returns:
        A dictionary of mocked sqlite connection components.
    """
    # Patch get_config to return a fake path
    mock_db_path = os.path.join("tmp", "fake", "tabula.db")
    mock_get_config = mocker.patch(
        "tabula.config.configfile.get_config", return_value={"database": {"path": mock_db_path}}
    )

    # Patch Path.mkdir so it doesn't touch the filesystem
    mock_mkdir = mocker.patch("pathlib.Path.mkdir")

    # Patch sqlite3.connect
    mock_conn = MagicMock(spec=sqlite3.Connection)
    mock_connect = mocker.patch("sqlite3.connect", return_value=mock_conn)

    return {
        "mock_db_path": mock_db_path,
        "mock_get_config": mock_get_config,
        "mock_mkdir": mock_mkdir,
        "mock_connect": mock_connect,
        "mock_conn": mock_conn,
    }


def test_connection_enter_sets_up_connection(mock_sqlite_components: FixtureDict[str, MagicMock]):
    """
    Test that `__enter__` correctly initializes the SQLite connection with expected settings.

    Args:
        mock_sqlite_components: A dictionary of mocked sqlite connection components.
    """
    conn_mock = mock_sqlite_components["mock_conn"]

    with SQLiteConnection() as driver:
        assert isinstance(driver, SQLiteDriver)
        assert driver.conn is conn_mock

    mock_sqlite_components["mock_get_config"].assert_called_once()
    mock_sqlite_components["mock_mkdir"].assert_called_once_with(parents=True, exist_ok=True)
    autocommit_kwargs = {"autocommit": True} if sys.version_info >= (3, 12) else {"isolation_level": None}
    mock_sqlite_components["mock_connect"].assert_called_once_with(
        mock_sqlite_components["mock_db_path"],
        check_same_thread=False,
        **autocommit_kwargs,
    )
    conn_mock.execute.assert_any_call("PRAGMA journal_mode=WAL")
    conn_mock.execute.assert_any_call("PRAGMA foreign_keys=ON")
    assert conn_mock.row_factory == sqlite3.Row


def test_connection_explicit_path(mock_sqlite_components: FixtureDict[str, MagicMock]):
    """
    Test that an explicit database path bypasses the configuration.

    Args:
        mock_sqlite_components: A dictionary of mocked sqlite connection components.
    """
    db_path = os.path.join("tmp", "other.db")

    with SQLiteConnection(db_path):
        pass

    mock_sqlite_components["mock_get_config"].assert_not_called()
    assert mock_sqlite_components["mock_connect"].call_args.args[0] == db_path


def test_connection_memory_database(mock_sqlite_components: FixtureDict[str, MagicMock]):
    """
    Test that no directory is created for an in-memory database.

    Args:
        mock_sqlite_components: A dictionary of mocked sqlite connection components.
    """
    with SQLiteConnection(MEMORY_DB):
        pass

    mock_sqlite_components["mock_mkdir"].assert_not_called()
    assert mock_sqlite_components["mock_connect"].call_args.args[0] == MEMORY_DB


def test_connection_exit_closes_connection(mock_sqlite_components: FixtureDict[str, MagicMock]):
    """
    Test that `__exit__` closes the SQLite connection.

    Args:
        mock_sqlite_components: A dictionary of mocked sqlite connection components.
    """
    conn_mock = mock_sqlite_components["mock_conn"]
    sqlite_conn = SQLiteConnection(MEMORY_DB)
    sqlite_conn.driver = SQLiteDriver(conn_mock)

    sqlite_conn.__exit__(None, None, None)

    conn_mock.close.assert_called_once()


def test_connection_closed_on_error(mock_sqlite_components: FixtureDict[str, MagicMock]):
    """
    Test that the connection is closed when the block raises.

    Args:
        mock_sqlite_components: A dictionary of mocked sqlite connection components.
    """
    with pytest.raises(RuntimeError):
        with SQLiteConnection(MEMORY_DB):
            raise RuntimeError("boom")

    mock_sqlite_components["mock_conn"].close.assert_called_once()


def test_real_file_database(tmp_path):
    """
    Test opening a database file in a directory that does not exist yet.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    db_path = tmp_path / "nested" / "dir" / "tabula.db"

    with SQLiteConnection(str(db_path)) as driver:
        driver.execute("CREATE TABLE T(A INTEGER)")
        driver.insert("T", {"A": 1})

    assert db_path.exists()
    with SQLiteConnection(str(db_path)) as driver:
        assert [row["A"] for row in driver.query("SELECT A FROM T")] == [1]
