##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Tests for the configfile.py module.
"""

import os

import pytest
import yaml
from pytest_mock import MockerFixture

from tabula.config import MappingSettings
from tabula.config.config_filepaths import APP_FILENAME, DEFAULT_DB_PATH
from tabula.config.configfile import (
    find_config_file,
    get_config,
    get_default_config,
    get_settings,
    is_debug,
    load_config,
    load_defaults,
)
from tabula.exceptions import ConfigurationError
from tests.fixture_types import FixtureCallable, FixtureStr


@pytest.fixture(scope="session")
def configfile_testing_dir(create_testing_dir: FixtureCallable, config_testing_dir: FixtureStr) -> FixtureStr:
    """
    Fixture to create a temporary output directory for tests related to testing the
    `configfile.py` module.

    Args:
        create_testing_dir: A fixture which returns a function that creates the testing directory.
        config_testing_dir: The path to the temporary ouptut directory for config tests.

    Returns:
        The path to the temporary testing directory for tests of the `configfile.py` module
    """
    return create_testing_dir(config_testing_dir, "configfile_tests")


@pytest.fixture
def isolated_search_paths(mocker: MockerFixture, tmp_path, monkeypatch) -> FixtureStr:
    """
    Point every location `find_config_file` searches at empty temporary directories.

    Args:
        mocker: PyTest mocker fixture.
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
        monkeypatch: A built-in fixture from the pytest library to modify the environment.

    Returns:
        The path to the directory standing in for `TABULA_HOME`.
    """
    home = tmp_path / "home"
    cwd = tmp_path / "cwd"
    home.mkdir()
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    mocker.patch("tabula.config.configfile.TABULA_HOME", str(home))
    mocker.patch("tabula.config.configfile.CONFIG_PATH_FILE", str(home / "config_path.txt"))
    return str(home)


def write_app_yaml(directory: str, contents: dict) -> str:
    """
    Write a `tabula.yaml` file into `directory`.

    Args:
        directory: Where to write the file.
        contents: The configuration to write.

    Returns:
        The path to the new file.
    """
    app_yaml = os.path.join(directory, APP_FILENAME)
    with open(app_yaml, "w") as app_file:
        yaml.dump(contents, app_file)
    return app_yaml


def test_load_config(configfile_testing_dir: FixtureStr):
    """
    Test that `load_config` reads a YAML file into a dictionary.

    Args:
        configfile_testing_dir: The directory used for testing configurations.
    """
    app_yaml = write_app_yaml(configfile_testing_dir, {"mapping": {"identity_field": "key"}})

    assert load_config(app_yaml) == {"mapping": {"identity_field": "key"}}


def test_load_config_empty_file(tmp_path):
    """
    Test that an empty file loads as an empty dictionary.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    empty = tmp_path / APP_FILENAME
    empty.write_text("")

    assert load_config(str(empty)) == {}


def test_load_config_missing_file(tmp_path):
    """
    Test that a missing file loads as None.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    assert load_config(str(tmp_path / "nope.yaml")) is None


@pytest.mark.parametrize("contents, type_name", [("- mapping\n- logging\n", "list"), ("just text\n", "str")])
def test_load_config_rejects_non_mapping(tmp_path, contents: str, type_name: str):
    """
    Test that a file whose top level is not a mapping is rejected.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
        contents: The text of the configuration file.
        type_name: The type the top level of the file loads as.
    """
    app_yaml = tmp_path / APP_FILENAME
    app_yaml.write_text(contents)

    with pytest.raises(ConfigurationError, match=f"not a {type_name}"):
        load_config(str(app_yaml))
    with pytest.raises(ConfigurationError):
        get_config(str(tmp_path))


def test_find_config_file_explicit_path(tmp_path):
    """
    Test that an explicit directory is the only place searched.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    assert find_config_file(str(tmp_path)) is None

    app_yaml = write_app_yaml(str(tmp_path), {})
    assert find_config_file(str(tmp_path)) == app_yaml


def test_find_config_file_none_found(isolated_search_paths: FixtureStr):
    """
    Test that None is returned when no location holds a configuration file.

    Args:
        isolated_search_paths: The directory standing in for `TABULA_HOME`.
    """
    assert find_config_file() is None


def test_find_config_file_search_order(isolated_search_paths: FixtureStr, tmp_path):
    """
    Test that the current directory wins over the config path file, which wins over `TABULA_HOME`.

    Args:
        isolated_search_paths: The directory standing in for `TABULA_HOME`.
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    home_yaml = write_app_yaml(isolated_search_paths, {})
    assert find_config_file() == home_yaml

    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    pointed_yaml = write_app_yaml(str(elsewhere), {})
    with open(os.path.join(isolated_search_paths, "config_path.txt"), "w") as path_file:
        path_file.write(f"{pointed_yaml}\n")
    assert find_config_file() == pointed_yaml

    local_yaml = write_app_yaml(os.getcwd(), {})
    assert find_config_file() == local_yaml


def test_get_default_config():
    """
    Test the contents of the default configuration.
    """
    assert get_default_config() == {
        "mapping": {"ignore_suffix": "_", "identity_field": "id", "null_token": "<null>"},
        "logging": {"level": "INFO", "colors": True},
        "database": {"path": DEFAULT_DB_PATH},
    }


def test_load_defaults():
    """
    Test that missing sections and keys are filled in and the database path is expanded.
    """
    config = {"mapping": {"identity_field": "key"}, "database": {"path": "~/data/app.db"}, "logging": None}

    load_defaults(config)

    assert config["mapping"] == {"ignore_suffix": "_", "identity_field": "key", "null_token": "<null>"}
    assert config["logging"] == {"level": "INFO", "colors": True}
    assert config["database"]["path"] == os.path.join(os.path.expanduser("~"), "data", "app.db")


def test_get_config_without_file(isolated_search_paths: FixtureStr):
    """
    Test that the defaults are used when there is no configuration file.

    Args:
        isolated_search_paths: The directory standing in for `TABULA_HOME`.
    """
    assert get_config() == get_default_config()


def test_get_config_with_file(isolated_search_paths: FixtureStr):
    """
    Test that a configuration file is merged over the defaults.

    Args:
        isolated_search_paths: The directory standing in for `TABULA_HOME`.
    """
    write_app_yaml(isolated_search_paths, {"logging": {"level": "DEBUG"}, "mapping": {"null_token": "NULL"}})

    config = get_config()

    assert config["logging"] == {"level": "DEBUG", "colors": True}
    assert config["mapping"]["null_token"] == "NULL"
    assert config["mapping"]["identity_field"] == "id"


def test_get_settings(tmp_path):
    """
    Test that the mapping section is turned into `MappingSettings`.

    Args:
        tmp_path: A built-in fixture from the pytest library providing a temporary directory.
    """
    write_app_yaml(str(tmp_path), {"mapping": {"ignore_suffix": "Tmp", "identity_field": "rowId"}})

    assert get_settings(str(tmp_path)) == MappingSettings(ignore_suffix="Tmp", identity_field="rowId")


@pytest.mark.parametrize("value, expected", [("1", True), ("0", False), (None, False)])
def test_is_debug(monkeypatch, value: str, expected: bool):
    """
    Test that debug mode follows the `TABULA_DEBUG` environment variable.

    Args:
        monkeypatch: A built-in fixture from the pytest library to modify the environment.
        value: The value of `TABULA_DEBUG`, or None to leave it unset.
        expected: Whether debug mode should be on.
    """
    if value is None:
        monkeypatch.delenv("TABULA_DEBUG", raising=False)
    else:
        monkeypatch.setenv("TABULA_DEBUG", value)

    assert is_debug() is expected
