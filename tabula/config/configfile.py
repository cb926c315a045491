##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
This module provides functionality for locating and loading Tabula's
configuration file (`tabula.yaml`) and for filling in default settings.

Unlike an application, a library must work without any configuration file,
so every lookup here falls back to the defaults from `get_default_config`.
"""
import logging
import os
from typing import Dict, Optional

from tabula.config import MappingSettings
from tabula.config.config_filepaths import APP_FILENAME, CONFIG_PATH_FILE, DEFAULT_DB_PATH, TABULA_HOME
from tabula.exceptions import ConfigurationError
from tabula.utils import load_yaml


LOG: logging.Logger = logging.getLogger(__name__)


def load_config(filepath: str) -> Optional[Dict]:
    """
    Reads a Tabula YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath: The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.

    Raises:
        (exceptions.ConfigurationError): If the top level of the file is not a mapping.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    contents = load_yaml(filepath)
    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ConfigurationError(
            f"The app config file {filepath} must contain a mapping of sections, not a {type(contents).__name__}"
        )
    return contents


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the Tabula configuration file (`tabula.yaml`).

    If no directory is provided the following locations are checked in order:
      1. `tabula.yaml` in the current working directory.
      2. The file named inside `CONFIG_PATH_FILE`, if that file exists.
      3. `tabula.yaml` in the `TABULA_HOME` directory.

    If a `path` is explicitly provided, only that directory is checked.

    Args:
        path: A specific directory to look for `tabula.yaml`.

    Returns:
        The full path to the `tabula.yaml` file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        if os.path.isfile(CONFIG_PATH_FILE):
            with open(CONFIG_PATH_FILE, "r") as f:
                config_path = f.read().strip()
            if os.path.isfile(config_path):
                return config_path

        path_app = os.path.join(TABULA_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def get_default_config() -> Dict:
    """
    Creates the default configuration used when no file is found.

    Returns:
        A configuration dictionary with every section filled in.
    """
    defaults = MappingSettings()
    return {
        "mapping": {
            "ignore_suffix": defaults.ignore_suffix,
            "identity_field": defaults.identity_field,
            "null_token": defaults.null_token,
        },
        "logging": {"level": "INFO", "colors": True},
        "database": {"path": DEFAULT_DB_PATH},
    }


def load_defaults(config: Dict):
    """
    Fill in any section or key missing from `config` with its default value.

    Args:
        config: The configuration dictionary to be updated in place.
    """
    for section, values in get_default_config().items():
        if not isinstance(config.get(section), dict):
            config[section] = {}
        for key, value in values.items():
            config[section].setdefault(key, value)

    config["database"]["path"] = os.path.expanduser(config["database"]["path"])


def get_config(path: Optional[str] = None) -> Dict:
    """
    Loads a Tabula configuration file and returns a dictionary containing the configuration data.

    Args:
        path: The directory path to search for the configuration file.
            If `None`, default search paths are used.

    Returns:
        A dictionary containing all of the configuration data with defaults applied.
    """
    filepath = find_config_file(path)
    if filepath is None:
        LOG.debug("No tabula.yaml found; using the default configuration")
        config = get_default_config()
    else:
        config = load_config(filepath)
    load_defaults(config)
    return config


def get_settings(path: Optional[str] = None) -> MappingSettings:
    """
    Load the configuration and return its mapping settings.

    Args:
        path: The directory path to search for the configuration file.

    Returns:
        The `MappingSettings` described by the configuration.
    """
    return MappingSettings.from_config(get_config(path))


def is_debug() -> bool:
    """
    Determines whether the application is running in debug mode.

    This function checks the environment variable `TABULA_DEBUG`. If the variable
    exists and its value is set to `1`, debug mode is enabled.

    Returns:
        True if `TABULA_DEBUG` is set to `1` in the environment, otherwise False.
    """
    if "TABULA_DEBUG" in os.environ and int(os.environ["TABULA_DEBUG"]) == 1:
        return True
    return False
