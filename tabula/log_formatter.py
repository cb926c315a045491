##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""This module handles setting up logging for applications that use Tabula."""

import logging
import sys
from typing import Dict

import coloredlogs

from tabula.config.configfile import is_debug


FORMATS = {
    "DEFAULT": "[%(asctime)s: %(levelname)s] %(message)s",
    "DEBUG": "[%(asctime)s: %(levelname)s] [%(module)s: %(lineno)d] %(message)s",
}


def setup_logging(logger: logging.Logger, log_level: str = "INFO", colors: bool = True):
    """
    Setup and configure Python logging.

    Args:
        logger: A logging.Logger object.
        log_level: Logger level.
        colors: If True use colored logs.
    """
    if is_debug():
        log_level = "DEBUG"
    fmt = FORMATS["DEBUG"] if log_level == "DEBUG" else FORMATS["DEFAULT"]

    formatter = logging.Formatter(fmt)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.setLevel(log_level)
    logger.propagate = False

    if colors is True:
        coloredlogs.install(level=log_level, logger=logger, fmt=fmt)


def setup_logging_from_config(config: Dict) -> logging.Logger:
    """
    Configure the `tabula` logger from the `logging` section of a configuration.

    Args:
        config: A configuration dictionary as returned by
            [`get_config`][config.configfile.get_config].

    Returns:
        The configured `tabula` logger.
    """
    logger = logging.getLogger("tabula")
    section = config.get("logging", {})
    setup_logging(logger, log_level=str(section.get("level", "INFO")).upper(), colors=bool(section.get("colors", True)))
    return logger
