##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Module of all Tabula-specific exception types.
"""

# Pylint complains that these exceptions are no different from Exception
# but we don't care, we just need new names for exceptions here
# pylint: disable=W0235

__all__ = (
    "TabulaError",
    "ConfigurationError",
    "TypeMismatchError",
    "ConversionError",
    "DriverError",
)


class TabulaError(Exception):
    """
    Base class for every error raised by Tabula.
    """


class ConfigurationError(TabulaError):
    """
    Exception to signal that a record type cannot be mapped onto a table.
    Raised while building a descriptor (unsupported field types, missing or
    conflicting primary keys, etc.) and when `tabula.yaml` is malformed.
    Never worth retrying.
    """

    def __init__(self, message):
        super().__init__(message)


class TypeMismatchError(TabulaError, TypeError):
    """
    Exception to signal that a record's field value does not match the
    semantic type declared for that field.
    """

    def __init__(self, message):
        super().__init__(message)


class ConversionError(TabulaError, ValueError):
    """
    Exception to signal that a value could not be converted between its
    record form and its storage form (e.g. a malformed timestamp string).
    """

    def __init__(self, message):
        super().__init__(message)


class DriverError(TabulaError):
    """
    Exception to signal that the underlying database rejected a statement
    or a transaction step.
    """

    def __init__(self, message):
        super().__init__(message)
