##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Identifier translation between record field names and table column names.

Field and class names are written in camelCase (`userId`, `UserMaster`) and
columns and tables are upper-case and underscore separated (`USER_ID`,
`USER_MASTER`). Only this direction is needed: column names are never mapped
back to field names, each column carries its field name alongside it.
"""

from tabula.exceptions import ConfigurationError


def to_column_name(identifier: str) -> str:
    """
    Convert a camelCase identifier to its column form.

    An underscore is inserted before every upper-case ASCII letter after the
    first character and the result is upper-cased. The first character is
    copied as is, so `_id` becomes `_ID` and `UserMaster` becomes `USER_MASTER`.

    Args:
        identifier: The field or class name to convert.

    Returns:
        The column (or table) name.

    Raises:
        (exceptions.ConfigurationError): If `identifier` is empty.
    """
    if not identifier:
        raise ConfigurationError("Cannot derive a column name from an empty identifier.")

    converted = [identifier[0]]
    for char in identifier[1:]:
        if "A" <= char <= "Z":
            converted.append("_")
        converted.append(char)
    return "".join(converted).upper()
