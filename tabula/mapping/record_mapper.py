##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Conversion between record instances and storage values.

Writes turn a record into a `{column: storage value}` mapping and reads turn
a result row back into a new record. Both directions go column by column
through the converters held by the record type's descriptor.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from tabula.exceptions import ConversionError, TypeMismatchError
from tabula.mapping.descriptor import EntityDescriptor, get_descriptor


LOG = logging.getLogger(__name__)


def to_storage_values(descriptor: EntityDescriptor, record: Any) -> Dict[str, Any]:
    """
    Encode a record's fields for an insert or update.

    The identity column is left out since its value is assigned by the database.

    Args:
        descriptor: The descriptor of the record's type.
        record: The record to encode.

    Returns:
        A dictionary of column names to storage values, in column order.

    Raises:
        (exceptions.TypeMismatchError): If `record` is not an instance of the
            descriptor's type, if a field holds a value of the wrong type, or
            if a `NOT NULL` field holds None.
    """
    if not isinstance(record, descriptor.record_type):
        raise TypeMismatchError(
            f"Expected a {descriptor.record_type.__name__} record but got {type(record).__name__}"
        )

    values = {}
    for column in descriptor.columns:
        if column.is_identity:
            continue

        value = getattr(record, column.field_name)
        if value is None:
            if not column.nullable:
                raise TypeMismatchError(
                    f"{descriptor.record_type.__name__}.{column.field_name} is None but column "
                    f"{column.column_name} is NOT NULL"
                )
            values[column.column_name] = None
            continue

        try:
            values[column.column_name] = column.converter.encode(value)
        except TypeMismatchError as exc:
            raise TypeMismatchError(f"{descriptor.record_type.__name__}.{column.field_name}: {exc}") from exc
        except ConversionError as exc:
            raise ConversionError(f"{descriptor.record_type.__name__}.{column.field_name}: {exc}") from exc
    return values


def from_row(descriptor: EntityDescriptor, row: Mapping[str, Any]) -> Any:
    """
    Create a record from a result row.

    Only the columns present in the row are read; fields whose column is
    missing (for example when the query selected fewer columns) keep their
    default values. Column names are matched without regard to case.

    Args:
        descriptor: The descriptor of the record type to create.
        row: Any object with `keys()` and name-based `__getitem__`, such as a
            `sqlite3.Row` or a dict.

    Returns:
        A new instance of the descriptor's record type.

    Raises:
        (exceptions.ConversionError): If a stored value cannot be decoded.
    """
    present = {key.upper(): key for key in row.keys()}

    init_values = {}
    late_values = {}
    for column in descriptor.columns:
        key = present.get(column.column_name.upper())
        if key is None:
            continue

        raw = row[key]
        if raw is None:
            value = None if column.nullable else column.converter.null_default
        else:
            try:
                value = column.converter.decode(raw)
            except ConversionError as exc:
                raise ConversionError(
                    f"{descriptor.table_name}.{column.column_name} could not be read into "
                    f"{descriptor.record_type.__name__}.{column.field_name}: {exc}"
                ) from exc

        if column.init:
            init_values[column.field_name] = value
        else:
            late_values[column.field_name] = value

    record = descriptor.record_type(**init_values)
    for field_name, value in late_values.items():
        # Works for frozen dataclasses too
        object.__setattr__(record, field_name, value)
    return record


def describe(record: Any, descriptor: Optional[EntityDescriptor] = None) -> str:
    """
    Render a record for logging as `TypeName[field1=value1,field2=value2]`.

    Fields appear in column order and None values are shown with the
    descriptor's null token (`<null>` by default).

    Args:
        record: The record to render.
        descriptor: The descriptor of the record's type. Looked up from the
            cache when not given.

    Returns:
        The rendered record.
    """
    descriptor = descriptor or get_descriptor(type(record))
    null_token = descriptor.settings.null_token

    rendered = []
    for column in descriptor.columns:
        value = getattr(record, column.field_name)
        rendered.append(f"{column.field_name}={null_token if value is None else value}")
    return f"{type(record).__name__}[{','.join(rendered)}]"
