##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Statement text and parameters for reads and key-based writes.

`SELECT` statements are built as text. Inserts, updates, and deletes are
carried out by the driver's own primitives, so for those this module only
produces the key `WHERE` clause and its ordered parameters.

Clauses handed to [`build_select`][mapping.query_builder.build_select] are
inserted verbatim. Callers are responsible for using `?` placeholders rather
than literal values in them.
"""

from typing import Any, List, Optional, Tuple

from tabula.exceptions import TypeMismatchError
from tabula.mapping.descriptor import EntityDescriptor


def build_select(
    descriptor: EntityDescriptor, where_clause: Optional[str] = None, order_clause: Optional[str] = None
) -> str:
    """
    Build a `SELECT * FROM <table>` statement.

    Args:
        descriptor: The descriptor of the table to read.
        where_clause: Text appended after `WHERE`, if given.
        order_clause: Text appended after the where clause, if given
            (e.g. `ORDER BY NAME DESC`).

    Returns:
        The statement text.
    """
    sql = f"SELECT * FROM {descriptor.table_name}"
    if where_clause is not None:
        sql += f" WHERE {where_clause}"
    if order_clause is not None:
        sql += f" {order_clause}"
    return sql


def build_where_for_keys(descriptor: EntityDescriptor) -> Tuple[str, List[str]]:
    """
    Build the `WHERE` clause that matches a single row by its primary key.

    Args:
        descriptor: The descriptor of the table.

    Returns:
        A tuple of the clause (`A=? AND B=?`) and the key column names in
        the order their parameters must be supplied.
    """
    keys = list(descriptor.primary_key_columns)
    return " AND ".join(f"{key}=?" for key in keys), keys


def key_params(descriptor: EntityDescriptor, record: Any) -> List[Any]:
    """
    Read the primary key values of a record in key order.

    Each value is encoded the same way it is stored so it compares equal to
    the stored column value.

    Args:
        descriptor: The descriptor of the record's type.
        record: The record whose key to read.

    Returns:
        The parameters for the clause from
        [`build_where_for_keys`][mapping.query_builder.build_where_for_keys].

    Raises:
        (exceptions.TypeMismatchError): If a key field is None or of the wrong type.
    """
    params = []
    for column in descriptor.key_columns:
        value = getattr(record, column.field_name)
        if value is None:
            raise TypeMismatchError(
                f"{type(record).__name__}.{column.field_name} is None; a key value is required to address a row"
            )
        params.append(column.converter.encode(value))
    return params
