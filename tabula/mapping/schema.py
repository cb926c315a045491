##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
`CREATE TABLE` statement generation.

The statement text is a pure function of the descriptor, so the same record
type always produces byte-identical SQL:

```
CREATE TABLE RECORD(ID INTEGER PRIMARY KEY AUTOINCREMENT,NAME TEXT,CREATED_AT INTEGER)
CREATE TABLE RESULT(USER_ID INTEGER NOT NULL,GAME_ID INTEGER NOT NULL,PRIMARY KEY (USER_ID, GAME_ID))
```
"""

import logging

from tabula.mapping.descriptor import ColumnDescriptor, EntityDescriptor


LOG = logging.getLogger(__name__)


def _column_definition(column: ColumnDescriptor) -> str:
    if column.is_identity:
        return f"{column.column_name} INTEGER PRIMARY KEY AUTOINCREMENT"
    definition = f"{column.column_name} {column.affinity.value}"
    if not column.nullable:
        definition += " NOT NULL"
    return definition


def generate_create_table(descriptor: EntityDescriptor, if_not_exists: bool = False) -> str:
    """
    Generate the `CREATE TABLE` statement for a descriptor.

    Columns are emitted in descriptor order. A table keyed by its identity
    column declares the key inline; any other key is added as a trailing
    `PRIMARY KEY (...)` clause in key order.

    Args:
        descriptor: The descriptor of the table to create.
        if_not_exists: Emit `CREATE TABLE IF NOT EXISTS` instead.

    Returns:
        The statement text.
    """
    definitions = [_column_definition(column) for column in descriptor.columns]
    if not descriptor.has_identity_key:
        definitions.append(f"PRIMARY KEY ({', '.join(descriptor.primary_key_columns)})")

    prefix = "CREATE TABLE IF NOT EXISTS" if if_not_exists else "CREATE TABLE"
    sql = f"{prefix} {descriptor.table_name}({','.join(definitions)})"
    LOG.debug(f"Create statement for {descriptor.record_type.__name__}: {sql}")
    return sql
