##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
The public entry point for storing and loading records.

A [`Repository`][repository.Repository] is created once per database handle
and combines the descriptor cache, the statement builders, and the record
mapper to offer record-level operations:

```python
with SQLiteConnection("app.db") as db:
    repo = Repository(db)
    repo.create_table(UserMaster, if_not_exists=True)
    user_id = repo.insert(UserMaster(name="alice", created=datetime.now()))
    users = repo.list(UserMaster, "NAME=?", "alice", order_clause="ORDER BY CREATED DESC")
```
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Type, TypeVar

from tabula.backends.driver import DatabaseDriver
from tabula.config import MappingSettings
from tabula.config.configfile import get_settings
from tabula.mapping.affinity import encode_param
from tabula.mapping.descriptor import EntityDescriptor, get_descriptor
from tabula.mapping.query_builder import build_select, build_where_for_keys, key_params
from tabula.mapping.record_mapper import from_row, to_storage_values
from tabula.mapping.schema import generate_create_table


LOG = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

NO_IDENTITY = -1


class Repository:
    """
    Record-level access to a database.

    Attributes:
        db (DatabaseDriver): The driver every statement is sent through.
        settings (MappingSettings): The naming rules used to build descriptors.

    Methods:
        descriptor: Get the cached descriptor of a record type.
        create_table: Create the table for a record type.
        insert: Insert a record and return its identity value.
        update: Update the row addressed by a record's primary key.
        delete: Delete the row addressed by a record's primary key.
        query: Run arbitrary SQL and map every row with a callable.
        list: Load the records of a type matching an optional where clause.
        count: Run a single-value aggregate query.
    """

    def __init__(self, db: DatabaseDriver, settings: Optional[MappingSettings] = None):
        """
        Args:
            db: The driver for the database handle.
            settings: The naming rules to build descriptors with. Defaults to the
                `mapping` section of `tabula.yaml`, or the default rules when no file is found.
        """
        self.db: DatabaseDriver = db
        self.settings: MappingSettings = settings or get_settings()

    def descriptor(self, record_type: Type) -> EntityDescriptor:
        """
        Get the cached descriptor of a record type.

        Args:
            record_type: A dataclass type.

        Returns:
            The descriptor of `record_type`.
        """
        return get_descriptor(record_type, self.settings)

    def create_table(self, record_type: Type, if_not_exists: bool = False):
        """
        Create the table for a record type.

        Args:
            record_type: A dataclass type.
            if_not_exists: Skip creation when the table already exists.
        """
        self.db.execute(generate_create_table(self.descriptor(record_type), if_not_exists=if_not_exists))

    def insert(self, record: Any) -> int:
        """
        Insert a record.

        The identity field of `record` is ignored and left untouched; the
        database assigns the value, which is returned.

        Args:
            record: The record to insert.

        Returns:
            The identity value of the new row, or `NO_IDENTITY` (-1) when the
            record type has no identity field.
        """
        descriptor = self.descriptor(type(record))
        values = to_storage_values(descriptor, record)
        LOG.debug(f"insert [{descriptor.table_name}] {values}")
        row_id = self.db.insert(descriptor.table_name, values)
        LOG.debug(f"insert return : {row_id}")
        return row_id if descriptor.identity_column is not None else NO_IDENTITY

    def update(self, record: Any) -> int:
        """
        Update the row addressed by a record's primary key with the record's values.

        Args:
            record: The record holding the new values.

        Returns:
            The number of rows updated.
        """
        descriptor = self.descriptor(type(record))
        values = to_storage_values(descriptor, record)
        where_clause, _ = build_where_for_keys(descriptor)
        params = key_params(descriptor, record)
        LOG.debug(f"update [{descriptor.table_name}] {values} where {where_clause} {params}")
        affected = self.db.update(descriptor.table_name, values, where_clause, params)
        LOG.debug(f"update return : {affected}")
        return affected

    def delete(self, record: Any) -> int:
        """
        Delete the row addressed by a record's primary key.

        Args:
            record: The record to delete.

        Returns:
            The number of rows deleted.
        """
        descriptor = self.descriptor(type(record))
        where_clause, _ = build_where_for_keys(descriptor)
        params = key_params(descriptor, record)
        LOG.debug(f"delete [{descriptor.table_name}] where {where_clause} {params}")
        affected = self.db.delete(descriptor.table_name, where_clause, params)
        LOG.debug(f"delete return : {affected}")
        return affected

    def query(self, mapper: Callable[[Mapping[str, Any]], R], sql: str, *params: Any) -> List[R]:
        """
        Run a query and convert every resulting row with `mapper`.

        The whole result is read before this method returns.

        Args:
            mapper: Called once per row; its results are collected.
            sql: The query to run.
            *params: Values for the `?` placeholders in `sql`. Timestamps,
                booleans, and decimals are converted to their stored form.

        Returns:
            The mapped rows, in result order.
        """
        encoded = [encode_param(param) for param in params]
        LOG.debug(f"select-sql:[{sql}] params:{encoded}")
        return [mapper(row) for row in self.db.query(sql, encoded)]

    def list(
        self, record_type: Type[T], where_clause: Optional[str] = None, *params: Any, order_clause: Optional[str] = None
    ) -> List[T]:
        """
        Load the records of a type.

        Args:
            record_type: The dataclass type to load.
            where_clause: A `WHERE` clause (without the keyword) using `?` placeholders.
            *params: Values for the placeholders in `where_clause`.
            order_clause: Text appended to the statement, e.g. `ORDER BY NAME`.

        Returns:
            The matching records; an empty list when nothing matches.
        """
        descriptor = self.descriptor(record_type)
        sql = build_select(descriptor, where_clause, order_clause)
        records = self.query(lambda row: from_row(descriptor, row), sql, *params)
        LOG.debug(f"Retrieved {len(records)} {record_type.__name__} record(s) from {descriptor.table_name}")
        return records

    def count(self, sql: str, *params: Any) -> int:
        """
        Run a query whose first column holds a count (e.g. `SELECT COUNT(*) ...`).

        Args:
            sql: The query to run.
            *params: Values for the `?` placeholders in `sql`.

        Returns:
            The value of the first column of the first row, or 0 when the
            query returns no rows or a NULL value.
        """
        rows = self.query(lambda row: row[0], sql, *params)
        if not rows or rows[0] is None:
            return 0
        return int(rows[0])
