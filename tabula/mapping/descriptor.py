##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Table metadata derived from a record type.

An [`EntityDescriptor`][mapping.descriptor.EntityDescriptor] holds everything
needed to generate statements for a record type and to convert its instances:
the table name, the ordered columns with their converters, and the primary
key columns. Descriptors depend only on the shape of the record type, so they
are built once per type and cached for the lifetime of the process.

Record types are dataclasses. Each dataclass field becomes a column unless its
name ends with the ignore suffix (`_` by default). Class variables are not
dataclass fields and never become columns. Two optional class attributes
refine the defaults:

- `__tablename__`: the table name, instead of the converted class name.
- `__primary_key__`: the key columns, required when there is no identity field.

```python
@dataclass
class Result:
    __primary_key__: ClassVar[Tuple[str, ...]] = ("USER_ID", "GAME_ID")

    userId: int = 0
    gameId: int = 0
    point: int = 0
    cached_: Optional[str] = None
```
"""

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type, get_type_hints

from tabula.config import DEFAULT_SETTINGS, MappingSettings
from tabula.exceptions import ConfigurationError
from tabula.mapping.affinity import REGISTRY, Affinity, SemanticType, TypeAffinityRegistry, TypeConverter
from tabula.mapping.naming import to_column_name


LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    A single mapped field.

    Attributes:
        field_name: The dataclass field name.
        column_name: The column name derived from `field_name`.
        converter: The converter for the field's semantic type.
        nullable: False when the column is declared `NOT NULL`.
        is_identity: True for the auto-incrementing primary key column.
        init: False when the field is left out of the generated `__init__`.
    """

    field_name: str
    column_name: str
    converter: TypeConverter
    nullable: bool
    is_identity: bool = False
    init: bool = True

    @property
    def semantic_type(self) -> SemanticType:
        """The semantic type of the field."""
        return self.converter.semantic_type

    @property
    def affinity(self) -> Affinity:
        """The affinity declared for the column."""
        return self.converter.affinity


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Table metadata for one record type.

    Attributes:
        record_type: The dataclass this descriptor was built from.
        table_name: The name of the table records are stored in.
        columns: The mapped fields in declaration order.
        primary_key_columns: The key column names in declaration order.
        settings: The naming rules the descriptor was built with.
    """

    record_type: type
    table_name: str
    columns: Tuple[ColumnDescriptor, ...]
    primary_key_columns: Tuple[str, ...]
    settings: MappingSettings = DEFAULT_SETTINGS

    @property
    def identity_column(self) -> Optional[ColumnDescriptor]:
        """The identity column, or None if the record type has no identity field."""
        for column in self.columns:
            if column.is_identity:
                return column
        return None

    @property
    def has_identity_key(self) -> bool:
        """True when the primary key is exactly the identity column."""
        identity = self.identity_column
        return identity is not None and self.primary_key_columns == (identity.column_name,)

    def column(self, column_name: str) -> ColumnDescriptor:
        """
        Look up a column by name.

        Args:
            column_name: The column name to find.

        Returns:
            The matching column.

        Raises:
            KeyError: If the descriptor has no such column.
        """
        for column in self.columns:
            if column.column_name == column_name:
                return column
        raise KeyError(f"Table '{self.table_name}' has no column '{column_name}'")

    @property
    def key_columns(self) -> Tuple[ColumnDescriptor, ...]:
        """The primary key columns in key order."""
        return tuple(self.column(name) for name in self.primary_key_columns)


def _has_default(field_obj: dataclasses.Field) -> bool:
    return field_obj.default is not dataclasses.MISSING or field_obj.default_factory is not dataclasses.MISSING


def _build_column(
    record_type: type,
    field_obj: dataclasses.Field,
    annotation,
    settings: MappingSettings,
    registry: TypeAffinityRegistry,
) -> ColumnDescriptor:
    """Map one dataclass field to its column, failing on unsupported declarations."""
    name = field_obj.name
    try:
        converter, nullable = registry.resolve(annotation)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{record_type.__name__}.{name}: {exc}") from exc

    is_identity = name == settings.identity_field
    if is_identity and converter.semantic_type is not SemanticType.INT64:
        raise ConfigurationError(
            f"{record_type.__name__}.{name}: the identity field '{settings.identity_field}' must be an Int64 (int), "
            f"not {converter.semantic_type.value}"
        )

    return ColumnDescriptor(
        field_name=name,
        column_name=to_column_name(name),
        converter=converter,
        nullable=nullable,
        is_identity=is_identity,
        init=field_obj.init,
    )


def _resolve_primary_key(record_type: type, columns: Tuple[ColumnDescriptor, ...]) -> Tuple[str, ...]:
    """Work out the key columns from the identity column or `__primary_key__`."""
    identity = next((column for column in columns if column.is_identity), None)
    declared = getattr(record_type, "__primary_key__", None)

    if declared is None:
        if identity is None:
            raise ConfigurationError(
                f"{record_type.__name__} has no identity field; declare its key columns with `__primary_key__`"
            )
        return (identity.column_name,)

    if isinstance(declared, str):
        declared = (declared,)
    declared = tuple(declared)
    if not declared:
        raise ConfigurationError(f"{record_type.__name__}.__primary_key__ must name at least one column")

    by_name = {}
    for column in columns:
        by_name[column.column_name] = column.column_name
        by_name[column.field_name] = column.column_name

    keys = []
    for name in declared:
        if name not in by_name:
            raise ConfigurationError(f"{record_type.__name__}.__primary_key__ names unknown column '{name}'")
        column_name = by_name[name]
        if column_name in keys:
            raise ConfigurationError(f"{record_type.__name__}.__primary_key__ lists column '{column_name}' twice")
        keys.append(column_name)

    if identity is not None and keys != [identity.column_name]:
        raise ConfigurationError(
            f"{record_type.__name__} declares multiple primary keys: the identity column "
            f"'{identity.column_name}' and {keys}"
        )
    return tuple(keys)


def build_descriptor(
    record_type: Type, settings: MappingSettings = None, registry: TypeAffinityRegistry = None
) -> EntityDescriptor:
    """
    Build the descriptor for a record type without consulting the cache.

    Args:
        record_type: A dataclass type.
        settings: The naming rules to apply. Defaults to `DEFAULT_SETTINGS`.
        registry: The affinity registry to resolve field types with. Defaults to `REGISTRY`.

    Returns:
        The descriptor for `record_type`.

    Raises:
        (exceptions.ConfigurationError): If `record_type` cannot be mapped to a table.
    """
    settings = settings or DEFAULT_SETTINGS
    registry = registry or REGISTRY

    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise ConfigurationError(f"{record_type!r} is not a dataclass type")

    try:
        hints = get_type_hints(record_type)
    except (NameError, TypeError) as exc:
        raise ConfigurationError(f"Cannot evaluate the annotations of {record_type.__name__}: {exc}") from exc

    columns = []
    seen_columns: Dict[str, str] = {}
    for field_obj in dataclasses.fields(record_type):
        if not _has_default(field_obj):
            raise ConfigurationError(
                f"{record_type.__name__}.{field_obj.name} needs a default value so that records can be "
                "created from query results"
            )
        if field_obj.name.endswith(settings.ignore_suffix):
            LOG.debug(f"Ignoring field {record_type.__name__}.{field_obj.name}")
            continue

        column = _build_column(record_type, field_obj, hints[field_obj.name], settings, registry)
        if column.column_name in seen_columns:
            raise ConfigurationError(
                f"{record_type.__name__}: fields '{seen_columns[column.column_name]}' and '{field_obj.name}' "
                f"both map to column '{column.column_name}'"
            )
        seen_columns[column.column_name] = field_obj.name
        columns.append(column)

    if not columns:
        raise ConfigurationError(f"{record_type.__name__} has no mapped fields")

    columns = tuple(columns)
    table_name = getattr(record_type, "__tablename__", None) or to_column_name(record_type.__name__)
    descriptor = EntityDescriptor(
        record_type=record_type,
        table_name=table_name,
        columns=columns,
        primary_key_columns=_resolve_primary_key(record_type, columns),
        settings=settings,
    )
    LOG.debug(
        f"Built descriptor for {record_type.__name__}: table={descriptor.table_name} "
        f"columns={[column.column_name for column in columns]} key={list(descriptor.primary_key_columns)}"
    )
    return descriptor


_DESCRIPTOR_CACHE: Dict[Tuple[type, MappingSettings], EntityDescriptor] = {}
_CACHE_LOCK = threading.Lock()


def get_descriptor(record_type: Type, settings: MappingSettings = None) -> EntityDescriptor:
    """
    Return the cached descriptor for a record type, building it on first use.

    The cache is shared by every thread. A miss is filled while holding a lock
    so that each descriptor is built by exactly one thread and readers only
    ever see complete descriptors.

    Args:
        record_type: A dataclass type.
        settings: The naming rules to apply. Defaults to `DEFAULT_SETTINGS`.

    Returns:
        The descriptor for `record_type`.

    Raises:
        (exceptions.ConfigurationError): If `record_type` cannot be mapped to a table.
    """
    if not isinstance(record_type, type):
        raise ConfigurationError(f"Expected a record type, got an instance of {type(record_type).__name__}")

    key = (record_type, settings or DEFAULT_SETTINGS)
    descriptor = _DESCRIPTOR_CACHE.get(key)
    if descriptor is not None:
        return descriptor

    with _CACHE_LOCK:
        descriptor = _DESCRIPTOR_CACHE.get(key)
        if descriptor is None:
            descriptor = build_descriptor(record_type, key[1])
            _DESCRIPTOR_CACHE[key] = descriptor
    return descriptor


def find_cached_descriptor(record_type: Type) -> Optional[EntityDescriptor]:
    """
    Look up a descriptor already built for a record type under any settings.

    Args:
        record_type: A dataclass type.

    Returns:
        The most recently built descriptor for `record_type`, or None if it
        has never been described.
    """
    with _CACHE_LOCK:
        for (cached_type, _), descriptor in reversed(list(_DESCRIPTOR_CACHE.items())):
            if cached_type is record_type:
                return descriptor
    return None


def clear_descriptor_cache():
    """Forget every cached descriptor."""
    with _CACHE_LOCK:
        _DESCRIPTOR_CACHE.clear()
