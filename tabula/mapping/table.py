##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
An optional base class for record types.

Any dataclass can be stored by Tabula. Inheriting from `Table` adds a few
conveniences: class-level access to the descriptor data and a `__str__` that
renders the record with [`describe`][mapping.record_mapper.describe].
"""

import logging
from dataclasses import Field, dataclass
from dataclasses import fields as dataclass_fields
from typing import ClassVar, Optional, Sequence, Tuple, Type, TypeVar

from tabula.config import MappingSettings
from tabula.exceptions import TabulaError
from tabula.mapping.descriptor import EntityDescriptor, find_cached_descriptor, get_descriptor
from tabula.mapping.record_mapper import describe


LOG = logging.getLogger(__name__)

T = TypeVar("T", bound="Table")


@dataclass
class Table:
    """
    Base dataclass for record types.

    Subclasses must be decorated with `@dataclass` themselves. One class
    corresponds to one table and each field (other than those ending with the
    ignore suffix) to one column.

    ```python
    @dataclass
    class UserMaster(Table):
        id: Optional[int] = None
        name: Optional[str] = None
        created: Optional[datetime] = None
    ```

    Attributes:
        __tablename__: Overrides the table name derived from the class name.
        __primary_key__: The key columns for tables without an identity field.

    Methods:
        get_class_fields: Retrieve the dataclass fields of this class.
        descriptor: Retrieve the cached descriptor of this class.
        table_name: Retrieve the name of the table for this class.
        describe: Render this record for logging.
    """

    __tablename__: ClassVar[Optional[str]] = None
    __primary_key__: ClassVar[Optional[Sequence[str]]] = None

    @classmethod
    def get_class_fields(cls) -> Tuple[Field]:
        """
        Get the fields associated with this class, mapped or not.

        Returns:
            A tuple of dataclass.Field objects representing the fields in this data class.
        """
        return dataclass_fields(cls)

    @classmethod
    def descriptor(cls: Type[T], settings: Optional[MappingSettings] = None) -> EntityDescriptor:
        """
        Get the cached descriptor for this class.

        Without `settings`, the descriptor a repository already built for this
        class is reused, so that records mapped under custom naming rules
        describe themselves with those rules.

        Args:
            settings: The naming rules to build the descriptor with.

        Returns:
            The descriptor for `settings`, else the one already cached for this
            class, else the one built with the default settings.
        """
        if settings is None:
            cached = find_cached_descriptor(cls)
            if cached is not None:
                return cached
        return get_descriptor(cls, settings)

    @classmethod
    def table_name(cls, settings: Optional[MappingSettings] = None) -> str:
        """
        Get the name of the table that stores this class.

        Args:
            settings: The naming rules to derive the name with.

        Returns:
            The table name.
        """
        return cls.descriptor(settings).table_name

    def describe(self, settings: Optional[MappingSettings] = None) -> str:
        """
        Render this record for logging.

        Args:
            settings: The naming rules that decide which fields are shown.

        Returns:
            The record as `TypeName[field=value,...]`.
        """
        return describe(self, self.descriptor(settings))

    def __str__(self) -> str:
        try:
            return self.describe()
        except TabulaError as exc:
            LOG.debug(f"Cannot describe {type(self).__name__}: {exc}")
            return repr(self)
