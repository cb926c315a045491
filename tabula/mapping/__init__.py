##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
The record mapping engine.

Modules:
    naming: Converts field and class names to column and table names.
    affinity: Declares the supported semantic types and their storage conversions.
    descriptor: Derives and caches table metadata for record types.
    schema: Generates `CREATE TABLE` statements.
    query_builder: Generates `SELECT` statements and key-based `WHERE` clauses.
    record_mapper: Converts records to storage values and rows back to records.
    table: An optional base class for record types.
"""

from tabula.mapping.affinity import REGISTRY, Affinity, Int32, SemanticType, TypeAffinityRegistry, TypeConverter
from tabula.mapping.descriptor import ColumnDescriptor, EntityDescriptor, get_descriptor
from tabula.mapping.naming import to_column_name
from tabula.mapping.record_mapper import describe, from_row, to_storage_values
from tabula.mapping.schema import generate_create_table
from tabula.mapping.table import Table


__all__ = [
    "REGISTRY",
    "Affinity",
    "ColumnDescriptor",
    "EntityDescriptor",
    "Int32",
    "SemanticType",
    "Table",
    "TypeAffinityRegistry",
    "TypeConverter",
    "describe",
    "from_row",
    "generate_create_table",
    "get_descriptor",
    "to_column_name",
    "to_storage_values",
]
