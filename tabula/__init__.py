##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Tabula: dataclass records on SQLite tables.

This package maps plain dataclass record types onto tables of an embedded
SQLite database. Table schema, statements, and value conversions are derived
from each record type's field declarations.
"""

import os


__version__ = "1.0.0"
VERSION = __version__
PATH_TO_PROJ = os.path.join(os.path.dirname(__file__), "")
