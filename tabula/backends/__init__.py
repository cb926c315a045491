##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Database drivers for Tabula.

The mapping engine never talks to a database directly. It goes through a
[`DatabaseDriver`][backends.driver.DatabaseDriver], which exposes the handful
of primitives the engine needs: executing DDL, inserting, updating, deleting,
querying, and a three-step transaction protocol.

Modules:
    driver: Defines the abstract `DatabaseDriver` interface.
    sqlite: Implements the interface on top of the standard library's `sqlite3`.
"""
