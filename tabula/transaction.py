##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Scoped transactions.

[`transaction`][transaction.transaction] is a context manager that begins a
transaction on entry and always ends it on exit: the transaction is committed
only if the block finished without raising.

[`run_in_transaction`][transaction.run_in_transaction] runs a callable inside
such a transaction and turns failures into a `None` result, so callers check
the result instead of catching exceptions. Programming errors
(`ConfigurationError`, `TypeMismatchError`) are still raised after the
rollback.

Transactions do not nest; neither function may be called again from inside
its own block against the same driver.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from tabula.backends.driver import DatabaseDriver
from tabula.exceptions import ConfigurationError, TypeMismatchError


LOG = logging.getLogger(__name__)

R = TypeVar("R")


@contextmanager
def transaction(db: DatabaseDriver) -> Iterator[DatabaseDriver]:
    """
    Run a block inside a transaction.

    Args:
        db: The driver to start the transaction on.

    Yields:
        The same driver.
    """
    db.begin_transaction()
    LOG.debug("*** begin transaction")
    try:
        yield db
        db.mark_successful()
        LOG.debug("*** transaction success")
    finally:
        db.end_transaction()
        LOG.debug("*** end transaction")


def run_in_transaction(db: DatabaseDriver, body: Callable[[DatabaseDriver], R]) -> Optional[R]:
    """
    Call `body(db)` inside a transaction.

    The transaction is committed when `body` returns and rolled back when it
    raises. Failures are logged and reported as a `None` result.

    Args:
        db: The driver to run the transaction on.
        body: The work to do; receives `db`.

    Returns:
        The value returned by `body`, or None if the transaction failed.

    Raises:
        (exceptions.ConfigurationError): Re-raised after rollback.
        (exceptions.TypeMismatchError): Re-raised after rollback.
    """
    try:
        with transaction(db):
            return body(db)
    except (ConfigurationError, TypeMismatchError):
        raise
    except Exception:  # pylint: disable=broad-except
        LOG.exception("Transaction rolled back")
        return None
