"""
Transaction coordinator — atomic scope for multi-record stock operations.

Usage:
    with atomic_operation('receipt.validate', receipt_id=receipt.pk):
        locked = lock_document(Receipt, receipt.pk)
        ...

Everything inside the block commits together or not at all.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from depotman.exceptions import StockError

logger = logging.getLogger('depotman')


@contextmanager
def atomic_operation(name: str, **context):
    """
    Run a block as one atomic unit.

    StockError propagates untouched (the scope is rolled back).
    Database failures (deadlock, lock timeout, integrity) become
    StockError('TRANSACTION_FAILURE').
    """
    try:
        with transaction.atomic():
            yield
    except StockError as exc:
        logger.info(
            "depot.operation.rejected",
            extra={"operation": name, "code": exc.code, **context},
        )
        raise
    except DatabaseError as exc:
        logger.error(
            "depot.operation.aborted",
            extra={"operation": name, "error": str(exc), **context},
        )
        raise StockError('TRANSACTION_FAILURE', operation=name, error=str(exc)) from exc


def lock_document(model, pk):
    """
    Re-read a document with a row lock.

    Must be called inside atomic_operation(). The returned row is the
    latest committed state, so status preconditions checked on it
    cannot race with a concurrent validate.
    """
    try:
        return model.objects.select_for_update().get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise StockError(
            'NOT_FOUND',
            f"{model._meta.verbose_name} {pk} not found",
            model=model.__name__,
            id=pk,
        )
