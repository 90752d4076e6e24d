"""
Stock movements — the only code that changes stock.

Every method mutates one (product, warehouse) location, re-derives the
product's total_stock from its locations and appends one ledger entry,
all inside the caller's atomic scope (each method also opens its own
savepoint so it is safe to call standalone).

Locking order is product row first, then the location row.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from depotman.exceptions import StockError
from depotman.models.enums import TransactionType
from depotman.models.ledger import StockLedgerEntry
from depotman.models.product import Product
from depotman.models.stock import StockLocation

logger = logging.getLogger('depotman')


class StockMovements:
    """State-changing stock methods. Callers own the lifecycle checks."""

    @classmethod
    def receive(cls, product, warehouse, quantity, *, reference=None, user=None,
                transaction_type=TransactionType.RECEIPT, notes=''):
        """
        Stock entry at a warehouse.

        Creates the location on first entry.

        Returns:
            The StockLedgerEntry written
        """
        if quantity <= 0:
            raise StockError('VALIDATION_ERROR', 'Quantity must be positive', requested=quantity)

        with transaction.atomic():
            locked_product = cls._lock_product(product)
            location = cls._lock_location(locked_product, warehouse, create=True)

            location.quantity += quantity
            location.save(update_fields=['quantity', 'updated_at'])

            return cls._record(
                locked_product, warehouse, quantity, transaction_type,
                reference=reference, user=user, notes=notes,
            )

    @classmethod
    def issue(cls, product, warehouse, quantity, *, reference=None, user=None,
              transaction_type=TransactionType.DELIVERY, notes=''):
        """
        Stock exit from a warehouse.

        Raises:
            StockError('INSUFFICIENT_STOCK'): If the location holds less than quantity
            StockError('VALIDATION_ERROR'): If quantity <= 0
        """
        if quantity <= 0:
            raise StockError('VALIDATION_ERROR', 'Quantity must be positive', requested=quantity)

        with transaction.atomic():
            locked_product = cls._lock_product(product)
            location = cls._lock_location(locked_product, warehouse, create=False)
            available = location.quantity if location else Decimal('0')

            if location is None or available < quantity:
                raise StockError(
                    'INSUFFICIENT_STOCK',
                    f"Insufficient stock for {locked_product.name} at {warehouse}. "
                    f"Available: {available}, Required: {quantity}",
                    product=locked_product.pk,
                    warehouse=warehouse.pk,
                    available=available,
                    requested=quantity,
                )

            old = location.quantity
            new = old - quantity
            if new < 0:
                logger.warning(
                    "stock.issue.clamped",
                    extra={
                        "product_id": locked_product.pk,
                        "warehouse_id": warehouse.pk,
                        "quantity": str(old),
                        "requested": str(quantity),
                    },
                )
                new = Decimal('0')

            location.quantity = new
            location.save(update_fields=['quantity', 'updated_at'])

            return cls._record(
                locked_product, warehouse, new - old, transaction_type,
                reference=reference, user=user, notes=notes,
            )

    @classmethod
    def transfer(cls, product, source, destination, quantity, *, reference=None,
                 user=None, notes=''):
        """
        Move quantity between two warehouses.

        Writes transfer_out at source, then transfer_in at destination.
        Total stock dips by quantity after the first entry and is restored
        by the second, so each balance_after follows its predecessor.

        Returns:
            (transfer_out entry, transfer_in entry)
        """
        reference_number = getattr(reference, 'number', '')
        with transaction.atomic():
            out_entry = cls.issue(
                product, source, quantity,
                reference=reference, user=user,
                transaction_type=TransactionType.TRANSFER_OUT,
                notes=notes or f"Transfer out: {reference_number}",
            )
            in_entry = cls.receive(
                product, destination, quantity,
                reference=reference, user=user,
                transaction_type=TransactionType.TRANSFER_IN,
                notes=notes or f"Transfer in: {reference_number}",
            )
            return out_entry, in_entry

    @classmethod
    def set_quantity(cls, product, warehouse, counted, *, expected, reference=None,
                     user=None, notes=''):
        """
        Overwrite a location's quantity with a physical count.

        Args:
            expected: Quantity the caller believes is in stock. Compared
                against the locked row to reject stale reads.

        Raises:
            StockError('STALE_READ'): If live stock differs from expected
        """
        if counted < 0:
            raise StockError('VALIDATION_ERROR', 'Counted quantity cannot be negative', counted=counted)

        with transaction.atomic():
            locked_product = cls._lock_product(product)
            location = cls._lock_location(locked_product, warehouse, create=False)
            current = location.quantity if location else Decimal('0')

            if current != expected:
                raise StockError(
                    'STALE_READ',
                    f"Recorded quantity ({expected}) does not match current stock "
                    f"({current}) in warehouse",
                    recorded=expected,
                    current=current,
                )

            if location is None:
                location = cls._lock_location(locked_product, warehouse, create=True)
            location.quantity = counted
            location.save(update_fields=['quantity', 'updated_at'])

            return cls._record(
                locked_product, warehouse, counted - expected, TransactionType.ADJUSTMENT,
                reference=reference, user=user, notes=notes,
            )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _lock_product(cls, product) -> Product:
        pk = getattr(product, 'pk', product)
        try:
            return Product.objects.select_for_update().get(pk=pk)
        except Product.DoesNotExist:
            raise StockError('NOT_FOUND', f"Product with id {pk} not found", model='Product', id=pk)

    @classmethod
    def _lock_location(cls, product, warehouse, create: bool) -> StockLocation | None:
        if create:
            location, _ = StockLocation.objects.get_or_create(product=product, warehouse=warehouse)
            return StockLocation.objects.select_for_update().get(pk=location.pk)
        return StockLocation.objects.select_for_update().filter(
            product=product, warehouse=warehouse,
        ).first()

    @classmethod
    def _record(cls, product, warehouse, change, transaction_type, *,
                reference=None, user=None, notes='') -> StockLedgerEntry:
        """Re-derive total_stock and append the ledger entry."""
        total = product.locations.aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']
        product.total_stock = total
        product.save(update_fields=['total_stock', 'updated_at'])

        entry = StockLedgerEntry.objects.create(
            product=product,
            warehouse=warehouse,
            transaction_type=transaction_type,
            reference=reference,
            reference_number=getattr(reference, 'number', ''),
            quantity_change=change,
            balance_after=total,
            performed_by=user,
            notes=notes[:255],
        )
        logger.info(
            "stock.movement",
            extra={
                "product_id": product.pk,
                "warehouse_id": warehouse.pk,
                "type": transaction_type,
                "change": str(change),
                "balance_after": str(total),
                "reference": entry.reference_number,
            },
        )
        return entry
