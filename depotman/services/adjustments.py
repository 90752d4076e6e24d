"""
Stock adjustments — physical count corrections.
"""

import logging

from django.db import transaction

from depotman.conf import depotman_settings
from depotman.exceptions import StockError
from depotman.models.adjustment import StockAdjustment
from depotman.models.enums import AdjustmentReason
from depotman.models.product import Product
from depotman.models.warehouse import Warehouse
from depotman.services.coordinator import atomic_operation
from depotman.services.documents import resolve, to_quantity
from depotman.services.movements import StockMovements

logger = logging.getLogger('depotman')


class StockAdjustments:
    """Create and delete StockAdjustment records."""

    @classmethod
    def create(cls, *, product, warehouse, recorded_quantity, counted_quantity,
               reason, notes='', user=None) -> StockAdjustment:
        """
        Correct one product's stock at one warehouse.

        Flow:
        1. Lock product, read live stock at the warehouse
        2. Reject if it differs from recorded_quantity (stale read)
        3. Set the location to counted_quantity, re-derive total_stock
        4. Write one 'adjustment' ledger entry (counted - recorded)

        Raises:
            StockError('NOT_FOUND'): Unknown product or warehouse
            StockError('STALE_READ'): recorded_quantity != live stock
            StockError('VALIDATION_ERROR'): Negative quantities, unknown reason
        """
        recorded = to_quantity(recorded_quantity, 'recorded_quantity')
        counted = to_quantity(counted_quantity, 'counted_quantity')
        if recorded < 0 or counted < 0:
            raise StockError('VALIDATION_ERROR', 'Quantities must be non-negative numbers',
                             recorded=recorded, counted=counted)
        if reason not in AdjustmentReason.values:
            raise StockError(
                'VALIDATION_ERROR',
                f"Reason must be one of: {', '.join(AdjustmentReason.values)}",
                reason=str(reason),
            )
        notes = (notes or '').strip()
        if len(notes) > depotman_settings.MAX_NOTES_LENGTH:
            raise StockError('VALIDATION_ERROR', 'Notes are too long', field='notes')

        with atomic_operation('adjustment.create', product=str(getattr(product, 'pk', product))):
            product = resolve(Product, product, 'Product')
            warehouse = resolve(Warehouse, warehouse, 'Warehouse')

            adjustment = StockAdjustment.objects.create(
                product=product,
                warehouse=warehouse,
                recorded_quantity=recorded,
                counted_quantity=counted,
                adjustment_quantity=counted - recorded,
                reason=reason,
                notes=notes,
                adjusted_by=user,
            )
            StockMovements.set_quantity(
                product,
                warehouse,
                counted,
                expected=recorded,
                reference=adjustment,
                user=user,
                notes=f"Stock adjustment: {adjustment.number} - {reason}",
            )

        logger.info(
            "depot.adjustment.created",
            extra={
                "adjustment_id": adjustment.pk,
                "product_id": product.pk,
                "warehouse_id": warehouse.pk,
                "delta": str(adjustment.adjustment_quantity),
                "reason": reason,
            },
        )
        return adjustment

    @classmethod
    def get(cls, pk) -> StockAdjustment:
        try:
            return StockAdjustment.objects.get(pk=pk)
        except (StockAdjustment.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', f"Stock adjustment {pk} not found", id=str(pk))

    @classmethod
    def delete(cls, adjustment) -> None:
        """
        Delete the record only. Stock and ledger are NOT reversed.

        Raises:
            StockError('INVALID_STATE'): ALLOW_ADJUSTMENT_DELETE is off
        """
        if not depotman_settings.ALLOW_ADJUSTMENT_DELETE:
            raise StockError('INVALID_STATE', 'Stock adjustments cannot be deleted')

        pk = getattr(adjustment, 'pk', adjustment)
        with transaction.atomic():
            record = cls.get(pk)
            record.delete()

        logger.warning(
            "depot.adjustment.deleted",
            extra={
                "adjustment_id": pk,
                "number": record.number,
                "delta": str(record.adjustment_quantity),
                "stock_reversed": False,
            },
        )
