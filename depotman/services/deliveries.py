"""
Delivery orders — outbound stock to customers.

Fulfillment runs in three stages per line: ordered → picked → packed.
Picking and packing only record intent; stock leaves the warehouse
at validate().

    order = DeliveryWorkflow.create(
        warehouse=main, customer='Bob',
        lines=[{'product': bolts, 'quantity_ordered': 20}],
    )
    DeliveryWorkflow.pick(order)   # draft → waiting
    DeliveryWorkflow.pack(order)   # waiting → ready
    DeliveryWorkflow.validate(order, user)
"""

import logging
from decimal import Decimal

from django.db import transaction

from depotman.conf import depotman_settings
from depotman.exceptions import StockError
from depotman.models.documents import DeliveryOrder, DeliveryOrderLine
from depotman.models.enums import DocumentStatus, TransactionType
from depotman.models.stock import StockLocation
from depotman.services.coordinator import lock_document
from depotman.services.documents import DocumentWorkflow, to_quantity
from depotman.services.movements import StockMovements

logger = logging.getLogger('depotman')

PICKABLE = (DocumentStatus.DRAFT, DocumentStatus.WAITING)
PACKABLE = (DocumentStatus.WAITING, DocumentStatus.READY)


class DeliveryWorkflow(DocumentWorkflow):
    """Delivery order lifecycle with pick and pack stages."""

    model = DeliveryOrder
    line_model = DeliveryOrderLine
    line_fk = 'order'
    warehouse_fields = ('warehouse',)
    editable_fields = ('customer', 'delivery_date', 'notes')
    event = 'delivery'
    action = 'validate'

    @classmethod
    def clean_line(cls, item):
        ordered = to_quantity(item.get('quantity_ordered'), 'quantity_ordered')
        picked = to_quantity(item.get('quantity_picked') or 0, 'quantity_picked')
        packed = to_quantity(item.get('quantity_packed') or 0, 'quantity_packed')

        if ordered <= 0:
            raise StockError('VALIDATION_ERROR', 'Quantity ordered must be a positive number',
                             product=str(item.get('product')), quantity_ordered=ordered)
        if picked < 0 or packed < 0:
            raise StockError('VALIDATION_ERROR', 'Picked and packed quantities cannot be negative',
                             product=str(item.get('product')))
        if picked > ordered:
            raise StockError('VALIDATION_ERROR', 'Picked quantity cannot exceed ordered quantity',
                             product=str(item.get('product')), ordered=ordered, picked=picked)
        if packed > picked:
            raise StockError('VALIDATION_ERROR', 'Packed quantity cannot exceed picked quantity',
                             product=str(item.get('product')), picked=picked, packed=packed)

        return {
            'quantity_ordered': ordered,
            'quantity_picked': picked,
            'quantity_packed': packed,
        }

    # ══════════════════════════════════════════════════════════════
    # PICK / PACK
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def pick(cls, order, lines=None, user=None):
        """
        Record picked quantities. draft → waiting.

        Args:
            lines: [{'product': id, 'quantity_picked': qty}, ...]
                   None = pick every line up to its ordered quantity

        Raises:
            StockError('INVALID_STATE'): Status is not draft/waiting
            StockError('VALIDATION_ERROR'): Product not on order, picked > ordered
            StockError('INSUFFICIENT_STOCK'): Picked > stock at the warehouse

        Nothing changes unless every line passes.
        """
        pk = getattr(order, 'pk', order)
        with transaction.atomic():
            locked = lock_document(DeliveryOrder, pk)
            cls._ensure_in(locked, PICKABLE, 'pick')
            order_lines = list(locked.lines.select_related('product'))

            updates = []
            if lines is not None:
                for item in lines:
                    line = cls._match_line(order_lines, item)
                    qty = to_quantity(item.get('quantity_picked'), 'quantity_picked')
                    if qty < 0:
                        raise StockError('VALIDATION_ERROR', 'Picked quantity cannot be negative',
                                         product=line.product_id)
                    if qty > line.quantity_ordered:
                        raise StockError(
                            'VALIDATION_ERROR',
                            f"Picked quantity cannot exceed ordered quantity for product {line.product_id}",
                            product=line.product_id, ordered=line.quantity_ordered, requested=qty,
                        )
                    if qty < line.quantity_packed:
                        raise StockError(
                            'VALIDATION_ERROR',
                            f"Picked quantity cannot drop below packed quantity for product {line.product_id}",
                            product=line.product_id, packed=line.quantity_packed, requested=qty,
                        )
                    cls._ensure_available(line, locked.warehouse, qty)
                    updates.append((line, qty))
            else:
                for line in order_lines:
                    cls._ensure_available(line, locked.warehouse, line.quantity_ordered)
                    updates.append((line, line.quantity_ordered))

            for line, qty in updates:
                line.quantity_picked = qty
                line.save(update_fields=['quantity_picked'])

            if locked.status == DocumentStatus.DRAFT:
                locked.status = DocumentStatus.WAITING
            locked.save(update_fields=['status', 'updated_at'])

        logger.info(
            "depot.delivery.picked",
            extra={"document_id": pk, "lines": len(updates), "status": locked.status},
        )
        return locked

    @classmethod
    def pack(cls, order, lines=None, user=None):
        """
        Record packed quantities. waiting → ready.

        Args:
            lines: [{'product': id, 'quantity_packed': qty}, ...]
                   None = pack every line up to its picked quantity

        Raises:
            StockError('INVALID_STATE'): Status is not waiting/ready
            StockError('VALIDATION_ERROR'): Product not on order, packed > picked
        """
        pk = getattr(order, 'pk', order)
        with transaction.atomic():
            locked = lock_document(DeliveryOrder, pk)
            cls._ensure_in(locked, PACKABLE, 'pack')
            order_lines = list(locked.lines.all())

            updates = []
            if lines is not None:
                for item in lines:
                    line = cls._match_line(order_lines, item)
                    qty = to_quantity(item.get('quantity_packed'), 'quantity_packed')
                    if qty < 0:
                        raise StockError('VALIDATION_ERROR', 'Packed quantity cannot be negative',
                                         product=line.product_id)
                    if qty > line.quantity_picked:
                        raise StockError(
                            'VALIDATION_ERROR',
                            f"Packed quantity cannot exceed picked quantity for product {line.product_id}",
                            product=line.product_id, picked=line.quantity_picked, requested=qty,
                        )
                    updates.append((line, qty))
            else:
                updates = [(line, line.quantity_picked) for line in order_lines]

            for line, qty in updates:
                line.quantity_packed = qty
                line.save(update_fields=['quantity_packed'])

            if locked.status == DocumentStatus.WAITING:
                locked.status = DocumentStatus.READY
            locked.save(update_fields=['status', 'updated_at'])

        logger.info(
            "depot.delivery.packed",
            extra={"document_id": pk, "lines": len(updates), "status": locked.status},
        )
        return locked

    # ══════════════════════════════════════════════════════════════
    # VALIDATE HOOKS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def check_before_apply(cls, document):
        if not depotman_settings.REQUIRE_FULL_PACKING:
            return
        short = [
            line.product_id for line in document.lines.all()
            if line.quantity_packed < line.quantity_ordered
        ]
        if short:
            raise StockError(
                'INVALID_STATE',
                f"{document.number} is not fully packed",
                products=short,
            )

    @classmethod
    def apply_line(cls, document, line, user):
        entry = StockMovements.issue(
            line.product,
            document.warehouse,
            line.quantity_to_deduct,
            reference=document,
            user=user,
            transaction_type=TransactionType.DELIVERY,
            notes=f"Delivery: {document.number}",
        )
        return [entry]

    @classmethod
    def finalize(cls, document, now):
        if document.delivery_date is None:
            document.delivery_date = now

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _ensure_in(cls, document, allowed, action):
        if document.status not in allowed:
            raise StockError(
                'INVALID_STATE',
                f"Cannot {action} items from {document.number} while it is {document.status}",
                current=document.status,
                expected=[str(s) for s in allowed],
            )

    @classmethod
    def _match_line(cls, order_lines, item):
        product = item.get('product')
        product_id = getattr(product, 'pk', product)
        for line in order_lines:
            if str(line.product_id) == str(product_id):
                return line
        raise StockError(
            'VALIDATION_ERROR',
            f"Product {product_id} not found in delivery order",
            product=str(product_id),
        )

    @classmethod
    def _ensure_available(cls, line, warehouse, quantity):
        location = StockLocation.objects.filter(product_id=line.product_id, warehouse=warehouse).first()
        available = location.quantity if location else Decimal('0')
        if quantity > available:
            raise StockError(
                'INSUFFICIENT_STOCK',
                f"Insufficient stock for product {line.product.name}. "
                f"Available: {available}, Requested: {quantity}",
                product=line.product_id,
                available=available,
                requested=quantity,
            )
