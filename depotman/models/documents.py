"""
Stock documents — Receipt, DeliveryOrder, InternalTransfer and their lines.

All three share one lifecycle (see DocumentStatus) and one shape:
a unique human-readable number, ordered line items, audit fields
for the terminal transition and free-text notes.
"""

import random
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from depotman.conf import depotman_settings
from depotman.models.enums import OPEN_STATUSES, DocumentKind, DocumentStatus


def generate_number(kind: str, digits: int = 3) -> str:
    """Build a document number like ``RC-1712345678901-042``."""
    prefix = depotman_settings.NUMBER_PREFIXES[kind]
    millis = int(timezone.now().timestamp() * 1000)
    suffix = str(random.randint(0, 10 ** digits - 1)).zfill(digits)
    return f"{prefix}-{millis}-{suffix}"


class StockDocument(models.Model):
    """Abstract base for documents moving stock through a lifecycle."""

    kind: str = ''

    number = models.CharField(
        max_length=50,
        unique=True,
        editable=False,
        verbose_name=_('Number'),
    )
    status = models.CharField(
        max_length=20,
        choices=DocumentStatus.choices,
        default=DocumentStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Validated By'),
    )
    validated_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Validated At'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    @property
    def is_done(self) -> bool:
        return self.status == DocumentStatus.DONE

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = generate_number(self.kind)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.number} [{self.status}]"


class DocumentLine(models.Model):
    """Abstract base for document line items."""

    product = models.ForeignKey(
        'depotman.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    position = models.PositiveIntegerField(default=0, verbose_name=_('Position'))
    unit_of_measure = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Unit'))

    class Meta:
        abstract = True
        ordering = ['position', 'id']


# ══════════════════════════════════════════════════════════════
# RECEIPT (inbound)
# ══════════════════════════════════════════════════════════════


class Receipt(StockDocument):
    """Goods arriving from a supplier into one warehouse."""

    kind = DocumentKind.RECEIPT

    supplier = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Supplier'))
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='receipts',
        verbose_name=_('Warehouse'),
    )
    received_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Received Date'))

    class Meta(StockDocument.Meta):
        verbose_name = _('Receipt')
        verbose_name_plural = _('Receipts')


class ReceiptLine(DocumentLine):
    receipt = models.ForeignKey(Receipt, on_delete=models.CASCADE, related_name='lines')
    quantity_received = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity Received'),
    )

    class Meta(DocumentLine.Meta):
        verbose_name = _('Receipt Line')
        verbose_name_plural = _('Receipt Lines')

    def __str__(self) -> str:
        return f"{self.quantity_received}x {self.product}"


# ══════════════════════════════════════════════════════════════
# DELIVERY ORDER (outbound)
# ══════════════════════════════════════════════════════════════


class DeliveryOrder(StockDocument):
    """Goods leaving one warehouse for a customer, picked then packed."""

    kind = DocumentKind.DELIVERY_ORDER

    customer = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Customer'))
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='delivery_orders',
        verbose_name=_('Warehouse'),
    )
    delivery_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Delivery Date'))

    class Meta(StockDocument.Meta):
        verbose_name = _('Delivery Order')
        verbose_name_plural = _('Delivery Orders')


class DeliveryOrderLine(DocumentLine):
    """
    Three-stage fulfillment progress:
    quantity_packed <= quantity_picked <= quantity_ordered.
    """

    order = models.ForeignKey(DeliveryOrder, on_delete=models.CASCADE, related_name='lines')
    quantity_ordered = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Ordered'))
    quantity_picked = models.DecimalField(
        max_digits=12, decimal_places=3, default=Decimal('0'), verbose_name=_('Picked'),
    )
    quantity_packed = models.DecimalField(
        max_digits=12, decimal_places=3, default=Decimal('0'), verbose_name=_('Packed'),
    )

    class Meta(DocumentLine.Meta):
        verbose_name = _('Delivery Order Line')
        verbose_name_plural = _('Delivery Order Lines')

    @property
    def quantity_to_deduct(self) -> Decimal:
        """Packed, else picked, else ordered."""
        return self.quantity_packed or self.quantity_picked or self.quantity_ordered

    def __str__(self) -> str:
        return (
            f"{self.product}: {self.quantity_packed}/{self.quantity_picked}/"
            f"{self.quantity_ordered}"
        )


# ══════════════════════════════════════════════════════════════
# INTERNAL TRANSFER (lateral)
# ══════════════════════════════════════════════════════════════


class InternalTransfer(StockDocument):
    """Goods moving between two different warehouses."""

    kind = DocumentKind.INTERNAL_TRANSFER

    source_warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='outgoing_transfers',
        verbose_name=_('Source Warehouse'),
    )
    destination_warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='incoming_transfers',
        verbose_name=_('Destination Warehouse'),
    )
    scheduled_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Scheduled Date'))

    class Meta(StockDocument.Meta):
        verbose_name = _('Internal Transfer')
        verbose_name_plural = _('Internal Transfers')
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(source_warehouse=models.F('destination_warehouse')),
                name='transfer_distinct_warehouses',
            ),
        ]


class TransferLine(DocumentLine):
    transfer = models.ForeignKey(InternalTransfer, on_delete=models.CASCADE, related_name='lines')
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))

    class Meta(DocumentLine.Meta):
        verbose_name = _('Transfer Line')
        verbose_name_plural = _('Transfer Lines')

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product}"
