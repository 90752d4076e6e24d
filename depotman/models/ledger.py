"""
StockLedgerEntry model — Immutable audit trail of stock changes.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from depotman.models.enums import TransactionType


class StockLedgerQuerySet(models.QuerySet):

    def for_product(self, product):
        return self.filter(product=product)

    def for_document(self, document):
        ct = ContentType.objects.get_for_model(document)
        return self.filter(reference_type=ct, reference_id=document.pk)

    def chronological(self):
        return self.order_by('created_at', 'id')


class StockLedgerEntry(models.Model):
    """
    Immutable record of one stock quantity change.

    Rules:
    - NEVER update() or delete()
    - One entry per (product, warehouse) movement
    - balance_after is the product's total stock right after this change,
      so per product: balance_after[n] == balance_after[n-1] + quantity_change[n]

    Written only by depotman.services.movements, inside the same
    atomic block as the stock change it records.
    """

    product = models.ForeignKey(
        'depotman.Product',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        verbose_name=_('Warehouse'),
    )
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        db_index=True,
        verbose_name=_('Transaction Type'),
    )

    # Originating document (receipt, delivery order, transfer, adjustment)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reference Type'),
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference = GenericForeignKey('reference_type', 'reference_id')
    reference_number = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Reference Number'),
    )

    quantity_change = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity Change'),
        help_text=_('Positive = inbound, Negative = outbound'),
    )
    balance_after = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Balance After'),
        help_text=_('Product total stock after this change'),
    )

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Performed By'),
    )
    notes = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Notes'))
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created At'))

    objects = StockLedgerQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock Ledger Entry')
        verbose_name_plural = _('Stock Ledger')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='ledger_product_created_idx'),
            models.Index(fields=['warehouse', 'created_at'], name='ledger_warehouse_created_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='ledger_reference_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Ledger entries are immutable. "
                "Record a new movement to correct stock."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(
            "Ledger entries are immutable. "
            "Record a new movement to correct stock."
        )

    def __str__(self) -> str:
        signal = '+' if self.quantity_change > 0 else ''
        return f"{signal}{self.quantity_change} {self.transaction_type} | {self.reference_number}"
