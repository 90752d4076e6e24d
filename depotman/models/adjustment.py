"""
StockAdjustment model — One-shot physical count correction.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from depotman.models.documents import generate_number
from depotman.models.enums import AdjustmentReason, DocumentKind


class StockAdjustment(models.Model):
    """
    Correction of one product's quantity at one warehouse.

    No lifecycle: created once by depotman.services.adjustments, never
    edited. recorded_quantity is what the user saw when counting; it
    must match live stock at creation time.
    """

    kind = DocumentKind.STOCK_ADJUSTMENT

    number = models.CharField(max_length=50, unique=True, editable=False, verbose_name=_('Number'))
    product = models.ForeignKey(
        'depotman.Product',
        on_delete=models.PROTECT,
        related_name='adjustments',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='adjustments',
        verbose_name=_('Warehouse'),
    )
    recorded_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Recorded'))
    counted_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Counted'))
    adjustment_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Adjustment'),
        help_text=_('counted - recorded'),
    )
    reason = models.CharField(max_length=20, choices=AdjustmentReason.choices, verbose_name=_('Reason'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))
    adjusted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Adjusted By'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Stock Adjustment')
        verbose_name_plural = _('Stock Adjustments')
        ordering = ['-created_at']

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = generate_number(self.kind, digits=4)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        signal = '+' if self.adjustment_quantity > 0 else ''
        return f"{self.number}: {signal}{self.adjustment_quantity} {self.product} ({self.reason})"
