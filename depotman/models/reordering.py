"""
ReorderingRule model — configurable min stock trigger per product.

Usage:
    # Set threshold
    ReorderingRule.objects.create(
        product=bolts, warehouse=main,
        minimum_quantity=10, reorder_quantity=50,
    )

    # Check rules (in a periodic task or after stock changes)
    from depotman.services.alerts import check_reordering_rules
    triggered = check_reordering_rules()
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ReorderingRule(models.Model):
    """
    Minimum stock rule per product (optionally per warehouse).

    The rule is triggered when stock is at or below minimum_quantity.
    reorder_quantity is the suggested replenishment.
    """

    product = models.ForeignKey(
        'depotman.Product',
        on_delete=models.CASCADE,
        related_name='reordering_rules',
        verbose_name=_('Product'),
    )

    # Optional warehouse filter (None = all warehouses combined)
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reordering_rules',
        verbose_name=_('Warehouse'),
        help_text=_('Empty = total stock across warehouses'),
    )

    minimum_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Minimum Quantity'),
    )
    reorder_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Reorder Quantity'),
    )

    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    last_triggered_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Last Triggered'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Reordering Rule')
        verbose_name_plural = _('Reordering Rules')
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'warehouse'],
                name='unique_reordering_rule_per_product_warehouse',
            ),
        ]

    def __str__(self) -> str:
        where = f" @ {self.warehouse}" if self.warehouse else ""
        return f"Reorder: {self.product}{where} <= {self.minimum_quantity}"
