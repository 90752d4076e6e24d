"""
StockLocation model — Quantity of a product at one warehouse.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class StockLocationQuerySet(models.QuerySet):
    """QuerySet with helper methods for StockLocation queries."""

    def for_product(self, product):
        """Filter locations for a specific product."""
        return self.filter(product=product)

    def at_warehouse(self, warehouse):
        """Filter by warehouse."""
        return self.filter(warehouse=warehouse)


class StockLocation(models.Model):
    """
    Quantity of a product held at a warehouse.

    One row per (product, warehouse): the persisted form of the
    product's stock-by-location map. Rows are created on first
    inbound movement and never deleted by the engine.
    """

    product = models.ForeignKey(
        'depotman.Product',
        on_delete=models.CASCADE,
        related_name='locations',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'depotman.Warehouse',
        on_delete=models.PROTECT,
        related_name='stock_locations',
        verbose_name=_('Warehouse'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockLocationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock Location')
        verbose_name_plural = _('Stock Locations')
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'warehouse'],
                name='unique_stock_location',
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='stock_location_quantity_non_negative',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} @ {self.warehouse}: {self.quantity}"
