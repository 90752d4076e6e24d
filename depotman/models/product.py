"""
Product catalog models — Category and Product.
"""

import logging
from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger('depotman')


class Category(models.Model):
    """Product grouping. Referenced only."""

    name = models.CharField(max_length=100, unique=True, verbose_name=_('Name'))
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Category')
        verbose_name_plural = _('Categories')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Product(models.Model):
    """
    A stockable product.

    Stock:
    - total_stock is a cache of the sum of StockLocation.quantity
    - Only depotman.services.movements writes it, always in the same
      atomic block as the StockLocation change it derives from
    - Use recalculate() for audit/correction
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(max_length=64, unique=True, verbose_name=_('SKU'))
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
        verbose_name=_('Category'),
    )
    unit_of_measure = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Unit of Measure'),
    )
    total_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Total Stock'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_stock__gte=0),
                name='product_total_stock_non_negative',
            ),
        ]

    @property
    def stock_by_location(self) -> dict[int, Decimal]:
        """Warehouse id → quantity."""
        return dict(self.locations.values_list('warehouse_id', 'quantity'))

    def stock_at(self, warehouse) -> Decimal:
        """Quantity held at one warehouse (0 when no location exists)."""
        warehouse_id = getattr(warehouse, 'pk', warehouse)
        return self.stock_by_location.get(warehouse_id, Decimal('0'))

    def recalculate(self, commit: bool = True) -> Decimal:
        """
        Recalculate total_stock from stock locations.

        Use for:
        - Integrity audit
        - Correction after detected drift

        Returns:
            New calculated total
        """
        total = self.locations.aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']

        if total != self.total_stock:
            old = self.total_stock
            self.total_stock = total
            if commit:
                self.save(update_fields=['total_stock', 'updated_at'])
            logger.warning(
                "product.total_stock.drift",
                extra={
                    "product_id": self.pk,
                    "old": str(old),
                    "new": str(total),
                    "fixed": commit,
                },
            )

        return total

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
