"""
Warehouse model — Where stock exists.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Warehouse(models.Model):
    """
    A physical site holding stock.

    Warehouses are stable entities, created during system setup.
    The inventory engine references them but never changes them.

    Examples:
        Warehouse.objects.create(name='Main', location='Building A')
        Warehouse.objects.create(name='Overflow', location='Dock 3')
    """

    name = models.CharField(
        unique=True,
        max_length=100,
        verbose_name=_('Name'),
    )
    location = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Location'),
        help_text=_('Address or area description'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
