"""
Enums for Depotman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DocumentStatus(models.TextChoices):
    """
    Stock document lifecycle.

    DRAFT → WAITING → READY → DONE
    DRAFT | WAITING | READY → CANCELED

    DONE and CANCELED are terminal: the document is frozen.
    Only validate/complete reaches DONE, only cancel reaches CANCELED.
    """
    DRAFT = 'draft', _('Draft')
    WAITING = 'waiting', _('Waiting')
    READY = 'ready', _('Ready')
    DONE = 'done', _('Done')
    CANCELED = 'canceled', _('Canceled')


OPEN_STATUSES = (DocumentStatus.DRAFT, DocumentStatus.WAITING, DocumentStatus.READY)


class DocumentKind(models.TextChoices):
    """Kind of document that originates a ledger entry."""
    RECEIPT = 'receipt', _('Receipt')
    DELIVERY_ORDER = 'delivery_order', _('Delivery Order')
    INTERNAL_TRANSFER = 'internal_transfer', _('Internal Transfer')
    STOCK_ADJUSTMENT = 'stock_adjustment', _('Stock Adjustment')


class TransactionType(models.TextChoices):
    """Direction of a ledger entry."""
    RECEIPT = 'receipt', _('Receipt')              # Inbound from supplier
    DELIVERY = 'delivery', _('Delivery')           # Outbound to customer
    TRANSFER_IN = 'transfer_in', _('Transfer In')
    TRANSFER_OUT = 'transfer_out', _('Transfer Out')
    ADJUSTMENT = 'adjustment', _('Adjustment')     # Physical count correction


class AdjustmentReason(models.TextChoices):
    """Why a physical count differs from the system."""
    DAMAGED = 'damaged', _('Damaged')
    LOST = 'lost', _('Lost')
    FOUND = 'found', _('Found')
    EXPIRED = 'expired', _('Expired')
    MISCOUNTED = 'miscounted', _('Miscounted')
    OTHER = 'other', _('Other')
