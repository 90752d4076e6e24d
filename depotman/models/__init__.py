"""
Depotman Models.

Core models for warehouse inventory:
- Warehouse: Where stock exists
- Product: Stockable item, caches its total stock
- StockLocation: Quantity of a product at a warehouse
- StockLedgerEntry: Immutable ledger of changes
- Receipt / DeliveryOrder / InternalTransfer: Stock documents
- StockAdjustment: Physical count corrections
- ReorderingRule: Configurable min stock trigger
"""

from depotman.models.adjustment import StockAdjustment
from depotman.models.documents import (
    DeliveryOrder,
    DeliveryOrderLine,
    InternalTransfer,
    Receipt,
    ReceiptLine,
    TransferLine,
)
from depotman.models.enums import (
    AdjustmentReason,
    DocumentKind,
    DocumentStatus,
    TransactionType,
)
from depotman.models.ledger import StockLedgerEntry
from depotman.models.product import Category, Product
from depotman.models.reordering import ReorderingRule
from depotman.models.stock import StockLocation
from depotman.models.warehouse import Warehouse

__all__ = [
    'AdjustmentReason',
    'DocumentKind',
    'DocumentStatus',
    'TransactionType',
    'Warehouse',
    'Category',
    'Product',
    'StockLocation',
    'StockLedgerEntry',
    'Receipt',
    'ReceiptLine',
    'DeliveryOrder',
    'DeliveryOrderLine',
    'InternalTransfer',
    'TransferLine',
    'StockAdjustment',
    'ReorderingRule',
]
