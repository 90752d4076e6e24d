"""
Django Depotman — Warehouse inventory transaction engine.

Receipts, delivery orders and internal transfers with an append-only
stock ledger.

Usage:
    from depotman import depot, StockError

    depot.receipts.validate(receipt, user)
    depot.deliveries.pick(order)
    depot.queries.stock_at(product, warehouse)  # Decimal('50')
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'depot':
        from depotman.service import Depot
        return Depot
    elif name == 'StockError':
        from depotman.exceptions import StockError
        return StockError
    elif name == 'Warehouse':
        from depotman.models.warehouse import Warehouse
        return Warehouse
    elif name == 'Product':
        from depotman.models.product import Product
        return Product
    elif name == 'StockLocation':
        from depotman.models.stock import StockLocation
        return StockLocation
    elif name == 'StockLedgerEntry':
        from depotman.models.ledger import StockLedgerEntry
        return StockLedgerEntry
    elif name == 'DocumentStatus':
        from depotman.models.enums import DocumentStatus
        return DocumentStatus
    elif name == 'TransactionType':
        from depotman.models.enums import TransactionType
        return TransactionType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'depot',
    'StockError',
    'Warehouse',
    'Product',
    'StockLocation',
    'StockLedgerEntry',
    'DocumentStatus',
    'TransactionType',
]

__version__ = '0.1.0'
