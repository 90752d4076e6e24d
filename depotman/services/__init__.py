"""
Depot services — modular organization of inventory operations.

Re-exports all public classes:
    from depotman.services import ReceiptWorkflow, DeliveryWorkflow, TransferWorkflow
"""

from depotman.services.adjustments import StockAdjustments
from depotman.services.deliveries import DeliveryWorkflow
from depotman.services.movements import StockMovements
from depotman.services.queries import StockQueries
from depotman.services.receipts import ReceiptWorkflow
from depotman.services.transfers import TransferWorkflow

__all__ = [
    'StockQueries',
    'StockMovements',
    'StockAdjustments',
    'ReceiptWorkflow',
    'DeliveryWorkflow',
    'TransferWorkflow',
]
