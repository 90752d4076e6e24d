"""
Depot Service — The single public interface for all inventory operations.

Usage:
    from depotman import depot, StockError

    receipt = depot.receipts.create(warehouse=main, lines=[...])
    depot.receipts.update(receipt, status='ready')
    depot.receipts.validate(receipt, user)

    depot.deliveries.pick(order)
    depot.deliveries.pack(order)
    depot.deliveries.validate(order, user)

    depot.transfers.complete(transfer, user)
    depot.adjustments.create(product=p, warehouse=w, recorded_quantity=30,
                             counted_quantity=28, reason='damaged', user=user)

    depot.queries.move_history(product=p)
"""

from depotman.services.adjustments import StockAdjustments
from depotman.services.deliveries import DeliveryWorkflow
from depotman.services.queries import StockQueries
from depotman.services.receipts import ReceiptWorkflow
from depotman.services.transfers import TransferWorkflow


class Depot:
    """
    Namespaced entry point.

    IMPORTANT: validate/complete and adjustments.create are atomic
    across stock, ledger and document. See each workflow's docstring.
    """

    receipts = ReceiptWorkflow
    deliveries = DeliveryWorkflow
    transfers = TransferWorkflow
    adjustments = StockAdjustments
    queries = StockQueries
