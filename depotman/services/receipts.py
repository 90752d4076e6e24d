"""
Receipts — inbound stock from suppliers.

    receipt = ReceiptWorkflow.create(
        warehouse=main, supplier='ACME',
        lines=[{'product': bolts, 'quantity_received': 50}],
    )
    ReceiptWorkflow.update(receipt, status='ready')
    ReceiptWorkflow.validate(receipt, user)
"""

from depotman.exceptions import StockError
from depotman.models.documents import Receipt, ReceiptLine
from depotman.models.enums import TransactionType
from depotman.services.documents import DocumentWorkflow, to_quantity
from depotman.services.movements import StockMovements


class ReceiptWorkflow(DocumentWorkflow):
    """Receipt lifecycle. validate() adds each line to the warehouse."""

    model = Receipt
    line_model = ReceiptLine
    line_fk = 'receipt'
    warehouse_fields = ('warehouse',)
    editable_fields = ('supplier', 'received_date', 'notes')
    event = 'receipt'
    action = 'validate'

    @classmethod
    def clean_line(cls, item):
        quantity = to_quantity(item.get('quantity_received'), 'quantity_received')
        if quantity <= 0:
            raise StockError(
                'VALIDATION_ERROR',
                'Quantity received must be a positive number',
                product=str(item.get('product')),
                quantity_received=quantity,
            )
        return {'quantity_received': quantity}

    @classmethod
    def apply_line(cls, document, line, user):
        entry = StockMovements.receive(
            line.product,
            document.warehouse,
            line.quantity_received,
            reference=document,
            user=user,
            transaction_type=TransactionType.RECEIPT,
            notes=f"Receipt: {document.number}",
        )
        return [entry]

    @classmethod
    def finalize(cls, document, now):
        if document.received_date is None:
            document.received_date = now
