"""
Internal transfers — stock moving between two warehouses.

    transfer = TransferWorkflow.create(
        source_warehouse=main, destination_warehouse=overflow,
        lines=[{'product': bolts, 'quantity': 10}],
    )
    TransferWorkflow.update(transfer, status='ready')
    TransferWorkflow.complete(transfer, user)
"""

from depotman.exceptions import StockError
from depotman.models.documents import InternalTransfer, TransferLine
from depotman.services.documents import DocumentWorkflow, to_quantity
from depotman.services.movements import StockMovements


class TransferWorkflow(DocumentWorkflow):
    """Transfer lifecycle. complete() writes transfer_out + transfer_in per line."""

    model = InternalTransfer
    line_model = TransferLine
    line_fk = 'transfer'
    warehouse_fields = ('source_warehouse', 'destination_warehouse')
    editable_fields = ('scheduled_date', 'notes')
    event = 'transfer'
    action = 'complete'

    @classmethod
    def create(cls, *, lines, user=None, **fields):
        # Same-warehouse is reported before any lookup
        source = fields.get('source_warehouse')
        destination = fields.get('destination_warehouse')
        if source is not None and cls._same(source, destination):
            raise StockError('VALIDATION_ERROR', 'Source and destination warehouses cannot be the same')
        return super().create(lines=lines, user=user, **fields)

    @classmethod
    def complete(cls, transfer, user=None):
        """Alias of validate() using transfer vocabulary."""
        return cls.validate(transfer, user)

    @classmethod
    def check_fields(cls, fields, instance=None):
        source = fields.get('source_warehouse', getattr(instance, 'source_warehouse', None))
        destination = fields.get('destination_warehouse', getattr(instance, 'destination_warehouse', None))
        if source is not None and cls._same(source, destination):
            raise StockError('VALIDATION_ERROR', 'Source and destination warehouses cannot be the same')

    @classmethod
    def clean_line(cls, item):
        quantity = to_quantity(item.get('quantity'), 'quantity')
        if quantity <= 0:
            raise StockError(
                'VALIDATION_ERROR',
                'Transfer quantity must be a positive number',
                product=str(item.get('product')),
                quantity=quantity,
            )
        return {'quantity': quantity}

    @classmethod
    def apply_line(cls, document, line, user):
        out_entry, in_entry = StockMovements.transfer(
            line.product,
            document.source_warehouse,
            document.destination_warehouse,
            line.quantity,
            reference=document,
            user=user,
        )
        return [out_entry, in_entry]

    @staticmethod
    def _same(a, b) -> bool:
        if b is None:
            return False
        return str(getattr(a, 'pk', a)) == str(getattr(b, 'pk', b))
