from django_filters import rest_framework as filters

from depotman.models import DeliveryOrder, InternalTransfer, Receipt, StockAdjustment


class ReceiptFilter(filters.FilterSet):
    class Meta:
        model = Receipt
        fields = ['status', 'warehouse']


class DeliveryOrderFilter(filters.FilterSet):
    customer = filters.CharFilter(
        field_name='customer',
        lookup_expr='icontains',
        help_text="Case-insensitive customer match"
    )

    class Meta:
        model = DeliveryOrder
        fields = ['status', 'warehouse', 'customer']


class InternalTransferFilter(filters.FilterSet):
    class Meta:
        model = InternalTransfer
        fields = ['status', 'source_warehouse', 'destination_warehouse']


class StockAdjustmentFilter(filters.FilterSet):
    class Meta:
        model = StockAdjustment
        fields = ['product', 'warehouse', 'reason']
