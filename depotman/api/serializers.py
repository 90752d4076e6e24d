from rest_framework import serializers

from depotman.models import (
    AdjustmentReason,
    DeliveryOrder,
    DeliveryOrderLine,
    DocumentStatus,
    InternalTransfer,
    Receipt,
    ReceiptLine,
    StockAdjustment,
    StockLedgerEntry,
    TransactionType,
    TransferLine,
)


def quantity_field(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=3, **kwargs)


# ══════════════════════════════════════════════════════════════
# READ
# ══════════════════════════════════════════════════════════════


class LineReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)

    common_fields = ['id', 'product', 'product_name', 'product_sku', 'unit_of_measure', 'position']


class ReceiptLineSerializer(LineReadSerializer):
    class Meta:
        model = ReceiptLine
        fields = LineReadSerializer.common_fields + ['quantity_received']


class DeliveryOrderLineSerializer(LineReadSerializer):
    class Meta:
        model = DeliveryOrderLine
        fields = LineReadSerializer.common_fields + [
            'quantity_ordered', 'quantity_picked', 'quantity_packed',
        ]


class TransferLineSerializer(LineReadSerializer):
    class Meta:
        model = TransferLine
        fields = LineReadSerializer.common_fields + ['quantity']


DOCUMENT_FIELDS = ['id', 'number', 'status', 'notes', 'validated_by', 'validated_at',
                   'created_at', 'updated_at']


class ReceiptSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    lines = ReceiptLineSerializer(many=True, read_only=True)

    class Meta:
        model = Receipt
        fields = DOCUMENT_FIELDS + ['supplier', 'warehouse', 'warehouse_name', 'received_date', 'lines']
        read_only_fields = fields


class DeliveryOrderSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    lines = DeliveryOrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = DeliveryOrder
        fields = DOCUMENT_FIELDS + ['customer', 'warehouse', 'warehouse_name', 'delivery_date', 'lines']
        read_only_fields = fields


class InternalTransferSerializer(serializers.ModelSerializer):
    source_warehouse_name = serializers.CharField(source='source_warehouse.name', read_only=True)
    destination_warehouse_name = serializers.CharField(source='destination_warehouse.name', read_only=True)
    lines = TransferLineSerializer(many=True, read_only=True)

    class Meta:
        model = InternalTransfer
        fields = DOCUMENT_FIELDS + [
            'source_warehouse', 'source_warehouse_name',
            'destination_warehouse', 'destination_warehouse_name',
            'scheduled_date', 'lines',
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    reason_display = serializers.CharField(source='get_reason_display', read_only=True)

    class Meta:
        model = StockAdjustment
        fields = [
            'id', 'number', 'product', 'product_name', 'warehouse', 'warehouse_name',
            'recorded_quantity', 'counted_quantity', 'adjustment_quantity',
            'reason', 'reason_display', 'notes', 'adjusted_by', 'created_at',
        ]
        read_only_fields = fields


class StockLedgerEntrySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    reference_type = serializers.CharField(source='reference_type.model', read_only=True, allow_null=True)

    class Meta:
        model = StockLedgerEntry
        fields = [
            'id', 'product', 'product_name', 'product_sku', 'warehouse', 'warehouse_name',
            'transaction_type', 'reference_type', 'reference_id', 'reference_number',
            'quantity_change', 'balance_after', 'performed_by', 'notes', 'created_at',
        ]
        read_only_fields = fields


# ══════════════════════════════════════════════════════════════
# WRITE (validated_data is passed straight to the workflows)
# ══════════════════════════════════════════════════════════════


class DocumentWriteSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DocumentStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class ReceiptLineInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity_received = quantity_field()
    unit_of_measure = serializers.CharField(required=False, allow_blank=True)


class ReceiptWriteSerializer(DocumentWriteSerializer):
    warehouse = serializers.IntegerField(required=False)
    supplier = serializers.CharField(required=False, allow_blank=True, max_length=200)
    received_date = serializers.DateTimeField(required=False, allow_null=True)
    lines = ReceiptLineInputSerializer(many=True, required=False)


class DeliveryOrderLineInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity_ordered = quantity_field()
    quantity_picked = quantity_field(required=False)
    quantity_packed = quantity_field(required=False)
    unit_of_measure = serializers.CharField(required=False, allow_blank=True)


class DeliveryOrderWriteSerializer(DocumentWriteSerializer):
    warehouse = serializers.IntegerField(required=False)
    customer = serializers.CharField(required=False, allow_blank=True, max_length=200)
    delivery_date = serializers.DateTimeField(required=False, allow_null=True)
    lines = DeliveryOrderLineInputSerializer(many=True, required=False)


class TransferLineInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity = quantity_field()
    unit_of_measure = serializers.CharField(required=False, allow_blank=True)


class InternalTransferWriteSerializer(DocumentWriteSerializer):
    source_warehouse = serializers.IntegerField(required=False)
    destination_warehouse = serializers.IntegerField(required=False)
    scheduled_date = serializers.DateTimeField(required=False, allow_null=True)
    lines = TransferLineInputSerializer(many=True, required=False)


class PickLineSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity_picked = quantity_field()


class PackLineSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity_packed = quantity_field()


class PickSerializer(serializers.Serializer):
    """Omit lines to pick every line in full."""
    lines = PickLineSerializer(many=True, required=False)


class PackSerializer(serializers.Serializer):
    """Omit lines to pack every line up to its picked quantity."""
    lines = PackLineSerializer(many=True, required=False)


class StockAdjustmentCreateSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    warehouse = serializers.IntegerField()
    recorded_quantity = quantity_field()
    counted_quantity = quantity_field()
    reason = serializers.ChoiceField(choices=AdjustmentReason.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class MoveHistoryQuerySerializer(serializers.Serializer):
    product = serializers.IntegerField(required=False)
    warehouse = serializers.IntegerField(required=False)
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    page = serializers.IntegerField(required=False, default=1)
    limit = serializers.IntegerField(required=False)
