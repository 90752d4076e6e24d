"""
Depotman Admin.

Provides views for back-office operation and production debugging:
- Warehouse / Category / Product: list + edit (total_stock read-only)
- StockLocation: read-only (product, warehouse, quantity)
- StockLedgerEntry: read-only audit trail
- Receipt / DeliveryOrder / InternalTransfer: read-only lines; edits, deletes
  and the validate/cancel actions go through the workflows
- StockAdjustment: read-only
- ReorderingRule: configurable min stock triggers
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from depotman.exceptions import StockError
from depotman.models import (
    Category,
    DeliveryOrder,
    DeliveryOrderLine,
    InternalTransfer,
    Product,
    Receipt,
    ReceiptLine,
    ReorderingRule,
    StockAdjustment,
    StockLedgerEntry,
    StockLocation,
    TransferLine,
    Warehouse,
)
from depotman.services import DeliveryWorkflow, ReceiptWorkflow, TransferWorkflow

logger = logging.getLogger('depotman')


class ReadOnlyAdmin(admin.ModelAdmin):
    """Stock only changes via the depot services."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'location']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active']
    search_fields = ['name']


class StockLocationInline(admin.TabularInline):
    model = StockLocation
    fields = ['warehouse', 'quantity', 'updated_at']
    readonly_fields = ['warehouse', 'quantity', 'updated_at']
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — total_stock is a cache, never edited by hand."""

    list_display = ['name', 'sku', 'category', 'total_stock', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['name', 'sku']
    readonly_fields = ['total_stock', 'created_at', 'updated_at']
    inlines = [StockLocationInline]


# =========================================================================
# STOCK (read-only)
# =========================================================================

@admin.register(StockLocation)
class StockLocationAdmin(ReadOnlyAdmin):
    list_display = ['product', 'warehouse', 'quantity', 'updated_at']
    list_filter = ['warehouse']
    search_fields = ['product__name', 'product__sku']


@admin.register(StockLedgerEntry)
class StockLedgerEntryAdmin(ReadOnlyAdmin):
    """Ledger admin — immutable audit trail."""

    list_display = ['created_at', 'product', 'warehouse', 'transaction_type',
                    'quantity_change', 'balance_after', 'reference_number', 'performed_by']
    list_filter = ['transaction_type', 'warehouse']
    search_fields = ['reference_number', 'product__name', 'product__sku']
    date_hierarchy = 'created_at'


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(ReadOnlyAdmin):
    list_display = ['number', 'product', 'warehouse', 'recorded_quantity',
                    'counted_quantity', 'adjustment_quantity', 'reason', 'created_at']
    list_filter = ['reason', 'warehouse']
    search_fields = ['number', 'product__name']


# =========================================================================
# DOCUMENTS
# =========================================================================

class DocumentAdmin(admin.ModelAdmin):
    """
    Shared admin for stock documents.

    Every write goes through the document's workflow: header edits call
    workflow.update(), deletes call workflow.delete(), and the actions call
    validate() / cancel(). Documents and their lines are created through
    the depot services or the API, not here.
    """

    workflow = None
    list_filter = ['status']
    search_fields = ['number']
    readonly_fields = ['number', 'status', 'validated_by', 'validated_at', 'created_at', 'updated_at']
    actions = ['validate_documents', 'cancel_documents']

    def _report(self, request, document, action, exc):
        logger.warning(
            "depot.admin.action_failed",
            extra={
                "action": action,
                "document_id": document.pk,
                "number": document.number,
                "code": exc.code,
            },
        )
        self.message_user(request, f"{document.number}: {exc.message}", level=messages.ERROR)

    def _run(self, request, queryset, action, done_message):
        operation = getattr(self.workflow, action)
        count = 0
        for document in queryset:
            try:
                operation(document, request.user)
                count += 1
            except StockError as exc:
                self._report(request, document, action, exc)
        self.message_user(request, done_message.format(count=count))

    @admin.action(description=_('Validate selected documents'))
    def validate_documents(self, request, queryset):
        self._run(request, queryset, 'validate', _('{count} document(s) validated.'))

    @admin.action(description=_('Cancel selected documents'))
    def cancel_documents(self, request, queryset):
        self._run(request, queryset, 'cancel', _('{count} document(s) canceled.'))

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        # Done and canceled documents are frozen
        if obj is not None and not obj.is_open:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_done:
            return False
        return super().has_delete_permission(request, obj)

    def save_model(self, request, obj, form, change):
        editable = self.workflow.warehouse_fields + self.workflow.editable_fields
        fields = {name: form.cleaned_data[name] for name in form.changed_data if name in editable}
        if not fields:
            return
        try:
            self.workflow.update(obj.pk, **fields)
        except StockError as exc:
            self._report(request, obj, 'update', exc)

    def delete_model(self, request, obj):
        try:
            self.workflow.delete(obj)
        except StockError as exc:
            self._report(request, obj, 'delete', exc)

    def delete_queryset(self, request, queryset):
        for document in queryset:
            self.delete_model(request, document)


class LineInline(admin.TabularInline):
    """Lines are shown read-only: they change only through the workflow."""

    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ReceiptLineInline(LineInline):
    model = ReceiptLine


@admin.register(Receipt)
class ReceiptAdmin(DocumentAdmin):
    workflow = ReceiptWorkflow
    list_display = ['number', 'supplier', 'warehouse', 'status', 'received_date']
    list_filter = ['status', 'warehouse']
    inlines = [ReceiptLineInline]


class DeliveryOrderLineInline(LineInline):
    model = DeliveryOrderLine


@admin.register(DeliveryOrder)
class DeliveryOrderAdmin(DocumentAdmin):
    workflow = DeliveryWorkflow
    list_display = ['number', 'customer', 'warehouse', 'status', 'delivery_date']
    list_filter = ['status', 'warehouse']
    inlines = [DeliveryOrderLineInline]


class TransferLineInline(LineInline):
    model = TransferLine


@admin.register(InternalTransfer)
class InternalTransferAdmin(DocumentAdmin):
    workflow = TransferWorkflow
    list_display = ['number', 'source_warehouse', 'destination_warehouse', 'status', 'scheduled_date']
    list_filter = ['status', 'source_warehouse', 'destination_warehouse']
    inlines = [TransferLineInline]


# =========================================================================
# REORDERING RULES
# =========================================================================

@admin.register(ReorderingRule)
class ReorderingRuleAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'minimum_quantity', 'reorder_quantity', 'warehouse',
                    'is_active', 'last_triggered_at']
    list_filter = ['is_active', 'warehouse']
    search_fields = ['product__name', 'product__sku']
    readonly_fields = ['last_triggered_at', 'created_at', 'updated_at']
