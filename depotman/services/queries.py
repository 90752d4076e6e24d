"""
Stock queries — read-only operations.

All methods are classmethods and use no locking.
"""

import math
from datetime import datetime
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from depotman.conf import depotman_settings
from depotman.exceptions import StockError
from depotman.models.documents import DeliveryOrder, InternalTransfer, Receipt
from depotman.models.enums import DocumentStatus, TransactionType
from depotman.models.ledger import StockLedgerEntry
from depotman.models.product import Category, Product
from depotman.models.stock import StockLocation
from depotman.models.warehouse import Warehouse

PENDING_STATUSES = (DocumentStatus.WAITING, DocumentStatus.READY)


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def get_product(cls, pk) -> Product:
        try:
            return Product.objects.get(pk=pk)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', f"Product {pk} not found", model='Product', id=str(pk))

    @classmethod
    def stock_at(cls, product, warehouse) -> Decimal:
        """Quantity of product at one warehouse (0 if never stocked there)."""
        location = StockLocation.objects.for_product(product).at_warehouse(warehouse).first()
        return location.quantity if location else Decimal('0')

    @classmethod
    def stock_by_location(cls, product) -> dict[int, Decimal]:
        """Warehouse id → quantity for one product."""
        return dict(
            StockLocation.objects.for_product(product).values_list('warehouse_id', 'quantity')
        )

    @classmethod
    def total_stock(cls, product) -> Decimal:
        """Sum over locations (not the cache)."""
        return StockLocation.objects.for_product(product).aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']

    @classmethod
    def move_history(cls, product=None, warehouse=None, transaction_type=None,
                     start: datetime | None = None, end: datetime | None = None,
                     page: int = 1, limit: int | None = None) -> dict:
        """
        Ledger entries, newest first, paginated.

        Args:
            product / warehouse: instance or pk filter
            transaction_type: one of TransactionType
            start / end: inclusive created_at bounds
            page: 1-based page
            limit: page size (default LEDGER_PAGE_SIZE, max LEDGER_MAX_PAGE_SIZE)

        Returns:
            {"count", "total", "page", "pages", "results"}
        """
        qs = StockLedgerEntry.objects.select_related('product', 'warehouse', 'performed_by')

        if product is not None:
            qs = qs.filter(product=product)
        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)
        if transaction_type:
            if transaction_type not in TransactionType.values:
                raise StockError(
                    'VALIDATION_ERROR',
                    f"Transaction type must be one of: {', '.join(TransactionType.values)}",
                    transaction_type=str(transaction_type),
                )
            qs = qs.filter(transaction_type=transaction_type)
        if start is not None:
            qs = qs.filter(created_at__gte=start)
        if end is not None:
            qs = qs.filter(created_at__lte=end)

        page_size = limit or depotman_settings.LEDGER_PAGE_SIZE
        if page < 1 or page_size < 1 or page_size > depotman_settings.LEDGER_MAX_PAGE_SIZE:
            raise StockError(
                'VALIDATION_ERROR',
                f"Page must be positive and limit between 1 and {depotman_settings.LEDGER_MAX_PAGE_SIZE}",
                page=page,
                limit=page_size,
            )

        total = qs.count()
        offset = (page - 1) * page_size
        results = list(qs.order_by('-created_at', '-id')[offset:offset + page_size])

        return {
            'count': len(results),
            'total': total,
            'page': page,
            'pages': math.ceil(total / page_size),
            'results': results,
        }

    @classmethod
    def dashboard_kpis(cls) -> dict:
        """Headline numbers for the admin dashboard."""
        from depotman.services.alerts import low_stock_products

        total_stock = Product.objects.aggregate(
            t=Coalesce(Sum('total_stock'), Decimal('0'))
        )['t']

        return {
            'counts': {
                'total_products': Product.objects.count(),
                'active_products': Product.objects.filter(is_active=True).count(),
                'total_categories': Category.objects.count(),
                'total_warehouses': Warehouse.objects.count(),
            },
            'inventory': {
                'total_stock': total_stock,
                'low_stock_products': len(low_stock_products()),
            },
            'operations': {
                'pending_receipts': Receipt.objects.filter(status__in=PENDING_STATUSES).count(),
                'pending_deliveries': DeliveryOrder.objects.filter(status__in=PENDING_STATUSES).count(),
                'pending_transfers': InternalTransfer.objects.filter(status__in=PENDING_STATUSES).count(),
            },
        }
