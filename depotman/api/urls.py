from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    DashboardKPIView,
    DeliveryOrderViewSet,
    InternalTransferViewSet,
    MoveHistoryView,
    ReceiptViewSet,
    StockAdjustmentViewSet,
)

router = DefaultRouter()
router.register('receipts', ReceiptViewSet, basename='receipt')
router.register('delivery-orders', DeliveryOrderViewSet, basename='delivery-order')
router.register('internal-transfers', InternalTransferViewSet, basename='internal-transfer')
router.register('stock-adjustments', StockAdjustmentViewSet, basename='stock-adjustment')

urlpatterns = [
    path('move-history/', MoveHistoryView.as_view(), name='move-history'),
    path('move-history/product/<int:product_id>/', MoveHistoryView.as_view(), name='move-history-product'),
    path('dashboard/kpis/', DashboardKPIView.as_view(), name='dashboard-kpis'),
    path('', include(router.urls)),
]
