"""
REST views. Every state change goes through the depot services;
StockError is rendered by depot_exception_handler.
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from depotman.models import DeliveryOrder, InternalTransfer, Receipt, StockAdjustment
from depotman.service import Depot

from .filters import (
    DeliveryOrderFilter,
    InternalTransferFilter,
    ReceiptFilter,
    StockAdjustmentFilter,
)
from .serializers import (
    DeliveryOrderSerializer,
    DeliveryOrderWriteSerializer,
    InternalTransferSerializer,
    InternalTransferWriteSerializer,
    MoveHistoryQuerySerializer,
    PackSerializer,
    PickSerializer,
    ReceiptSerializer,
    ReceiptWriteSerializer,
    StockAdjustmentCreateSerializer,
    StockAdjustmentSerializer,
    StockLedgerEntrySerializer,
)

logger = logging.getLogger('depotman')


class DocumentViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      viewsets.GenericViewSet):
    """
    CRUD for a stock document plus its lifecycle actions.

    Subclasses set queryset, serializer_class, write_serializer_class
    and workflow.
    """

    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    write_serializer_class = None
    workflow = None

    def _input(self, partial=False):
        serializer = self.write_serializer_class(data=self.request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)

    def _render(self, document, status_code=status.HTTP_200_OK):
        fresh = self.get_queryset().get(pk=document.pk)
        return Response(self.get_serializer(fresh).data, status=status_code)

    def create(self, request, *args, **kwargs):
        data = self._input()
        lines = data.pop('lines', None)
        document = self.workflow.create(lines=lines, user=request.user, **data)
        return self._render(document, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        data = self._input(partial=True)
        document = self.workflow.update(kwargs['pk'], **data)
        return self._render(document)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        self.workflow.delete(kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        document = self.workflow.cancel(pk, user=request.user)
        return self._render(document)


class ReceiptViewSet(DocumentViewSet):
    queryset = Receipt.objects.select_related('warehouse').prefetch_related('lines__product')
    serializer_class = ReceiptSerializer
    write_serializer_class = ReceiptWriteSerializer
    filterset_class = ReceiptFilter
    workflow = Depot.receipts

    @action(detail=True, methods=['post'])
    def validate(self, request, pk=None):
        document = self.workflow.validate(pk, user=request.user)
        return self._render(document)


class DeliveryOrderViewSet(DocumentViewSet):
    queryset = DeliveryOrder.objects.select_related('warehouse').prefetch_related('lines__product')
    serializer_class = DeliveryOrderSerializer
    write_serializer_class = DeliveryOrderWriteSerializer
    filterset_class = DeliveryOrderFilter
    workflow = Depot.deliveries

    @action(detail=True, methods=['post'])
    def pick(self, request, pk=None):
        serializer = PickSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = self.workflow.pick(pk, lines=serializer.validated_data.get('lines'), user=request.user)
        return self._render(document)

    @action(detail=True, methods=['post'])
    def pack(self, request, pk=None):
        serializer = PackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = self.workflow.pack(pk, lines=serializer.validated_data.get('lines'), user=request.user)
        return self._render(document)

    @action(detail=True, methods=['post'])
    def validate(self, request, pk=None):
        document = self.workflow.validate(pk, user=request.user)
        return self._render(document)


class InternalTransferViewSet(DocumentViewSet):
    queryset = InternalTransfer.objects.select_related(
        'source_warehouse', 'destination_warehouse',
    ).prefetch_related('lines__product')
    serializer_class = InternalTransferSerializer
    write_serializer_class = InternalTransferWriteSerializer
    filterset_class = InternalTransferFilter
    workflow = Depot.transfers

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        document = self.workflow.complete(pk, user=request.user)
        return self._render(document)


class StockAdjustmentViewSet(mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    queryset = StockAdjustment.objects.select_related('product', 'warehouse')
    serializer_class = StockAdjustmentSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = StockAdjustmentFilter

    def create(self, request, *args, **kwargs):
        serializer = StockAdjustmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        adjustment = Depot.adjustments.create(user=request.user, **serializer.validated_data)
        return Response(self.get_serializer(adjustment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        Depot.adjustments.delete(kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


class MoveHistoryView(APIView):
    """
    Ledger entries, newest first.

    GET /move-history/?product=&warehouse=&transaction_type=&start_date=&end_date=&page=&limit=
    GET /move-history/product/<product_id>/
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, product_id=None):
        params = MoveHistoryQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        query = params.validated_data

        if product_id is not None:
            product = Depot.queries.get_product(product_id)
        else:
            product = query.get('product')

        history = Depot.queries.move_history(
            product=product,
            warehouse=query.get('warehouse'),
            transaction_type=query.get('transaction_type'),
            start=query.get('start_date'),
            end=query.get('end_date'),
            page=query['page'],
            limit=query.get('limit'),
        )
        history['results'] = StockLedgerEntrySerializer(history['results'], many=True).data
        return Response(history)


class DashboardKPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(Depot.queries.dashboard_kpis())
