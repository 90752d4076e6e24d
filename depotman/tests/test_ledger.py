"""
Tests for the stock ledger, movements and the transaction coordinator.
"""

from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from depotman import StockError, depot
from depotman.models import DocumentStatus, StockLedgerEntry, StockLocation
from depotman.services.movements import StockMovements


pytestmark = pytest.mark.django_db


def assert_ledger_consistent(product):
    """Per product: each balance follows its predecessor, last equals total_stock."""
    entries = list(StockLedgerEntry.objects.for_product(product).chronological())
    previous = Decimal('0')
    for entry in entries:
        assert entry.balance_after == previous + entry.quantity_change
        previous = entry.balance_after
    product.refresh_from_db()
    assert previous == product.total_stock


class TestLedgerInvariants:

    def test_mixed_operations_keep_balance_chain(self, product, main, overflow, user):
        receipt = depot.receipts.create(
            warehouse=main, status=DocumentStatus.READY,
            lines=[{'product': product, 'quantity_received': 40}],
        )
        depot.receipts.validate(receipt, user)

        transfer = depot.transfers.create(
            source_warehouse=main, destination_warehouse=overflow, status=DocumentStatus.READY,
            lines=[{'product': product, 'quantity': 15}],
        )
        depot.transfers.complete(transfer, user)

        order = depot.deliveries.create(
            warehouse=overflow, lines=[{'product': product, 'quantity_ordered': 5}],
        )
        depot.deliveries.pick(order)
        depot.deliveries.pack(order)
        depot.deliveries.validate(order, user)

        depot.adjustments.create(
            product=product, warehouse=main,
            recorded_quantity=25, counted_quantity=24, reason='damaged',
        )

        assert_ledger_consistent(product)
        product.refresh_from_db()
        assert product.total_stock == Decimal('34')
        assert product.stock_by_location == {main.pk: Decimal('24'), overflow.pk: Decimal('10')}

    def test_total_stock_matches_locations(self, product, main, overflow, stock):
        stock(product, main, 7)
        stock(product, overflow, 3)

        assert product.total_stock == Decimal('10')
        assert product.recalculate(commit=False) == Decimal('10')

    def test_entries_are_immutable(self, product, main, stock):
        stock(product, main, 1)
        entry = StockLedgerEntry.objects.get()

        entry.notes = 'tampered'
        with pytest.raises(ValueError):
            entry.save()
        with pytest.raises(ValueError):
            entry.delete()


class TestStockMovements:
    """Tests for the low-level movement methods."""

    def test_receive_creates_location(self, product, main):
        entry = StockMovements.receive(product, main, Decimal('5'))

        assert StockLocation.objects.get(product=product, warehouse=main).quantity == Decimal('5')
        assert entry.balance_after == Decimal('5')
        assert entry.reference is None

    def test_receive_rejects_zero(self, product, main):
        with pytest.raises(StockError) as exc:
            StockMovements.receive(product, main, Decimal('0'))

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_issue_without_location(self, product, main):
        with pytest.raises(StockError) as exc:
            StockMovements.issue(product, main, Decimal('1'))

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert not StockLocation.objects.exists()

    def test_issue_records_negative_change(self, product, main, stock):
        stock(product, main, 9)
        entry = StockMovements.issue(product, main, Decimal('4'))

        assert entry.quantity_change == Decimal('-4')
        assert entry.balance_after == Decimal('5')

    def test_set_quantity_stale(self, product, main, stock):
        stock(product, main, 2)

        with pytest.raises(StockError) as exc:
            StockMovements.set_quantity(product, main, Decimal('1'), expected=Decimal('3'))

        assert exc.value.code == 'STALE_READ'


class TestCoordinator:
    """Database failures roll back the whole operation."""

    def test_database_error_becomes_transaction_failure(self, product, other_product, main, user):
        receipt = depot.receipts.create(
            warehouse=main, status=DocumentStatus.READY,
            lines=[
                {'product': product, 'quantity_received': 5},
                {'product': other_product, 'quantity_received': 6},
            ],
        )
        original = StockLedgerEntry.objects.create
        calls = []

        def failing_create(**kwargs):
            calls.append(kwargs)
            if len(calls) == 2:
                raise DatabaseError('disk full')
            return original(**kwargs)

        with mock.patch.object(StockLedgerEntry.objects, 'create', side_effect=failing_create):
            with pytest.raises(StockError) as exc:
                depot.receipts.validate(receipt, user)

        assert exc.value.code == 'TRANSACTION_FAILURE'
        assert StockLedgerEntry.objects.count() == 0
        product.refresh_from_db()
        assert product.total_stock == Decimal('0')
        assert not StockLocation.objects.exists()
        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.READY

    def test_error_payload(self):
        error = StockError('INSUFFICIENT_STOCK', available=Decimal('2'), requested=Decimal('3'))

        assert error.as_dict() == {
            'code': 'INSUFFICIENT_STOCK',
            'message': 'Insufficient stock for the requested quantity',
            'data': {'available': '2', 'requested': '3'},
        }
