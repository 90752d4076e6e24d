"""
Tests for receipt lifecycle.
"""

from decimal import Decimal

import pytest

from depotman import StockError, depot
from depotman.models import DocumentStatus, Receipt, StockLedgerEntry, TransactionType


pytestmark = pytest.mark.django_db


@pytest.fixture
def receipt(main, product):
    """Draft receipt for 50 bolts at Main."""
    return depot.receipts.create(
        warehouse=main,
        supplier='ACME Fasteners',
        lines=[{'product': product, 'quantity_received': 50}],
    )


class TestReceiptCreate:
    """Tests for depot.receipts.create()."""

    def test_create_assigns_number_and_draft(self, receipt):
        """New receipts are draft with an RC- number."""
        assert receipt.status == DocumentStatus.DRAFT
        assert receipt.number.startswith('RC-')
        parts = receipt.number.split('-')
        assert len(parts) == 3
        assert len(parts[2]) == 3

    def test_create_copies_unit_of_measure(self, receipt):
        """Line unit defaults to the product's unit."""
        line = receipt.lines.get()
        assert line.unit_of_measure == 'pcs'
        assert line.quantity_received == Decimal('50')

    def test_create_accepts_primary_keys(self, main, product):
        receipt = depot.receipts.create(
            warehouse=main.pk,
            lines=[{'product': product.pk, 'quantity_received': '2.5'}],
        )
        assert receipt.warehouse == main
        assert receipt.lines.get().quantity_received == Decimal('2.5')

    def test_create_without_lines_rejected(self, main):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=main, lines=[])

        assert exc.value.code == 'VALIDATION_ERROR'
        assert Receipt.objects.count() == 0

    def test_create_without_warehouse_rejected(self, product):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(lines=[{'product': product, 'quantity_received': 1}])

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_create_non_positive_quantity_rejected(self, main, product):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=main, lines=[{'product': product, 'quantity_received': 0}])

        assert exc.value.code == 'VALIDATION_ERROR'

    @pytest.mark.parametrize('quantity', ['NaN', 'sNaN', 'Infinity', '-Infinity'])
    def test_create_non_finite_quantity_rejected(self, main, product, quantity):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=main, lines=[{'product': product, 'quantity_received': quantity}])

        assert exc.value.code == 'VALIDATION_ERROR'
        assert Receipt.objects.count() == 0

    def test_create_too_many_decimal_places_rejected(self, main, product):
        """0.0004 would be stored as 0.000 and could never validate."""
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=main, lines=[{'product': product, 'quantity_received': '0.0004'}])

        assert exc.value.code == 'VALIDATION_ERROR'
        assert exc.value.data['field'] == 'quantity_received'
        assert Receipt.objects.count() == 0

    def test_create_three_decimal_places_accepted(self, main, product):
        receipt = depot.receipts.create(warehouse=main, lines=[{'product': product, 'quantity_received': '0.125'}])
        assert receipt.lines.get().quantity_received == Decimal('0.125')

    def test_create_unknown_warehouse(self, product):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=999999, lines=[{'product': product, 'quantity_received': 1}])

        assert exc.value.code == 'NOT_FOUND'

    def test_create_unknown_product(self, main):
        with pytest.raises(StockError) as exc:
            depot.receipts.create(warehouse=main, lines=[{'product': 999999, 'quantity_received': 1}])

        assert exc.value.code == 'NOT_FOUND'

    def test_create_cannot_start_done(self, main, product):
        """Only validate() reaches done."""
        with pytest.raises(StockError) as exc:
            depot.receipts.create(
                warehouse=main,
                status=DocumentStatus.DONE,
                lines=[{'product': product, 'quantity_received': 1}],
            )

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_get(self, receipt):
        assert depot.receipts.get(receipt.pk) == receipt

        with pytest.raises(StockError) as exc:
            depot.receipts.get(999999)

        assert exc.value.code == 'NOT_FOUND'

    def test_create_has_no_stock_effect(self, receipt, product):
        product.refresh_from_db()
        assert product.total_stock == Decimal('0')
        assert StockLedgerEntry.objects.count() == 0


class TestReceiptUpdate:
    """Tests for depot.receipts.update()."""

    def test_update_to_ready(self, receipt):
        updated = depot.receipts.update(receipt, status=DocumentStatus.READY)
        assert updated.status == DocumentStatus.READY

    def test_update_replaces_lines(self, receipt, product, other_product):
        depot.receipts.update(receipt, lines=[
            {'product': product, 'quantity_received': 5},
            {'product': other_product, 'quantity_received': 7},
        ])

        assert [line.quantity_received for line in receipt.lines.all()] == [Decimal('5'), Decimal('7')]

    def test_update_only_touches_supplied_fields(self, receipt):
        depot.receipts.update(receipt, notes='Pallet 4')
        receipt.refresh_from_db()

        assert receipt.notes == 'Pallet 4'
        assert receipt.supplier == 'ACME Fasteners'

    def test_update_status_done_rejected(self, receipt):
        with pytest.raises(StockError) as exc:
            depot.receipts.update(receipt, status=DocumentStatus.DONE)

        assert exc.value.code == 'VALIDATION_ERROR'
        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.DRAFT

    def test_update_done_receipt_rejected(self, receipt, user):
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        with pytest.raises(StockError) as exc:
            depot.receipts.update(receipt, notes='late edit')

        assert exc.value.code == 'INVALID_STATE'

    def test_update_unknown_field_rejected(self, receipt):
        with pytest.raises(StockError) as exc:
            depot.receipts.update(receipt, customer='Bob')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_notes_too_long(self, receipt, settings):
        settings.DEPOTMAN = {'MAX_NOTES_LENGTH': 10}

        with pytest.raises(StockError) as exc:
            depot.receipts.update(receipt, notes='x' * 11)

        assert exc.value.code == 'VALIDATION_ERROR'


class TestReceiptValidate:
    """Tests for depot.receipts.validate()."""

    def test_validate_adds_stock(self, receipt, product, main, user):
        """Receipt of 50 into an empty warehouse."""
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        done = depot.receipts.validate(receipt, user)

        product.refresh_from_db()
        assert done.status == DocumentStatus.DONE
        assert done.validated_by == user
        assert done.validated_at is not None
        assert done.received_date is not None
        assert product.total_stock == Decimal('50')
        assert product.stock_by_location == {main.pk: Decimal('50')}

        entry = StockLedgerEntry.objects.get()
        assert entry.transaction_type == TransactionType.RECEIPT
        assert entry.quantity_change == Decimal('50')
        assert entry.balance_after == Decimal('50')
        assert entry.reference == done
        assert entry.reference_number == done.number
        assert entry.performed_by == user

    def test_validate_adds_to_existing_location(self, receipt, product, main, stock, user):
        stock(product, main, 10)
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        product.refresh_from_db()
        assert product.stock_at(main) == Decimal('60')
        assert product.locations.count() == 1

    def test_validate_from_draft_rejected(self, receipt, product, user):
        with pytest.raises(StockError) as exc:
            depot.receipts.validate(receipt, user)

        assert exc.value.code == 'INVALID_STATE'
        product.refresh_from_db()
        assert product.total_stock == Decimal('0')

    def test_validate_from_waiting_rejected(self, receipt, user):
        depot.receipts.update(receipt, status=DocumentStatus.WAITING)

        with pytest.raises(StockError) as exc:
            depot.receipts.validate(receipt, user)

        assert exc.value.code == 'INVALID_STATE'

    def test_validate_twice_writes_once(self, receipt, product, user):
        """Second validate is rejected and writes nothing."""
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        with pytest.raises(StockError) as exc:
            depot.receipts.validate(receipt, user)

        assert exc.value.code == 'INVALID_STATE'
        product.refresh_from_db()
        assert product.total_stock == Decimal('50')
        assert StockLedgerEntry.objects.count() == 1

    def test_validate_with_stale_ready_copy(self, receipt, product, user):
        """A caller holding an old 'ready' instance still cannot validate twice."""
        ready = depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(ready, user)
        assert ready.status == DocumentStatus.READY

        with pytest.raises(StockError) as exc:
            depot.receipts.validate(ready, user)

        assert exc.value.code == 'INVALID_STATE'
        assert StockLedgerEntry.objects.count() == 1

    def test_validate_unknown_receipt(self, user):
        with pytest.raises(StockError) as exc:
            depot.receipts.validate(999999, user)

        assert exc.value.code == 'NOT_FOUND'

    def test_validate_multiple_lines_in_order(self, main, product, other_product, user):
        receipt = depot.receipts.create(
            warehouse=main,
            status=DocumentStatus.READY,
            lines=[
                {'product': product, 'quantity_received': 3},
                {'product': other_product, 'quantity_received': 4},
            ],
        )
        depot.receipts.validate(receipt, user)

        entries = list(StockLedgerEntry.objects.for_document(receipt).chronological())
        assert [e.product_id for e in entries] == [product.pk, other_product.pk]


class TestReceiptCancelDelete:
    """Tests for cancel and delete."""

    def test_cancel_draft(self, receipt):
        canceled = depot.receipts.cancel(receipt)
        assert canceled.status == DocumentStatus.CANCELED

    def test_cancel_canceled_rejected(self, receipt):
        depot.receipts.cancel(receipt)

        with pytest.raises(StockError) as exc:
            depot.receipts.cancel(receipt)

        assert exc.value.code == 'INVALID_STATE'

    def test_cancel_done_rejected(self, receipt, product, user):
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        with pytest.raises(StockError) as exc:
            depot.receipts.cancel(receipt)

        assert exc.value.code == 'INVALID_STATE'
        product.refresh_from_db()
        assert product.total_stock == Decimal('50')

    def test_canceled_cannot_validate(self, receipt, user):
        depot.receipts.cancel(receipt)

        with pytest.raises(StockError) as exc:
            depot.receipts.validate(receipt, user)

        assert exc.value.code == 'INVALID_STATE'

    def test_delete_draft(self, receipt):
        depot.receipts.delete(receipt)
        assert not Receipt.objects.exists()

    def test_delete_done_rejected(self, receipt, user):
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        with pytest.raises(StockError) as exc:
            depot.receipts.delete(receipt)

        assert exc.value.code == 'INVALID_STATE'
        assert Receipt.objects.filter(pk=receipt.pk).exists()
