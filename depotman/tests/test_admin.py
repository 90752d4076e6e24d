"""
Tests for the document admins.
"""

import pytest
from django.contrib import admin
from django.contrib.messages import ERROR, get_messages
from django.contrib.messages.storage.fallback import FallbackStorage

from depotman import depot
from depotman.admin import DeliveryOrderAdmin, InternalTransferAdmin, ReceiptAdmin
from depotman.models import DeliveryOrder, DocumentStatus, InternalTransfer, Receipt, ReceiptLine


pytestmark = pytest.mark.django_db


@pytest.fixture
def admin_request(rf, admin_user):
    """POST request from a superuser with message storage attached."""
    request = rf.post('/admin/')
    request.user = admin_user
    request.session = {}
    request._messages = FallbackStorage(request)
    return request


@pytest.fixture
def receipt_admin():
    return ReceiptAdmin(Receipt, admin.site)


@pytest.fixture
def receipt(main, product):
    """Draft receipt for 5 bolts at Main."""
    return depot.receipts.create(
        warehouse=main,
        supplier='ACME Fasteners',
        lines=[{'product': product, 'quantity_received': 5}],
    )


@pytest.fixture
def done_receipt(main, product, user):
    receipt = depot.receipts.create(
        warehouse=main,
        status=DocumentStatus.READY,
        lines=[{'product': product, 'quantity_received': 5}],
    )
    return depot.receipts.validate(receipt, user)


def error_messages(request):
    return [str(m) for m in get_messages(request) if m.level == ERROR]


def change_form(model_admin, request, document, **data):
    """Bound admin change form for document, as a POST would build it."""
    form_class = model_admin.get_form(request, document, change=True)
    form = form_class(data=data, instance=document)
    assert form.is_valid(), form.errors
    return form


class TestDocumentPermissions:

    def test_done_document_cannot_be_deleted(self, receipt_admin, admin_request, receipt, done_receipt):
        assert receipt_admin.has_delete_permission(admin_request, receipt)
        assert not receipt_admin.has_delete_permission(admin_request, done_receipt)

    def test_terminal_document_cannot_be_changed(self, receipt_admin, admin_request, receipt, done_receipt):
        canceled = depot.receipts.cancel(receipt)

        assert not receipt_admin.has_change_permission(admin_request, done_receipt)
        assert not receipt_admin.has_change_permission(admin_request, canceled)

    @pytest.mark.parametrize('admin_class, model', [
        (ReceiptAdmin, Receipt),
        (DeliveryOrderAdmin, DeliveryOrder),
        (InternalTransferAdmin, InternalTransfer),
    ])
    def test_documents_not_added_in_admin(self, admin_request, admin_class, model):
        assert not admin_class(model, admin.site).has_add_permission(admin_request)

    def test_lines_are_read_only(self, receipt_admin, admin_request, receipt):
        inline = receipt_admin.get_inline_instances(admin_request, receipt)[0]

        assert inline.model is ReceiptLine
        assert not inline.has_add_permission(admin_request, receipt)
        assert not inline.has_change_permission(admin_request, receipt)
        assert not inline.has_delete_permission(admin_request, receipt)
        assert inline.has_view_permission(admin_request, receipt)


class TestDocumentDelete:

    def test_delete_model_removes_draft(self, receipt_admin, admin_request, receipt):
        receipt_admin.delete_model(admin_request, receipt)

        assert not Receipt.objects.filter(pk=receipt.pk).exists()

    def test_delete_model_keeps_done(self, receipt_admin, admin_request, done_receipt):
        receipt_admin.delete_model(admin_request, done_receipt)

        assert Receipt.objects.filter(pk=done_receipt.pk).exists()
        assert done_receipt.lines.count() == 1
        assert done_receipt.number in error_messages(admin_request)[0]

    def test_bulk_delete_skips_done(self, receipt_admin, admin_request, receipt, done_receipt):
        receipt_admin.delete_queryset(admin_request, Receipt.objects.all())

        assert list(Receipt.objects.all()) == [done_receipt]
        assert len(error_messages(admin_request)) == 1


class TestDocumentChange:

    def test_header_edit_goes_through_workflow(self, receipt_admin, admin_request, receipt, main):
        form = change_form(
            receipt_admin, admin_request, receipt,
            supplier='ACME Fasteners', warehouse=main.pk, notes='Pallet 4',
        )

        receipt_admin.save_model(admin_request, form.save(commit=False), form, change=True)

        receipt.refresh_from_db()
        assert receipt.notes == 'Pallet 4'
        assert error_messages(admin_request) == []

    def test_header_edit_rejected_by_workflow(self, receipt_admin, admin_request, receipt, main, settings):
        settings.DEPOTMAN = {'MAX_NOTES_LENGTH': 10}
        form = change_form(
            receipt_admin, admin_request, receipt,
            supplier='ACME Fasteners', warehouse=main.pk, notes='x' * 11,
        )

        receipt_admin.save_model(admin_request, form.save(commit=False), form, change=True)

        receipt.refresh_from_db()
        assert receipt.notes == ''
        assert 'Notes are too long' in error_messages(admin_request)[0]

    def test_edit_of_document_validated_meanwhile(self, receipt_admin, admin_request, receipt, main, user):
        """A form opened while the receipt was open cannot edit it once done."""
        form = change_form(
            receipt_admin, admin_request, receipt,
            supplier='Someone Else', warehouse=main.pk, notes='',
        )
        depot.receipts.update(receipt, status=DocumentStatus.READY)
        depot.receipts.validate(receipt, user)

        receipt_admin.save_model(admin_request, form.save(commit=False), form, change=True)

        receipt.refresh_from_db()
        assert receipt.supplier == 'ACME Fasteners'
        assert receipt.status == DocumentStatus.DONE
        assert len(error_messages(admin_request)) == 1


class TestDocumentActions:

    def test_validate_action(self, receipt_admin, admin_request, receipt, product):
        depot.receipts.update(receipt, status=DocumentStatus.READY)

        receipt_admin.validate_documents(admin_request, Receipt.objects.all())

        receipt.refresh_from_db()
        product.refresh_from_db()
        assert receipt.status == DocumentStatus.DONE
        assert receipt.validated_by == admin_request.user
        assert product.total_stock == 5

    def test_validate_action_reports_failures(self, receipt_admin, admin_request, receipt, caplog):
        receipt_admin.validate_documents(admin_request, Receipt.objects.all())

        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.DRAFT
        assert receipt.number in error_messages(admin_request)[0]
        record = next(r for r in caplog.records if r.msg == 'depot.admin.action_failed')
        assert record.code == 'INVALID_STATE'
        assert record.action == 'validate'
