"""
Document workflows — shared lifecycle for receipts, deliveries and transfers.

DocumentWorkflow owns everything the three document kinds have in common:
reference resolution, line validation, create/update, cancel/delete, and
the atomic validate skeleton. Subclasses declare their models and fields
and implement clean_line() and apply_line().
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from depotman.conf import depotman_settings
from depotman.exceptions import StockError
from depotman.models.enums import OPEN_STATUSES, DocumentStatus
from depotman.models.product import Product
from depotman.models.warehouse import Warehouse
from depotman.services.coordinator import atomic_operation, lock_document

logger = logging.getLogger('depotman')


QUANTITY_PLACES = 3


def to_quantity(value, field: str) -> Decimal:
    """
    Coerce input to Decimal, rejecting garbage.

    NaN, infinities and values finer than the stored precision
    (three decimal places) are rejected rather than rounded.
    """
    try:
        quantity = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise StockError('VALIDATION_ERROR', f"{field} must be a number", field=field, value=str(value))

    if not quantity.is_finite():
        raise StockError('VALIDATION_ERROR', f"{field} must be a finite number", field=field, value=str(value))
    if quantity.as_tuple().exponent < -QUANTITY_PLACES:
        raise StockError(
            'VALIDATION_ERROR',
            f"{field} allows at most {QUANTITY_PLACES} decimal places",
            field=field,
            value=str(value),
        )
    return quantity


def resolve(model, value, label: str):
    """Return a model instance from an instance or primary key."""
    if isinstance(value, model):
        return value
    try:
        return model.objects.get(pk=value)
    except (model.DoesNotExist, ValueError, TypeError):
        raise StockError('NOT_FOUND', f"{label} {value} not found", model=model.__name__, id=str(value))


class DocumentWorkflow:
    """
    Lifecycle operations common to every stock document.

    Class attributes:
        model: Document model
        line_model: Line model
        line_fk: Name of the line's FK to the document
        warehouse_fields: Document fields holding a Warehouse
        editable_fields: Other fields callers may set on create/update
        event: Prefix for log events
        action: Name of the terminal transition (validate / complete)
    """

    model = None
    line_model = None
    line_fk = ''
    warehouse_fields: tuple[str, ...] = ('warehouse',)
    editable_fields: tuple[str, ...] = ('notes',)
    event = ''
    action = 'validate'

    # ══════════════════════════════════════════════════════════════
    # HOOKS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def clean_line(cls, item: dict) -> dict:
        """Validate one line's quantities. Returns line model kwargs."""
        raise NotImplementedError

    @classmethod
    def check_fields(cls, fields: dict, instance=None) -> None:
        """Cross-field checks after references are resolved."""

    @classmethod
    def check_before_apply(cls, document) -> None:
        """Extra preconditions evaluated under lock, before any stock change."""

    @classmethod
    def apply_line(cls, document, line, user) -> list:
        """Mutate stock for one line. Returns the ledger entries written."""
        raise NotImplementedError

    @classmethod
    def finalize(cls, document, now) -> None:
        """Set kind-specific fields on the terminal transition."""

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get(cls, pk):
        try:
            return cls.model.objects.get(pk=pk)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', f"{cls.model._meta.verbose_name} {pk} not found", id=str(pk))

    @classmethod
    def create(cls, *, lines, user=None, status=DocumentStatus.DRAFT, **fields):
        """
        Create a document with its lines.

        Raises:
            StockError('NOT_FOUND'): Unknown warehouse or product
            StockError('VALIDATION_ERROR'): No lines, bad quantities, bad fields
        """
        cls._ensure_settable(status)
        cleaned = cls._clean_fields(fields, instance=None)
        missing = [f for f in cls.warehouse_fields if f not in cleaned]
        if missing:
            raise StockError('VALIDATION_ERROR', f"{', '.join(missing)} is required", fields=missing)
        cls.check_fields(cleaned)
        line_data = cls._clean_lines(lines)

        with transaction.atomic():
            document = cls.model(status=status, **cleaned)
            document.save()
            cls._save_lines(document, line_data)

        logger.info(
            f"depot.{cls.event}.created",
            extra={"document_id": document.pk, "number": document.number, "lines": len(line_data)},
        )
        return document

    @classmethod
    def update(cls, document, *, lines=None, status=None, **fields):
        """
        Edit an open document. Only supplied fields change.

        Raises:
            StockError('INVALID_STATE'): Document is done or canceled
        """
        pk = getattr(document, 'pk', document)
        with transaction.atomic():
            locked = lock_document(cls.model, pk)
            cls._ensure_open(locked, 'update')

            cleaned = cls._clean_fields(fields, instance=locked)
            cls.check_fields(cleaned, instance=locked)
            for name, value in cleaned.items():
                setattr(locked, name, value)

            if status is not None:
                cls._ensure_settable(status)
                locked.status = status

            locked.save()

            if lines is not None:
                line_data = cls._clean_lines(lines)
                locked.lines.all().delete()
                cls._save_lines(locked, line_data)

        logger.info(f"depot.{cls.event}.updated", extra={"document_id": pk, "status": locked.status})
        return locked

    @classmethod
    def cancel(cls, document, user=None):
        """
        Cancel an open document. No stock effect.

        Raises:
            StockError('INVALID_STATE'): Document is done or canceled
        """
        pk = getattr(document, 'pk', document)
        with transaction.atomic():
            locked = lock_document(cls.model, pk)
            cls._ensure_open(locked, 'cancel')
            locked.status = DocumentStatus.CANCELED
            locked.save(update_fields=['status', 'updated_at'])

        logger.info(
            f"depot.{cls.event}.canceled",
            extra={"document_id": pk, "user_id": getattr(user, 'pk', None)},
        )
        return locked

    @classmethod
    def delete(cls, document) -> None:
        """
        Delete a document that never reached done.

        Raises:
            StockError('INVALID_STATE'): Document is done
        """
        pk = getattr(document, 'pk', document)
        with transaction.atomic():
            locked = lock_document(cls.model, pk)
            if locked.status == DocumentStatus.DONE:
                raise StockError(
                    'INVALID_STATE',
                    f"Cannot delete {locked.number}: it has been {cls.action}d",
                    current=locked.status,
                )
            number = locked.number
            locked.delete()

        logger.info(f"depot.{cls.event}.deleted", extra={"document_id": pk, "number": number})

    @classmethod
    def validate(cls, document, user=None):
        """
        Terminal transition: apply stock, write ledger, mark done.

        Runs as one atomic unit. The document is re-read under lock and
        must be READY on that fresh row, so a second call (or a concurrent
        one) fails with INVALID_STATE and writes nothing.

        Returns:
            The updated document
        """
        pk = getattr(document, 'pk', document)
        entries = []
        with atomic_operation(f"{cls.event}.{cls.action}", document_id=pk):
            locked = lock_document(cls.model, pk)
            cls._ensure_status(locked, DocumentStatus.READY, cls.action)
            cls.check_before_apply(locked)

            for line in locked.lines.select_related('product').order_by('position', 'id'):
                entries.extend(cls.apply_line(locked, line, user))

            now = timezone.now()
            locked.status = DocumentStatus.DONE
            locked.validated_by = user
            locked.validated_at = now
            cls.finalize(locked, now)
            locked.save()

        logger.info(
            f"depot.{cls.event}.{cls.action}d",
            extra={
                "document_id": pk,
                "number": locked.number,
                "entries": len(entries),
                "user_id": getattr(user, 'pk', None),
            },
        )
        return locked

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _ensure_open(cls, document, action: str) -> None:
        if document.status not in OPEN_STATUSES:
            raise StockError(
                'INVALID_STATE',
                f"Cannot {action} {document.number}: it is already {document.status}",
                current=document.status,
                expected=[str(s) for s in OPEN_STATUSES],
            )

    @classmethod
    def _ensure_status(cls, document, expected, action: str) -> None:
        if document.status != expected:
            raise StockError(
                'INVALID_STATE',
                f"{document.number} must be in '{expected}' state to {action}. "
                f"Current state: {document.status}",
                current=document.status,
                expected=str(expected),
            )

    @classmethod
    def _ensure_settable(cls, status) -> None:
        """Plain create/update may only use open statuses."""
        if status not in OPEN_STATUSES:
            raise StockError(
                'VALIDATION_ERROR',
                f"Status '{status}' cannot be set directly",
                status=str(status),
                allowed=[str(s) for s in OPEN_STATUSES],
            )

    @classmethod
    def _clean_fields(cls, fields: dict, instance=None) -> dict:
        unknown = set(fields) - set(cls.warehouse_fields) - set(cls.editable_fields)
        if unknown:
            raise StockError('VALIDATION_ERROR', f"Unknown fields: {', '.join(sorted(unknown))}",
                             fields=sorted(unknown))

        cleaned = {}
        for name, value in fields.items():
            if name in cls.warehouse_fields:
                label = cls.model._meta.get_field(name).verbose_name
                cleaned[name] = resolve(Warehouse, value, label)
            elif name == 'notes':
                notes = (value or '').strip()
                if len(notes) > depotman_settings.MAX_NOTES_LENGTH:
                    raise StockError('VALIDATION_ERROR', 'Notes are too long', field='notes')
                cleaned[name] = notes
            else:
                cleaned[name] = value
        return cleaned

    @classmethod
    def _clean_lines(cls, lines) -> list[tuple[Product, dict]]:
        if not lines:
            raise StockError('VALIDATION_ERROR', 'At least one product is required')
        cleaned = []
        for item in lines:
            if 'product' not in item:
                raise StockError('VALIDATION_ERROR', 'Each line needs a product')
            product = resolve(Product, item['product'], 'Product')
            data = cls.clean_line(item)
            data['unit_of_measure'] = item.get('unit_of_measure') or product.unit_of_measure
            cleaned.append((product, data))
        return cleaned

    @classmethod
    def _save_lines(cls, document, line_data) -> None:
        cls.line_model.objects.bulk_create([
            cls.line_model(**{cls.line_fk: document}, product=product, position=index, **data)
            for index, (product, data) in enumerate(line_data)
        ])
