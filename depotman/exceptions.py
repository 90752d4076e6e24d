"""
Exceptions for Depotman.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class StockError(Exception):
    """
    Structured exception for inventory operations.

    Usage:
        try:
            depot.deliveries.validate(order, user)
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'NOT_FOUND': 'Referenced record not found',
        'INVALID_STATE': 'Operation not allowed in the current status',
        'VALIDATION_ERROR': 'Invalid input',
        'INSUFFICIENT_STOCK': 'Insufficient stock for the requested quantity',
        'STALE_READ': 'Recorded quantity does not match current stock',
        'TRANSACTION_FAILURE': 'Transaction could not be committed',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }

    def __repr__(self) -> str:
        return f"StockError({self.code!r}, {self.message!r})"
