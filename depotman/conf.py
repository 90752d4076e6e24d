"""
Depotman configuration.

Usage in settings.py:
    DEPOTMAN = {
        "NUMBER_PREFIXES": {"receipt": "RC", "delivery_order": "DO"},
        "LEDGER_PAGE_SIZE": 50,
        "REQUIRE_FULL_PACKING": False,
        "ALLOW_ADJUSTMENT_DELETE": True,
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


def _default_prefixes() -> dict[str, str]:
    return {
        'receipt': 'RC',
        'delivery_order': 'DO',
        'internal_transfer': 'IT',
        'stock_adjustment': 'ADJ',
    }


@dataclass
class DepotmanSettings:
    """Depotman configuration settings."""

    # Human-readable number prefix per document kind
    NUMBER_PREFIXES: dict[str, str] = field(default_factory=_default_prefixes)

    # Move history pagination
    LEDGER_PAGE_SIZE: int = 50
    LEDGER_MAX_PAGE_SIZE: int = 100

    # Delivery validation refuses orders not fully packed
    REQUIRE_FULL_PACKING: bool = False

    # Deleting an adjustment never reverses its stock effect
    ALLOW_ADJUSTMENT_DELETE: bool = True

    MAX_NOTES_LENGTH: int = 1000


def get_depotman_settings() -> DepotmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "DEPOTMAN", {})
    values = {
        k: v for k, v in user_settings.items()
        if k in DepotmanSettings.__dataclass_fields__
    }
    if 'NUMBER_PREFIXES' in values:
        values['NUMBER_PREFIXES'] = {**_default_prefixes(), **values['NUMBER_PREFIXES']}
    return DepotmanSettings(**values)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_depotman_settings(), name)


depotman_settings = _LazySettings()
