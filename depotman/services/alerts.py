"""
Reordering alerts — check products that reached their reorder point.

Usage:
    from depotman.services.alerts import check_reordering_rules

    # Run periodically (celery beat, cron) or after stock changes
    triggered = check_reordering_rules()
    # Returns list of (ReorderingRule, current_quantity) tuples
"""

import logging
from decimal import Decimal

from django.utils import timezone

from depotman.models.reordering import ReorderingRule
from depotman.services.queries import StockQueries

logger = logging.getLogger('depotman')


def current_quantity(rule: ReorderingRule) -> Decimal:
    """Stock the rule watches: one warehouse, or all of them."""
    if rule.warehouse_id:
        return StockQueries.stock_at(rule.product_id, rule.warehouse_id)
    return StockQueries.total_stock(rule.product_id)


def _active_rules(product=None):
    qs = ReorderingRule.objects.filter(is_active=True, product__is_active=True)
    if product is not None:
        qs = qs.filter(product=product)
    return qs.select_related('product', 'warehouse')


def check_reordering_rules(product=None) -> list[tuple[ReorderingRule, Decimal]]:
    """
    Check all active rules and return those that are triggered.

    A rule is triggered when current quantity <= minimum_quantity.

    Args:
        product: Optional product to check rules for (None = all).

    Returns:
        List of (rule, current_quantity) tuples for triggered rules.
    """
    triggered = []
    now = timezone.now()

    for rule in _active_rules(product):
        current = current_quantity(rule)

        if current <= rule.minimum_quantity:
            rule.last_triggered_at = now
            rule.save(update_fields=['last_triggered_at'])
            triggered.append((rule, current))
            logger.warning(
                "stock.reorder.triggered",
                extra={
                    "rule_id": rule.pk,
                    "product_id": rule.product_id,
                    "minimum_quantity": str(rule.minimum_quantity),
                    "current": str(current),
                    "warehouse": str(rule.warehouse) if rule.warehouse else "all",
                },
            )

    return triggered


def low_stock_products() -> set[int]:
    """Ids of products with at least one triggered rule. Read-only."""
    return {
        rule.product_id for rule in _active_rules()
        if current_quantity(rule) <= rule.minimum_quantity
    }
