"""
Tests for read-side queries, reordering alerts and management commands.
"""

from datetime import timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from depotman import StockError, depot
from depotman.models import DocumentStatus, Product, ReorderingRule, StockLedgerEntry, TransactionType
from depotman.services.alerts import check_reordering_rules, low_stock_products


pytestmark = pytest.mark.django_db


class TestStockLevels:

    def test_stock_at_unknown_location_is_zero(self, product, main):
        assert depot.queries.stock_at(product, main) == Decimal('0')

    def test_stock_by_location(self, product, main, overflow, stock):
        stock(product, main, 4)
        stock(product, overflow, 6)

        assert depot.queries.stock_by_location(product) == {
            main.pk: Decimal('4'),
            overflow.pk: Decimal('6'),
        }
        assert depot.queries.total_stock(product) == Decimal('10')

    def test_get_product_not_found(self):
        with pytest.raises(StockError) as exc:
            depot.queries.get_product(999999)

        assert exc.value.code == 'NOT_FOUND'


class TestMoveHistory:
    """Tests for depot.queries.move_history()."""

    def test_newest_first(self, product, main, stock):
        stock(product, main, 1)
        stock(product, main, 2)

        history = depot.queries.move_history(product=product)

        assert [e.quantity_change for e in history['results']] == [Decimal('2'), Decimal('1')]
        assert history['total'] == 2
        assert history['pages'] == 1

    def test_pagination(self, product, main, stock):
        for _ in range(5):
            stock(product, main, 1)

        history = depot.queries.move_history(page=2, limit=2)

        assert history == {
            'count': 2,
            'total': 5,
            'page': 2,
            'pages': 3,
            'results': history['results'],
        }

    def test_filters(self, product, other_product, main, overflow, stock):
        stock(product, main, 10)
        stock(other_product, overflow, 3)
        depot.adjustments.create(
            product=product, warehouse=main,
            recorded_quantity=10, counted_quantity=9, reason='lost',
        )

        assert depot.queries.move_history(warehouse=overflow)['total'] == 1
        assert depot.queries.move_history(product=product)['total'] == 2
        adjustments = depot.queries.move_history(transaction_type=TransactionType.ADJUSTMENT)
        assert adjustments['total'] == 1

    def test_date_range(self, product, main, stock):
        stock(product, main, 1)
        StockLedgerEntry.objects.update(created_at=timezone.now() - timedelta(days=10))
        stock(product, main, 1)

        recent = depot.queries.move_history(start=timezone.now() - timedelta(days=1))
        old = depot.queries.move_history(end=timezone.now() - timedelta(days=5))

        assert recent['total'] == 1
        assert old['total'] == 1

    def test_limit_above_max_rejected(self):
        with pytest.raises(StockError) as exc:
            depot.queries.move_history(limit=101)

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_unknown_transaction_type_rejected(self):
        with pytest.raises(StockError) as exc:
            depot.queries.move_history(transaction_type='gift')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_default_page_size(self, settings, product, main, stock):
        settings.DEPOTMAN = {'LEDGER_PAGE_SIZE': 2}
        for _ in range(3):
            stock(product, main, 1)

        assert depot.queries.move_history()['count'] == 2


class TestReorderingRules:
    """Tests for check_reordering_rules()."""

    def test_triggered_at_or_below_minimum(self, product, main, stock):
        stock(product, main, 5)
        rule = ReorderingRule.objects.create(product=product, minimum_quantity=5, reorder_quantity=20)

        triggered = check_reordering_rules()

        assert triggered == [(rule, Decimal('5'))]
        rule.refresh_from_db()
        assert rule.last_triggered_at is not None

    def test_not_triggered_above_minimum(self, product, main, stock):
        stock(product, main, 6)
        ReorderingRule.objects.create(product=product, minimum_quantity=5, reorder_quantity=20)

        assert check_reordering_rules() == []

    def test_warehouse_rule_uses_that_warehouse(self, product, main, overflow, stock):
        stock(product, main, 100)
        stock(product, overflow, 1)
        ReorderingRule.objects.create(product=product, warehouse=overflow, minimum_quantity=2, reorder_quantity=10)

        triggered = check_reordering_rules(product=product)

        assert len(triggered) == 1
        assert triggered[0][1] == Decimal('1')

    def test_inactive_rule_ignored(self, product):
        ReorderingRule.objects.create(product=product, minimum_quantity=5, reorder_quantity=20, is_active=False)

        assert check_reordering_rules() == []
        assert low_stock_products() == set()


class TestDashboard:

    def test_kpis(self, product, other_product, main, stock):
        stock(product, main, 8)
        ReorderingRule.objects.create(product=other_product, minimum_quantity=1, reorder_quantity=5)
        depot.receipts.create(
            warehouse=main, status=DocumentStatus.WAITING,
            lines=[{'product': product, 'quantity_received': 1}],
        )
        depot.deliveries.create(warehouse=main, lines=[{'product': product, 'quantity_ordered': 1}])

        kpis = depot.queries.dashboard_kpis()

        assert kpis['counts'] == {
            'total_products': 2,
            'active_products': 2,
            'total_categories': 1,
            'total_warehouses': 1,
        }
        assert kpis['inventory']['total_stock'] == Decimal('8')
        assert kpis['inventory']['low_stock_products'] == 1
        assert kpis['operations'] == {
            'pending_receipts': 1,
            'pending_deliveries': 0,
            'pending_transfers': 0,
        }


class TestCommands:

    def test_reconcile_fixes_drift(self, product, main, stock):
        stock(product, main, 12)
        Product.objects.filter(pk=product.pk).update(total_stock=Decimal('99'))
        out = StringIO()

        call_command('reconcile_stock', stdout=out)

        product.refresh_from_db()
        assert product.total_stock == Decimal('12')
        assert '1 product(s) corrected' in out.getvalue()

    def test_reconcile_dry_run(self, product, main, stock):
        stock(product, main, 12)
        Product.objects.filter(pk=product.pk).update(total_stock=Decimal('99'))
        out = StringIO()

        call_command('reconcile_stock', '--dry-run', stdout=out)

        product.refresh_from_db()
        assert product.total_stock == Decimal('99')
        assert '1 product(s) would be corrected' in out.getvalue()

    def test_check_reorder_rules(self, product):
        ReorderingRule.objects.create(product=product, minimum_quantity=3, reorder_quantity=10)
        out = StringIO()

        call_command('check_reorder_rules', stdout=out)

        assert 'BOLT-M8 @ all warehouses' in out.getvalue()
        assert '1 rule(s) triggered' in out.getvalue()
