"""
Management command to evaluate reordering rules.

Usage:
    python manage.py check_reorder_rules
"""

from django.core.management.base import BaseCommand

from depotman.services.alerts import check_reordering_rules


class Command(BaseCommand):
    """List products at or below their reorder point."""

    help = 'Evaluates active reordering rules'

    def handle(self, *args, **options):
        triggered = check_reordering_rules()

        for rule, current in triggered:
            where = rule.warehouse.name if rule.warehouse else 'all warehouses'
            self.stdout.write(
                f'{rule.product.sku} @ {where}: {current} <= {rule.minimum_quantity} '
                f'(reorder {rule.reorder_quantity})'
            )

        self.stdout.write(self.style.SUCCESS(f'{len(triggered)} rule(s) triggered'))
