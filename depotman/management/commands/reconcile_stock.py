"""
Management command to recalculate cached product totals.

Usage:
    python manage.py reconcile_stock
    python manage.py reconcile_stock --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from depotman.models import Product


class Command(BaseCommand):
    """Compare total_stock with the sum of stock locations."""

    help = 'Recalculates product total_stock from stock locations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without fixing it'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        drifted = 0

        for product in Product.objects.order_by('pk').iterator():
            old = product.total_stock
            with transaction.atomic():
                new = product.recalculate(commit=not dry_run)
            if new != old:
                drifted += 1
                self.stdout.write(f'{product.sku}: {old} -> {new}')

        if dry_run:
            self.stdout.write(f'{drifted} product(s) would be corrected')
        else:
            self.stdout.write(self.style.SUCCESS(f'{drifted} product(s) corrected'))
