"""
Initial migration for Depotman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


STATUS_CHOICES = [
    ('draft', 'Draft'),
    ('waiting', 'Waiting'),
    ('ready', 'Ready'),
    ('done', 'Done'),
    ('canceled', 'Canceled'),
]


class Migration(migrations.Migration):
    """Create Depotman models: catalog, stock, ledger, documents, adjustments, rules."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Name')),
                ('location', models.CharField(blank=True, default='', help_text='Address or area description', max_length=200, verbose_name='Location')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Warehouse',
                'verbose_name_plural': 'Warehouses',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Name')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('unit_of_measure', models.CharField(blank=True, default='', max_length=50, verbose_name='Unit of Measure')),
                ('total_stock', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Total Stock')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='depotman.category', verbose_name='Category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('total_stock__gte', 0)), name='product_total_stock_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='locations', to='depotman.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_locations', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock Location',
                'verbose_name_plural': 'Stock Locations',
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'warehouse'), name='unique_stock_location'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_location_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_type', models.CharField(choices=[('receipt', 'Receipt'), ('delivery', 'Delivery'), ('transfer_in', 'Transfer In'), ('transfer_out', 'Transfer Out'), ('adjustment', 'Adjustment')], db_index=True, max_length=20, verbose_name='Transaction Type')),
                ('reference_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reference_number', models.CharField(blank=True, default='', max_length=50, verbose_name='Reference Number')),
                ('quantity_change', models.DecimalField(decimal_places=3, help_text='Positive = inbound, Negative = outbound', max_digits=12, verbose_name='Quantity Change')),
                ('balance_after', models.DecimalField(decimal_places=3, help_text='Product total stock after this change', max_digits=12, verbose_name='Balance After')),
                ('notes', models.CharField(blank=True, default='', max_length=255, verbose_name='Notes')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created At')),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Performed By')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='depotman.product', verbose_name='Product')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Reference Type')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock Ledger Entry',
                'verbose_name_plural': 'Stock Ledger',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='ledger_product_created_idx'),
                    models.Index(fields=['warehouse', 'created_at'], name='ledger_warehouse_created_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='ledger_reference_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Receipt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.CharField(editable=False, max_length=50, unique=True, verbose_name='Number')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('validated_at', models.DateTimeField(blank=True, null=True, verbose_name='Validated At')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('supplier', models.CharField(blank=True, default='', max_length=200, verbose_name='Supplier')),
                ('received_date', models.DateTimeField(blank=True, null=True, verbose_name='Received Date')),
                ('validated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Validated By')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipts', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Receipt',
                'verbose_name_plural': 'Receipts',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='ReceiptLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('unit_of_measure', models.CharField(blank=True, default='', max_length=50, verbose_name='Unit')),
                ('quantity_received', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity Received')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='depotman.product', verbose_name='Product')),
                ('receipt', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='depotman.receipt')),
            ],
            options={
                'verbose_name': 'Receipt Line',
                'verbose_name_plural': 'Receipt Lines',
                'ordering': ['position', 'id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='DeliveryOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.CharField(editable=False, max_length=50, unique=True, verbose_name='Number')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('validated_at', models.DateTimeField(blank=True, null=True, verbose_name='Validated At')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.CharField(blank=True, default='', max_length=200, verbose_name='Customer')),
                ('delivery_date', models.DateTimeField(blank=True, null=True, verbose_name='Delivery Date')),
                ('validated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Validated By')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_orders', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Delivery Order',
                'verbose_name_plural': 'Delivery Orders',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='DeliveryOrderLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('unit_of_measure', models.CharField(blank=True, default='', max_length=50, verbose_name='Unit')),
                ('quantity_ordered', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Ordered')),
                ('quantity_picked', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Picked')),
                ('quantity_packed', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Packed')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='depotman.deliveryorder')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='depotman.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Delivery Order Line',
                'verbose_name_plural': 'Delivery Order Lines',
                'ordering': ['position', 'id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='InternalTransfer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.CharField(editable=False, max_length=50, unique=True, verbose_name='Number')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('validated_at', models.DateTimeField(blank=True, null=True, verbose_name='Validated At')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('scheduled_date', models.DateTimeField(blank=True, null=True, verbose_name='Scheduled Date')),
                ('destination_warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_transfers', to='depotman.warehouse', verbose_name='Destination Warehouse')),
                ('source_warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_transfers', to='depotman.warehouse', verbose_name='Source Warehouse')),
                ('validated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Validated By')),
            ],
            options={
                'verbose_name': 'Internal Transfer',
                'verbose_name_plural': 'Internal Transfers',
                'ordering': ['-created_at'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('source_warehouse', models.F('destination_warehouse')), _negated=True), name='transfer_distinct_warehouses'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TransferLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('unit_of_measure', models.CharField(blank=True, default='', max_length=50, verbose_name='Unit')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='depotman.product', verbose_name='Product')),
                ('transfer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='depotman.internaltransfer')),
            ],
            options={
                'verbose_name': 'Transfer Line',
                'verbose_name_plural': 'Transfer Lines',
                'ordering': ['position', 'id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.CharField(editable=False, max_length=50, unique=True, verbose_name='Number')),
                ('recorded_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Recorded')),
                ('counted_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Counted')),
                ('adjustment_quantity', models.DecimalField(decimal_places=3, help_text='counted - recorded', max_digits=12, verbose_name='Adjustment')),
                ('reason', models.CharField(choices=[('damaged', 'Damaged'), ('lost', 'Lost'), ('found', 'Found'), ('expired', 'Expired'), ('miscounted', 'Miscounted'), ('other', 'Other')], max_length=20, verbose_name='Reason')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('adjusted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Adjusted By')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='adjustments', to='depotman.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='adjustments', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock Adjustment',
                'verbose_name_plural': 'Stock Adjustments',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ReorderingRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('minimum_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Minimum Quantity')),
                ('reorder_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Reorder Quantity')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('last_triggered_at', models.DateTimeField(blank=True, null=True, verbose_name='Last Triggered')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reordering_rules', to='depotman.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(blank=True, help_text='Empty = total stock across warehouses', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reordering_rules', to='depotman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Reordering Rule',
                'verbose_name_plural': 'Reordering Rules',
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'warehouse'), name='unique_reordering_rule_per_product_warehouse'),
                ],
            },
        ),
    ]
