"""
Pytest fixtures for Depotman tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from depotman.models import Category, Product, Warehouse
from depotman.services.movements import StockMovements


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='clerk',
        password='testpass123'
    )


@pytest.fixture
def main(db):
    """Main warehouse."""
    return Warehouse.objects.create(name='Main', location='Building A')


@pytest.fixture
def overflow(db):
    """Secondary warehouse."""
    return Warehouse.objects.create(name='Overflow', location='Dock 3')


@pytest.fixture
def category(db):
    return Category.objects.create(name='Hardware')


@pytest.fixture
def product(db, category):
    """Create a test product with no stock."""
    return Product.objects.create(
        name='Steel Bolt M8',
        sku='BOLT-M8',
        category=category,
        unit_of_measure='pcs',
    )


@pytest.fixture
def other_product(db, category):
    return Product.objects.create(
        name='Hex Nut M8',
        sku='NUT-M8',
        category=category,
        unit_of_measure='pcs',
    )


@pytest.fixture
def stock():
    """
    Put opening stock at a warehouse.

    Usage:
        stock(product, main, 50)
    """
    def _stock(product, warehouse, quantity):
        StockMovements.receive(product, warehouse, Decimal(str(quantity)), notes='Opening stock')
        product.refresh_from_db()
        return product
    return _stock


@pytest.fixture
def api_client(user):
    """APIClient authenticated as the test user."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client
