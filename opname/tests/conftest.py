"""
Pytest fixtures for Opname tests.
"""

import pytest

from opname.adapters import reset_advisory_backend
from opname.models import Category, Item


@pytest.fixture
def category(db):
    """Create a test category."""
    return Category.objects.create(name='ATK')


@pytest.fixture
def other_category(db):
    return Category.objects.create(name='Kebersihan')


@pytest.fixture
def item(db, category):
    """Item A: 50 on hand, minimum 10."""
    return Item.objects.create(
        sku='ATK-001',
        name='Kertas A4',
        category=category.name,
        location='Gudang 1',
        unit='Rim',
        initial_stock=50,
        current_stock=50,
        min_stock=10,
    )


@pytest.fixture
def pen(db, category):
    return Item.objects.create(
        sku='ATK-002',
        name='Pulpen',
        category=category.name,
        location='Gudang 1',
        unit='Pcs',
        initial_stock=20,
        current_stock=20,
        min_stock=5,
    )


@pytest.fixture
def soap(db, other_category):
    """Item already below its minimum."""
    return Item.objects.create(
        sku='KBR-001',
        name='Sabun Cuci',
        category=other_category.name,
        location='Gudang 2',
        unit='Botol',
        initial_stock=3,
        current_stock=3,
        min_stock=5,
    )


@pytest.fixture(autouse=True)
def advisory_backend_cache():
    """Drop the cached advisory backend around every test."""
    reset_advisory_backend()
    yield
    reset_advisory_backend()
