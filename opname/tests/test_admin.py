"""
Tests for admin paths that must respect the catalog rules.
"""

import pytest
from django.contrib.admin.sites import AdminSite
from django.contrib.messages import get_messages
from django.contrib.messages.storage.cookie import CookieStorage

from opname.admin import CategoryAdmin, ItemAdminForm
from opname.models import Category, Item


pytestmark = pytest.mark.django_db


@pytest.fixture
def admin_request(rf, admin_user):
    request = rf.post('/admin/opname/category/')
    request.user = admin_user
    request._messages = CookieStorage(request)
    return request


@pytest.fixture
def category_admin():
    return CategoryAdmin(Category, AdminSite())


class TestCategoryAdminDelete:
    """Deleting categories from the admin."""

    def test_bulk_delete_keeps_used_category(self, category_admin, admin_request,
                                             category, other_category, item):
        category_admin.delete_queryset(admin_request, Category.objects.all())

        assert list(Category.objects.all()) == [category]
        item.refresh_from_db()
        assert item.category == 'ATK'

        errors = [str(message) for message in get_messages(admin_request)]
        assert len(errors) == 1
        assert 'ATK-001' in errors[0]

    def test_delete_permission_hidden_for_used_category(self, category_admin, admin_request,
                                                        category, other_category, item):
        assert category_admin.has_delete_permission(admin_request, category) is False
        assert category_admin.has_delete_permission(admin_request, other_category) is True
        assert category_admin.has_delete_permission(admin_request) is True

    def test_delete_model_unused(self, category_admin, admin_request, other_category):
        category_admin.delete_model(admin_request, other_category)

        assert not Category.objects.exists()


class TestItemAdminForm:
    """Item form validates the category against existing categories."""

    def _data(self, **overrides):
        data = {
            'sku': 'ATK-100',
            'name': 'Map Plastik',
            'category': '',
            'location': 'Rak A',
            'unit': 'Pcs',
            'min_stock': 0,
            'initial_stock': 0,
        }
        data.update(overrides)
        return data

    def test_unknown_category_rejected(self, category):
        form = ItemAdminForm(data=self._data(category='TidakAda'))

        assert not form.is_valid()
        assert 'category' in form.errors

    def test_category_name_normalised(self, category):
        form = ItemAdminForm(data=self._data(category='atk'))

        assert form.is_valid(), form.errors
        item = form.save()
        assert item.category == 'ATK'
        assert list(Item.objects.in_category('ATK')) == [item]

    def test_blank_category_allowed(self, db):
        form = ItemAdminForm(data=self._data())

        assert form.is_valid(), form.errors
        assert form.cleaned_data['category'] == ''
