"""
Opname Admin.

- Category: list + edit (renames cascade through services.catalog)
- Item: editable metadata, stock fields read-only
- Transaction: read-only audit trail
- OpnameSession: read-only with lines inline and a "finalize" action
"""

import logging

from django import forms
from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from opname.exceptions import StockError
from opname.models import Category, Item, OpnameItem, OpnameSession, StockStatus, Transaction
from opname.services.catalog import _category_by_name

logger = logging.getLogger(__name__)


# =========================================================================
# CATEGORY ADMIN
# =========================================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Category admin — renames and deletes go through the catalog rules."""

    list_display = ['name', 'item_count']
    search_fields = ['name']

    @admin.display(description=_('Jumlah Barang'))
    def item_count(self, obj):
        return Item.objects.in_category(obj.name).count()

    def save_model(self, request, obj, form, change):
        from opname import stock

        if change and 'name' in form.changed_data:
            old = Category.objects.get(pk=obj.pk)
            new_name = obj.name
            obj.name = old.name
            stock.rename_category(obj, new_name)
        else:
            super().save_model(request, obj, form, change)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and Item.objects.in_category(obj.name).exists():
            return False
        return super().has_delete_permission(request, obj)

    def delete_model(self, request, obj):
        from opname import stock

        stock.delete_category(obj)

    def delete_queryset(self, request, queryset):
        """Bulk delete: categories still in use are skipped and reported."""
        from opname import stock

        for category in queryset:
            try:
                stock.delete_category(category)
            except StockError as exc:
                self.message_user(
                    request,
                    f"{category.name}: {exc.message} ({', '.join(exc.dependents)})",
                    level=messages.ERROR,
                )


# =========================================================================
# ITEM ADMIN
# =========================================================================

class ItemAdminForm(forms.ModelForm):
    """Category picked from existing categories and stored under its canonical name."""

    class Meta:
        model = Item
        fields = ['sku', 'name', 'category', 'location', 'unit', 'min_stock', 'initial_stock']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if 'category' in self.fields:
            choices = [('', '---------')] + [
                (name, name) for name in Category.objects.values_list('name', flat=True)
            ]
            self.fields['category'].widget = forms.Select(choices=choices)

    def clean_category(self):
        name = (self.cleaned_data.get('category') or '').strip()
        if not name:
            return ''
        try:
            return _category_by_name(name).name
        except StockError as exc:
            raise forms.ValidationError(exc.message) from None


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — stock only changes via transactions and opname."""

    form = ItemAdminForm

    list_display = ['sku', 'name', 'category', 'location', 'current_stock',
                    'min_stock', 'unit', 'status_display', 'last_updated']
    list_filter = ['category', 'location']
    search_fields = ['sku', 'name']
    readonly_fields = ['current_stock', 'last_updated', 'created_at']

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields.append('initial_stock')
        return fields

    def save_model(self, request, obj, form, change):
        if not change:
            obj.current_stock = obj.initial_stock
        super().save_model(request, obj, form, change)

    @admin.display(description=_('Status Stok'))
    def status_display(self, obj):
        return StockStatus(obj.stock_status).label


# =========================================================================
# TRANSACTION ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Transaction admin — read-only. Immutable ledger."""

    list_display = ['created_at', 'date', 'item', 'type', 'quantity', 'notes', 'related_session']
    list_filter = ['type', 'date']
    search_fields = ['notes', 'item__name', 'item__sku']
    readonly_fields = ['item', 'type', 'quantity', 'date', 'notes',
                       'related_session', 'metadata', 'created_at']
    date_hierarchy = 'date'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# OPNAME SESSION ADMIN (read-only with finalize action)
# =========================================================================

class OpnameItemInline(admin.TabularInline):
    model = OpnameItem
    fields = ['item', 'system_stock', 'physical_stock', 'difference']
    readonly_fields = fields
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(OpnameSession)
class OpnameSessionAdmin(admin.ModelAdmin):
    """Session admin — counts are entered through stock.record_count()."""

    list_display = ['label', 'date', 'status', 'accuracy_display', 'discrepancy_display', 'completed_at']
    list_filter = ['status']
    readonly_fields = ['label', 'date', 'status', 'notes', 'completed_at']
    inlines = [OpnameItemInline]
    actions = ['finalize_sessions']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Akurasi (%)'))
    def accuracy_display(self, obj):
        from opname import stock
        return stock.accuracy_rate(obj)

    @admin.display(description=_('Selisih'))
    def discrepancy_display(self, obj):
        return obj.items.discrepancies().count()

    @admin.action(description=_('Selesaikan sesi terpilih'))
    def finalize_sessions(self, request, queryset):
        from opname import stock

        adjusted = 0
        for session in queryset:
            try:
                adjusted += stock.finalize(session).adjusted
            except StockError as exc:
                logger.warning("finalize_sessions: %s skipped: %s", session.label, exc)

        self.message_user(
            request,
            _('Stock Opname selesai. {count} stok barang disesuaikan.').format(count=adjusted),
        )
