"""
Catalog — item registration and category rules.

Items point to categories by name. The rules that keep those references
sound live here:
- renaming a category renames it on every item that uses it
- deleting a category that is still used is rejected
"""

import logging

from django.db import transaction
from django.db.models import ProtectedError, Q

from opname.exceptions import StockError
from opname.models.category import Category
from opname.models.item import Item

logger = logging.getLogger('opname')

STOCK_FIELDS = frozenset({'current_stock', 'initial_stock'})
EDITABLE_FIELDS = frozenset({'sku', 'name', 'category', 'location', 'unit', 'min_stock'})


def _clean_name(name) -> str:
    name = (name or '').strip()
    if not name:
        raise StockError('INVALID_NAME')
    return name


def _category_by_name(name: str) -> Category:
    category = Category.objects.filter(name__iexact=name).first()
    if category is None:
        raise StockError('CATEGORY_NOT_FOUND', category=name)
    return category


def _resolve_category(category) -> Category:
    if isinstance(category, Category):
        return category
    try:
        return Category.objects.get(pk=category)
    except (Category.DoesNotExist, ValueError, TypeError):
        raise StockError('CATEGORY_NOT_FOUND', category=category) from None


class Catalog:
    """Item and category methods."""

    # ══════════════════════════════════════════════════════════════
    # ITEMS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def register_item(cls, sku: str, name: str, category: str = '', location: str = '',
                      unit: str = 'Pcs', min_stock: int = 0, initial_stock: int = 0) -> Item:
        """
        Add an item to the catalog with its opening stock.

        initial_stock becomes current_stock and is the starting point of
        ledger replay.

        Raises:
            StockError('INVALID_NAME'): Empty sku or name
            StockError('DUPLICATE_SKU'): SKU already registered
            StockError('CATEGORY_NOT_FOUND'): Category name unknown
            StockError('INVALID_QUANTITY'): Negative min or initial stock
        """
        sku = _clean_name(sku)
        name = _clean_name(name)

        for value in (min_stock, initial_stock):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise StockError('INVALID_QUANTITY', requested=value)

        with transaction.atomic():
            if Item.objects.filter(sku__iexact=sku).exists():
                raise StockError('DUPLICATE_SKU', sku=sku)

            category_name = _category_by_name(category).name if category else ''

            item = Item.objects.create(
                sku=sku,
                name=name,
                category=category_name,
                location=location or '',
                unit=unit or 'Pcs',
                min_stock=min_stock,
                initial_stock=initial_stock,
                current_stock=initial_stock,
            )

        logger.info(
            "catalog.item.registered",
            extra={"item": item.sku, "initial_stock": initial_stock},
        )
        return item

    @classmethod
    def update_item(cls, item: Item, **fields) -> Item:
        """
        Edit item metadata. Stock fields are never writable here.

        Raises:
            StockError('STOCK_FIELD_READONLY'): current_stock / initial_stock passed
            StockError('CATEGORY_NOT_FOUND'): Category name unknown
            StockError('DUPLICATE_SKU'): New SKU already registered
        """
        readonly = STOCK_FIELDS.intersection(fields)
        if readonly:
            raise StockError('STOCK_FIELD_READONLY', fields=sorted(readonly))

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"update_item() got unexpected fields: {sorted(unknown)}")

        if fields.get('category'):
            fields['category'] = _category_by_name(fields['category']).name

        if 'sku' in fields:
            fields['sku'] = _clean_name(fields['sku'])
            if Item.objects.filter(sku__iexact=fields['sku']).exclude(pk=item.pk).exists():
                raise StockError('DUPLICATE_SKU', sku=fields['sku'])

        if 'name' in fields:
            fields['name'] = _clean_name(fields['name'])

        for attr, value in fields.items():
            setattr(item, attr, value)
        item.save(update_fields=list(fields))
        return item

    @classmethod
    def delete_item(cls, item) -> None:
        """
        Remove an item that never moved.

        Items with ledger entries or opname lines are protected: deleting
        them would break ledger replay and session history.

        Raises:
            StockError('ITEM_NOT_FOUND'): Unknown item
            StockError('ITEM_IN_USE'): Transactions or opname lines reference it
        """
        item = item if isinstance(item, Item) else cls.get_item(item)
        sku = item.sku

        try:
            with transaction.atomic():
                item.delete()
        except ProtectedError:
            raise StockError(
                'ITEM_IN_USE',
                sku=sku,
                transactions=item.transactions.count(),
                sessions=item.opname_lines.count(),
            ) from None

        logger.info("catalog.item.deleted", extra={"item": sku})

    @classmethod
    def get_item(cls, item_id) -> Item:
        try:
            return Item.objects.get(pk=item_id)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise StockError('ITEM_NOT_FOUND', item_id=item_id) from None

    @classmethod
    def list_items(cls, category: str | None = None, location: str | None = None,
                   status: str | None = None, search: str | None = None) -> list[Item]:
        """Catalog in catalog order, with the inventory screen's filters."""
        qs = Item.objects.order_by('id')
        if category:
            qs = qs.in_category(category)
        if location:
            qs = qs.filter(location=location)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(sku__icontains=search))

        items = list(qs)
        if status:
            items = [item for item in items if item.stock_status == status]
        return items

    # ══════════════════════════════════════════════════════════════
    # CATEGORIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_category(cls, name: str) -> Category:
        """
        Raises:
            StockError('INVALID_NAME'): Empty name
            StockError('CATEGORY_EXISTS'): Same name, case-insensitive
        """
        name = _clean_name(name)

        with transaction.atomic():
            if Category.objects.filter(name__iexact=name).exists():
                raise StockError('CATEGORY_EXISTS', category=name)
            category = Category.objects.create(name=name)

        logger.info("catalog.category.created", extra={"category": name})
        return category

    @classmethod
    def rename_category(cls, category, new_name: str) -> Category:
        """
        Rename a category and every item that references it.

        Returns:
            The renamed Category

        Raises:
            StockError('CATEGORY_NOT_FOUND'): Unknown category
            StockError('CATEGORY_EXISTS'): Another category already has new_name
        """
        category = _resolve_category(category)
        new_name = _clean_name(new_name)
        old_name = category.name

        if new_name == old_name:
            return category

        with transaction.atomic():
            clash = Category.objects.filter(name__iexact=new_name).exclude(pk=category.pk)
            if clash.exists():
                raise StockError('CATEGORY_EXISTS', category=new_name)

            category.name = new_name
            category.save(update_fields=['name'])
            moved = Item.objects.in_category(old_name).update(category=new_name)

        logger.info(
            "catalog.category.renamed",
            extra={"old": old_name, "new": new_name, "items": moved},
        )
        return category

    @classmethod
    def delete_category(cls, category) -> None:
        """
        Raises:
            StockError('CATEGORY_NOT_FOUND'): Unknown category
            StockError('CATEGORY_IN_USE'): Items still reference it (data['dependents'] = SKUs)
        """
        category = _resolve_category(category)

        with transaction.atomic():
            dependents = list(
                Item.objects.in_category(category.name).order_by('id').values_list('sku', flat=True)
            )
            if dependents:
                raise StockError('CATEGORY_IN_USE', category=category.name, dependents=dependents)
            category.delete()

        logger.info("catalog.category.deleted", extra={"category": category.name})

    @classmethod
    def list_categories(cls):
        return Category.objects.all()
