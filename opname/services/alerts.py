"""
Stock alerts — items that dropped to or below their minimum stock.

Usage:
    from opname.services.alerts import check_low_stock

    # Run periodically or after stock changes
    triggered = check_low_stock()
    # Returns list of (Item, shortfall) tuples
"""

import logging

from opname.models.item import Item

logger = logging.getLogger('opname')


def check_low_stock(category: str | None = None) -> list[tuple[Item, int]]:
    """
    Return items whose current_stock <= min_stock.

    Args:
        category: Optional category name to restrict the check to.

    Returns:
        List of (item, shortfall) tuples, shortfall = min_stock - current_stock.
    """
    qs = Item.objects.low_stock()
    if category is not None:
        qs = qs.in_category(category)

    triggered = []

    for item in qs.order_by('id'):
        shortfall = item.min_stock - item.current_stock
        triggered.append((item, shortfall))
        logger.warning(
            "stock.alert.low_stock",
            extra={
                "item": item.sku,
                "min_stock": item.min_stock,
                "current_stock": item.current_stock,
                "category": item.category or "-",
            },
        )

    return triggered
