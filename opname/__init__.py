"""
Django Opname — Consumable stock ledger and stock opname engine.

Usage:
    from opname import stock, StockError

    stock.receive(kertas, 5)
    session = stock.create_session()
    stock.record_count(session, kertas, 40)
    stock.finalize(session)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from opname.service import Stock
        return Stock
    elif name == 'StockError':
        from opname.exceptions import StockError
        return StockError
    elif name == 'Category':
        from opname.models.category import Category
        return Category
    elif name == 'Item':
        from opname.models.item import Item
        return Item
    elif name == 'Transaction':
        from opname.models.transaction import Transaction
        return Transaction
    elif name == 'OpnameSession':
        from opname.models.session import OpnameSession
        return OpnameSession
    elif name == 'OpnameItem':
        from opname.models.session import OpnameItem
        return OpnameItem
    elif name == 'TransactionType':
        from opname.models.enums import TransactionType
        return TransactionType
    elif name == 'SessionStatus':
        from opname.models.enums import SessionStatus
        return SessionStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'Category',
    'Item',
    'Transaction',
    'OpnameSession',
    'OpnameItem',
    'TransactionType',
    'SessionStatus',
]

__version__ = '0.1.0'
