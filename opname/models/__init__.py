"""
Opname Models.

Core models for consumable stock and reconciliation:
- Category: Label items point to by name
- Item: Catalog entry with current stock
- Transaction: Immutable ledger of stock events
- OpnameSession: Physical count session (OPEN → COMPLETED)
- OpnameItem: One counted line inside a session
"""

from opname.models.category import Category
from opname.models.enums import SessionStatus, StockStatus, TransactionType
from opname.models.item import Item
from opname.models.session import OpnameItem, OpnameSession
from opname.models.transaction import Transaction

__all__ = [
    'TransactionType',
    'SessionStatus',
    'StockStatus',
    'Category',
    'Item',
    'Transaction',
    'OpnameSession',
    'OpnameItem',
]
