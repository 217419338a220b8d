"""
Stock ledger — state-changing operations (record, receive, issue) and audit.

All writes use transaction.atomic() and lock the affected Item.
"""

import logging
from dataclasses import dataclass
from datetime import date

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from opname.conf import NEGATIVE_STOCK_REJECT, opname_settings
from opname.exceptions import StockError
from opname.models.enums import TransactionType
from opname.models.item import Item
from opname.models.transaction import Transaction

logger = logging.getLogger('opname')


def _resolve_item(item) -> Item:
    """Accept an Item or its pk; raise ITEM_NOT_FOUND otherwise."""
    pk = item.pk if isinstance(item, Item) else item
    if pk is None:
        raise StockError('ITEM_NOT_FOUND', item_id=None)
    try:
        return Item.objects.get(pk=pk)
    except (Item.DoesNotExist, ValueError, TypeError):
        raise StockError('ITEM_NOT_FOUND', item_id=pk) from None


def _coerce_quantity(quantity) -> int:
    """Positive integer, or INVALID_QUANTITY. Digit strings and integral floats are accepted."""
    if isinstance(quantity, bool):
        raise StockError('INVALID_QUANTITY', requested=quantity)
    if isinstance(quantity, str):
        try:
            quantity = int(quantity.strip())
        except ValueError:
            raise StockError('INVALID_QUANTITY', requested=quantity) from None
    if isinstance(quantity, float):
        if not quantity.is_integer():
            raise StockError('INVALID_QUANTITY', requested=quantity)
        quantity = int(quantity)
    if not isinstance(quantity, int) or quantity <= 0:
        raise StockError('INVALID_QUANTITY', requested=quantity)
    return quantity


@dataclass(frozen=True)
class LedgerMismatch:
    """An item whose stored stock disagrees with its ledger replay."""

    item: Item
    recorded: int
    replayed: int

    @property
    def diff(self) -> int:
        return self.replayed - self.recorded


class StockLedger:
    """Ledger write and audit methods."""

    @classmethod
    def record_transaction(cls, item, tx_type, quantity, date: date | None = None,
                           notes: str = '', related_session=None, **metadata) -> Transaction:
        """
        Append a transaction and apply its stock effect as one unit.

        IN adds quantity to current_stock, OUT subtracts it. ADJUSTMENT and
        OPNAME_ADJUSTMENT are recorded without touching stock.

        Raises:
            StockError('ITEM_NOT_FOUND'): If the item doesn't exist
            StockError('INVALID_TYPE'): If tx_type is not a TransactionType
            StockError('INVALID_QUANTITY'): If quantity is not a positive integer
            StockError('INSUFFICIENT_STOCK'): OUT beyond stock under the "reject" policy

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Item
            - Transaction.save() updates current_stock with F()
        """
        if tx_type not in TransactionType.values:
            raise StockError('INVALID_TYPE', type=tx_type)
        quantity = _coerce_quantity(quantity)
        target = _resolve_item(item)

        with transaction.atomic():
            locked_item = Item.objects.select_for_update().get(pk=target.pk)

            if (tx_type == TransactionType.OUT
                    and opname_settings.NEGATIVE_STOCK_POLICY == NEGATIVE_STOCK_REJECT
                    and locked_item.current_stock < quantity):
                raise StockError(
                    'INSUFFICIENT_STOCK',
                    available=locked_item.current_stock,
                    requested=quantity,
                )

            tx = Transaction.objects.create(
                item=locked_item,
                type=tx_type,
                quantity=quantity,
                date=date or timezone.localdate(),
                notes=notes or '',
                related_session=related_session,
                metadata=metadata,
            )

            locked_item.refresh_from_db()
            if isinstance(item, Item):
                item.refresh_from_db()

        logger.info(
            "stock.transaction.recorded",
            extra={
                "item": locked_item.sku,
                "type": tx_type,
                "qty": quantity,
                "stock": locked_item.current_stock,
                "tx_id": tx.pk,
            },
        )
        return tx

    @classmethod
    def receive(cls, item, quantity, date: date | None = None, notes: str = '', **metadata) -> Transaction:
        """Goods in. Shortcut for record_transaction(IN)."""
        return cls.record_transaction(item, TransactionType.IN, quantity, date=date, notes=notes, **metadata)

    @classmethod
    def issue(cls, item, quantity, date: date | None = None, notes: str = '', **metadata) -> Transaction:
        """
        Goods out. Shortcut for record_transaction(OUT).

        Stock may go negative unless NEGATIVE_STOCK_POLICY is "reject".
        """
        return cls.record_transaction(item, TransactionType.OUT, quantity, date=date, notes=notes, **metadata)

    @classmethod
    def list_transactions(cls, item=None, tx_type=None, start: date | None = None,
                          end: date | None = None, search: str | None = None):
        """Transactions most-recent-first, optionally filtered."""
        qs = Transaction.objects.select_related('item')

        if item is not None:
            qs = qs.for_item(item)
        if tx_type is not None:
            qs = qs.of_type(tx_type)

        qs = qs.between(start, end)

        if search:
            qs = qs.filter(
                Q(item__name__icontains=search)
                | Q(item__sku__icontains=search)
                | Q(notes__icontains=search)
            )

        return qs

    @classmethod
    def verify_ledger(cls, fix: bool = False) -> list[LedgerMismatch]:
        """
        Replay every item's ledger and report stock mismatches.

        Args:
            fix: Overwrite current_stock with the replayed value

        Returns:
            List of LedgerMismatch (empty when consistent)
        """
        mismatches = []

        for item in Item.objects.order_by('id'):
            replayed = item.replay_stock()
            if replayed == item.current_stock:
                continue

            mismatches.append(LedgerMismatch(item=item, recorded=item.current_stock, replayed=replayed))
            logger.warning(
                "stock.ledger.mismatch",
                extra={"item": item.sku, "recorded": item.current_stock, "replayed": replayed},
            )
            if fix:
                with transaction.atomic():
                    Item.objects.select_for_update().get(pk=item.pk).recalculate()

        return mismatches
