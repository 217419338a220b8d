"""
Opname sessions — count lifecycle (create, record_count, finalize).

All methods use transaction.atomic() and lock the session row.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.utils import timezone

from opname.conf import opname_settings
from opname.exceptions import StockError
from opname.models.enums import SessionStatus, TransactionType
from opname.models.item import Item
from opname.models.session import OpnameItem, OpnameSession
from opname.models.transaction import Transaction

logger = logging.getLogger('opname')


def _session_pk(session):
    return session.pk if isinstance(session, OpnameSession) else session


def _lock_session(session) -> OpnameSession:
    """select_for_update the session; raise SESSION_NOT_FOUND if missing."""
    pk = _session_pk(session)
    try:
        return OpnameSession.objects.select_for_update().get(pk=pk)
    except (OpnameSession.DoesNotExist, ValueError, TypeError):
        raise StockError('SESSION_NOT_FOUND', session_id=pk) from None


def _parse_count(raw_input) -> int | None:
    """
    Normalize a physical count.

    None, "" and whitespace mean "uncounted" (None), never zero.
    Non-negative integers (or their string form) are accepted as-is.
    """
    value = raw_input

    if value is None:
        return None
    if isinstance(value, bool):
        raise StockError('INVALID_COUNT', value=raw_input)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = int(value)
        except ValueError:
            raise StockError('INVALID_COUNT', value=raw_input) from None
    if isinstance(value, float):
        if not value.is_integer():
            raise StockError('INVALID_COUNT', value=raw_input)
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise StockError('INVALID_COUNT', value=raw_input)
    return value


def _adjustment_note(line: OpnameItem) -> str:
    return f"Opname Adjustment: System({line.system_stock}) -> Physical({line.physical_stock})"


@dataclass(frozen=True)
class FinalizeResult:
    """Outcome of finalize(): the closed session and what it adjusted."""

    session: OpnameSession
    adjusted: int
    transactions: list[Transaction] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'session_id': self.session.pk,
            'status': self.session.status,
            'adjusted': self.adjusted,
            'transaction_ids': [tx.pk for tx in self.transactions],
        }


class OpnameSessions:
    """Opname session lifecycle methods."""

    @classmethod
    def create_session(cls, notes: str = '') -> OpnameSession:
        """
        Open a count session over the whole catalog.

        Snapshots every item's current_stock as system_stock. The snapshot
        is frozen: later stock changes and later items are not reflected.
        """
        now = timezone.now()
        label = f"{opname_settings.SESSION_LABEL_PREFIX}{timezone.localtime(now):%Y%m%d}"

        with transaction.atomic():
            session = OpnameSession.objects.create(
                label=label,
                date=now,
                status=SessionStatus.OPEN,
                notes=notes or '',
            )
            OpnameItem.objects.bulk_create([
                OpnameItem(
                    session=session,
                    item=item,
                    system_stock=item.current_stock,
                    physical_stock=None,
                    difference=0,
                )
                for item in Item.objects.order_by('id')
            ])

        logger.info(
            "opname.session.created",
            extra={"session_id": session.pk, "label": label, "items": session.items.count()},
        )
        return session

    @classmethod
    def record_count(cls, session, item, raw_input) -> OpnameItem:
        """
        Record (or clear) the physical count of one item.

        Last write wins. Catalog stock is not touched.

        Raises:
            StockError('SESSION_NOT_FOUND'): If the session doesn't exist
            StockError('SESSION_CLOSED'): If the session is COMPLETED
            StockError('ITEM_NOT_IN_SESSION'): If the item is not in the snapshot
            StockError('INVALID_COUNT'): If raw_input is negative or not an integer
        """
        physical = _parse_count(raw_input)
        item_id = item.pk if isinstance(item, Item) else item

        with transaction.atomic():
            locked = _lock_session(session)

            if not locked.is_open:
                raise StockError('SESSION_CLOSED', session_id=locked.pk, status=locked.status)

            try:
                line = locked.items.filter(item_id=item_id).first()
            except (ValueError, TypeError):
                line = None
            if line is None:
                raise StockError('ITEM_NOT_IN_SESSION', session_id=locked.pk, item_id=item_id)

            line.set_count(physical)
            line.save(update_fields=['physical_stock', 'difference'])

        logger.debug(
            "opname.count.recorded",
            extra={"session_id": locked.pk, "item_id": item_id, "physical": physical},
        )
        return line

    @classmethod
    def finalize(cls, session) -> FinalizeResult:
        """
        Close the session and reconcile catalog stock.

        1. Validates status is OPEN
        2. Plans one OPNAME_ADJUSTMENT per discrepancy (counted, difference != 0)
        3. Transition: OPEN -> COMPLETED
        4. Writes the adjustments and force-sets current_stock = physical_stock

        Matched and uncounted items are left untouched. Everything happens in
        one atomic block: a failure leaves the session OPEN and stock unchanged.

        Raises:
            StockError('SESSION_NOT_FOUND'): If the session doesn't exist
            StockError('SESSION_CLOSED'): If already COMPLETED
        """
        with transaction.atomic():
            locked = _lock_session(session)

            if not locked.is_open:
                logger.warning(
                    "opname.session.finalize_rejected",
                    extra={"session_id": locked.pk, "status": locked.status},
                )
                raise StockError('SESSION_CLOSED', session_id=locked.pk, status=locked.status)

            now = timezone.now()
            today = timezone.localdate(now)

            lines = list(locked.items.discrepancies().order_by('id'))
            plan = [
                (line, Transaction(
                    item_id=line.item_id,
                    type=TransactionType.OPNAME_ADJUSTMENT,
                    quantity=abs(line.difference),
                    date=today,
                    notes=_adjustment_note(line),
                    related_session=locked,
                    metadata={
                        'system_stock': line.system_stock,
                        'physical_stock': line.physical_stock,
                        'difference': line.difference,
                    },
                    created_at=now,
                ))
                for line in lines
            ]

            # Lock every item about to be force-set
            list(Item.objects.select_for_update().filter(pk__in=[line.item_id for line in lines]))

            locked.status = SessionStatus.COMPLETED
            locked.completed_at = now
            locked.save(update_fields=['status', 'completed_at'])

            for line, tx in plan:
                tx.save()
                Item.objects.filter(pk=line.item_id).update(
                    current_stock=line.physical_stock,
                    last_updated=now,
                )

        if isinstance(session, OpnameSession):
            session.refresh_from_db()

        logger.info(
            "opname.session.finalized",
            extra={"session_id": locked.pk, "label": locked.label, "adjusted": len(plan)},
        )
        return FinalizeResult(
            session=locked,
            adjusted=len(plan),
            transactions=[tx for _, tx in plan],
        )

    @classmethod
    def get_session(cls, session_id) -> OpnameSession:
        try:
            return OpnameSession.objects.get(pk=session_id)
        except (OpnameSession.DoesNotExist, ValueError, TypeError):
            raise StockError('SESSION_NOT_FOUND', session_id=session_id) from None

    @classmethod
    def list_sessions(cls, status: str | None = None):
        """Sessions most-recent-first."""
        qs = OpnameSession.objects.all()
        if status is not None:
            qs = qs.filter(status=status)
        return qs

    @classmethod
    def open_sessions(cls):
        return cls.list_sessions(status=SessionStatus.OPEN)
