"""
Reports — read-only projections over sessions, catalog and ledger.

Session projections (accuracy_rate, discrepancies, progress) work on the
session's lines only and never query the catalog.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from django.db.models import Count, Sum
from django.utils import timezone

from opname.models.enums import SessionStatus, TransactionType
from opname.models.item import Item
from opname.models.session import OpnameItem, OpnameSession
from opname.models.transaction import Transaction


def _lines(session) -> list[OpnameItem]:
    """Session lines in catalog order. Accepts a session or a list of lines."""
    if isinstance(session, OpnameSession):
        return list(session.items.order_by('id'))
    return list(session)


def _percent(part: int, whole: int) -> int:
    """round(100 * part / whole), halves rounded up, 0 for an empty whole."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


@dataclass(frozen=True)
class Progress:
    """How much of a session has been counted."""

    counted: int
    total: int

    @property
    def ratio(self) -> float:
        return self.counted / self.total if self.total else 0.0

    @property
    def percent(self) -> int:
        return _percent(self.counted, self.total)


class OpnameReports:
    """Read-only report methods."""

    # ══════════════════════════════════════════════════════════════
    # SESSION PROJECTIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def discrepancies(cls, session) -> list[OpnameItem]:
        """Counted lines whose physical count differs from system stock."""
        return [line for line in _lines(session) if line.has_discrepancy]

    @classmethod
    def accuracy_rate(cls, session) -> int:
        """
        Percentage of counted lines that matched system stock.

        Uncounted lines are excluded from the denominator. Returns 0 when
        nothing has been counted.
        """
        counted = [line for line in _lines(session) if line.is_counted]
        matching = sum(1 for line in counted if line.difference == 0)
        return _percent(matching, len(counted))

    @classmethod
    def progress(cls, session) -> Progress:
        lines = _lines(session)
        return Progress(
            counted=sum(1 for line in lines if line.is_counted),
            total=len(lines),
        )

    @classmethod
    def session_summary(cls, session: OpnameSession) -> dict:
        """Figures shown on the opname report."""
        lines = _lines(session)
        found = [line for line in lines if line.has_discrepancy]
        progress = cls.progress(lines)
        return {
            'session_id': session.pk,
            'label': session.label,
            'status': session.status,
            'total_items': progress.total,
            'counted_items': progress.counted,
            'accuracy_rate': cls.accuracy_rate(lines),
            'discrepancy_count': len(found),
            'surplus': sum(line.difference for line in found if line.difference > 0),
            'shortage': sum(-line.difference for line in found if line.difference < 0),
        }

    # ══════════════════════════════════════════════════════════════
    # CATALOG & LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def low_stock_items(cls):
        """Items at or below their minimum stock."""
        return Item.objects.low_stock().order_by('id')

    @classmethod
    def dashboard_metrics(cls) -> dict:
        return {
            'total_items': Item.objects.count(),
            'low_stock_count': Item.objects.low_stock().count(),
            'total_transactions': Transaction.objects.count(),
            'pending_opnames': OpnameSession.objects.filter(status=SessionStatus.OPEN).count(),
        }

    @classmethod
    def usage_trend(cls, days: int = 7, today: date | None = None) -> list[tuple[date, int]]:
        """
        OUT quantity per day for the last `days` days (oldest first).

        Days without usage are reported as 0.
        """
        end = today or timezone.localdate()
        start = end - timedelta(days=days - 1)

        totals = dict(
            Transaction.objects.of_type(TransactionType.OUT)
            .between(start, end)
            .order_by()
            .values('date')
            .annotate(total=Sum('quantity'))
            .values_list('date', 'total')
        )
        return [
            (start + timedelta(days=offset), totals.get(start + timedelta(days=offset), 0))
            for offset in range(days)
        ]

    @classmethod
    def category_distribution(cls) -> dict[str, int]:
        """Number of items per category name."""
        rows = (
            Item.objects.values('category')
            .annotate(count=Count('id'))
            .order_by('category')
        )
        return {row['category']: row['count'] for row in rows}
