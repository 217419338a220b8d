"""
Advisory — read-only inventory analysis through the configured backend.

Never raises and never writes: every failure becomes
AdvisoryResult.unavailable().
"""

import logging
from datetime import timedelta

from django.utils import timezone

from opname.adapters.advisory import get_advisory_backend
from opname.conf import opname_settings
from opname.models.item import Item
from opname.models.transaction import Transaction
from opname.protocols.advisory import AdvisoryResult, AdvisorySnapshot

logger = logging.getLogger('opname')


class StockAdvisory:
    """Advisory methods."""

    @classmethod
    def build_snapshot(cls) -> AdvisorySnapshot:
        """
        Items plus the most recent transactions inside the lookback window.

        Transactions are capped at ADVISORY_MAX_TRANSACTIONS to keep the
        prompt small.
        """
        since = timezone.localdate() - timedelta(days=opname_settings.ADVISORY_LOOKBACK_DAYS)
        limit = opname_settings.ADVISORY_MAX_TRANSACTIONS

        transactions = Transaction.objects.filter(date__gt=since)[:limit]

        return AdvisorySnapshot(
            items=[item.as_dict() for item in Item.objects.order_by('id')],
            transactions=[tx.as_dict() for tx in transactions],
        )

    @classmethod
    def analyze_inventory(cls) -> AdvisoryResult:
        """
        Ask the advisory backend about the current inventory.

        Returns:
            AdvisoryResult; AdvisoryResult.unavailable() on any failure
        """
        try:
            snapshot = cls.build_snapshot()
            backend = get_advisory_backend()
            result = backend.analyze(snapshot)
        except Exception:
            logger.exception("advisory.analysis_failed")
            return AdvisoryResult.unavailable()

        if not isinstance(result, AdvisoryResult):
            logger.error("advisory.invalid_result", extra={"result_type": type(result).__name__})
            return AdvisoryResult.unavailable()

        logger.info(
            "advisory.analysis_done",
            extra={"available": result.available, "items": len(snapshot.items)},
        )
        return result
