"""
Tests for report projections and low-stock alerts.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from opname import stock
from opname.models import OpnameItem, StockStatus
from opname.services.alerts import check_low_stock


pytestmark = pytest.mark.django_db


class TestAccuracyRate:
    """Tests for stock.accuracy_rate()."""

    def test_matched_and_uncounted(self, item, pen, soap):
        """2 counted and matching, 1 uncounted: 100% with progress 2/3."""
        session = stock.create_session()
        stock.record_count(session, item, 50)
        stock.record_count(session, pen, 20)

        assert stock.accuracy_rate(session) == 100

        progress = stock.progress(session)
        assert (progress.counted, progress.total) == (2, 3)
        assert progress.percent == 67

    def test_nothing_counted(self, item, pen):
        session = stock.create_session()

        assert stock.accuracy_rate(session) == 0
        assert stock.progress(session).ratio == 0.0

    def test_rounding(self, item, pen, soap):
        session = stock.create_session()
        stock.record_count(session, item, 50)
        stock.record_count(session, pen, 20)
        stock.record_count(session, soap, 1)

        assert stock.accuracy_rate(session) == 67

    def test_half_rounds_up(self):
        lines = [OpnameItem(system_stock=5, physical_stock=5, difference=0)]
        lines += [OpnameItem(system_stock=5, physical_stock=6, difference=1) for _ in range(7)]

        assert stock.accuracy_rate(lines) == 13

    def test_accepts_plain_lines(self):
        lines = [
            OpnameItem(system_stock=5, physical_stock=5, difference=0),
            OpnameItem(system_stock=5, physical_stock=7, difference=2),
            OpnameItem(system_stock=5, physical_stock=None, difference=0),
        ]

        assert stock.accuracy_rate(lines) == 50
        assert [line.difference for line in stock.discrepancies(lines)] == [2]


class TestSessionSummary:
    """Tests for stock.session_summary()."""

    def test_summary(self, item, pen, soap):
        session = stock.create_session()
        stock.record_count(session, item, 47)
        stock.record_count(session, pen, 24)

        summary = stock.session_summary(session)

        assert summary['label'] == session.label
        assert summary['total_items'] == 3
        assert summary['counted_items'] == 2
        assert summary['discrepancy_count'] == 2
        assert summary['surplus'] == 4
        assert summary['shortage'] == 3
        assert summary['accuracy_rate'] == 0


class TestCatalogReports:
    """Tests for low stock, dashboard, usage trend and category reports."""

    def test_stock_status(self, item, soap):
        assert item.stock_status == StockStatus.SAFE
        assert soap.stock_status == StockStatus.LOW

        stock.issue(soap, 3)
        assert soap.stock_status == StockStatus.OUT

    def test_low_stock_boundary(self, item):
        stock.issue(item, 40)

        assert item.is_low_stock
        assert list(stock.low_stock_items()) == [item]

    def test_dashboard_metrics(self, item, pen, soap):
        stock.issue(item, 1)
        stock.create_session()

        assert stock.dashboard_metrics() == {
            'total_items': 3,
            'low_stock_count': 1,
            'total_transactions': 1,
            'pending_opnames': 1,
        }

    def test_usage_trend(self, item, pen):
        today = timezone.localdate()
        stock.issue(item, 3, date=today)
        stock.issue(pen, 2, date=today)
        stock.issue(item, 4, date=today - timedelta(days=2))
        stock.issue(item, 9, date=today - timedelta(days=10))
        stock.receive(item, 50, date=today)

        trend = stock.usage_trend(days=3, today=today)

        assert trend == [
            (today - timedelta(days=2), 4),
            (today - timedelta(days=1), 0),
            (today, 5),
        ]

    def test_category_distribution(self, item, pen, soap):
        assert stock.category_distribution() == {'ATK': 2, 'Kebersihan': 1}


class TestCheckLowStock:
    """Tests for check_low_stock()."""

    def test_returns_shortfall(self, item, soap, caplog):
        with caplog.at_level('WARNING', logger='opname'):
            triggered = check_low_stock()

        assert triggered == [(soap, 2)]
        assert any(record.getMessage() == 'stock.alert.low_stock' for record in caplog.records)

    def test_category_filter(self, item, soap, category):
        assert check_low_stock(category=category.name) == []
        assert check_low_stock(category='Kebersihan') == [(soap, 2)]
