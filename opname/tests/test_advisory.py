"""
Tests for the advisory service and its backends.
"""

import json
from datetime import timedelta
from unittest import mock

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from opname import stock
from opname.adapters import NoopAdvisoryBackend, get_advisory_backend
from opname.adapters.gemini import NOT_CONFIGURED_SUMMARY, GeminiAdvisoryBackend
from opname.models import Item, Transaction
from opname.protocols import AdvisoryBackend, AdvisoryResult, AdvisorySnapshot


pytestmark = pytest.mark.django_db


class FixedBackend:
    """Backend returning a canned result."""

    def analyze(self, snapshot):
        return AdvisoryResult(
            summary=f"{len(snapshot.items)} barang dianalisis",
            recommendations=['Beli sabun'],
            anomalies=[],
        )


class FailingBackend:

    def analyze(self, snapshot):
        raise ConnectionError("network down")


class WrongTypeBackend:

    def analyze(self, snapshot):
        return {'summary': 'bukan AdvisoryResult'}


def _backend_path(cls):
    return f"{__name__}.{cls.__name__}"


class TestBackendLoader:
    """Tests for get_advisory_backend()."""

    def test_default_is_noop(self):
        backend = get_advisory_backend()

        assert isinstance(backend, NoopAdvisoryBackend)
        assert isinstance(backend, AdvisoryBackend)
        assert get_advisory_backend() is backend

    def test_bad_path(self, settings):
        settings.OPNAME = {'ADVISORY_BACKEND': 'opname.adapters.missing.Backend'}

        with pytest.raises(ImproperlyConfigured):
            get_advisory_backend()

    def test_empty_path(self, settings):
        settings.OPNAME = {'ADVISORY_BACKEND': ''}

        with pytest.raises(ImproperlyConfigured):
            get_advisory_backend()


class TestAnalyzeInventory:
    """Tests for stock.analyze_inventory()."""

    def test_noop_is_unavailable(self, item):
        result = stock.analyze_inventory()

        assert result.available is False
        assert result.recommendations == []
        assert result.anomalies == []

    def test_custom_backend(self, item, pen, settings):
        settings.OPNAME = {'ADVISORY_BACKEND': _backend_path(FixedBackend)}

        result = stock.analyze_inventory()

        assert result.available is True
        assert result.summary == '2 barang dianalisis'
        assert result.as_dict()['recommendations'] == ['Beli sabun']

    @pytest.mark.parametrize('backend', [FailingBackend, WrongTypeBackend])
    def test_failures_degrade(self, item, settings, backend):
        settings.OPNAME = {'ADVISORY_BACKEND': _backend_path(backend)}
        stock.issue(item, 5)

        result = stock.analyze_inventory()

        assert result.available is False
        item.refresh_from_db()
        assert item.current_stock == 45
        assert Transaction.objects.count() == 1

    def test_misconfigured_backend_degrades(self, item, settings):
        settings.OPNAME = {'ADVISORY_BACKEND': 'opname.adapters.missing.Backend'}

        assert stock.analyze_inventory().available is False


class TestBuildSnapshot:
    """Tests for stock.build_snapshot()."""

    def test_window_and_cap(self, item, settings):
        settings.OPNAME = {'ADVISORY_LOOKBACK_DAYS': 7, 'ADVISORY_MAX_TRANSACTIONS': 2}
        today = timezone.localdate()
        stock.issue(item, 1, date=today - timedelta(days=30))
        stock.issue(item, 2, date=today)
        stock.issue(item, 3, date=today)
        latest = stock.issue(item, 4, date=today)

        snapshot = stock.build_snapshot()

        assert [entry['sku'] for entry in snapshot.items] == ['ATK-001']
        assert len(snapshot.transactions) == 2
        assert snapshot.transactions[0]['id'] == latest.pk
        assert all(entry['quantity'] != 1 for entry in snapshot.transactions)


class TestGeminiBackend:
    """Tests for GeminiAdvisoryBackend with the client mocked."""

    def _snapshot(self):
        return AdvisorySnapshot(
            items=[item.as_dict() for item in Item.objects.order_by('id')],
            transactions=[],
        )

    def test_missing_key(self, item):
        backend = GeminiAdvisoryBackend(api_key='')

        with mock.patch('opname.adapters.gemini.genai') as genai:
            result = backend.analyze(self._snapshot())

        genai.configure.assert_not_called()
        assert result.available is False
        assert result.summary == NOT_CONFIGURED_SUMMARY
        assert result.recommendations == ['Konfigurasi API Key', 'Hubungi Administrator']

    def test_parses_response(self, item):
        payload = {
            'summary': 'Stok aman',
            'recommendations': ['Pesan kertas'],
            'anomalies': ['Pemakaian pulpen tinggi'],
        }
        backend = GeminiAdvisoryBackend(api_key='secret', model_name='gemini-test')

        with mock.patch('opname.adapters.gemini.genai') as genai:
            genai.GenerativeModel.return_value.generate_content.return_value.text = json.dumps(payload)
            result = backend.analyze(self._snapshot())

        genai.configure.assert_called_once_with(api_key='secret')
        assert genai.GenerativeModel.call_args.args[0] == 'gemini-test'
        prompt = genai.GenerativeModel.return_value.generate_content.call_args.args[0]
        assert 'Kertas A4' in prompt
        assert result.available is True
        assert result.summary == 'Stok aman'
        assert result.recommendations == ['Pesan kertas']
        assert result.anomalies == ['Pemakaian pulpen tinggi']

    @pytest.mark.parametrize('text', ['', 'bukan json', '{"recommendations": []}'])
    def test_bad_response_raises(self, item, text):
        backend = GeminiAdvisoryBackend(api_key='secret')

        with mock.patch('opname.adapters.gemini.genai') as genai:
            genai.GenerativeModel.return_value.generate_content.return_value.text = text
            with pytest.raises(ValueError):
                backend.analyze(self._snapshot())

    def test_service_degrades_on_client_error(self, item, settings):
        settings.OPNAME = {
            'ADVISORY_BACKEND': 'opname.adapters.gemini.GeminiAdvisoryBackend',
            'GEMINI_API_KEY': 'secret',
        }

        with mock.patch('opname.adapters.gemini.genai') as genai:
            genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")
            result = stock.analyze_inventory()

        assert result.available is False
