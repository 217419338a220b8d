"""
Noop Advisory Backend — Stub adapter for development and testing.

Usage in settings.py:
    OPNAME = {
        "ADVISORY_BACKEND": "opname.adapters.noop.NoopAdvisoryBackend",
    }

This is the default backend: it performs no analysis and always answers
with the "unavailable" payload.
"""

from __future__ import annotations

from opname.protocols.advisory import AdvisoryResult, AdvisorySnapshot


class NoopAdvisoryBackend:
    """
    No-operation advisory backend.

    Implements the ``AdvisoryBackend`` protocol without any external
    dependencies, making it suitable for:

    - Local development without an API key
    - Tests that don't exercise the advisory feature
    """

    def analyze(self, snapshot: AdvisorySnapshot) -> AdvisoryResult:
        """Always returns AdvisoryResult.unavailable()."""
        return AdvisoryResult.unavailable()
