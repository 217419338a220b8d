"""
Opname configuration.

Usage in settings.py:
    OPNAME = {
        "NEGATIVE_STOCK_POLICY": "reject",
        "ADVISORY_BACKEND": "opname.adapters.gemini.GeminiAdvisoryBackend",
        "GEMINI_API_KEY": env("GEMINI_API_KEY"),
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


NEGATIVE_STOCK_ALLOW = "allow"
NEGATIVE_STOCK_REJECT = "reject"
NEGATIVE_STOCK_POLICIES = (NEGATIVE_STOCK_ALLOW, NEGATIVE_STOCK_REJECT)


@dataclass
class OpnameSettings:
    """Opname configuration settings."""

    # What an OUT transaction may do to stock: "allow" going below zero, or "reject" it
    NEGATIVE_STOCK_POLICY: str = NEGATIVE_STOCK_ALLOW

    # Prefix of the date-coded session label (SO-20240131)
    SESSION_LABEL_PREFIX: str = "SO-"

    # Advisory backend (dotted path)
    ADVISORY_BACKEND: str = "opname.adapters.noop.NoopAdvisoryBackend"

    # Snapshot window sent to the advisory backend
    ADVISORY_LOOKBACK_DAYS: int = 30
    ADVISORY_MAX_TRANSACTIONS: int = 50

    # Gemini adapter
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"


def get_opname_settings() -> OpnameSettings:
    """
    Load settings from Django settings.

    Raises:
        ImproperlyConfigured: If NEGATIVE_STOCK_POLICY is not a known policy
    """
    user_settings: dict[str, Any] = getattr(settings, "OPNAME", {})
    loaded = OpnameSettings(**{
        k: v for k, v in user_settings.items()
        if k in OpnameSettings.__dataclass_fields__
    })

    if loaded.NEGATIVE_STOCK_POLICY not in NEGATIVE_STOCK_POLICIES:
        raise ImproperlyConfigured(
            f"OPNAME['NEGATIVE_STOCK_POLICY'] must be one of {NEGATIVE_STOCK_POLICIES}, "
            f"got {loaded.NEGATIVE_STOCK_POLICY!r}"
        )

    return loaded


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_opname_settings(), name)


opname_settings = _LazySettings()
