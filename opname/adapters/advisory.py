"""
Advisory backend loader.

Loads the configured AdvisoryBackend from settings.

Usage:
    from opname.adapters import get_advisory_backend

    backend = get_advisory_backend()
    result = backend.analyze(snapshot)

Settings:
    OPNAME = {
        "ADVISORY_BACKEND": "opname.adapters.gemini.GeminiAdvisoryBackend",
    }

If the backend can't be imported, get_advisory_backend() raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from opname.conf import opname_settings
from opname.protocols.advisory import AdvisoryBackend

logger = logging.getLogger(__name__)


# Cached backend instance
_lock = threading.Lock()
_advisory_backend: AdvisoryBackend | None = None


def get_advisory_backend() -> AdvisoryBackend:
    """
    Return the configured advisory backend.

    Raises:
        ImproperlyConfigured: If ADVISORY_BACKEND is empty or import fails
    """
    global _advisory_backend

    if _advisory_backend is None:
        with _lock:
            if _advisory_backend is None:  # double-checked
                backend_path = opname_settings.ADVISORY_BACKEND

                if not backend_path:
                    raise ImproperlyConfigured(
                        "OPNAME['ADVISORY_BACKEND'] must be configured. "
                        "Example: 'opname.adapters.noop.NoopAdvisoryBackend'"
                    )

                try:
                    backend_class = import_string(backend_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import advisory backend '{backend_path}': {e}"
                    ) from e

                _advisory_backend = backend_class()
                logger.debug("Loaded advisory backend: %s", backend_path)

    return _advisory_backend


def reset_advisory_backend() -> None:
    """Reset the cached backend. Useful for testing."""
    global _advisory_backend
    _advisory_backend = None
