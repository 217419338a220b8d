"""
Opname Adapters.

Implementations of protocols for external systems.
"""

from opname.adapters.advisory import get_advisory_backend, reset_advisory_backend
from opname.adapters.noop import NoopAdvisoryBackend

__all__ = [
    "NoopAdvisoryBackend",
    "get_advisory_backend",
    "reset_advisory_backend",
]
