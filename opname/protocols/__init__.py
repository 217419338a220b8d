"""
Opname Protocols.

Defines interfaces for external system integration.
"""

from opname.protocols.advisory import (
    AdvisoryBackend,
    AdvisoryResult,
    AdvisorySnapshot,
)

__all__ = [
    "AdvisoryBackend",
    "AdvisoryResult",
    "AdvisorySnapshot",
]
