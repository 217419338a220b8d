"""
Advisory Protocol — Interface for inventory analysis services.

Opname defines this protocol; an AI or rules-based service implements it.
The backend only sees a read-only snapshot and returns advisory text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from django.utils import timezone


UNAVAILABLE_SUMMARY = (
    "Analisis inventaris tidak tersedia saat ini. "
    "Silakan coba beberapa saat lagi."
)


@dataclass(frozen=True)
class AdvisorySnapshot:
    """Read-only view of the inventory handed to a backend."""

    items: list[dict[str, Any]]
    transactions: list[dict[str, Any]]
    taken_at: datetime = field(default_factory=timezone.now)


@dataclass(frozen=True)
class AdvisoryResult:
    """Advisory text returned by a backend."""

    summary: str
    recommendations: list[str] = field(default_factory=list)
    anomalies: list[str] = field(default_factory=list)
    available: bool = True
    generated_at: datetime = field(default_factory=timezone.now)

    @classmethod
    def unavailable(cls, summary: str = UNAVAILABLE_SUMMARY,
                    recommendations: list[str] | None = None) -> AdvisoryResult:
        """Fixed payload used whenever analysis cannot be produced."""
        return cls(
            summary=summary,
            recommendations=list(recommendations or []),
            anomalies=[],
            available=False,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            'summary': self.summary,
            'recommendations': list(self.recommendations),
            'anomalies': list(self.anomalies),
            'available': self.available,
            'generated_at': self.generated_at.isoformat(),
        }


@runtime_checkable
class AdvisoryBackend(Protocol):
    """
    Protocol for inventory advisory services.

    Implementations may raise on network, auth or parse problems; the
    caller (services.advisory) turns any failure into
    AdvisoryResult.unavailable().
    """

    def analyze(self, snapshot: AdvisorySnapshot) -> AdvisoryResult:
        """
        Analyze the snapshot.

        Args:
            snapshot: Items and recent transactions

        Returns:
            AdvisoryResult with summary, recommendations and anomalies
        """
        ...
