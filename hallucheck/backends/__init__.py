"""
Scoring Backend — Abstract Interface

Every way of producing a score goes through this interface. The
fallback chain composes backends so the remote classifier is tried
first and local heuristics answer when it cannot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hallucheck.errors import BackendUnavailable
from hallucheck.scorer import AggregateResult


class ScoringBackend(ABC):
    """Abstract base for scoring backends."""

    name: str = ""

    @abstractmethod
    async def score(self, text: str) -> AggregateResult:
        """Score text in one shot. Raise BackendUnavailable if unable to."""
        ...


__all__ = ["ScoringBackend", "BackendUnavailable"]
