"""
Local Heuristic Backend — the last resort.

Runs the four analyzers and aggregates them. Deterministic, no I/O.
Unlike the remote backend, failures here are surfaced: there is
nothing left to fall back to.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from hallucheck.analyzers import DEFAULT_ANALYZERS, Analyzer, run_analyzers
from hallucheck.backends import ScoringBackend
from hallucheck.errors import AggregationFailure
from hallucheck.logging import get_logger
from hallucheck.scorer import AggregateResult, aggregate

logger = get_logger("backends.local")


class LocalHeuristicBackend(ScoringBackend):
    """Heuristic analyzers + aggregator."""

    name = "local"

    def __init__(self, analyzers: Sequence[Analyzer] = DEFAULT_ANALYZERS):
        self._analyzers = tuple(analyzers)

    def score_sync(self, text: str) -> AggregateResult:
        try:
            return aggregate(text, run_analyzers(text, self._analyzers))
        except AggregationFailure:
            raise
        except Exception as e:
            logger.error(
                "Local analysis failed",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            raise AggregationFailure() from e

    async def score(self, text: str) -> AggregateResult:
        # Off the event loop so a deadline can fire mid-analysis.
        return await asyncio.to_thread(self.score_sync, text)
