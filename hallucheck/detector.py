"""
Detector — Scoring Orchestrator

Entry points for scoring text:
  - score_local:        local heuristics only. Synchronous. Deterministic.
  - score_text:         configured backend chain (remote classifier first,
                        local heuristics as the last resort).
  - score_with_timeout: score_text raced against a deadline.

The result is always delivered in one shot; there is no partial or
streamed output.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from hallucheck.backends import ScoringBackend
from hallucheck.backends.factory import build_backend
from hallucheck.backends.local import LocalHeuristicBackend
from hallucheck.config import settings
from hallucheck.errors import InvalidInput, ScoringTimeout
from hallucheck.logging import elapsed_ms, get_logger
from hallucheck.scorer import AggregateResult

logger = get_logger("detector")

# Shown alongside any surfaced error.
ERROR_SUGGESTIONS: tuple[str, ...] = (
    "Check your internet connection",
    "Try with shorter content",
    "Ensure content is in English",
    "Try again in a few moments",
)

_local = LocalHeuristicBackend()

# Lazy default backend
_backend: Optional[ScoringBackend] = None


def get_default_backend() -> ScoringBackend:
    global _backend
    if _backend is None:
        _backend = build_backend(settings)
    return _backend


def score_local(text: str) -> AggregateResult:
    """Local-only score. No I/O."""
    return _local.score_sync(text)


async def score_text(
    text: str,
    backend: Optional[ScoringBackend] = None,
) -> AggregateResult:
    """
    Score text with the given backend (default: remote, then local).

    Raises:
        InvalidInput if the text is empty after trimming.
        AggregationFailure if local analysis, the last resort, fails.
    """
    if not text or not text.strip():
        raise InvalidInput("Please enter some content to analyze.")

    backend = backend or get_default_backend()
    start = time.monotonic()
    result = await backend.score(text)
    logger.info(
        f"Score complete: score={result.score} source={result.source}",
        extra={
            "score": result.score,
            "confidence": result.confidence,
            "source": result.source,
            "band": result.band,
            "factors_count": len(result.factors),
            "duration_ms": elapsed_ms(start),
        },
    )
    return result


async def score_with_timeout(
    text: str,
    timeout: Optional[float] = None,
    backend: Optional[ScoringBackend] = None,
) -> AggregateResult:
    """
    score_text, failing with ScoringTimeout once `timeout` seconds pass.

    The default deadline is settings.SCORE_TIMEOUT.
    """
    timeout = settings.SCORE_TIMEOUT if timeout is None else timeout
    try:
        return await asyncio.wait_for(score_text(text, backend=backend), timeout)
    except asyncio.TimeoutError as e:
        logger.warning(
            "Scoring timed out after %ss", timeout,
            extra={"error_type": "timeout"},
        )
        raise ScoringTimeout() from e
