"""
Error taxonomy.

BackendUnavailable never reaches callers of score_text: the fallback
chain recovers from it. The rest are surfaced and carry a message that
is safe to show to an end user.
"""

from __future__ import annotations


class HallucheckError(Exception):
    """Base for errors surfaced to callers."""

    error_type = "error"


class InvalidInput(HallucheckError, ValueError):
    """Text is empty after trimming, or fails caller-level validation."""

    error_type = "invalid_input"


class AggregationFailure(HallucheckError):
    """Local analysis could not produce a score."""

    error_type = "analysis_failed"

    def __init__(self, message: str = "Analysis failed. Please try again with different content."):
        super().__init__(message)


class ScoringTimeout(HallucheckError):
    """The caller's deadline passed before a result was ready."""

    error_type = "timeout"

    def __init__(self, message: str = "Analysis timed out. Please try again."):
        super().__init__(message)


class BackendUnavailable(Exception):
    """A scoring backend is not configured, unreachable, or returned junk."""
