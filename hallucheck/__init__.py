"""
Hallucheck — Heuristic Hallucination Likelihood Scorer

Scores a block of text 0-100 for how likely it is to be AI-generated,
using lexical, statistical, semantic and readability heuristics, with
an optional hosted classifier tried first.

Public API:
  - score_text:         async; remote classifier first, local fallback
  - score_with_timeout: async; score_text raced against a deadline
  - score_local:        sync; local heuristics only
  - aggregate:          combine analyzer outcomes into a result
  - ScoringBackend:     abstract backend for provider swapping

Usage:
    from hallucheck import score_local, score_with_timeout
    result = score_local("Furthermore, it is important to note ...")
    result.score, result.factors, result.recommendations
"""

__version__ = "1.0.0"

from hallucheck.analyzers import (
    AnalyzerResult,
    AnalyzerFailure,
    LanguagePatternAnalyzer,
    StatisticalAnalyzer,
    SemanticAnalyzer,
    ReadabilityAnalyzer,
    DEFAULT_ANALYZERS,
    run_analyzers,
)
from hallucheck.scorer import AggregateResult, aggregate, from_classifier, band_for
from hallucheck.backends import ScoringBackend
from hallucheck.backends.factory import FallbackChain, build_backend, get_backend
from hallucheck.backends.local import LocalHeuristicBackend
from hallucheck.backends.remote import RemoteClassifierBackend
from hallucheck.detector import score_local, score_text, score_with_timeout
from hallucheck.errors import (
    HallucheckError,
    InvalidInput,
    AggregationFailure,
    ScoringTimeout,
    BackendUnavailable,
)

__all__ = [
    "AnalyzerResult",
    "AnalyzerFailure",
    "LanguagePatternAnalyzer",
    "StatisticalAnalyzer",
    "SemanticAnalyzer",
    "ReadabilityAnalyzer",
    "DEFAULT_ANALYZERS",
    "run_analyzers",
    "AggregateResult",
    "aggregate",
    "from_classifier",
    "band_for",
    "ScoringBackend",
    "FallbackChain",
    "build_backend",
    "get_backend",
    "LocalHeuristicBackend",
    "RemoteClassifierBackend",
    "score_local",
    "score_text",
    "score_with_timeout",
    "HallucheckError",
    "InvalidInput",
    "AggregationFailure",
    "ScoringTimeout",
    "BackendUnavailable",
]
