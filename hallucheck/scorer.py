"""
Score Aggregator

Combines analyzer outcomes into the single result shape every backend
returns.

Local score:
  Sum of analyzer scores (failed analyzers contribute 0).
  Clamp to 0..100.
  Short content (< 100 chars):                   +15, re-clamped
  Long content (> 1000 chars) with > 3 factors:  +10, re-clamped
  Confidence is fixed at 85.

Classifier score:
  score      = round(machine_prob * 100)
  confidence = round((machine_prob + human_prob) * 100)

Both paths take their narrative factors and recommendations from the
same band table, keyed off the final score.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from hallucheck.analyzers import AnalyzerFailure, AnalyzerOutcome
from hallucheck.errors import AggregationFailure

LOCAL_CONFIDENCE = 85
LOCAL_SUMMARY = "Advanced local analysis completed using multiple detection methods"
CLASSIFIER_SUMMARY = "AI detection analysis completed using Hugging Face model"
DEFAULT_FACTOR = "Content analysis completed"

SHORT_CONTENT_CHARS = 100
SHORT_CONTENT_BOOST = 15
LONG_CONTENT_CHARS = 1000
LONG_CONTENT_BOOST = 10
LONG_CONTENT_MIN_FACTORS = 3


# ============================================================
# BANDS
# ============================================================

@dataclass(frozen=True)
class Band:
    """A score range and its fixed narrative."""
    key: str
    floor: Optional[int]   # Exclusive lower bound; None catches everything left
    factors: tuple[str, ...]
    recommendations: tuple[str, ...]

    def contains(self, score: int) -> bool:
        return self.floor is None or score > self.floor


# Ordered highest first; the first band that contains a score wins.
BANDS: tuple[Band, ...] = (
    Band(
        key="high",
        floor=60,
        factors=(
            "HIGH LIKELIHOOD of AI-generated content",
            "Multiple strong AI content markers detected",
            "Content shows typical AI writing patterns",
        ),
        recommendations=(
            "⚠️ HIGH LIKELIHOOD of AI-generated content",
            "Strongly recommend manual review for accuracy",
            "Cross-reference all factual claims with reliable sources",
            "Consider rewriting in more natural language",
        ),
    ),
    Band(
        key="moderate_high",
        floor=40,
        factors=(
            "MODERATE to HIGH likelihood of AI-generated content",
            "Several AI content indicators present",
            "Content shows some AI writing characteristics",
        ),
        recommendations=(
            "⚠️ MODERATE to HIGH likelihood of AI-generated content",
            "Review for factual accuracy and natural flow",
            "Verify key claims and statements",
            "Consider human editing for authenticity",
        ),
    ),
    Band(
        key="moderate",
        floor=20,
        factors=(
            "MODERATE AI content indicators",
            "Some unusual patterns identified",
            "Content may be partially AI-generated",
        ),
        recommendations=(
            "⚠️ MODERATE AI content indicators",
            "Review for accuracy and natural language",
            "Some sections may need human revision",
        ),
    ),
    Band(
        key="minor",
        floor=10,
        factors=(
            "Minor AI content markers detected",
            "Some patterns suggest AI involvement",
        ),
        recommendations=(
            "Minor AI content markers detected",
            "Review for accuracy",
        ),
    ),
    Band(
        key="human",
        floor=None,
        factors=(
            "Content appears to be human-generated",
            "Minimal AI content markers detected",
        ),
        recommendations=(
            "Content appears to be human-generated",
            "Content looks good!",
        ),
    ),
)


def band_for(score: int) -> Band:
    """Return the band a final score falls in."""
    for band in BANDS:
        if band.contains(score):
            return band
    return BANDS[-1]


def factors_for_score(score: int) -> list[str]:
    return list(band_for(score).factors)


def recommendations_for_score(score: int) -> list[str]:
    return list(band_for(score).recommendations)


# ============================================================
# RESULT
# ============================================================

@dataclass(frozen=True)
class AggregateResult:
    """The one result shape every backend produces."""
    score: int
    confidence: int
    factors: tuple[str, ...]
    recommendations: tuple[str, ...]
    summary: str
    band: str
    source: str = "local"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["factors"] = list(self.factors)
        data["recommendations"] = list(self.recommendations)
        return data


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def _percent(probability: float) -> int:
    """Probability to a whole percentage, halves rounded up."""
    return int(probability * 100 + 0.5)


# ============================================================
# AGGREGATION
# ============================================================

def aggregate(text: str, outcomes: Sequence[AnalyzerOutcome]) -> AggregateResult:
    """
    Combine analyzer outcomes for `text` into an AggregateResult.

    Outcomes are consumed in order; factors keep that order. A failed
    analyzer contributes zero and a "<label> unavailable" factor.

    Raises:
        AggregationFailure if there are no outcomes or every one failed.
    """
    if not outcomes or all(isinstance(o, AnalyzerFailure) for o in outcomes):
        raise AggregationFailure()

    score = 0
    factors: list[str] = []
    for outcome in outcomes:
        if isinstance(outcome, AnalyzerFailure):
            factors.append(f"{outcome.analyzer} unavailable")
            continue
        score += outcome.score
        factors.extend(outcome.factors)

    score = _clamp(score)

    if len(text) < SHORT_CONTENT_CHARS:
        score = _clamp(score + SHORT_CONTENT_BOOST)
        factors.append("Very short content detected (potential AI-generated)")
    elif len(text) > LONG_CONTENT_CHARS and len(factors) > LONG_CONTENT_MIN_FACTORS:
        score = _clamp(score + LONG_CONTENT_BOOST)
        factors.append("Long content with multiple AI patterns detected")

    if not factors:
        factors.append(DEFAULT_FACTOR)

    band = band_for(score)
    return AggregateResult(
        score=score,
        confidence=LOCAL_CONFIDENCE,
        factors=tuple(factors) + band.factors,
        recommendations=band.recommendations,
        summary=LOCAL_SUMMARY,
        band=band.key,
        source="local",
    )


def from_classifier(machine_prob: float, human_prob: float) -> AggregateResult:
    """Normalize a remote classifier's label probabilities."""
    score = _clamp(_percent(machine_prob))
    band = band_for(score)
    return AggregateResult(
        score=score,
        confidence=_clamp(_percent(machine_prob + human_prob)),
        factors=band.factors,
        recommendations=band.recommendations,
        summary=CLASSIFIER_SUMMARY,
        band=band.key,
        source="remote",
    )
