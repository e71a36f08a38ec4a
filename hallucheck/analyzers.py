"""
Analyzers — Heuristic Text Inspection

Four independent analyzers, each a pure function of the input text:

  1. LanguagePatternAnalyzer  — canned connectives, hedging, formal
                                phrasing, repeated 3-word windows
  2. StatisticalAnalyzer      — sentence/paragraph length variance,
                                word repetition, punctuation runs
  3. SemanticAnalyzer         — numeric claims, jargon, emotional and
                                descriptive vocabulary
  4. ReadabilityAnalyzer      — syllables, sentence length, vocabulary
                                diversity, long/comma-heavy sentences

Each returns an AnalyzerResult. Scores are non-negative and unbounded
here; the aggregator clamps the total. Thresholds and caps are fixed
constants.

Analyzers hold no state and are safe to share between requests.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Sequence, Union

from hallucheck.lexicon import (
    AI_CONNECTIVE_PHRASES,
    DESCRIPTIVE_WORDS,
    EMOTIONAL_WORDS,
    FORMAL_PHRASES,
    HEDGING_WORDS,
    count_matches,
)
from hallucheck.logging import get_logger

logger = get_logger("analyzers")


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class AnalyzerResult:
    """Score and triggered factors from a single analyzer."""
    score: int
    factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalyzerFailure:
    """Stands in for an analyzer that raised instead of returning."""
    analyzer: str   # Display label, e.g. "Statistical analysis"
    error: str


AnalyzerOutcome = Union[AnalyzerResult, AnalyzerFailure]


# ============================================================
# TOKENIZATION
# ============================================================

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PUNCTUATION_RUN = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_NON_LETTERS = re.compile(r"[^a-zA-Z]")
_VOWEL_GROUP = re.compile(r"[aeiouy]+", re.IGNORECASE)

_FACTUAL_CLAIM = re.compile(
    r"\d{4}"            # years and other 4-digit figures
    r"|\d{1,2}/\d{1,2}"  # 12/05
    r"|\d{1,2}-\d{1,2}"  # 12-05
    r"|\d+%"
    r"|\d+\.\d+"
)
_TECHNICAL_TERM = re.compile(r"\b[A-Z]{2,}\b|\b[a-z]+[A-Z][a-z]+\b")


def tokenize_words(text: str) -> list[str]:
    """Lowercased whitespace-delimited tokens. Punctuation stays attached."""
    return text.lower().split()


def split_sentences(text: str) -> list[str]:
    """Fragments between runs of . ! ? with blank fragments dropped."""
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def population_variance(values: Sequence[int]) -> float:
    """Population variance. An empty sequence has variance 0."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def estimate_syllables(words: Sequence[str]) -> float:
    """
    Average syllables per word.

    Non-letters are stripped first. Words of three letters or fewer
    count as one syllable; longer words count their vowel groups,
    with a minimum of one.
    """
    if not words:
        return 0.0
    total = 0
    for word in words:
        clean = _NON_LETTERS.sub("", word)
        if len(clean) <= 3:
            total += 1
        else:
            total += max(1, len(_VOWEL_GROUP.findall(clean)))
    return total / len(words)


# ============================================================
# ANALYZERS
# ============================================================

class Analyzer(ABC):
    """Base for all analyzers."""

    name: str = ""
    label: str = ""

    @abstractmethod
    def analyze(self, text: str) -> AnalyzerResult:
        ...


class LanguagePatternAnalyzer(Analyzer):
    """Canned phrasing and local repetition."""

    name = "language_pattern"
    label = "Language pattern analysis"

    def analyze(self, text: str) -> AnalyzerResult:
        text_lower = text.lower()
        words = text_lower.split()
        score = 0
        factors: list[str] = []

        connective_count = count_matches(text_lower, AI_CONNECTIVE_PHRASES)
        if connective_count > 0:
            score += min(40, connective_count * 8)
            factors.append(
                f"AI-generated language patterns detected ({connective_count} instances)"
            )

        repeated = self.repeated_trigrams(words)
        if repeated > 1:
            score += min(35, repeated * 5)
            factors.append(f"Repetitive language patterns found ({repeated} instances)")

        hedging_count = count_matches(text_lower, HEDGING_WORDS)
        if hedging_count > 1:
            score += min(25, hedging_count * 4)
            factors.append(f"Hedging language detected ({hedging_count} instances)")

        formal_count = count_matches(text_lower, FORMAL_PHRASES)
        if formal_count > 0:
            score += min(20, formal_count * 6)
            factors.append(
                f"Formal academic language patterns detected ({formal_count} instances)"
            )

        return AnalyzerResult(score=score, factors=tuple(factors))

    @staticmethod
    def repeated_trigrams(words: Sequence[str]) -> int:
        """Number of distinct 3-word windows that occur more than once."""
        windows = Counter(zip(words, words[1:], words[2:]))
        return sum(1 for count in windows.values() if count > 1)


class StatisticalAnalyzer(Analyzer):
    """Length uniformity, word repetition and punctuation runs."""

    name = "statistical"
    label = "Statistical analysis"

    def analyze(self, text: str) -> AnalyzerResult:
        score = 0
        factors: list[str] = []

        sentence_lengths = [len(s.split()) for s in split_sentences(text)]
        if population_variance(sentence_lengths) < 15 and len(sentence_lengths) > 3:
            score += 25
            factors.append("Unusually consistent sentence lengths detected")

        frequencies = Counter(w for w in tokenize_words(text) if len(w) > 2)
        high_freq_count = sum(1 for count in frequencies.values() if count > 2)
        if high_freq_count > 2:
            score += 20
            factors.append(
                f"High word repetition detected ({high_freq_count} frequently used words)"
            )

        runs = _PUNCTUATION_RUN.findall(text)
        if sum(1 for run in runs if len(run) > 1) > 1:
            score += 15
            factors.append("Unusual punctuation patterns detected")

        # Two or fewer paragraphs: no paragraph factor either way.
        paragraphs = _PARAGRAPH_SPLIT.split(text)
        if len(paragraphs) > 2:
            paragraph_lengths = [len(p.split()) for p in paragraphs]
            if population_variance(paragraph_lengths) < 20:
                score += 18
                factors.append("Unusually consistent paragraph lengths detected")

        return AnalyzerResult(score=score, factors=tuple(factors))


class SemanticAnalyzer(Analyzer):
    """Claims, jargon and loaded vocabulary."""

    name = "semantic"
    label = "Semantic analysis"

    def analyze(self, text: str) -> AnalyzerResult:
        text_lower = text.lower()
        score = 0
        factors: list[str] = []

        claim_count = len(_FACTUAL_CLAIM.findall(text))
        if claim_count > 2:
            score += min(25, claim_count * 4)
            factors.append(f"Multiple factual claims detected ({claim_count} instances)")

        if len(_TECHNICAL_TERM.findall(text)) > 4:
            score += 18
            factors.append("High technical jargon usage detected")

        emotional_count = count_matches(text_lower, EMOTIONAL_WORDS)
        if emotional_count > 1:
            score += min(20, emotional_count * 5)
            factors.append("High emotional language usage detected")

        descriptive_count = count_matches(text_lower, DESCRIPTIVE_WORDS)
        if descriptive_count > 0:
            score += min(15, descriptive_count * 5)
            factors.append("Overly descriptive language detected")

        return AnalyzerResult(score=score, factors=tuple(factors))


class ReadabilityAnalyzer(Analyzer):
    """Sentence complexity and vocabulary diversity."""

    name = "readability"
    label = "Readability analysis"

    def analyze(self, text: str) -> AnalyzerResult:
        words = tokenize_words(text)
        sentences = split_sentences(text)
        score = 0
        factors: list[str] = []

        # No sentence fragments (e.g. "...") means no words-per-sentence signal.
        avg_words_per_sentence = len(words) / len(sentences) if sentences else 0.0
        avg_syllables_per_word = estimate_syllables(words)
        if avg_words_per_sentence > 20 or avg_syllables_per_word > 1.6:
            score += 20
            factors.append("Complex sentence structure detected")

        if words:
            diversity = len({w for w in words if len(w) > 2}) / len(words)
            if diversity < 0.4 and len(words) > 30:
                score += 18
                factors.append("Low vocabulary diversity detected")

        complex_count = sum(1 for s in sentences if self.is_complex(s))
        if complex_count > 1:
            score += min(15, complex_count * 5)
            factors.append(
                f"Complex sentence structures detected ({complex_count} instances)"
            )

        return AnalyzerResult(score=score, factors=tuple(factors))

    @staticmethod
    def is_complex(sentence: str) -> bool:
        """Over 25 words, or more than three comma-separated clauses."""
        return len(sentence.split()) > 25 or len(sentence.split(",")) > 3


# ============================================================
# RUNNER
# ============================================================

DEFAULT_ANALYZERS: tuple[Analyzer, ...] = (
    LanguagePatternAnalyzer(),
    StatisticalAnalyzer(),
    SemanticAnalyzer(),
    ReadabilityAnalyzer(),
)


def run_analyzers(
    text: str,
    analyzers: Sequence[Analyzer] = DEFAULT_ANALYZERS,
) -> list[AnalyzerOutcome]:
    """
    Run every analyzer over the same text, in order.

    An analyzer that raises is recorded as an AnalyzerFailure so the
    others still contribute.
    """
    outcomes: list[AnalyzerOutcome] = []
    for analyzer in analyzers:
        try:
            outcomes.append(analyzer.analyze(text))
        except Exception as e:
            logger.warning(
                "%s failed: %s", analyzer.label, e,
                extra={"analyzer": analyzer.name, "error": str(e)},
            )
            outcomes.append(AnalyzerFailure(analyzer=analyzer.label, error=str(e)))
    return outcomes
