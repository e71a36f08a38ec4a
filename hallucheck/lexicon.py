"""
Pattern Lexicon — Fixed Reference Vocabulary

Phrase and word lists shared by the analyzers. Every entry is lowercase
and is matched by substring containment against lowercased text, so
"appears" also hits "disappears". An entry counts once per text no
matter how many times it occurs.

These tuples are module-level constants. Nothing in the package
mutates them; callers only read.
"""

from __future__ import annotations

from typing import Iterable


# ============================================================
# LANGUAGE PATTERNS
# ============================================================

AI_CONNECTIVE_PHRASES: tuple[str, ...] = (
    "furthermore", "moreover", "additionally", "in conclusion", "to summarize",
    "it is important to note", "it should be mentioned", "as previously stated",
    "in terms of", "with regard to", "in the context of", "it is worth noting",
    "on the other hand", "conversely", "nevertheless", "however",
    "in light of", "considering", "given that", "as such", "therefore",
    "thus", "hence", "consequently", "accordingly", "subsequently",
    "meanwhile", "besides", "likewise",
    "similarly", "in addition", "not only", "but also", "as well as",
    "in order to", "so as to", "with the aim of", "for the purpose of",
    "it can be argued", "it is evident", "it is clear", "it is obvious",
    "as a result", "due to", "because of", "owing to", "thanks to",
)

HEDGING_WORDS: tuple[str, ...] = (
    "might", "could", "possibly", "perhaps", "maybe", "seems", "appears",
    "likely", "probably", "potentially", "arguably", "presumably",
    "supposedly", "allegedly",
)

FORMAL_PHRASES: tuple[str, ...] = (
    "in accordance with", "pursuant to", "with respect to", "in relation to",
    "in reference to", "in regard to", "as per", "pertaining to",
    "concerning", "regarding",
)


# ============================================================
# SEMANTIC PATTERNS
# ============================================================

EMOTIONAL_WORDS: tuple[str, ...] = (
    "amazing", "incredible", "fantastic", "terrible", "horrible",
    "wonderful", "excellent", "outstanding", "remarkable", "extraordinary",
    "phenomenal", "spectacular",
)

DESCRIPTIVE_WORDS: tuple[str, ...] = (
    "comprehensive", "thorough", "detailed", "extensive", "elaborate",
    "systematic", "methodical", "rigorous", "meticulous",
)


LEXICONS: dict[str, tuple[str, ...]] = {
    "ai_connective": AI_CONNECTIVE_PHRASES,
    "hedging": HEDGING_WORDS,
    "formal": FORMAL_PHRASES,
    "emotional": EMOTIONAL_WORDS,
    "descriptive": DESCRIPTIVE_WORDS,
}


def count_matches(text_lower: str, lexicon: Iterable[str]) -> int:
    """Number of lexicon entries contained in already-lowercased text."""
    return sum(1 for entry in lexicon if entry in text_lower)
