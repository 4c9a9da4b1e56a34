"""
Book Matching Module

Scores free-text book references against library entries and turns the
score into a confidence tier and a link decision.
"""

from shelflink.matching.normalizer import TextNormalizer
from shelflink.matching.similarity import StringSimilarity
from shelflink.matching.matcher import (
    AUTHOR_WEIGHT,
    HIGH_CONFIDENCE,
    LAST_NAME_CREDIT,
    LOW_CONFIDENCE,
    MEDIUM_CONFIDENCE,
    NEUTRAL_AUTHOR_SCORE,
    NUMBER_MISMATCH_CAP,
    SERIES_STRIP_CREDIT,
    TITLE_WEIGHT,
    BookReference,
    CandidateBook,
    LinkDecision,
    MatchConfidence,
    MatchResult,
    ScoringComponents,
    author_similarity,
    confidence_of,
    decide,
    is_auto_linkable,
    is_suggestion_worthy,
    match,
    rank,
    score,
    title_similarity,
)

__all__ = [
    # Normalization
    "TextNormalizer",
    "StringSimilarity",
    # Constants
    "TITLE_WEIGHT",
    "AUTHOR_WEIGHT",
    "NEUTRAL_AUTHOR_SCORE",
    "NUMBER_MISMATCH_CAP",
    "LAST_NAME_CREDIT",
    "SERIES_STRIP_CREDIT",
    "HIGH_CONFIDENCE",
    "MEDIUM_CONFIDENCE",
    "LOW_CONFIDENCE",
    # Types
    "BookReference",
    "CandidateBook",
    "LinkDecision",
    "MatchConfidence",
    "MatchResult",
    "ScoringComponents",
    # Operations
    "score",
    "match",
    "rank",
    "confidence_of",
    "decide",
    "is_auto_linkable",
    "is_suggestion_worthy",
    "title_similarity",
    "author_similarity",
]
