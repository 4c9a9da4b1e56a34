"""
Book Matcher

Fuzzy matching of free-text book references against a user's library:
- Title similarity (edit distance + word overlap)
- Author agreement as a bounded bonus
- Confidence tiers with fixed cut points
- Link decisions derived from the tier

Scoring contract:
    score = TITLE_WEIGHT * title_similarity + AUTHOR_WEIGHT * author_component

    title_similarity  = max(edit, word overlap) on normalized titles, or
                        SERIES_STRIP_CREDIT * the same on titles without a
                        trailing "(Series, #n)" part, whichever is higher;
                        capped at NUMBER_MISMATCH_CAP when the titles carry
                        different numbers ("Harry Potter 1" vs "... 2")
    author_component  = max(edit, token-sorted edit,
                            LAST_NAME_CREDIT * last-name edit)
                        when both authors are present, 1 when neither is,
                        else NEUTRAL_AUTHOR_SCORE

    An empty title on either side scores 0. Identical normalized title and
    author score exactly 1. Disjoint titles score at most AUTHOR_WEIGHT.

Confidence cut points are inclusive lower bounds:
    score >= 0.92 -> HIGH   -> AUTO_LINK
    score >= 0.75 -> MEDIUM -> SUGGEST
    score >= 0.50 -> LOW    -> IGNORE
    otherwise     -> NONE   -> IGNORE

Every function here is pure and never raises on malformed input.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from shelflink.matching.normalizer import TextNormalizer
from shelflink.matching.similarity import StringSimilarity


# Scoring weights
TITLE_WEIGHT = 0.75
AUTHOR_WEIGHT = 0.25

# Author component when exactly one side has an author
NEUTRAL_AUTHOR_SCORE = 0.5

# Title similarity ceiling for titles with different numbers; keeps
# another volume of a series out of HIGH
NUMBER_MISMATCH_CAP = 0.85

# Partial credit for agreeing on the last name only
LAST_NAME_CREDIT = 0.9

# Credit for titles that only agree once the series suffix is removed
SERIES_STRIP_CREDIT = 0.95

# Confidence thresholds
HIGH_CONFIDENCE = 0.92
MEDIUM_CONFIDENCE = 0.75
LOW_CONFIDENCE = 0.5


class MatchConfidence(str, Enum):
    """Confidence tier of a match, ordered NONE < LOW < MEDIUM < HIGH."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def level(self) -> int:
        return _TIER_ORDER.index(self)

    # str ordering would compare the values alphabetically
    def __lt__(self, other):
        if not isinstance(other, MatchConfidence):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other):
        if not isinstance(other, MatchConfidence):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other):
        if not isinstance(other, MatchConfidence):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other):
        if not isinstance(other, MatchConfidence):
            return NotImplemented
        return self.level >= other.level


_TIER_ORDER = (
    MatchConfidence.NONE,
    MatchConfidence.LOW,
    MatchConfidence.MEDIUM,
    MatchConfidence.HIGH,
)


class LinkDecision(str, Enum):
    """What the caller should do with a match."""
    AUTO_LINK = "auto_link"
    SUGGEST = "suggest"
    IGNORE = "ignore"


@dataclass(frozen=True)
class BookReference:
    """Free-text title/author pair to be matched."""

    title: Optional[str]
    author: Optional[str] = None


@dataclass(frozen=True)
class CandidateBook:
    """Library entry a reference may be matched against."""

    book_id: str
    title: Optional[str]
    author: Optional[str] = None


@dataclass(frozen=True)
class ScoringComponents:
    """Breakdown of scoring components for transparency."""

    title_similarity: float = 0.0
    author_similarity: float = 0.0
    author_compared: bool = False

    def to_dict(self) -> dict:
        return {
            "title_similarity": self.title_similarity,
            "author_similarity": self.author_similarity,
            "author_compared": self.author_compared,
        }


@dataclass(frozen=True)
class MatchResult:
    """Result of scoring one reference against one candidate."""

    score: float
    confidence: MatchConfidence
    decision: LinkDecision
    components: ScoringComponents = field(default_factory=ScoringComponents)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "confidence": self.confidence.value,
            "decision": self.decision.value,
            "components": self.components.to_dict(),
        }


def _compare_titles(norm_query: str, norm_cand: str) -> float:
    if not norm_query or not norm_cand:
        return 0.0

    similarity = max(
        StringSimilarity.edit_similarity(norm_query, norm_cand),
        StringSimilarity.word_similarity(norm_query, norm_cand),
    )
    if StringSimilarity.numbers(norm_query) != StringSimilarity.numbers(norm_cand):
        similarity = min(similarity, NUMBER_MISMATCH_CAP)
    return similarity


def title_similarity(query_title, candidate_title) -> float:
    """Similarity of two raw titles in [0, 1]."""
    similarity = _compare_titles(
        TextNormalizer.normalize_title(query_title),
        TextNormalizer.normalize_title(candidate_title),
    )
    if similarity == 1.0:
        return similarity

    stripped = _compare_titles(
        TextNormalizer.normalize_title(query_title, strip_series=True),
        TextNormalizer.normalize_title(candidate_title, strip_series=True),
    )
    return max(similarity, SERIES_STRIP_CREDIT * stripped)


def author_similarity(query_author, candidate_author) -> Optional[float]:
    """
    Similarity of two raw author names.

    Returns:
        Score in [0, 1], or None when either side has no author
    """
    norm_query = TextNormalizer.normalize_author(query_author)
    norm_cand = TextNormalizer.normalize_author(candidate_author)

    if not norm_query or not norm_cand:
        return None

    query_lastname = TextNormalizer.extract_author_lastname(norm_query)
    cand_lastname = TextNormalizer.extract_author_lastname(norm_cand)

    return max(
        StringSimilarity.edit_similarity(norm_query, norm_cand),
        StringSimilarity.token_sort_similarity(norm_query, norm_cand),
        LAST_NAME_CREDIT * StringSimilarity.edit_similarity(query_lastname, cand_lastname),
    )


def _score_components(query: BookReference, candidate: CandidateBook) -> tuple[float, ScoringComponents]:
    title_sim = title_similarity(query.title, candidate.title)
    if title_sim <= 0.0:
        return 0.0, ScoringComponents()

    author_sim = author_similarity(query.author, candidate.author)
    author_compared = author_sim is not None
    if not author_compared:
        # No author on either side agrees; one missing author is unknown
        either_author = TextNormalizer.normalize_author(query.author) or \
            TextNormalizer.normalize_author(candidate.author)
        author_sim = NEUTRAL_AUTHOR_SCORE if either_author else 1.0

    score = TITLE_WEIGHT * title_sim + AUTHOR_WEIGHT * author_sim

    if not math.isfinite(score):
        score = 0.0
    score = max(0.0, min(1.0, score))

    return score, ScoringComponents(
        title_similarity=title_sim,
        author_similarity=author_sim,
        author_compared=author_compared,
    )


def score(query: BookReference, candidate: CandidateBook) -> float:
    """
    Score a reference against a candidate.

    Args:
        query: Free-text reference
        candidate: Library entry

    Returns:
        Deterministic score in [0, 1]
    """
    return _score_components(query, candidate)[0]


def confidence_of(value: float) -> MatchConfidence:
    """Map a score to its confidence tier; cut points are inclusive."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return MatchConfidence.NONE

    if value >= HIGH_CONFIDENCE:
        return MatchConfidence.HIGH
    elif value >= MEDIUM_CONFIDENCE:
        return MatchConfidence.MEDIUM
    elif value >= LOW_CONFIDENCE:
        return MatchConfidence.LOW
    else:
        return MatchConfidence.NONE


_DECISIONS = {
    MatchConfidence.HIGH: LinkDecision.AUTO_LINK,
    MatchConfidence.MEDIUM: LinkDecision.SUGGEST,
    MatchConfidence.LOW: LinkDecision.IGNORE,
    MatchConfidence.NONE: LinkDecision.IGNORE,
}


def decide(tier: MatchConfidence) -> LinkDecision:
    """Map a confidence tier to a link decision."""
    return _DECISIONS[MatchConfidence(tier)]


def is_auto_linkable(value: float) -> bool:
    """Check if a score is high enough to link without confirmation."""
    return decide(confidence_of(value)) is LinkDecision.AUTO_LINK


def is_suggestion_worthy(value: float) -> bool:
    """Check if a score should be offered to the user for confirmation."""
    return decide(confidence_of(value)) is LinkDecision.SUGGEST


def match(query: BookReference, candidate: CandidateBook) -> MatchResult:
    """Score one pair and derive its confidence tier and decision."""
    value, components = _score_components(query, candidate)
    tier = confidence_of(value)

    return MatchResult(
        score=value,
        confidence=tier,
        decision=decide(tier),
        components=components,
    )


def rank(
    query: BookReference,
    candidates: Iterable[CandidateBook],
    limit: Optional[int] = None,
    min_confidence: MatchConfidence = MatchConfidence.NONE,
) -> list[tuple[CandidateBook, MatchResult]]:
    """
    Rank candidates against a reference.

    Sorted by score descending, ties broken by book_id ascending.

    Args:
        query: Free-text reference
        candidates: Library entries, in any order
        limit: Keep at most this many results (None = all)
        min_confidence: Drop results below this tier

    Returns:
        New list of (candidate, result) pairs
    """
    ranked = []
    for candidate in candidates:
        result = match(query, candidate)
        if result.confidence < min_confidence:
            continue
        ranked.append((candidate, result))

    ranked.sort(key=lambda pair: (-pair[1].score, str(pair[0].book_id)))

    if ranked:
        best_candidate, best = ranked[0]
        logger.debug(
            f"Ranked {len(ranked)} candidates for '{query.title}': "
            f"best={best_candidate.book_id} score={best.score:.3f} ({best.confidence.value})"
        )

    if limit is not None:
        ranked = ranked[:limit]

    return ranked
