"""
API Schemas for ShelfLink

Pydantic models for request validation and response serialization:
- Matching models
- Link repair models
- System models
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from shelflink.matching import (
    BookReference,
    CandidateBook,
    LinkDecision,
    MatchConfidence,
    MatchResult,
)


# =============================================================================
# Matching Schemas
# =============================================================================

class BookReferenceIn(BaseModel):
    """Free-text book reference."""

    title: Optional[str] = Field(None, max_length=500)
    author: Optional[str] = Field(None, max_length=255)

    def to_reference(self) -> BookReference:
        return BookReference(title=self.title, author=self.author)


class CandidateIn(BaseModel):
    """Library entry to match against."""

    id: str = Field(..., min_length=1, max_length=64)
    title: Optional[str] = Field(None, max_length=500)
    author: Optional[str] = Field(None, max_length=255)

    def to_candidate(self) -> CandidateBook:
        return CandidateBook(book_id=self.id, title=self.title, author=self.author)


class ScoreRequest(BaseModel):
    query: BookReferenceIn
    candidate: CandidateIn

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": {"title": "Suç ve Ceza", "author": "Dostoyevski"},
                "candidate": {"id": "b1", "title": "Suç ve Ceza", "author": "Fyodor Dostoyevski"},
            }
        }
    )


class RankRequest(BaseModel):
    query: BookReferenceIn
    candidates: list[CandidateIn] = Field(default_factory=list, max_length=5000)
    limit: Optional[int] = Field(None, ge=1, le=5000)


class ScoringComponentsOut(BaseModel):
    title_similarity: float
    author_similarity: float
    author_compared: bool


class MatchResultOut(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    confidence: MatchConfidence
    decision: LinkDecision
    components: ScoringComponentsOut

    @classmethod
    def from_result(cls, result: MatchResult) -> "MatchResultOut":
        return cls(
            score=result.score,
            confidence=result.confidence,
            decision=result.decision,
            components=ScoringComponentsOut(**result.components.to_dict()),
        )


class RankedMatchOut(BaseModel):
    candidate_id: str
    title: Optional[str] = None
    author: Optional[str] = None
    rank: int
    result: MatchResultOut


class RankResponse(BaseModel):
    query: BookReferenceIn
    matches: list[RankedMatchOut]
    total_candidates: int


class ThresholdsResponse(BaseModel):
    high: float
    medium: float
    low: float
    title_weight: float
    author_weight: float
    neutral_author_score: float
    last_name_credit: float
    series_strip_credit: float
    number_mismatch_cap: float


# =============================================================================
# Link Repair Schemas
# =============================================================================

class RepairCandidateOut(BaseModel):
    book_id: str
    book_title: str
    score: float
    confidence: MatchConfidence


class RepairSuggestionOut(BaseModel):
    type: str
    target_id: str
    target_title: str
    target_author: str
    list_or_challenge_name: str
    candidates: list[RepairCandidateOut]


class RepairStatsOut(BaseModel):
    reading_lists_scanned: int = 0
    reading_lists_repaired: int = 0
    challenges_scanned: int = 0
    challenges_repaired: int = 0
    suggestions_found: int = 0


class RepairResponse(BaseModel):
    success: bool
    stats: RepairStatsOut
    suggestions: list[RepairSuggestionOut] = Field(default_factory=list)


class ConfirmLinkRequest(BaseModel):
    type: str = Field(..., pattern=r"^(reading-list|challenge)$")
    target_id: str = Field(..., min_length=1)
    book_id: str = Field(..., min_length=1)


class ConfirmLinkResponse(BaseModel):
    success: bool = True


class BrokenLinkCountResponse(BaseModel):
    reading_lists: int
    challenges: int
    total: int


# =============================================================================
# System Schemas
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: Optional[str] = None
    timestamp: datetime
