"""
Matching API Routes

Stateless scoring and ranking of book references against caller-supplied
candidates.
"""

from fastapi import APIRouter
from loguru import logger

from shelflink.api.schemas import (
    ScoreRequest,
    RankRequest,
    RankResponse,
    RankedMatchOut,
    MatchResultOut,
    ThresholdsResponse,
)
from shelflink.matching import matcher


router = APIRouter(prefix="/match", tags=["matching"])


@router.post("/score", response_model=MatchResultOut)
def score_pair(request: ScoreRequest) -> MatchResultOut:
    """Score one reference against one candidate."""
    result = matcher.match(request.query.to_reference(), request.candidate.to_candidate())
    return MatchResultOut.from_result(result)


@router.post("/rank", response_model=RankResponse)
def rank_candidates(request: RankRequest) -> RankResponse:
    """
    Rank candidates against a reference.

    Sorted by score descending, ties by candidate id ascending.
    """
    logger.info(f"Ranking {len(request.candidates)} candidates for '{request.query.title}'")

    ranked = matcher.rank(
        request.query.to_reference(),
        [c.to_candidate() for c in request.candidates],
        limit=request.limit,
    )

    return RankResponse(
        query=request.query,
        matches=[
            RankedMatchOut(
                candidate_id=candidate.book_id,
                title=candidate.title,
                author=candidate.author,
                rank=i + 1,
                result=MatchResultOut.from_result(result),
            )
            for i, (candidate, result) in enumerate(ranked)
        ],
        total_candidates=len(request.candidates),
    )


@router.get("/thresholds", response_model=ThresholdsResponse)
def get_thresholds() -> ThresholdsResponse:
    """Fixed cut points and weights of the scoring contract."""
    return ThresholdsResponse(
        high=matcher.HIGH_CONFIDENCE,
        medium=matcher.MEDIUM_CONFIDENCE,
        low=matcher.LOW_CONFIDENCE,
        title_weight=matcher.TITLE_WEIGHT,
        author_weight=matcher.AUTHOR_WEIGHT,
        neutral_author_score=matcher.NEUTRAL_AUTHOR_SCORE,
        last_name_credit=matcher.LAST_NAME_CREDIT,
        series_strip_credit=matcher.SERIES_STRIP_CREDIT,
        number_mismatch_cap=matcher.NUMBER_MISMATCH_CAP,
    )
