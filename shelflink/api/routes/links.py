"""
Link Repair API Routes

Repair, confirm and count broken reading-list and challenge links of the
current user.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from shelflink.api.dependencies import get_current_user_id, get_link_repair_service
from shelflink.api.schemas import (
    RepairResponse,
    ConfirmLinkRequest,
    ConfirmLinkResponse,
    BrokenLinkCountResponse,
    ErrorResponse,
)


router = APIRouter(prefix="/links", tags=["links"])


@router.post("/repair", response_model=RepairResponse)
def repair_links(
    user_id: str = Depends(get_current_user_id),
    service=Depends(get_link_repair_service),
):
    """
    Scan broken links, auto-link confident matches and return suggestions
    for the rest.
    """
    logger.info(f"Repairing links for user {user_id}")
    result = service.repair_all_links(user_id)
    return result.to_dict()


@router.post(
    "/confirm",
    response_model=ConfirmLinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Book or link not found"},
    },
)
def confirm_link(
    request: ConfirmLinkRequest,
    user_id: str = Depends(get_current_user_id),
    service=Depends(get_link_repair_service),
) -> ConfirmLinkResponse:
    """Apply a suggested link the user confirmed."""
    service.confirm_suggested_link(user_id, request.type, request.target_id, request.book_id)
    return ConfirmLinkResponse(success=True)


@router.get("/broken-count", response_model=BrokenLinkCountResponse)
def broken_links_count(
    user_id: str = Depends(get_current_user_id),
    service=Depends(get_link_repair_service),
) -> BrokenLinkCountResponse:
    """Number of broken links of the current user."""
    count = service.get_broken_links_count(user_id)
    return BrokenLinkCountResponse(
        reading_lists=count.reading_lists,
        challenges=count.challenges,
        total=count.total,
    )
