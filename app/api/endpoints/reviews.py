"""Review endpoints."""

from fastapi import APIRouter

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.reviews import ReviewListResponse, ReviewResponse
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_reviews(current_user: CurrentUser, db: DatabaseSession) -> ReviewListResponse:
    """List reviews written by or about the caller (all reviews for admins)."""
    rows = await ReviewService(db).list_reviews(current_user)
    return ReviewListResponse(
        count=len(rows),
        reviews=[ReviewResponse.model_validate(row) for row in rows],
    )
