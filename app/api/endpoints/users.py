"""User endpoints."""

from fastapi import APIRouter

from app.core.exceptions import NotFoundException
from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.users import ProfileEnvelope, ProfileResponse, ProfileUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.patch("/me", response_model=ProfileEnvelope)
async def update_current_user_profile(
    user_data: ProfileUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
):
    """Update current user's contact fields."""
    user = await UserService.update_user(db, current_user["id"], user_data)

    if not user:
        raise NotFoundException("User not found")

    return ProfileEnvelope(user=ProfileResponse.model_validate(user))
