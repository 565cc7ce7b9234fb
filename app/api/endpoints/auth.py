"""Authentication endpoints."""

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.schemas.users import ProfileEnvelope, ProfileResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient or doctor account",
)
async def register(data: RegisterRequest, db: DatabaseSession) -> AuthResponse:
    """
    Create a profile with an email and password and sign it in.

    Admin accounts cannot be registered here; they are seeded with
    ``scripts/create_admin.py``.

    Args:
        data: Registration details
        db: Database session

    Returns:
        Session token and the new profile
    """
    user, token = await AuthService.register(db, data)
    return AuthResponse(token=token, user=ProfileResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in with email and password",
)
async def login(data: LoginRequest, db: DatabaseSession) -> AuthResponse:
    """
    Verify credentials and return a session token.

    Raises:
        UnauthorizedException: If the email or password is wrong
    """
    user, token = await AuthService.login(db, data)
    return AuthResponse(token=token, user=ProfileResponse.model_validate(user))


@router.get(
    "/me",
    response_model=ProfileEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Get current profile",
)
async def get_me(current_user: CurrentUser) -> ProfileEnvelope:
    """Return the caller's profile."""
    return ProfileEnvelope(user=ProfileResponse.model_validate(current_user))
