"""Authentication service for email/password accounts and JWT sessions."""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ForbiddenException, UnauthorizedException
from app.core.security import hash_password, issue_session_token, verify_password
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)


class AuthService:
    """Registers profiles, checks credentials and issues session tokens."""

    @staticmethod
    def create_token(user: dict) -> str:
        """Session token for a profile, valid for ``ACCESS_TOKEN_EXPIRE_MINUTES``."""
        return issue_session_token(str(user["id"]), user["role"])

    @staticmethod
    async def register(db: AsyncSession, data: RegisterRequest) -> tuple[dict, str]:
        """
        Create a profile and return it with a session token.

        Raises:
            BadRequestException: If the email is already registered
        """
        email = data.email.lower()

        if await UserService.get_user_by_email(db, email):
            raise BadRequestException("Email already registered")

        try:
            user = await UserService.create_user(
                db,
                email=email,
                password_hash=hash_password(data.password),
                full_name=data.full_name.strip(),
                role=data.role,
                phone=data.phone,
            )
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await db.rollback()
            raise BadRequestException("Email already registered") from e

        logger.info("user_registered", user_id=str(user["id"]), role=user["role"])
        return user, AuthService.create_token(user)

    @staticmethod
    async def login(db: AsyncSession, data: LoginRequest) -> tuple[dict, str]:
        """
        Verify credentials and return the profile with a session token.

        Raises:
            UnauthorizedException: If email or password is wrong
            ForbiddenException: If the account is deactivated
        """
        user = await UserService.get_user_by_email(db, data.email)

        if not user or not verify_password(data.password, user["password_hash"]):
            logger.info("login_failed", email=data.email.lower())
            raise UnauthorizedException("Invalid credentials")

        if not user["is_active"]:
            raise ForbiddenException("User account is deactivated")

        await UserService.update_last_login(db, user["id"])
        logger.info("user_logged_in", user_id=str(user["id"]))
        return user, AuthService.create_token(user)
