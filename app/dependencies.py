"""FastAPI dependencies."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any
from uuid import UUID

import redis
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.redis_client import CacheManager, get_redis_client
from app.core.security import decode_session_token
from app.database import get_db
from app.schemas.users import UserRole
from app.services.doctor_service import DoctorService
from app.services.user_service import UserService

# Missing credentials are reported as 401 by get_current_user_id
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate user ID from JWT token.

    Args:
        credentials: Bearer token credentials

    Returns:
        User ID from token

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_session_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Could not validate credentials")

    user_id_str = payload.get("sub")
    if user_id_str is None or not isinstance(user_id_str, str):
        raise UnauthorizedException("Could not validate credentials")

    try:
        return UUID(user_id_str)
    except ValueError as e:
        raise UnauthorizedException("Invalid user ID format") from e


async def get_current_user(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Get current user from database.

    Raises:
        UnauthorizedException: If the profile no longer exists
        ForbiddenException: If the account is deactivated
    """
    user = await UserService.get_user_by_id(db, user_id)

    if not user:
        raise UnauthorizedException("User not found")

    if not user["is_active"]:
        raise ForbiddenException("User account is deactivated")

    structlog.contextvars.bind_contextvars(user_id=str(user["id"]), role=user["role"])
    return user


def require_role(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, dict]]:
    """Build a dependency that only lets the given roles through."""
    allowed = {role.value for role in roles}

    async def checker(user: Annotated[dict, Depends(get_current_user)]) -> dict:
        if user["role"] not in allowed:
            raise ForbiddenException("Not authorized")
        return user

    return checker


def get_cache_manager(
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> CacheManager:
    """Cache manager bound to the shared Redis client."""
    return CacheManager(redis_client)


def get_doctor_service(
    cache: Annotated[CacheManager, Depends(get_cache_manager)],
) -> DoctorService:
    """Doctor service with the profile cache attached."""
    return DoctorService(cache)


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
PatientUser = Annotated[dict, Depends(require_role(UserRole.PATIENT))]
DoctorUser = Annotated[dict, Depends(require_role(UserRole.DOCTOR))]
AdminUser = Annotated[dict, Depends(require_role(UserRole.ADMIN))]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
DoctorServiceDep = Annotated[DoctorService, Depends(get_doctor_service)]
