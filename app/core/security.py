"""Password hashing and session tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings

TOKEN_ISSUER = "medireach-api"
SESSION_TOKEN_TYPE = "session"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_session_token(
    user_id: str,
    role: str | None = None,
    expires_in: timedelta | None = None,
) -> str:
    """
    Sign a session token for a profile.

    The role claim is informational; authorization always re-reads the
    profile so role changes and deactivation apply immediately.
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_in or timedelta(minutes=settings.access_token_expire_minutes)

    claims: dict[str, Any] = {
        "sub": user_id,
        "iss": TOKEN_ISSUER,
        "type": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    if role is not None:
        claims["role"] = role

    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> dict[str, Any] | None:
    """Return the claims of a valid session token, None for anything else."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=TOKEN_ISSUER,
        )
    except JWTError:
        return None

    return claims if claims.get("type") == SESSION_TOKEN_TYPE else None
