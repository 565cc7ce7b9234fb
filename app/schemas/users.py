"""Profile schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRole(str, Enum):
    """Profile role enumeration."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class Gender(str, Enum):
    """Gender enumeration."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class ProfileUpdate(BaseModel):
    """Contact fields a user may change on their own profile."""

    full_name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=20)
    avatar_url: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None

    @field_validator("full_name")
    @classmethod
    def require_full_name(cls, v: str | None) -> str:
        """A name may be changed but not cleared."""
        if v is None or not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()


class ProfileResponse(BaseModel):
    """Profile as returned by the API (never includes the password hash)."""

    id: UUID
    email: EmailStr
    full_name: str
    role: UserRole
    phone: str | None = None
    avatar_url: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileEnvelope(BaseModel):
    """Single profile response."""

    success: bool = True
    user: ProfileResponse
