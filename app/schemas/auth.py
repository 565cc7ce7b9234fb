"""Authentication schemas."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from app.schemas.users import ProfileResponse


class RegisterRequest(BaseModel):
    """Self-service registration. Admin accounts are provisioned separately."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: Literal["patient", "doctor"]
    phone: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    """Email and password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Session token with the authenticated profile."""

    success: bool = True
    token: str
    token_type: str = "bearer"
    user: ProfileResponse
