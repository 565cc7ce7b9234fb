"""Row factories and request helpers shared by the test modules."""

from datetime import timedelta
from uuid import uuid4

from httpx import AsyncClient, Response
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password, issue_session_token
from app.models import doctor_profiles, profiles

TEST_PASSWORD = "correct-horse-battery"


async def create_profile(
    db: AsyncSession,
    role: str,
    full_name: str,
    email: str | None = None,
    is_active: bool = True,
) -> dict:
    """Insert a profile that can log in with TEST_PASSWORD."""
    result = await db.execute(
        insert(profiles)
        .values(
            id=uuid4(),
            email=email or f"{role}-{uuid4().hex[:8]}@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            full_name=full_name,
            role=role,
            is_active=is_active,
        )
        .returning(profiles)
    )
    await db.commit()
    return dict(result.mappings().one())


async def create_doctor_profile(
    db: AsyncSession,
    user_id,
    is_verified: bool = True,
    specialization: str = "Cardiology",
) -> dict:
    """Insert a doctor profile for an existing doctor account."""
    result = await db.execute(
        insert(doctor_profiles)
        .values(
            id=uuid4(),
            user_id=user_id,
            specialization=specialization,
            license_number=f"LIC-{uuid4().hex[:10]}",
            qualification="MBBS, MD",
            experience_years=8,
            consultation_fee=50,
            is_verified=is_verified,
        )
        .returning(doctor_profiles)
    )
    await db.commit()
    return dict(result.mappings().one())


def make_auth_headers(user: dict) -> dict:
    """Bearer headers for a profile."""
    token = issue_session_token(str(user["id"]), user["role"], expires_in=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


async def set_status(
    client: AsyncClient, appointment_id: str, status: str, headers: dict
) -> Response:
    """PATCH the status of an appointment."""
    return await client.patch(
        f"/api/appointments/{appointment_id}/status",
        json={"status": status},
        headers=headers,
    )
