"""Profile service for business logic."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users import profiles
from app.schemas.users import ProfileUpdate


class UserService:
    """Service for profile operations."""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password_hash: str,
        full_name: str,
        role: str,
        phone: str | None = None,
    ) -> dict:
        """Create a new profile."""
        query = (
            profiles.insert()
            .values(
                email=email,
                password_hash=password_hash,
                full_name=full_name,
                role=role,
                phone=phone,
            )
            .returning(profiles)
        )

        result = await db.execute(query)
        user = result.mappings().first()

        if not user:
            raise ValueError("Failed to create user")

        await db.commit()
        return dict(user)

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> dict | None:
        """Get profile by ID."""
        query = select(profiles).where(profiles.c.id == user_id)
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> dict | None:
        """Get profile by email (case-insensitive)."""
        query = select(profiles).where(profiles.c.email == email.lower())
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    @staticmethod
    async def update_user(db: AsyncSession, user_id: UUID, user_data: ProfileUpdate) -> dict | None:
        """Update contact fields of a profile."""
        update_data = user_data.model_dump(exclude_unset=True, mode="json")
        # date_of_birth must stay a date object for the DB driver
        if user_data.date_of_birth is not None:
            update_data["date_of_birth"] = user_data.date_of_birth
        if not update_data:
            return await UserService.get_user_by_id(db, user_id)

        update_data["updated_at"] = datetime.now(UTC)

        query = (
            update(profiles).where(profiles.c.id == user_id).values(**update_data).returning(profiles)
        )

        result = await db.execute(query)
        user = result.mappings().first()
        await db.commit()

        return dict(user) if user else None

    @staticmethod
    async def update_last_login(db: AsyncSession, user_id: UUID) -> None:
        """Update profile's last login timestamp."""
        query = (
            update(profiles).where(profiles.c.id == user_id).values(last_login_at=datetime.now(UTC))
        )
        await db.execute(query)
        await db.commit()
