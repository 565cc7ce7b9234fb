"""Doctor profile service for business logic."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictException, NotFoundException
from app.core.permissions import can_view_doctor_profile
from app.core.redis_client import CacheManager
from app.models.doctors import doctor_availability, doctor_profiles
from app.models.users import profiles
from app.schemas.doctors import (
    AvailabilitySlot,
    DoctorProfileCreate,
    DoctorProfileUpdate,
)
from app.schemas.notifications import NotificationType
from app.schemas.users import UserRole
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


class DoctorService:
    """Service for doctor profile operations."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_doctor_cache_key(doctor_id: UUID | str) -> str:
        """Generate cache key for doctor."""
        return f"doctor:{doctor_id}"

    @staticmethod
    def _doctor_query():
        """Doctor profile joined with the owner's display name."""
        return select(doctor_profiles, profiles.c.full_name).join(
            profiles, doctor_profiles.c.user_id == profiles.c.id
        )

    def invalidate(self, doctor_id: UUID | str) -> None:
        """Drop a cached doctor profile after any write."""
        if self.cache:
            self.cache.delete(self._get_doctor_cache_key(doctor_id))

    async def _fetch_doctor(self, db: AsyncSession, doctor_id: UUID) -> dict | None:
        result = await db.execute(self._doctor_query().where(doctor_profiles.c.id == doctor_id))
        doctor = result.mappings().first()
        return dict(doctor) if doctor else None

    async def create_doctor(
        self,
        db: AsyncSession,
        user_id: UUID,
        doctor_data: DoctorProfileCreate,
    ) -> dict:
        """
        Create the doctor profile for a doctor account.

        Raises:
            ConflictException: If the user already has a profile or the license is taken
        """
        if await self.get_doctor_by_user_id(db, user_id):
            raise ConflictException("Doctor profile already exists")

        license_number = doctor_data.license_number.strip()
        existing = await db.execute(
            select(doctor_profiles.c.id).where(doctor_profiles.c.license_number == license_number)
        )
        if existing.first():
            raise ConflictException(
                f"Doctor with license number '{license_number}' already exists"
            )

        query = (
            insert(doctor_profiles)
            .values(
                user_id=user_id,
                specialization=doctor_data.specialization.strip(),
                license_number=license_number,
                qualification=doctor_data.qualification.strip(),
                experience_years=doctor_data.experience_years,
                consultation_fee=doctor_data.consultation_fee,
                bio=doctor_data.bio,
            )
            .returning(doctor_profiles.c.id)
        )

        try:
            result = await db.execute(query)
            doctor_id = result.scalar_one()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("Doctor profile already exists") from e

        logger.info("doctor_profile_created", doctor_id=str(doctor_id), user_id=str(user_id))
        doctor = await self._fetch_doctor(db, doctor_id)
        if not doctor:
            raise ValueError("Failed to create doctor")
        return doctor

    async def get_doctor_by_id(
        self, db: AsyncSession, doctor_id: UUID, use_cache: bool = True
    ) -> dict | None:
        """
        Get doctor by ID with caching.

        Cached rows carry ids and decimals as strings; pass ``use_cache=False``
        when the result feeds further writes.
        """
        if self.cache and use_cache:
            cached = self.cache.get_json(self._get_doctor_cache_key(doctor_id))
            if cached:
                return cached

        doctor = await self._fetch_doctor(db, doctor_id)
        if not doctor:
            return None

        if self.cache:
            self.cache.set_json(
                self._get_doctor_cache_key(doctor_id),
                doctor,
                ttl=settings.doctor_cache_ttl,
            )

        return doctor

    async def get_doctor_by_user_id(self, db: AsyncSession, user_id: UUID) -> dict | None:
        """Get the doctor profile owned by a user."""
        result = await db.execute(self._doctor_query().where(doctor_profiles.c.user_id == user_id))
        doctor = result.mappings().first()
        return dict(doctor) if doctor else None

    async def get_own_doctor(self, db: AsyncSession, user_id: UUID) -> dict:
        """
        Get the caller's doctor profile.

        Raises:
            NotFoundException: If the caller has no doctor profile
        """
        doctor = await self.get_doctor_by_user_id(db, user_id)
        if not doctor:
            raise NotFoundException("Doctor profile not found")
        return doctor

    async def get_visible_doctor(
        self, db: AsyncSession, user: dict[str, Any], doctor_id: UUID
    ) -> dict:
        """
        Get a doctor profile the caller is allowed to see.

        Unverified profiles are reported as missing to everyone except their
        owner and admins.
        """
        doctor = await self.get_doctor_by_id(db, doctor_id)
        if not doctor or not can_view_doctor_profile(user, doctor):
            raise NotFoundException("Doctor not found")
        return doctor

    async def list_doctors(
        self,
        db: AsyncSession,
        user: dict[str, Any],
        specialization: str | None = None,
        available_only: bool = False,
        min_rating: float | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[dict]:
        """List doctor profiles visible to the caller, best rated first."""
        conditions: list = []

        if user["role"] != UserRole.ADMIN:
            conditions.append(
                or_(
                    doctor_profiles.c.is_verified.is_(True),
                    doctor_profiles.c.user_id == user["id"],
                )
            )

        if specialization:
            conditions.append(doctor_profiles.c.specialization.ilike(f"%{specialization}%"))

        if available_only:
            conditions.append(doctor_profiles.c.is_available.is_(True))

        if min_rating is not None:
            conditions.append(doctor_profiles.c.rating >= min_rating)

        query = (
            self._doctor_query()
            .where(and_(*conditions) if conditions else True)
            .order_by(
                doctor_profiles.c.rating.desc(),
                doctor_profiles.c.total_consultations.desc(),
                doctor_profiles.c.created_at,
            )
            .offset(skip)
            .limit(limit)
        )

        result = await db.execute(query)
        return [dict(d) for d in result.mappings().all()]

    async def update_doctor(
        self, db: AsyncSession, doctor_id: UUID, doctor_data: DoctorProfileUpdate
    ) -> dict:
        """Update the editable fields of a doctor profile."""
        update_values = {
            field: value.strip() if isinstance(value, str) else value
            for field, value in doctor_data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if update_values:
            update_values["updated_at"] = datetime.now(UTC)
            await db.execute(
                update(doctor_profiles)
                .where(doctor_profiles.c.id == doctor_id)
                .values(**update_values)
            )
            await db.commit()
            self.invalidate(doctor_id)

        doctor = await self._fetch_doctor(db, doctor_id)
        if not doctor:
            raise NotFoundException("Doctor not found")
        return doctor

    async def set_verification(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        is_verified: bool,
        verified_by: UUID,
    ) -> dict:
        """
        Verify or unverify a doctor (admin only) and notify the doctor.

        Raises:
            NotFoundException: If the doctor profile does not exist
        """
        doctor = await self._fetch_doctor(db, doctor_id)
        if not doctor:
            raise NotFoundException("Doctor not found")

        values: dict[str, Any] = {"is_verified": is_verified, "updated_at": datetime.now(UTC)}
        if is_verified:
            values.update(verified_at=datetime.now(UTC), verified_by=verified_by)
        else:
            values.update(verified_at=None, verified_by=None)

        await db.execute(
            update(doctor_profiles).where(doctor_profiles.c.id == doctor_id).values(**values)
        )

        if is_verified != doctor["is_verified"]:
            await NotificationService.notify(
                db,
                user_id=doctor["user_id"],
                title="Profile Verified" if is_verified else "Verification Revoked",
                message=(
                    "Your doctor profile has been verified and is now visible to patients"
                    if is_verified
                    else "Your doctor profile is no longer verified"
                ),
                notification_type=NotificationType.SYSTEM,
                related_id=doctor_id,
                commit=False,
            )

        await db.commit()
        self.invalidate(doctor_id)

        logger.info(
            "doctor_verification_changed",
            doctor_id=str(doctor_id),
            is_verified=is_verified,
            verified_by=str(verified_by),
        )
        updated = await self._fetch_doctor(db, doctor_id)
        if not updated:
            raise NotFoundException("Doctor not found")
        return updated

    @staticmethod
    async def increment_consultations(db: AsyncSession, doctor_id: UUID) -> None:
        """Add one completed consultation. Joins the caller's transaction."""
        await db.execute(
            update(doctor_profiles)
            .where(doctor_profiles.c.id == doctor_id)
            .values(total_consultations=doctor_profiles.c.total_consultations + 1)
        )

    @staticmethod
    async def get_availability(db: AsyncSession, doctor_id: UUID) -> list[dict]:
        """Get a doctor's weekly availability slots ordered by day and start time."""
        query = (
            select(doctor_availability)
            .where(doctor_availability.c.doctor_id == doctor_id)
            .order_by(doctor_availability.c.day_of_week, doctor_availability.c.start_time)
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def replace_availability(
        db: AsyncSession,
        doctor_id: UUID,
        slots: list[AvailabilitySlot],
    ) -> list[dict]:
        """Replace all availability slots of a doctor in one transaction."""
        await db.execute(
            delete(doctor_availability).where(doctor_availability.c.doctor_id == doctor_id)
        )

        if slots:
            await db.execute(
                insert(doctor_availability),
                [{"doctor_id": doctor_id, **slot.model_dump()} for slot in slots],
            )

        await db.commit()
        logger.info("doctor_availability_replaced", doctor_id=str(doctor_id), slots=len(slots))
        return await DoctorService.get_availability(db, doctor_id)
