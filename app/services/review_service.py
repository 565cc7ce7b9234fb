"""Review service: patient reviews of completed appointments."""

from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.permissions import row_scope
from app.models.appointments import appointments
from app.models.reviews import reviews
from app.schemas.appointments import AppointmentStatus
from app.schemas.reviews import ReviewCreate
from app.schemas.users import UserRole
from app.services.doctor_service import DoctorService
from app.services.rating_service import RatingService

logger = structlog.get_logger(__name__)


class ReviewService:
    """Service for creating and listing reviews."""

    def __init__(self, db: AsyncSession, doctor_service: DoctorService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.doctors = doctor_service or DoctorService()

    async def create_review(
        self,
        appointment_id: UUID,
        patient: dict[str, Any],
        data: ReviewCreate,
    ) -> tuple[dict[str, Any], Decimal]:
        """
        Create the review for a completed appointment and refresh the doctor's rating.

        The review insert and the rating update are committed together, so the
        rating is current once this returns.

        Returns:
            Tuple of (review, recomputed doctor rating)

        Raises:
            NotFoundException: If the appointment does not exist
            ForbiddenException: If the caller is not the appointment's patient
            BadRequestException: If the appointment is not completed
            ConflictException: If the appointment already has a review
        """
        result = await self.db.execute(select(appointments).where(appointments.c.id == appointment_id))
        appointment = result.mappings().first()

        if not appointment:
            raise NotFoundException("Appointment not found")
        if patient["role"] != UserRole.PATIENT or appointment["patient_id"] != patient["id"]:
            raise ForbiddenException("Only the patient of this appointment can review it")
        if appointment["status"] != AppointmentStatus.COMPLETED.value:
            raise BadRequestException("Reviews can only be submitted for completed appointments")

        existing = await self.db.execute(
            select(reviews.c.id).where(reviews.c.appointment_id == appointment_id)
        )
        if existing.first():
            raise ConflictException("This appointment has already been reviewed")

        try:
            insert_result = await self.db.execute(
                insert(reviews)
                .values(
                    appointment_id=appointment_id,
                    patient_id=patient["id"],
                    doctor_id=appointment["doctor_id"],
                    rating=data.rating,
                    comment=data.comment,
                )
                .returning(reviews)
            )
            review = dict(insert_result.mappings().one())

            rating = await RatingService.recompute_rating(
                self.db, appointment["doctor_id"], data.rating
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictException("This appointment has already been reviewed") from e

        self.doctors.invalidate(appointment["doctor_id"])

        logger.info(
            "review_created",
            review_id=str(review["id"]),
            appointment_id=str(appointment_id),
            doctor_id=str(appointment["doctor_id"]),
            rating=data.rating,
        )
        return review, rating

    async def list_reviews(self, user: dict[str, Any]) -> list[dict[str, Any]]:
        """List reviews visible to the caller, newest first."""
        doctor_id = None
        if user["role"] == UserRole.DOCTOR:
            doctor = await self.doctors.get_doctor_by_user_id(self.db, user["id"])
            doctor_id = doctor["id"] if doctor else None

        conditions = row_scope(reviews, user, doctor_id)
        stmt = (
            select(reviews)
            .where(and_(*conditions) if conditions else True)
            .order_by(reviews.c.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
