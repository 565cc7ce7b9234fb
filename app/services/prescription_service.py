"""Prescription service."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenException, NotFoundException
from app.core.permissions import can_access_row, row_scope
from app.models.appointments import appointments
from app.models.prescriptions import prescriptions
from app.schemas.notifications import NotificationType
from app.schemas.prescriptions import PrescriptionCreate
from app.schemas.users import UserRole
from app.services.doctor_service import DoctorService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


class PrescriptionService:
    """Doctors issue prescriptions for their own appointments."""

    def __init__(self, db: AsyncSession, doctor_service: DoctorService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.doctors = doctor_service or DoctorService()

    async def _caller_doctor_id(self, user: dict[str, Any]) -> UUID | None:
        if user["role"] != UserRole.DOCTOR:
            return None
        doctor = await self.doctors.get_doctor_by_user_id(self.db, user["id"])
        return doctor["id"] if doctor else None

    async def create_prescription(
        self,
        doctor_user: dict[str, Any],
        data: PrescriptionCreate,
    ) -> dict[str, Any]:
        """
        Issue a prescription and notify the patient.

        Raises:
            NotFoundException: If the appointment does not exist
            ForbiddenException: If the appointment is not booked with the caller
        """
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == data.appointment_id)
        )
        appointment = result.mappings().first()
        if not appointment:
            raise NotFoundException("Appointment not found")

        doctor_id = await self._caller_doctor_id(doctor_user)
        if doctor_id is None or appointment["doctor_id"] != doctor_id:
            raise ForbiddenException("Not authorized")

        insert_result = await self.db.execute(
            insert(prescriptions)
            .values(
                appointment_id=appointment["id"],
                patient_id=appointment["patient_id"],
                doctor_id=doctor_id,
                diagnosis=data.diagnosis,
                medications=[m.model_dump() for m in data.medications],
                instructions=data.instructions,
                file_url=data.file_url,
            )
            .returning(prescriptions)
        )
        prescription = dict(insert_result.mappings().one())

        await NotificationService.notify(
            self.db,
            user_id=appointment["patient_id"],
            title="New Prescription",
            message=f"{doctor_user['full_name']} has issued a prescription for you",
            notification_type=NotificationType.PRESCRIPTION,
            related_id=prescription["id"],
            commit=False,
        )
        await self.db.commit()

        logger.info(
            "prescription_created",
            prescription_id=str(prescription["id"]),
            appointment_id=str(appointment["id"]),
        )
        return prescription

    async def list_prescriptions(self, user: dict[str, Any]) -> list[dict[str, Any]]:
        """List prescriptions visible to the caller, newest first."""
        doctor_id = await self._caller_doctor_id(user)
        conditions = row_scope(prescriptions, user, doctor_id)
        stmt = (
            select(prescriptions)
            .where(and_(*conditions) if conditions else True)
            .order_by(prescriptions.c.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_prescription(self, prescription_id: UUID, user: dict[str, Any]) -> dict[str, Any]:
        """
        Get one prescription.

        Raises:
            NotFoundException: If missing
            ForbiddenException: If not visible to the caller
        """
        result = await self.db.execute(
            select(prescriptions).where(prescriptions.c.id == prescription_id)
        )
        prescription = result.mappings().first()
        if not prescription:
            raise NotFoundException("Prescription not found")

        doctor_id = await self._caller_doctor_id(user)
        if not can_access_row(user, prescription, doctor_id):
            raise ForbiddenException("Access denied to this prescription")

        return dict(prescription)
