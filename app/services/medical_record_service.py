"""Medical record service."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.core.permissions import can_access_record, record_scope
from app.models.appointments import appointments
from app.models.medical_records import medical_records
from app.schemas.medical_records import MedicalRecordCreate, RecordType
from app.schemas.users import UserRole
from app.services.doctor_service import DoctorService
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)


class MedicalRecordService:
    """Documents attached to a patient's history by the patient or their doctors."""

    def __init__(self, db: AsyncSession, doctor_service: DoctorService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.doctors = doctor_service or DoctorService()

    async def _has_treated(self, doctor_user: dict[str, Any], patient_id: UUID) -> bool:
        """True if the patient has booked at least one appointment with this doctor."""
        doctor = await self.doctors.get_doctor_by_user_id(self.db, doctor_user["id"])
        if not doctor:
            return False

        result = await self.db.execute(
            select(appointments.c.id)
            .where(
                and_(
                    appointments.c.doctor_id == doctor["id"],
                    appointments.c.patient_id == patient_id,
                )
            )
            .limit(1)
        )
        return result.first() is not None

    async def create_record(
        self,
        uploader: dict[str, Any],
        data: MedicalRecordCreate,
    ) -> dict[str, Any]:
        """
        Attach a record to a patient's history.

        Patients upload for themselves. Doctors upload for patients who have
        booked with them. Admins upload for any patient.

        Raises:
            BadRequestException: If a doctor or admin does not name the patient
            NotFoundException: If the patient profile does not exist
            ForbiddenException: If the caller may not upload for that patient
        """
        role = uploader["role"]
        patient_id = data.patient_id

        if role == UserRole.PATIENT:
            if patient_id is not None and patient_id != uploader["id"]:
                raise ForbiddenException("Patients can only upload their own records")
            patient_id = uploader["id"]
        elif patient_id is None:
            raise BadRequestException("patient_id is required")

        patient = await UserService.get_user_by_id(self.db, patient_id)
        if not patient or patient["role"] != UserRole.PATIENT:
            raise NotFoundException("Patient not found")

        if role == UserRole.DOCTOR and not await self._has_treated(uploader, patient_id):
            raise ForbiddenException("Not authorized")

        result = await self.db.execute(
            insert(medical_records)
            .values(
                patient_id=patient_id,
                record_type=data.record_type.value,
                title=data.title,
                description=data.description,
                file_url=data.file_url,
                uploaded_by=uploader["id"],
            )
            .returning(medical_records)
        )
        record = dict(result.mappings().one())
        await self.db.commit()

        logger.info(
            "medical_record_created",
            record_id=str(record["id"]),
            patient_id=str(patient_id),
            record_type=record["record_type"],
        )
        return record

    async def list_records(
        self,
        user: dict[str, Any],
        record_type: RecordType | None = None,
    ) -> list[dict[str, Any]]:
        """List records visible to the caller, newest first."""
        conditions = record_scope(medical_records, user)
        if record_type:
            conditions.append(medical_records.c.record_type == record_type.value)

        stmt = (
            select(medical_records)
            .where(and_(*conditions) if conditions else True)
            .order_by(medical_records.c.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_record(self, record_id: UUID, user: dict[str, Any]) -> dict[str, Any]:
        """
        Get one record.

        Raises:
            NotFoundException: If missing
            ForbiddenException: If the caller is neither the patient nor the uploader
        """
        result = await self.db.execute(
            select(medical_records).where(medical_records.c.id == record_id)
        )
        record = result.mappings().first()
        if not record:
            raise NotFoundException("Medical record not found")

        if not can_access_record(user, record):
            raise ForbiddenException("Access denied to this medical record")

        return dict(record)
