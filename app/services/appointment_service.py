"""Appointment service: booking and the status lifecycle."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
)
from app.core.permissions import can_access_row, can_view_doctor_profile, row_scope
from app.models.appointments import appointments
from app.schemas.appointments import (
    MODIFIABLE_STATUSES,
    AppointmentCreate,
    AppointmentStatus,
    AppointmentUpdate,
)
from app.schemas.users import UserRole
from app.services.doctor_service import DoctorService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession, doctor_service: DoctorService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.doctors = doctor_service or DoctorService()

    async def _caller_doctor_id(self, user: dict[str, Any]) -> UUID | None:
        """Doctor profile id of a doctor caller, None for everyone else."""
        if user["role"] != UserRole.DOCTOR:
            return None
        doctor = await self.doctors.get_doctor_by_user_id(self.db, user["id"])
        return doctor["id"] if doctor else None

    async def _get_row(self, appointment_id: UUID) -> dict[str, Any]:
        result = await self.db.execute(select(appointments).where(appointments.c.id == appointment_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def create_appointment(
        self,
        patient: dict[str, Any],
        data: AppointmentCreate,
    ) -> dict[str, Any]:
        """
        Book an appointment for a patient and notify the doctor.

        Args:
            patient: Authenticated patient profile
            data: Appointment creation data

        Returns:
            Created appointment with status ``pending``

        Raises:
            NotFoundException: If the doctor does not exist or is not visible
            BadRequestException: If the doctor is not accepting appointments
        """
        doctor = await self.doctors.get_doctor_by_id(self.db, data.doctor_id, use_cache=False)
        if not doctor or not can_view_doctor_profile(patient, doctor):
            raise NotFoundException("Doctor not found")
        if not doctor["is_available"]:
            raise BadRequestException("Doctor is not accepting appointments")

        stmt = (
            insert(appointments)
            .values(
                patient_id=patient["id"],
                doctor_id=doctor["id"],
                appointment_date=data.appointment_date,
                appointment_time=data.appointment_time,
                reason=data.reason,
                notes=data.notes,
                status=AppointmentStatus.PENDING.value,
            )
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        appointment = dict(result.mappings().one())

        await NotificationService.notify_appointment_requested(
            self.db,
            doctor_user_id=doctor["user_id"],
            patient_name=patient["full_name"],
            appointment_id=appointment["id"],
            commit=False,
        )
        await self.db.commit()

        logger.info(
            "appointment_created",
            appointment_id=str(appointment["id"]),
            patient_id=str(patient["id"]),
            doctor_id=str(doctor["id"]),
        )
        return appointment

    async def list_appointments(
        self,
        user: dict[str, Any],
        status: AppointmentStatus | None = None,
    ) -> list[dict[str, Any]]:
        """
        List appointments visible to the caller.

        Patients get their own bookings, doctors the bookings made with them,
        admins everything.

        Raises:
            NotFoundException: If a doctor caller has no doctor profile yet
        """
        doctor_id = await self._caller_doctor_id(user)
        if user["role"] == UserRole.DOCTOR and doctor_id is None:
            raise NotFoundException("Doctor profile not found")

        conditions = row_scope(appointments, user, doctor_id)
        if status:
            conditions.append(appointments.c.status == status.value)

        stmt = (
            select(appointments)
            .where(and_(*conditions) if conditions else True)
            .order_by(appointments.c.appointment_date, appointments.c.appointment_time)
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_appointment(self, appointment_id: UUID, user: dict[str, Any]) -> dict[str, Any]:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the caller is neither its patient, its doctor nor an admin
        """
        appointment = await self._get_row(appointment_id)
        doctor_id = await self._caller_doctor_id(user)

        if not can_access_row(user, appointment, doctor_id):
            raise ForbiddenException("Access denied to this appointment")

        return appointment

    async def update_appointment(
        self,
        appointment_id: UUID,
        user: dict[str, Any],
        data: AppointmentUpdate,
    ) -> dict[str, Any]:
        """
        Reschedule or edit an appointment.

        Only pending and confirmed appointments can be modified.
        """
        appointment = await self.get_appointment(appointment_id, user)

        if AppointmentStatus(appointment["status"]) not in MODIFIABLE_STATUSES:
            raise BadRequestException("Only pending or confirmed appointments can be modified")

        update_values = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not update_values:
            return appointment

        update_values["updated_at"] = datetime.now(UTC)

        stmt = (
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(**update_values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        return dict(result.mappings().one())

    async def set_status(
        self,
        appointment_id: UUID,
        requested_status: AppointmentStatus,
        acting_user_id: UUID,
        acting_role: UserRole | str,
    ) -> dict[str, Any]:
        """
        Apply a status change to an appointment.

        Rules:
            - a doctor may only act on appointments booked with their own profile;
            - a patient may only act on their own appointments and cannot
              complete them;
            - ``completed`` is only reachable from ``confirmed``;
            - every other transition is allowed.

        On success the new status, the patient notification and (for
        completion) the doctor's consultation counter are committed together.

        Args:
            appointment_id: Appointment ID
            requested_status: Target status
            acting_user_id: Profile ID of the caller
            acting_role: Role of the caller

        Returns:
            Updated appointment

        Raises:
            NotFoundException: If the appointment does not exist
            ForbiddenException: If the caller does not own the appointment
            InvalidTransitionException: If completing an unconfirmed appointment
        """
        role = UserRole(acting_role)
        appointment = await self._get_row(appointment_id)
        current_status = AppointmentStatus(appointment["status"])

        if role == UserRole.DOCTOR:
            doctor = await self.doctors.get_doctor_by_user_id(self.db, acting_user_id)
            if not doctor or doctor["id"] != appointment["doctor_id"]:
                raise ForbiddenException("Not authorized")
        elif role == UserRole.PATIENT:
            if appointment["patient_id"] != acting_user_id:
                raise ForbiddenException("Not authorized")
            if requested_status == AppointmentStatus.COMPLETED:
                raise ForbiddenException("Only the doctor can mark an appointment as completed")

        if (
            requested_status == AppointmentStatus.COMPLETED
            and current_status != AppointmentStatus.CONFIRMED
        ):
            raise InvalidTransitionException(
                current_status.value,
                requested_status.value,
                "Only confirmed appointments can be completed",
            )

        update_values: dict[str, Any] = {
            "status": requested_status.value,
            "updated_at": datetime.now(UTC),
        }
        if requested_status == AppointmentStatus.CONFIRMED and not appointment["video_room_id"]:
            update_values["video_room_id"] = f"room-{uuid4().hex[:12]}"

        stmt = (
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(**update_values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        updated = dict(result.mappings().one())

        if requested_status == AppointmentStatus.COMPLETED:
            await DoctorService.increment_consultations(self.db, appointment["doctor_id"])

        await NotificationService.notify_appointment_status(
            self.db,
            patient_id=appointment["patient_id"],
            new_status=requested_status.value,
            appointment_id=appointment_id,
            commit=False,
        )
        await self.db.commit()

        if requested_status == AppointmentStatus.COMPLETED:
            self.doctors.invalidate(appointment["doctor_id"])

        logger.info(
            "appointment_status_changed",
            appointment_id=str(appointment_id),
            old_status=current_status.value,
            new_status=requested_status.value,
            acting_user_id=str(acting_user_id),
            acting_role=role.value,
        )
        return updated
