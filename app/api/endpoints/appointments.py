"""Appointment endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import (
    CurrentUser,
    DatabaseSession,
    DoctorServiceDep,
    PatientUser,
)
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentEnvelope,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from app.schemas.reviews import ReviewCreate, ReviewEnvelope, ReviewResponse
from app.services.appointment_service import AppointmentService
from app.services.review_service import ReviewService

router = APIRouter()


@router.post(
    "",
    response_model=AppointmentEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    current_user: PatientUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
) -> AppointmentEnvelope:
    """
    Book an appointment with a verified doctor.

    The appointment starts as ``pending`` and the doctor is notified.

    Args:
        data: Appointment creation data
        current_user: Authenticated patient
        db: Database session
        doctors: Doctor service

    Returns:
        Created appointment
    """
    service = AppointmentService(db, doctors)
    appointment = await service.create_appointment(current_user, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.get(
    "",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    current_user: CurrentUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
) -> AppointmentListResponse:
    """
    List the appointments visible to the caller.

    Args:
        current_user: Authenticated user
        db: Database session
        doctors: Doctor service
        status_filter: Only return appointments in this status

    Returns:
        Appointments ordered by date and time
    """
    service = AppointmentService(db, doctors)
    rows = await service.list_appointments(current_user, status_filter)
    return AppointmentListResponse(
        count=len(rows),
        appointments=[AppointmentResponse.model_validate(row) for row in rows],
    )


@router.get(
    "/{appointment_id}",
    response_model=AppointmentEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
) -> AppointmentEnvelope:
    """
    Get a specific appointment by ID.

    Raises:
        NotFoundException: If the appointment does not exist
        ForbiddenException: If the caller may not see it
    """
    service = AppointmentService(db, doctors)
    appointment = await service.get_appointment(appointment_id, current_user)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Reschedule or edit an appointment",
)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
) -> AppointmentEnvelope:
    """Update date, time, reason or notes of a pending or confirmed appointment."""
    service = AppointmentService(db, doctors)
    appointment = await service.update_appointment(appointment_id, current_user, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Change appointment status",
)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
) -> AppointmentEnvelope:
    """
    Move an appointment through its lifecycle.

    Doctors confirm, complete and cancel their own appointments; patients
    may cancel or otherwise update theirs but never complete them. The
    patient is notified of every change.

    Raises:
        ForbiddenException: If the caller does not own the appointment
        InvalidTransitionException: If completing an appointment that is not confirmed
    """
    service = AppointmentService(db, doctors)
    appointment = await service.set_status(
        appointment_id,
        data.status,
        acting_user_id=current_user["id"],
        acting_role=current_user["role"],
    )
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.post(
    "/{appointment_id}/review",
    response_model=ReviewEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Review a completed appointment",
)
async def create_review(
    appointment_id: UUID,
    data: ReviewCreate,
    current_user: PatientUser,
    db: DatabaseSession,
    doctors: DoctorServiceDep,
) -> ReviewEnvelope:
    """
    Rate the doctor of a completed appointment.

    Returns the review together with the doctor's recomputed rating.
    """
    service = ReviewService(db, doctors)
    review, rating = await service.create_review(appointment_id, current_user, data)
    return ReviewEnvelope(review=ReviewResponse.model_validate(review), doctor_rating=rating)
