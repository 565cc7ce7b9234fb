"""Doctor profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import (
    AdminUser,
    CurrentUser,
    DatabaseSession,
    DoctorServiceDep,
    DoctorUser,
)
from app.schemas.doctors import (
    AvailabilityResponse,
    AvailabilitySlotResponse,
    AvailabilityUpdate,
    DoctorListResponse,
    DoctorProfileCreate,
    DoctorProfileEnvelope,
    DoctorProfileResponse,
    DoctorProfileUpdate,
    DoctorVerificationRequest,
)
from app.services.doctor_service import DoctorService

router = APIRouter()


# ============================================================================
# Own profile
# ============================================================================


@router.post("", response_model=DoctorProfileEnvelope, status_code=status.HTTP_201_CREATED)
async def create_doctor_profile(
    doctor_data: DoctorProfileCreate,
    current_user: DoctorUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """
    Create the caller's doctor profile.

    - **specialization**: Primary medical specialization
    - **license_number**: Medical license number (unique)
    - **qualification**: Medical qualifications
    - **experience_years**: Years of medical experience
    - **consultation_fee**: Consultation fee
    - **bio**: Doctor's biography

    New profiles are unverified and hidden from patients until an admin
    verifies them.
    """
    doctor = await doctor_service.create_doctor(db, current_user["id"], doctor_data)
    return DoctorProfileEnvelope(doctor=DoctorProfileResponse.model_validate(doctor))


@router.get("/me", response_model=DoctorProfileEnvelope)
async def get_my_doctor_profile(
    current_user: DoctorUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """Get the caller's doctor profile."""
    doctor = await doctor_service.get_own_doctor(db, current_user["id"])
    return DoctorProfileEnvelope(doctor=DoctorProfileResponse.model_validate(doctor))


@router.patch("/me", response_model=DoctorProfileEnvelope)
async def update_my_doctor_profile(
    doctor_data: DoctorProfileUpdate,
    current_user: DoctorUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """Update the caller's doctor profile. Only provided fields are changed."""
    doctor = await doctor_service.get_own_doctor(db, current_user["id"])
    updated = await doctor_service.update_doctor(db, doctor["id"], doctor_data)
    return DoctorProfileEnvelope(doctor=DoctorProfileResponse.model_validate(updated))


@router.put("/me/availability", response_model=AvailabilityResponse)
async def replace_my_availability(
    availability: AvailabilityUpdate,
    current_user: DoctorUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """Replace the caller's weekly availability with the given slots."""
    doctor = await doctor_service.get_own_doctor(db, current_user["id"])
    slots = await DoctorService.replace_availability(db, doctor["id"], availability.slots)
    return AvailabilityResponse(
        doctor_id=doctor["id"],
        slots=[AvailabilitySlotResponse.model_validate(slot) for slot in slots],
    )


# ============================================================================
# Directory
# ============================================================================


@router.get("", response_model=DoctorListResponse)
async def list_doctors(
    current_user: CurrentUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
    specialization: str | None = Query(None, description="Filter by specialization"),
    available_only: bool = Query(False, description="Only doctors accepting appointments"),
    min_rating: float | None = Query(None, ge=0, le=5, description="Minimum rating"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of records to return"),
):
    """
    List verified doctors, best rated first.

    Admins also see unverified profiles; doctors also see their own.
    """
    doctors = await doctor_service.list_doctors(
        db,
        current_user,
        specialization=specialization,
        available_only=available_only,
        min_rating=min_rating,
        skip=skip,
        limit=limit,
    )
    return DoctorListResponse(
        count=len(doctors),
        doctors=[DoctorProfileResponse.model_validate(d) for d in doctors],
    )


@router.get("/{doctor_id}", response_model=DoctorProfileEnvelope)
async def get_doctor(
    doctor_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """Get a doctor profile by ID (cached)."""
    doctor = await doctor_service.get_visible_doctor(db, current_user, doctor_id)
    return DoctorProfileEnvelope(doctor=DoctorProfileResponse.model_validate(doctor))


@router.get("/{doctor_id}/availability", response_model=AvailabilityResponse)
async def get_doctor_availability(
    doctor_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """Get the weekly availability of a visible doctor."""
    doctor = await doctor_service.get_visible_doctor(db, current_user, doctor_id)
    slots = await DoctorService.get_availability(db, doctor_id)
    return AvailabilityResponse(
        doctor_id=doctor["id"],
        slots=[AvailabilitySlotResponse.model_validate(slot) for slot in slots],
    )


# ============================================================================
# Verification
# ============================================================================


@router.patch("/{doctor_id}/verification", response_model=DoctorProfileEnvelope)
async def set_doctor_verification(
    doctor_id: UUID,
    verification: DoctorVerificationRequest,
    current_user: AdminUser,
    db: DatabaseSession,
    doctor_service: DoctorServiceDep,
):
    """
    Verify or unverify a doctor (admin only).

    The doctor receives a system notification when the flag changes.
    """
    doctor = await doctor_service.set_verification(
        db,
        doctor_id,
        is_verified=verification.is_verified,
        verified_by=current_user["id"],
    )
    return DoctorProfileEnvelope(doctor=DoctorProfileResponse.model_validate(doctor))
