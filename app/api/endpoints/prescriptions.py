"""Prescription endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DatabaseSession, DoctorUser
from app.schemas.prescriptions import (
    PrescriptionCreate,
    PrescriptionEnvelope,
    PrescriptionListResponse,
    PrescriptionResponse,
)
from app.services.prescription_service import PrescriptionService

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.post("", response_model=PrescriptionEnvelope, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    data: PrescriptionCreate,
    current_user: DoctorUser,
    db: DatabaseSession,
):
    """Issue a prescription for one of the caller's appointments."""
    prescription = await PrescriptionService(db).create_prescription(current_user, data)
    return PrescriptionEnvelope(prescription=PrescriptionResponse.model_validate(prescription))


@router.get("", response_model=PrescriptionListResponse)
async def list_prescriptions(current_user: CurrentUser, db: DatabaseSession):
    """List prescriptions visible to the caller."""
    rows = await PrescriptionService(db).list_prescriptions(current_user)
    return PrescriptionListResponse(
        count=len(rows),
        prescriptions=[PrescriptionResponse.model_validate(row) for row in rows],
    )


@router.get("/{prescription_id}", response_model=PrescriptionEnvelope)
async def get_prescription(
    prescription_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
):
    """Get a prescription by ID."""
    prescription = await PrescriptionService(db).get_prescription(prescription_id, current_user)
    return PrescriptionEnvelope(prescription=PrescriptionResponse.model_validate(prescription))
