"""Medical record endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.medical_records import (
    MedicalRecordCreate,
    MedicalRecordEnvelope,
    MedicalRecordListResponse,
    MedicalRecordResponse,
    RecordType,
)
from app.services.medical_record_service import MedicalRecordService

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])


@router.post("", response_model=MedicalRecordEnvelope, status_code=status.HTTP_201_CREATED)
async def create_medical_record(
    data: MedicalRecordCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
):
    """Upload a record to a patient's history."""
    record = await MedicalRecordService(db).create_record(current_user, data)
    return MedicalRecordEnvelope(record=MedicalRecordResponse.model_validate(record))


@router.get("", response_model=MedicalRecordListResponse)
async def list_medical_records(
    current_user: CurrentUser,
    db: DatabaseSession,
    record_type: RecordType | None = Query(None, description="Filter by record type"),
):
    """List records the caller owns or uploaded."""
    rows = await MedicalRecordService(db).list_records(current_user, record_type)
    return MedicalRecordListResponse(
        count=len(rows),
        records=[MedicalRecordResponse.model_validate(row) for row in rows],
    )


@router.get("/{record_id}", response_model=MedicalRecordEnvelope)
async def get_medical_record(
    record_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
):
    """Get a medical record by ID."""
    record = await MedicalRecordService(db).get_record(record_id, current_user)
    return MedicalRecordEnvelope(record=MedicalRecordResponse.model_validate(record))
