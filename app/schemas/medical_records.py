"""Medical record schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordType(str, Enum):
    """Kind of document a medical record holds."""

    LAB_REPORT = "lab_report"
    IMAGING = "imaging"
    PRESCRIPTION = "prescription"
    DIAGNOSIS = "diagnosis"
    OTHER = "other"


class MedicalRecordCreate(BaseModel):
    """
    Record uploaded for a patient.

    Patients may omit ``patient_id``; their own id is used.
    """

    patient_id: UUID | None = None
    record_type: RecordType
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    file_url: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


class MedicalRecordResponse(BaseModel):
    """Stored medical record."""

    id: UUID
    patient_id: UUID
    record_type: RecordType
    title: str
    description: str | None = None
    file_url: str | None = None
    uploaded_by: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicalRecordEnvelope(BaseModel):
    """Single medical record response."""

    success: bool = True
    record: MedicalRecordResponse


class MedicalRecordListResponse(BaseModel):
    """Medical records visible to the caller."""

    success: bool = True
    count: int
    records: list[MedicalRecordResponse]
