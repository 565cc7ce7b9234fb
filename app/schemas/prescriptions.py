"""Prescription schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Medication(BaseModel):
    """One prescribed medication."""

    name: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: str | None = Field(None, max_length=100)


class PrescriptionCreate(BaseModel):
    """Prescription issued by the appointment's doctor."""

    appointment_id: UUID
    diagnosis: str = Field(..., min_length=1)
    medications: list[Medication] = Field(default_factory=list)
    instructions: str | None = None
    file_url: str | None = None


class PrescriptionResponse(BaseModel):
    """Stored prescription."""

    id: UUID
    appointment_id: UUID
    patient_id: UUID
    doctor_id: UUID
    diagnosis: str
    medications: list[Medication]
    instructions: str | None = None
    file_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PrescriptionEnvelope(BaseModel):
    """Single prescription response."""

    success: bool = True
    prescription: PrescriptionResponse


class PrescriptionListResponse(BaseModel):
    """Role-scoped prescription list."""

    success: bool = True
    count: int
    prescriptions: list[PrescriptionResponse]
