"""Review schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ReviewCreate(BaseModel):
    """Patient review of a completed appointment."""

    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    """Stored review."""

    id: UUID
    appointment_id: UUID
    patient_id: UUID
    doctor_id: UUID
    rating: int
    comment: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewEnvelope(BaseModel):
    """Created review with the doctor's recomputed rating."""

    success: bool = True
    review: ReviewResponse
    doctor_rating: Decimal

    @field_serializer("doctor_rating", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class ReviewListResponse(BaseModel):
    """Role-scoped review list."""

    success: bool = True
    count: int
    reviews: list[ReviewResponse]
