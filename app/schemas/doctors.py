"""Doctor profile schemas for request/response validation."""

from datetime import datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

# ============================================================================
# Doctor Profile Schemas
# ============================================================================


class DoctorProfileCreate(BaseModel):
    """Schema for a doctor creating their own profile."""

    specialization: str = Field(..., min_length=1, max_length=200)
    license_number: str = Field(..., min_length=1, max_length=100)
    qualification: str = Field(..., min_length=1)
    experience_years: int = Field(0, ge=0)
    consultation_fee: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    bio: str | None = Field(None, max_length=1000)


class DoctorProfileUpdate(BaseModel):
    """Fields a doctor may change. Verification and aggregates are system-owned."""

    specialization: str | None = Field(None, min_length=1, max_length=200)
    qualification: str | None = Field(None, min_length=1)
    experience_years: int | None = Field(None, ge=0)
    consultation_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    bio: str | None = Field(None, max_length=1000)
    is_available: bool | None = None


class DoctorVerificationRequest(BaseModel):
    """Admin verification toggle."""

    is_verified: bool


class DoctorProfileResponse(BaseModel):
    """Doctor profile response schema."""

    id: UUID
    user_id: UUID
    full_name: str | None = None
    specialization: str
    license_number: str
    qualification: str
    experience_years: int
    consultation_fee: Decimal
    bio: str | None = None
    is_verified: bool
    verified_at: datetime | None = None
    is_available: bool
    rating: Decimal
    rating_count: int
    total_consultations: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("consultation_fee", "rating", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class DoctorProfileEnvelope(BaseModel):
    """Single doctor profile response."""

    success: bool = True
    doctor: DoctorProfileResponse


class DoctorListResponse(BaseModel):
    """Paginated doctor list."""

    success: bool = True
    count: int
    doctors: list[DoctorProfileResponse]


# ============================================================================
# Availability Schemas
# ============================================================================


class AvailabilitySlot(BaseModel):
    """Weekly availability slot (0 = Sunday ... 6 = Saturday)."""

    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time
    is_active: bool = True

    @model_validator(mode="after")
    def validate_time_range(self) -> "AvailabilitySlot":
        """End time must be after start time."""
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class AvailabilityUpdate(BaseModel):
    """Replacement set of availability slots."""

    slots: list[AvailabilitySlot] = Field(default_factory=list, max_length=50)

    @model_validator(mode="after")
    def validate_unique_slots(self) -> "AvailabilityUpdate":
        """A doctor cannot have two slots starting at the same time on one day."""
        keys = [(slot.day_of_week, slot.start_time) for slot in self.slots]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate availability slot")
        return self


class AvailabilitySlotResponse(AvailabilitySlot):
    """Stored availability slot."""

    id: UUID
    doctor_id: UUID

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    """Availability slots for one doctor."""

    success: bool = True
    doctor_id: UUID
    slots: list[AvailabilitySlotResponse]
