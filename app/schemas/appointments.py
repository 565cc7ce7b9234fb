"""Appointment schemas for request/response validation."""

import re
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


# Statuses in which the booking details may still be edited
MODIFIABLE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


def _validate_time(value: str) -> str:
    if not _TIME_PATTERN.match(value):
        raise ValueError("Please provide time in HH:mm format")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def _validate_date(value: date) -> date:
    if value < date.today():
        raise ValueError("Appointment date cannot be in the past")
    return value


def _validate_reason(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Reason for appointment is required")
    return value


class AppointmentCreate(BaseModel):
    """Schema for a patient booking an appointment."""

    doctor_id: UUID
    appointment_date: date
    appointment_time: str
    reason: str = Field(..., min_length=1, max_length=500)
    notes: str | None = Field(None, max_length=1000)

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate HH:mm time format."""
        return _validate_time(v)

    @field_validator("appointment_date")
    @classmethod
    def validate_date(cls, v: date) -> date:
        """Reject dates in the past."""
        return _validate_date(v)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        """Trim whitespace and reject blank reasons."""
        return _validate_reason(v)


class AppointmentUpdate(BaseModel):
    """Reschedule or edit an appointment that is still pending or confirmed."""

    appointment_date: date | None = None
    appointment_time: str | None = None
    reason: str | None = Field(None, min_length=1, max_length=500)
    notes: str | None = Field(None, max_length=1000)

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str | None) -> str | None:
        """Validate HH:mm time format."""
        return _validate_time(v) if v is not None else v

    @field_validator("appointment_date")
    @classmethod
    def validate_date(cls, v: date | None) -> date | None:
        """Reject dates in the past."""
        return _validate_date(v) if v is not None else v

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str | None) -> str:
        """A reason may be reworded but not blanked or removed."""
        if v is None:
            raise ValueError("Reason for appointment is required")
        return _validate_reason(v)


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    patient_id: UUID
    doctor_id: UUID
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: str
    notes: str | None = None
    video_room_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AppointmentEnvelope(BaseModel):
    """Single appointment response."""

    success: bool = True
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    """Role-scoped appointment list."""

    success: bool = True
    count: int
    appointments: list[AppointmentResponse]
