"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from app.models.metadata import metadata

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Ownership / references
    Column(
        "patient_id",
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Appointment details
    Column("appointment_date", Date, nullable=False, index=True),
    # HH:MM, 24h clock
    Column("appointment_time", String(5), nullable=False),
    Column("reason", Text, nullable=False),
    Column("notes", Text, nullable=True),
    Column("video_room_id", Text, nullable=True),
    # Status management
    Column("status", String(20), nullable=False, server_default=text("'pending'"), index=True),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'rescheduled')",
        name="status_check",
    ),
    Index("idx_appointments_patient_date", "patient_id", "appointment_date"),
    Index("idx_appointments_doctor_date", "doctor_id", "appointment_date"),
)
