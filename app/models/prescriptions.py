"""Prescription model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Table, Text, Uuid, func

from app.models.metadata import metadata

prescriptions = Table(
    "prescriptions",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
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
    Column("diagnosis", Text, nullable=False),
    # [{"name": ..., "dosage": ..., "frequency": ..., "duration": ...}]
    Column("medications", JSON, nullable=False),
    Column("instructions", Text),
    Column("file_url", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
