"""Review model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Table,
    Text,
    Uuid,
    func,
)

from app.models.metadata import metadata

reviews = Table(
    "reviews",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # One review per appointment
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("patient_id", Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("rating", Integer, nullable=False),
    Column("comment", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("rating BETWEEN 1 AND 5", name="rating_check"),
)
