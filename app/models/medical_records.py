"""Medical record model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from app.models.metadata import metadata

medical_records = Table(
    "medical_records",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "patient_id",
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("record_type", String(20), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("file_url", Text),
    # Profile that uploaded the record; the patient or one of their doctors
    Column("uploaded_by", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "record_type IN ('lab_report', 'imaging', 'prescription', 'diagnosis', 'other')",
        name="record_type_check",
    ),
)
