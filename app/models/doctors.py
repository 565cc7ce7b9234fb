"""Doctor profile and availability models using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Time,
    UniqueConstraint,
    Uuid,
    func,
    text,
)

from app.models.metadata import metadata

doctor_profiles = Table(
    "doctor_profiles",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    ),
    # Professional credentials
    Column("specialization", String(200), nullable=False, index=True),
    Column("license_number", String(100), nullable=False, unique=True),
    Column("qualification", Text, nullable=False),
    Column("experience_years", Integer, nullable=False, server_default=text("0")),
    Column("consultation_fee", Numeric(10, 2), nullable=False, server_default=text("0")),
    Column("bio", Text),
    # Verification (admin only)
    Column("is_verified", Boolean, nullable=False, server_default=text("false"), index=True),
    Column("verified_at", DateTime(timezone=True)),
    Column("verified_by", Uuid),
    Column("is_available", Boolean, nullable=False, server_default=text("true")),
    # Aggregates maintained by the system
    Column("rating", Numeric(3, 2), nullable=False, server_default=text("0")),
    Column("rating_count", Integer, nullable=False, server_default=text("0")),
    Column("total_consultations", Integer, nullable=False, server_default=text("0")),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("experience_years >= 0", name="experience_years_check"),
    CheckConstraint("consultation_fee >= 0", name="consultation_fee_check"),
    CheckConstraint("rating >= 0 AND rating <= 5", name="rating_check"),
)

doctor_availability = Table(
    "doctor_availability",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # 0 = Sunday ... 6 = Saturday
    Column("day_of_week", Integer, nullable=False),
    Column("start_time", Time, nullable=False),
    Column("end_time", Time, nullable=False),
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("day_of_week BETWEEN 0 AND 6", name="day_of_week_check"),
    UniqueConstraint(
        "doctor_id", "day_of_week", "start_time", name="doctor_availability_slot_key"
    ),
)
