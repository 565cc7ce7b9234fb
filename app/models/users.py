"""Profile model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from app.models.metadata import metadata

profiles = Table(
    "profiles",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Identity (immutable after registration)
    Column("email", Text, nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    Column("role", String(20), nullable=False, server_default=text("'patient'")),
    # Contact info (mutable)
    Column("full_name", Text, nullable=False),
    Column("phone", String(20)),
    Column("avatar_url", Text),
    Column("date_of_birth", Date),
    Column("gender", String(20)),
    # Account state
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("last_login_at", DateTime(timezone=True)),
    CheckConstraint("role IN ('patient', 'doctor', 'admin')", name="role_check"),
    CheckConstraint(
        "gender IN ('male', 'female', 'other', 'prefer_not_to_say')",
        name="gender_check",
    ),
)
