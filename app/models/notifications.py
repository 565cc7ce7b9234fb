"""Notification model for in-app notifications."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
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

notifications = Table(
    "notifications",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("user_id", Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
    Column("title", Text, nullable=False),
    Column("message", Text, nullable=False),
    Column("type", String(20), nullable=False),
    Column("is_read", Boolean, nullable=False, server_default=text("false")),
    # Appointment, prescription or doctor profile the notification is about
    Column("related_id", Uuid, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "type IN ('appointment', 'prescription', 'system', 'reminder')",
        name="type_check",
    ),
    Index("idx_notifications_user_id", "user_id"),
    Index("idx_notifications_unread", "user_id", "is_read"),
)
