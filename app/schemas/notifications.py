"""Notification schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    """Notification type enumeration."""

    APPOINTMENT = "appointment"
    PRESCRIPTION = "prescription"
    SYSTEM = "system"
    REMINDER = "reminder"


class NotificationRecord(BaseModel):
    """Schema for notification record."""

    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationType
    is_read: bool
    related_id: UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """Notifications for the current user, newest first."""

    success: bool = True
    count: int
    unread_count: int
    notifications: list[NotificationRecord]


class UnreadCountResponse(BaseModel):
    """Unread notification counter."""

    success: bool = True
    unread_count: int


class MarkReadResponse(BaseModel):
    """Result of marking notifications read."""

    success: bool = True
    updated: int
