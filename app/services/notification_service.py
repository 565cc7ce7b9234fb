"""Notification service for in-app notifications."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notifications import notifications
from app.schemas.notifications import NotificationType

logger = structlog.get_logger(__name__)


class NotificationService:
    """
    Creates and reads notification records.

    Notifications are plain inserts: no deduplication, batching or push
    delivery. Clients poll for unread rows.
    """

    @staticmethod
    async def notify(
        db: AsyncSession,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: NotificationType | str,
        related_id: UUID | None = None,
        commit: bool = True,
    ) -> dict[str, Any]:
        """
        Create a notification for a user.

        Args:
            db: Database session
            user_id: Recipient profile ID
            title: Notification title
            message: Notification body
            notification_type: appointment, prescription, system or reminder
            related_id: Optional ID of the entity the notification is about
            commit: Commit immediately; pass False to join the caller's transaction

        Returns:
            Created notification record
        """
        notification_type = NotificationType(notification_type)

        stmt = (
            notifications.insert()
            .values(
                user_id=user_id,
                title=title,
                message=message,
                type=notification_type.value,
                related_id=related_id,
            )
            .returning(notifications)
        )
        result = await db.execute(stmt)
        record = dict(result.mappings().one())

        if commit:
            await db.commit()

        logger.info(
            "notification_created",
            notification_id=str(record["id"]),
            user_id=str(user_id),
            type=notification_type.value,
        )
        return record

    @staticmethod
    async def notify_appointment_requested(
        db: AsyncSession,
        doctor_user_id: UUID,
        patient_name: str,
        appointment_id: UUID,
        commit: bool = True,
    ) -> dict[str, Any]:
        """Tell a doctor a patient has booked with them."""
        return await NotificationService.notify(
            db,
            user_id=doctor_user_id,
            title="New Appointment Request",
            message=f"{patient_name} has requested an appointment",
            notification_type=NotificationType.APPOINTMENT,
            related_id=appointment_id,
            commit=commit,
        )

    @staticmethod
    async def notify_appointment_status(
        db: AsyncSession,
        patient_id: UUID,
        new_status: str,
        appointment_id: UUID,
        commit: bool = True,
    ) -> dict[str, Any]:
        """Tell a patient their appointment changed status."""
        return await NotificationService.notify(
            db,
            user_id=patient_id,
            title="Appointment Status Updated",
            message=f"Your appointment status is now: {new_status}",
            notification_type=NotificationType.APPOINTMENT,
            related_id=appointment_id,
            commit=commit,
        )

    @staticmethod
    async def get_user_notifications(
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Get notifications for a user, newest first.

        Args:
            db: Database session
            user_id: Recipient profile ID
            unread_only: Only return unread notifications
            limit: Maximum number of rows
            offset: Rows to skip

        Returns:
            Notification records
        """
        query = select(notifications).where(notifications.c.user_id == user_id)

        if unread_only:
            query = query.where(notifications.c.is_read.is_(False))

        query = (
            query.order_by(desc(notifications.c.created_at), desc(notifications.c.id))
            .limit(limit)
            .offset(offset)
        )

        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def count_unread(db: AsyncSession, user_id: UUID) -> int:
        """Count unread notifications for a user."""
        query = (
            select(func.count())
            .select_from(notifications)
            .where(
                notifications.c.user_id == user_id,
                notifications.c.is_read.is_(False),
            )
        )
        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def mark_as_read(db: AsyncSession, notification_id: UUID, user_id: UUID) -> bool:
        """
        Mark one notification read.

        Returns:
            True if updated, False if the notification does not exist for this user
        """
        result = await db.execute(
            update(notifications)
            .where(
                notifications.c.id == notification_id,
                notifications.c.user_id == user_id,
            )
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def mark_all_as_read(db: AsyncSession, user_id: UUID) -> int:
        """Mark every unread notification of a user read, returning how many changed."""
        result = await db.execute(
            update(notifications)
            .where(
                notifications.c.user_id == user_id,
                notifications.c.is_read.is_(False),
            )
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount
