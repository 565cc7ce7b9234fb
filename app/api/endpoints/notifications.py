"""Notification endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from app.core.exceptions import NotFoundException
from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.notifications import (
    MarkReadResponse,
    NotificationListResponse,
    NotificationRecord,
    UnreadCountResponse,
)
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def list_notifications(
    current_user: CurrentUser,
    db: DatabaseSession,
    unread_only: bool = Query(False, description="Only return unread notifications"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> NotificationListResponse:
    """
    Get the caller's notifications, newest first.

    Args:
        current_user: Authenticated user
        db: Database session
        unread_only: Only return unread notifications
        limit: Maximum number of notifications
        offset: Number of notifications to skip

    Returns:
        Notifications with the total unread count
    """
    rows = await NotificationService.get_user_notifications(
        db,
        user_id=current_user["id"],
        unread_only=unread_only,
        limit=limit,
        offset=offset,
    )
    unread = await NotificationService.count_unread(db, current_user["id"])

    return NotificationListResponse(
        count=len(rows),
        unread_count=unread,
        notifications=[NotificationRecord.model_validate(row) for row in rows],
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Count unread")
async def unread_count(current_user: CurrentUser, db: DatabaseSession) -> UnreadCountResponse:
    """Number of unread notifications for the caller."""
    count = await NotificationService.count_unread(db, current_user["id"])
    return UnreadCountResponse(unread_count=count)


@router.patch("/read-all", response_model=MarkReadResponse, summary="Mark all read")
async def mark_all_read(current_user: CurrentUser, db: DatabaseSession) -> MarkReadResponse:
    """Mark every notification of the caller as read."""
    updated = await NotificationService.mark_all_as_read(db, current_user["id"])
    return MarkReadResponse(updated=updated)


@router.patch("/{notification_id}/read", response_model=MarkReadResponse, summary="Mark read")
async def mark_read(
    notification_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> MarkReadResponse:
    """
    Mark one of the caller's notifications as read.

    Raises:
        NotFoundException: If the notification does not belong to the caller
    """
    if not await NotificationService.mark_as_read(db, notification_id, current_user["id"]):
        raise NotFoundException("Notification not found")
    return MarkReadResponse(updated=1)
