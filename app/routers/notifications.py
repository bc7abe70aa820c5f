from fastapi import APIRouter

from app.core.errors import NotFound
from app.dependencies import CurrentUser, DbSession
from app.schemas import (
    MarkAllReadResponse,
    MessageResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationResponse,
)
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_notifications(user: CurrentUser, db: DbSession):
    notifications = await NotificationService.get_notifications(user.id, db)
    return NotificationListResponse(
        count=len(notifications),
        notifications=[NotificationRead.model_validate(n) for n in notifications],
    )


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_as_read(user: CurrentUser, db: DbSession):
    modified = await NotificationService.mark_all_as_read(user.id, db)
    return MarkAllReadResponse(
        message="All notifications marked as read", modified=modified
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(notification_id: str, user: CurrentUser, db: DbSession):
    notification = await NotificationService.mark_as_read(user.id, notification_id, db)
    if not notification:
        raise NotFound("Notification")
    return NotificationResponse(
        notification=NotificationRead.model_validate(notification)
    )


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(notification_id: str, user: CurrentUser, db: DbSession):
    deleted = await NotificationService.delete_notification(user.id, notification_id, db)
    if not deleted:
        raise NotFound("Notification")
    return MessageResponse(message="Notification deleted successfully")
