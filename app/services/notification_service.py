import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.models import Notification
from app.schemas import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    @staticmethod
    async def create_notification(
        user_id: str, notification_data: NotificationCreate, db: AsyncSession
    ):
        """Store a notification for ``user_id``.

        There is no HTTP endpoint for this; server-side producers (reminders,
        system messages) call it directly.
        """
        data = notification_data.model_dump(exclude={"data"})
        if notification_data.data is not None:
            data["data"] = notification_data.data.model_dump(
                mode="json", by_alias=True, exclude_none=True
            )
        notification = Notification(**data, user_id=user_id)
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def get_notifications(user_id: str, db: AsyncSession):
        query = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(col(Notification.created_at).desc(), col(Notification.id))
        )
        result = await db.exec(query)
        return result.all()

    @staticmethod
    async def get_notification(user_id: str, notification_id: str, db: AsyncSession):
        query = select(Notification).where(
            Notification.id == notification_id, Notification.user_id == user_id
        )
        result = await db.exec(query)
        return result.first()

    @staticmethod
    async def mark_as_read(user_id: str, notification_id: str, db: AsyncSession):
        notification = await NotificationService.get_notification(
            user_id, notification_id, db
        )
        if not notification:
            return None
        notification.read = True
        notification.updated_at = datetime.now(timezone.utc)
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def mark_all_as_read(user_id: str, db: AsyncSession) -> int:
        """Mark every unread notification of the user as read in one statement."""
        stmt = (
            update(Notification)
            .where(col(Notification.user_id) == user_id, col(Notification.read).is_(False))
            .values(read=True, updated_at=datetime.now(timezone.utc))
        )
        result = await db.execute(stmt)
        await db.commit()
        logger.debug(f"Marked {result.rowcount} notifications read for user {user_id}")
        return result.rowcount

    @staticmethod
    async def delete_notification(user_id: str, notification_id: str, db: AsyncSession):
        notification = await NotificationService.get_notification(
            user_id, notification_id, db
        )
        if not notification:
            return False
        await db.delete(notification)
        await db.commit()
        return True
