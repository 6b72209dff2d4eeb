"""
In-app notifications for the current user and admin broadcasts.
"""

from datetime import datetime, timezone
from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.engagement import NotificationRepository
from marketplace.repositories.user import UserRepository
from marketplace.models.engagement import Notification, NotificationType
from marketplace.models.user import User
from marketplace.schemas.engagement import NotificationBroadcast
from marketplace.utils.exceptions import NotFoundError, BadRequestError
import uuid
import logging

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, db_session: AsyncSession):
        self.notification_repo = NotificationRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_for_user(
        self,
        user: User,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[Notification], int]:
        return await self.notification_repo.list_for_user(user.id, unread_only, skip, limit)

    async def unread_count(self, user: User) -> int:
        return await self.notification_repo.count_unread(user.id)

    async def _get_own(self, notification_id: uuid.UUID, user: User) -> Notification:
        # Another user's notification is reported as missing
        notification = await self.notification_repo.get_for_user(notification_id, user.id)
        if not notification:
            raise NotFoundError("Notification", str(notification_id))
        return notification

    async def mark_read(self, notification_id: uuid.UUID, user: User) -> Notification:
        notification = await self._get_own(notification_id, user)
        if notification.is_read:
            return notification
        return await self.notification_repo.save(
            notification, {"is_read": True, "read_at": datetime.now(timezone.utc)}
        )

    async def mark_all_read(self, user: User) -> int:
        return await self.notification_repo.mark_all_read(user.id)

    async def delete(self, notification_id: uuid.UUID, user: User) -> None:
        notification = await self._get_own(notification_id, user)
        await self.notification_repo.delete(notification.id)

    async def broadcast(self, data: NotificationBroadcast, admin: User) -> int:
        """
        Send a general notification to explicit users or every active user of a type.

        Returns:
            Number of notifications created
        """
        if data.user_ids:
            recipients = []
            for user_id in dict.fromkeys(data.user_ids):
                if not await self.user_repo.get_by_id(user_id):
                    raise NotFoundError("User", str(user_id))
                recipients.append(user_id)
        else:
            recipients = await self.user_repo.get_active_ids_by_type(data.user_type)

        if not recipients:
            raise BadRequestError("No recipients matched the broadcast")

        created = await self.notification_repo.bulk_create([
            {
                "user_id": user_id,
                "title": data.title,
                "message": data.message,
                "type": NotificationType.GENERAL,
            }
            for user_id in recipients
        ])
        logger.info(f"Broadcast '{data.title}' sent to {len(created)} users by {admin.email}")
        return len(created)
