"""
Repositories for advertisement leads, notifications and admin settings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_
from marketplace.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from marketplace.models.engagement import (
    AdvertisementSubmission,
    SubmissionStatus,
    Notification,
    AdminSetting,
)
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class AdvertisementSubmissionRepository(BaseRepository[AdvertisementSubmission]):

    def __init__(self, db: AsyncSession):
        super().__init__(AdvertisementSubmission, db)

    async def search(
        self,
        status: Optional[SubmissionStatus] = None,
        banner_type: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[AdvertisementSubmission], int]:
        """Leads for the admin inbox, newest first."""
        query = select(AdvertisementSubmission)

        if status:
            query = query.where(AdvertisementSubmission.status == status)

        if banner_type:
            query = query.where(AdvertisementSubmission.banner_type == banner_type)

        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    AdvertisementSubmission.full_name.ilike(pattern, escape=LIKE_ESCAPE),
                    AdvertisementSubmission.email.ilike(pattern, escape=LIKE_ESCAPE),
                    AdvertisementSubmission.phone.ilike(pattern, escape=LIKE_ESCAPE),
                    AdvertisementSubmission.project_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        query = query.order_by(AdvertisementSubmission.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def count_by_status(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(AdvertisementSubmission.status, func.count(AdvertisementSubmission.id))
            .group_by(AdvertisementSubmission.status)
        )
        counts = {status.value: 0 for status in SubmissionStatus}
        for status, total in result.all():
            counts[status.value] = total
        return counts

    async def count_by_banner_type(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(AdvertisementSubmission.banner_type, func.count(AdvertisementSubmission.id))
            .group_by(AdvertisementSubmission.banner_type)
        )
        return {banner_type: total for banner_type, total in result.all()}


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[Notification], int]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def get_for_user(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Notification]:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_unread(self, user_id: uuid.UUID) -> int:
        return await self.count({"user_id": user_id, "is_read": False})

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        try:
            result = await self.db.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
                .values(is_read=True, read_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to mark notifications read for {user_id}: {e}")
            raise


class AdminSettingRepository(BaseRepository[AdminSetting]):

    def __init__(self, db: AsyncSession):
        super().__init__(AdminSetting, db)

    async def get_value(self, key: str) -> Optional[Dict[str, Any]]:
        setting = await self.get_by_field("key", key)
        return dict(setting.value) if setting else None

    async def upsert(self, key: str, value: Dict[str, Any], updated_by: Optional[uuid.UUID] = None) -> AdminSetting:
        setting = await self.get_by_field("key", key)
        if setting is None:
            return await self.create({"key": key, "value": value, "updated_by": updated_by})
        return await self.save(setting, {"value": value, "updated_by": updated_by})
