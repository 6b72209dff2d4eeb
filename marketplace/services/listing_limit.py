"""
Free listing limit service.

Every user may post a number of unpaid listings inside a rolling window (30 days for
"monthly", 365 for "yearly"). The effective limit is resolved from the user's own
override, then the admin default stored under the "free_listing_limits" setting,
then the configured defaults. Counts are computed fresh on every call.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.models.user import User, UserType, ListingPeriod
from marketplace.models.engagement import NotificationType
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.engagement import AdminSettingRepository, NotificationRepository
from marketplace.schemas.engagement import ListingStats, UserListingStats, FreeListingSettings
from marketplace.utils.exceptions import ListingLimitExceededError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

SETTINGS_KEY = "free_listing_limits"
LISTING_USER_TYPES = (UserType.SELLER, UserType.AGENT)


class ListingLimitService:
    """Resolves, reports and enforces free listing allowances."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.settings_repo = AdminSettingRepository(db_session)
        self.notification_repo = NotificationRepository(db_session)

    async def get_default_settings(self) -> FreeListingSettings:
        stored = await self.settings_repo.get_value(SETTINGS_KEY) or {}
        period = ListingPeriod(stored.get("default_period", settings.free_listing_default_period))
        return FreeListingSettings(
            default_limit=stored.get("default_limit", settings.free_listing_default_limit),
            default_period=period,
            default_limit_type=period.days,
        )

    async def update_default_settings(
        self,
        data: FreeListingSettings,
        admin: User
    ) -> FreeListingSettings:
        value = {
            "default_limit": data.default_limit,
            "default_period": data.default_period.value,
            "default_limit_type": data.default_period.days,
        }
        await self.settings_repo.upsert(SETTINGS_KEY, value, updated_by=admin.id)
        logger.info(
            f"Free listing defaults set to {data.default_limit}/{data.default_period.value} by {admin.email}"
        )
        return await self.get_default_settings()

    async def resolve_limit(
        self,
        user: User,
        defaults: Optional[FreeListingSettings] = None
    ) -> Tuple[int, ListingPeriod]:
        """Effective (limit, period) for a user."""
        if defaults is None:
            defaults = await self.get_default_settings()

        limit = user.free_listing_limit if user.free_listing_limit is not None else defaults.default_limit
        period = user.free_listing_period or defaults.default_period
        return limit, period

    @staticmethod
    def window_start(period: ListingPeriod, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.now(timezone.utc)) - timedelta(days=period.days)

    async def get_stats(
        self,
        user: User,
        defaults: Optional[FreeListingSettings] = None
    ) -> ListingStats:
        """Usage summary for one user."""
        limit, period = await self.resolve_limit(user, defaults)
        since = self.window_start(period)

        used = await self.property_repo.count_free_listings(user.id, since)
        pending = await self.property_repo.count_free_listings(user.id, since, pending_only=True)
        total = await self.property_repo.count_live_listings(user.id)

        return ListingStats(
            total_listings=total,
            free_listings_used=used,
            free_listing_limit=limit,
            free_listing_period=period,
            free_listing_limit_type=period.days,
            remaining_free_listings=max(0, limit - used),
            pending_free_listings=pending,
        )

    async def ensure_can_post_free(self, user: User) -> None:
        """
        Raise when one more unpaid listing would exceed the user's allowance.

        Raises:
            ListingLimitExceededError: 403 with the limit and window length
        """
        limit, period = await self.resolve_limit(user)
        used = await self.property_repo.count_free_listings(user.id, self.window_start(period))
        if used >= limit:
            logger.info(f"Free listing limit reached for {user.email}: {used}/{limit} in {period.days} days")
            raise ListingLimitExceededError(limit, period.days)

    async def list_user_stats(
        self,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[UserListingStats], int]:
        """Listing usage for sellers and agents, for the admin limits table."""
        users, total = await self.user_repo.search_users(
            user_types=LISTING_USER_TYPES, search=search, skip=skip, limit=limit
        )
        defaults = await self.get_default_settings()

        rows = []
        for user in users:
            stats = await self.get_stats(user, defaults)
            rows.append(UserListingStats(
                user_id=user.id,
                name=user.name,
                email=user.email,
                phone=user.phone,
                user_type=user.user_type,
                has_custom_limit=user.free_listing_limit is not None,
                **stats.model_dump(),
            ))
        return rows, total

    async def set_user_limit(
        self,
        user_id: uuid.UUID,
        limit: int,
        period: ListingPeriod,
        admin: User
    ) -> Dict[str, Any]:
        """Store a per-user override and tell the user about it."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        user = await self.user_repo.save(user, {"free_listing_limit": limit, "free_listing_period": period})

        await self.notification_repo.create({
            "user_id": user.id,
            "title": "Free listing limit updated",
            "message": f"You can now post {limit} free listings per {period.days} days.",
            "type": NotificationType.LISTING_LIMIT,
        })
        logger.info(f"Free listing limit for {user.email} set to {limit}/{period.value} by {admin.email}")

        return {
            "user_id": str(user.id),
            "free_listing_limit": {"limit": limit, "period": period.value, "limit_type": period.days},
        }
