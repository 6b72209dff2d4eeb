"""
Admin moderation of listings and the admin dashboard counters.
"""

from datetime import datetime, timezone
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.engagement import NotificationRepository, AdvertisementSubmissionRepository
from marketplace.repositories.content import BlogRepository
from marketplace.models.property import Property, PropertyStatus, ApprovalStatus, AWAITING_REVIEW
from marketplace.models.user import User
from marketplace.models.engagement import NotificationType, SubmissionStatus
from marketplace.models.content import PublishStatus
from marketplace.schemas.property import PropertyApprovalUpdate
from marketplace.schemas.engagement import AdminStats
from marketplace.utils.exceptions import APIException, NotFoundError, BadRequestError
import uuid
import logging

logger = logging.getLogger(__name__)


class ModerationService:
    """Approval workflow, status and featured flags, soft deletion."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.notification_repo = NotificationRepository(db_session)

    async def _get_property(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_active_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        return property_obj

    async def list_properties(
        self,
        status: Optional[PropertyStatus] = None,
        approval_status: Optional[ApprovalStatus] = None,
        owner_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        return await self.property_repo.search_admin(
            status=status,
            approval_statuses=[approval_status] if approval_status else None,
            owner_id=owner_id,
            search=search,
            skip=skip,
            limit=limit,
        )

    async def list_pending(self, skip: int = 0, limit: int = 20) -> Tuple[List[Property], int]:
        return await self.property_repo.search_admin(approval_statuses=AWAITING_REVIEW, skip=skip, limit=limit)

    async def decide(
        self,
        property_id: uuid.UUID,
        decision: PropertyApprovalUpdate,
        admin: User
    ) -> Tuple[Property, Optional[User]]:
        """
        Approve or reject a listing and notify its owner.

        Returns:
            Tuple of (updated property, owner) so the caller can schedule the email
        """
        try:
            property_obj = await self._get_property(property_id)
            approved = decision.approval_status == ApprovalStatus.APPROVED.value

            if approved:
                changes = {
                    "approval_status": ApprovalStatus.APPROVED,
                    "status": PropertyStatus.ACTIVE,
                    "is_approved": True,
                    "approved_at": datetime.now(timezone.utc),
                    "approved_by": admin.id,
                    "rejection_reason": None,
                }
            else:
                changes = {
                    "approval_status": ApprovalStatus.REJECTED,
                    "status": PropertyStatus.INACTIVE,
                    "is_approved": False,
                    "rejection_reason": decision.rejection_reason.strip(),
                }
            if decision.admin_comments is not None:
                changes["admin_comments"] = decision.admin_comments

            property_obj = await self.property_repo.save(property_obj, changes)

            if approved:
                title, message = "Property approved", f"Your property \"{property_obj.title}\" is now live."
            else:
                title = "Property rejected"
                message = f"Your property \"{property_obj.title}\" was rejected: {property_obj.rejection_reason}"

            await self.notification_repo.create({
                "user_id": property_obj.owner_id,
                "property_id": property_obj.id,
                "title": title,
                "message": message,
                "type": NotificationType.APPROVAL if approved else NotificationType.REJECTION,
            })

            logger.info(
                f"Property {property_id} {decision.approval_status} by {admin.email}",
                extra={"property_id": str(property_id), "admin_id": str(admin.id)}
            )
            owner = await self.user_repo.get_by_id(property_obj.owner_id)
            return property_obj, owner
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to moderate property {property_id}: {e}")
            raise BadRequestError(f"Failed to update approval status: {str(e)}")

    async def set_status(self, property_id: uuid.UUID, status: PropertyStatus) -> Property:
        property_obj = await self._get_property(property_id)
        return await self.property_repo.save(property_obj, {"status": status})

    async def set_featured(self, property_id: uuid.UUID, featured: bool) -> Property:
        property_obj = await self._get_property(property_id)
        return await self.property_repo.save(property_obj, {"featured": featured})

    async def delete_property(self, property_id: uuid.UUID, admin: User) -> Property:
        property_obj = await self._get_property(property_id)
        deleted = await self.property_repo.soft_delete(property_obj)
        logger.info(f"Property {property_id} deleted by admin {admin.email}")
        return deleted

    async def get_stats(self) -> AdminStats:
        submissions = await AdvertisementSubmissionRepository(self.db).count_by_status()
        published = await BlogRepository(self.db).count({"publish_status": PublishStatus.PUBLISHED})

        return AdminStats(
            users_by_type=await self.user_repo.count_by_type(),
            properties_by_approval_status=await self.property_repo.count_by_approval_status(),
            new_advertisement_submissions=submissions[SubmissionStatus.NEW.value],
            published_blogs=published,
        )
