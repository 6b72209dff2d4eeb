"""
Seller dashboard analytics.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.property import PropertyRepository
from marketplace.models.user import User
from marketplace.schemas.engagement import SellerAnalytics
from marketplace.schemas.property import PropertyResponse


class SellerService:

    def __init__(self, db_session: AsyncSession):
        self.property_repo = PropertyRepository(db_session)

    async def get_analytics(self, user: User) -> SellerAnalytics:
        """Views and inquiries over the owner's non-deleted listings."""
        properties = await self.property_repo.get_by_owner(user.id)

        total_views = sum(p.views for p in properties)
        total_inquiries = sum(p.inquiries for p in properties)
        top = max(properties, key=lambda p: p.views) if properties else None

        return SellerAnalytics(
            total_properties=len(properties),
            total_views=total_views,
            total_inquiries=total_inquiries,
            avg_views_per_property=round(total_views / len(properties), 2) if properties else 0.0,
            top_property=PropertyResponse.model_validate(top.to_dict()) if top else None,
            by_approval_status=await self.property_repo.count_by_approval_status(owner_id=user.id),
        )
