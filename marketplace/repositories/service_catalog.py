"""
Repositories for the "other services" categories and subcategories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marketplace.repositories.base import BaseRepository
from marketplace.models.service_catalog import ServiceCategory, ServiceSubcategory
from typing import Optional, List, Tuple
import uuid


class ServiceCategoryRepository(BaseRepository[ServiceCategory]):

    def __init__(self, db: AsyncSession):
        super().__init__(ServiceCategory, db)

    async def search(
        self,
        active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[ServiceCategory], int]:
        """Newest first, optionally filtered by the active flag."""
        query = select(ServiceCategory)
        if active is not None:
            query = query.where(ServiceCategory.active == active)
        query = query.order_by(ServiceCategory.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def list_active(self) -> List[ServiceCategory]:
        query = (
            select(ServiceCategory)
            .where(ServiceCategory.active.is_(True))
            .order_by(ServiceCategory.sort_order.asc(), ServiceCategory.name.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Optional[ServiceCategory]:
        result = await self.db.execute(select(ServiceCategory).where(ServiceCategory.slug == slug))
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(ServiceCategory.id).where(ServiceCategory.slug == slug)
        if exclude_id:
            query = query.where(ServiceCategory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None


class ServiceSubcategoryRepository(BaseRepository[ServiceSubcategory]):

    def __init__(self, db: AsyncSession):
        super().__init__(ServiceSubcategory, db)

    async def list_for_category(
        self,
        category_id: uuid.UUID,
        active: Optional[bool] = None
    ) -> List[ServiceSubcategory]:
        query = select(ServiceSubcategory).where(ServiceSubcategory.category_id == category_id)
        if active is not None:
            query = query.where(ServiceSubcategory.active == active)
        query = query.order_by(ServiceSubcategory.sort_order.asc(), ServiceSubcategory.name.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_for_category(self, category_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(ServiceSubcategory.id)).where(ServiceSubcategory.category_id == category_id)
        )
        return result.scalar() or 0

    async def slug_exists(
        self,
        category_id: uuid.UUID,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        query = select(ServiceSubcategory.id).where(
            ServiceSubcategory.category_id == category_id,
            ServiceSubcategory.slug == slug,
        )
        if exclude_id:
            query = query.where(ServiceSubcategory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None
