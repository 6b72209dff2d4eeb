"""
Repositories for banners, area maps and blog posts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from marketplace.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from marketplace.models.content import Banner, AreaMap, Blog, PublishStatus
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class BannerRepository(BaseRepository[Banner]):

    def __init__(self, db: AsyncSession):
        super().__init__(Banner, db)

    async def list_banners(
        self,
        position: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> List[Banner]:
        """Banners for a page position, sorted by sort_order."""
        query = select(Banner)
        if position:
            query = query.where(Banner.position == position)
        if is_active is not None:
            query = query.where(Banner.is_active == is_active)
        query = query.order_by(Banner.sort_order.asc(), Banner.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())


class AreaMapRepository(BaseRepository[AreaMap]):

    def __init__(self, db: AsyncSession):
        super().__init__(AreaMap, db)

    async def list_maps(self, active_only: bool = True) -> List[AreaMap]:
        query = select(AreaMap)
        if active_only:
            query = query.where(AreaMap.is_active.is_(True))
        query = query.order_by(AreaMap.sort_order.asc(), AreaMap.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())


class BlogRepository(BaseRepository[Blog]):

    def __init__(self, db: AsyncSession):
        super().__init__(Blog, db)

    async def search(
        self,
        published_only: bool = True,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Blog], int]:
        """Blog posts, newest first."""
        query = select(Blog)

        if published_only:
            query = query.where(Blog.publish_status == PublishStatus.PUBLISHED)

        if category:
            query = query.where(Blog.category == category)

        if search:
            pattern = contains_pattern(search)
            query = query.where(or_(
                Blog.title.ilike(pattern, escape=LIKE_ESCAPE),
                Blog.excerpt.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        query = query.order_by(Blog.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def get_by_slug(self, slug: str) -> Optional[Blog]:
        result = await self.db.execute(select(Blog).where(Blog.slug == slug))
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(Blog.id).where(Blog.slug == slug)
        if exclude_id:
            query = query.where(Blog.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None
