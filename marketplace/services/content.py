"""
Services for the editorial content managed from the admin panel: banners, area maps and blog posts.
"""

from datetime import datetime, timezone
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.content import BannerRepository, AreaMapRepository, BlogRepository
from marketplace.models.content import Banner, AreaMap, Blog, PublishStatus
from marketplace.models.user import User
from marketplace.schemas.content import (
    BannerCreate,
    BannerUpdate,
    AreaMapCreate,
    AreaMapUpdate,
    BlogCreate,
    BlogUpdate,
)
from marketplace.utils.exceptions import APIException, NotFoundError, BadRequestError, ValidationError
from marketplace.utils.slugs import slugify, unique_slug
import uuid
import logging

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200
META_DESCRIPTION_LENGTH = 160


class BannerService:

    def __init__(self, db_session: AsyncSession):
        self.banner_repo = BannerRepository(db_session)

    async def list_banners(self, position: Optional[str] = None, is_active: Optional[bool] = True) -> List[Banner]:
        return await self.banner_repo.list_banners(position, is_active)

    async def get_banner(self, banner_id: uuid.UUID) -> Banner:
        banner = await self.banner_repo.get_by_id(banner_id)
        if not banner:
            raise NotFoundError("Banner", str(banner_id))
        return banner

    async def create_banner(self, data: BannerCreate) -> Banner:
        banner = await self.banner_repo.create(data.model_dump())
        logger.info(f"Created banner '{banner.title}' at {banner.position}")
        return banner

    async def update_banner(self, banner_id: uuid.UUID, data: BannerUpdate) -> Banner:
        banner = await self.get_banner(banner_id)
        return await self.banner_repo.save(banner, data.model_dump(exclude_unset=True, exclude_none=True))

    async def delete_banner(self, banner_id: uuid.UUID) -> None:
        if not await self.banner_repo.delete(banner_id):
            raise NotFoundError("Banner", str(banner_id))


class AreaMapService:

    def __init__(self, db_session: AsyncSession):
        self.map_repo = AreaMapRepository(db_session)

    async def list_maps(self, active_only: bool = True) -> List[AreaMap]:
        return await self.map_repo.list_maps(active_only)

    async def get_map(self, map_id: uuid.UUID) -> AreaMap:
        area_map = await self.map_repo.get_by_id(map_id)
        if not area_map:
            raise NotFoundError("Map", str(map_id))
        return area_map

    async def create_map(self, data: AreaMapCreate) -> AreaMap:
        return await self.map_repo.create(data.model_dump())

    async def update_map(self, map_id: uuid.UUID, data: AreaMapUpdate) -> AreaMap:
        area_map = await self.get_map(map_id)
        return await self.map_repo.save(area_map, data.model_dump(exclude_unset=True, exclude_none=True))

    async def delete_map(self, map_id: uuid.UUID) -> None:
        if not await self.map_repo.delete(map_id):
            raise NotFoundError("Map", str(map_id))


class BlogService:
    """
    Blog posts with unique slugs derived from titles.

    Excerpt and meta description fall back to the start of the content, and
    published_at is stamped the first time a post is published.
    """

    def __init__(self, db_session: AsyncSession):
        self.blog_repo = BlogRepository(db_session)

    async def _unique_slug(self, source: str, exclude_id: Optional[uuid.UUID] = None) -> str:
        base = slugify(source)
        if not base:
            raise ValidationError("A slug could not be derived from the title")
        return await unique_slug(base, lambda candidate: self.blog_repo.slug_exists(candidate, exclude_id))

    @staticmethod
    def _fill_defaults(blog_data: dict) -> dict:
        content = blog_data.get("content") or ""
        if not blog_data.get("excerpt"):
            blog_data["excerpt"] = content[:EXCERPT_LENGTH]
        if not blog_data.get("meta_description"):
            blog_data["meta_description"] = content[:META_DESCRIPTION_LENGTH]
        if not blog_data.get("meta_title") and blog_data.get("title"):
            blog_data["meta_title"] = blog_data["title"]
        return blog_data

    async def list_published(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Blog], int]:
        return await self.blog_repo.search(True, category, search, skip, limit)

    async def list_all(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Blog], int]:
        return await self.blog_repo.search(False, category, search, skip, limit)

    async def read_published(self, slug: str) -> Blog:
        """Public read by slug; counts a view."""
        blog = await self.blog_repo.get_by_slug(slug)
        if not blog or not blog.is_published:
            raise NotFoundError("Blog post", slug)
        return await self.blog_repo.save(blog, {"views": Blog.views + 1})

    async def get_blog(self, blog_id: uuid.UUID) -> Blog:
        blog = await self.blog_repo.get_by_id(blog_id)
        if not blog:
            raise NotFoundError("Blog post", str(blog_id))
        return blog

    async def create_blog(self, data: BlogCreate, author: User) -> Blog:
        try:
            blog_data = self._fill_defaults(data.model_dump())
            blog_data["slug"] = await self._unique_slug(data.slug or data.title)
            blog_data["author_id"] = author.id
            if data.publish_status == PublishStatus.PUBLISHED:
                blog_data["published_at"] = datetime.now(timezone.utc)

            blog = await self.blog_repo.create(blog_data)
            logger.info(f"Blog post created by {author.email}: {blog.slug}")
            return blog
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create blog post: {e}")
            raise BadRequestError(f"Failed to create blog post: {str(e)}")

    async def update_blog(self, blog_id: uuid.UUID, data: BlogUpdate) -> Blog:
        blog = await self.get_blog(blog_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "slug" in changes:
            changes["slug"] = await self._unique_slug(changes["slug"], exclude_id=blog_id)
        elif "title" in changes and changes["title"] != blog.title:
            changes["slug"] = await self._unique_slug(changes["title"], exclude_id=blog_id)

        if changes.get("publish_status") == PublishStatus.PUBLISHED and blog.published_at is None:
            changes["published_at"] = datetime.now(timezone.utc)

        return await self.blog_repo.save(blog, changes)

    async def delete_blog(self, blog_id: uuid.UUID) -> None:
        if not await self.blog_repo.delete(blog_id):
            raise NotFoundError("Blog post", str(blog_id))
