"""
Repositories for the category, subcategory and mini-subcategory tree.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_
from marketplace.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from marketplace.models.category import Category, Subcategory, MiniSubcategory
from typing import Optional, List, Tuple, Sequence, Dict
import uuid
import logging

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    """Top-level categories."""

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

    async def list_categories(
        self,
        active_only: bool = True,
        category_type: Optional[str] = None
    ) -> List[Category]:
        """Categories sorted by sort_order then name."""
        query = select(Category)
        if active_only:
            query = query.where(Category.is_active.is_(True))
        if category_type:
            query = query.where(Category.type == category_type)
        query = query.order_by(Category.sort_order.asc(), Category.name.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str, active_only: bool = False) -> Optional[Category]:
        query = select(Category).where(Category.slug == slug)
        if active_only:
            query = query.where(Category.is_active.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(Category.id).where(Category.slug == slug)
        if exclude_id:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def delete_tree(self, category_id: uuid.UUID) -> bool:
        """Delete a category together with its subcategories and mini-subcategories."""
        try:
            sub_ids = select(Subcategory.id).where(Subcategory.category_id == category_id)
            await self.db.execute(
                delete(MiniSubcategory).where(MiniSubcategory.subcategory_id.in_(sub_ids))
            )
            await self.db.execute(delete(Subcategory).where(Subcategory.category_id == category_id))
            result = await self.db.execute(delete(Category).where(Category.id == category_id))
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete category tree {category_id}: {e}")
            raise

    async def clear_all(self) -> None:
        """Remove the whole taxonomy, used by a forced re-seed."""
        try:
            await self.db.execute(delete(MiniSubcategory))
            await self.db.execute(delete(Subcategory))
            await self.db.execute(delete(Category))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to clear categories: {e}")
            raise


class SubcategoryRepository(BaseRepository[Subcategory]):
    """Second-level nodes."""

    def __init__(self, db: AsyncSession):
        super().__init__(Subcategory, db)

    async def list_for_categories(
        self,
        category_ids: Sequence[uuid.UUID],
        active_only: bool = True
    ) -> Dict[uuid.UUID, List[Subcategory]]:
        """Subcategories grouped by parent category id."""
        grouped: Dict[uuid.UUID, List[Subcategory]] = {category_id: [] for category_id in category_ids}
        if not category_ids:
            return grouped

        query = select(Subcategory).where(Subcategory.category_id.in_(list(category_ids)))
        if active_only:
            query = query.where(Subcategory.is_active.is_(True))
        query = query.order_by(Subcategory.sort_order.asc(), Subcategory.name.asc())

        for subcategory in (await self.db.execute(query)).scalars().all():
            grouped[subcategory.category_id].append(subcategory)
        return grouped

    async def slug_exists(
        self,
        category_id: uuid.UUID,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        query = select(Subcategory.id).where(
            Subcategory.category_id == category_id,
            Subcategory.slug == slug,
        )
        if exclude_id:
            query = query.where(Subcategory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def delete_with_children(self, subcategory_id: uuid.UUID) -> bool:
        try:
            await self.db.execute(
                delete(MiniSubcategory).where(MiniSubcategory.subcategory_id == subcategory_id)
            )
            result = await self.db.execute(delete(Subcategory).where(Subcategory.id == subcategory_id))
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete subcategory {subcategory_id}: {e}")
            raise


class MiniSubcategoryRepository(BaseRepository[MiniSubcategory]):
    """Third-level nodes."""

    def __init__(self, db: AsyncSession):
        super().__init__(MiniSubcategory, db)

    async def search(
        self,
        subcategory_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[MiniSubcategory], int]:
        """Admin listing sorted by sort_order then creation time."""
        query = select(MiniSubcategory)

        if subcategory_id:
            query = query.where(MiniSubcategory.subcategory_id == subcategory_id)

        if is_active is not None:
            query = query.where(MiniSubcategory.is_active == is_active)

        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    MiniSubcategory.name.ilike(pattern, escape=LIKE_ESCAPE),
                    MiniSubcategory.slug.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        query = query.order_by(MiniSubcategory.sort_order.asc(), MiniSubcategory.created_at.asc())
        return await self.paginate(query, skip, limit)

    async def list_active_for_subcategory(self, subcategory_id: uuid.UUID) -> List[MiniSubcategory]:
        query = (
            select(MiniSubcategory)
            .where(
                MiniSubcategory.subcategory_id == subcategory_id,
                MiniSubcategory.is_active.is_(True),
            )
            .order_by(MiniSubcategory.sort_order.asc(), MiniSubcategory.name.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def slug_exists(
        self,
        subcategory_id: uuid.UUID,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        query = select(MiniSubcategory.id).where(
            MiniSubcategory.subcategory_id == subcategory_id,
            MiniSubcategory.slug == slug,
        )
        if exclude_id:
            query = query.where(MiniSubcategory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None
