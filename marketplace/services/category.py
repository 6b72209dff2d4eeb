"""
Category service for the three-level taxonomy and its admin management.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.category import (
    CategoryRepository,
    SubcategoryRepository,
    MiniSubcategoryRepository,
)
from marketplace.repositories.content import BannerRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.models.category import Category, Subcategory, MiniSubcategory
from marketplace.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    SubcategoryCreate,
    SubcategoryUpdate,
    SubcategoryResponse,
    MiniSubcategoryCreate,
    MiniSubcategoryUpdate,
    MiniSubcategoryResponse,
    CategorySeedResult,
)
from marketplace.seed_data import SEED_CATEGORIES, SEED_ADVERTISEMENT_BANNERS, ADVERTISEMENT_BANNER_POSITION
from marketplace.utils.exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    DuplicateResourceError,
    TaxonomyInUseError,
)
from marketplace.utils.slugs import normalize_slug, unique_slug
import uuid
import logging

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Public taxonomy reads and admin management of categories, subcategories and
    mini-subcategories.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.category_repo = CategoryRepository(db_session)
        self.subcategory_repo = SubcategoryRepository(db_session)
        self.mini_repo = MiniSubcategoryRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    # Public reads

    async def list_categories(
        self,
        active_only: bool = True,
        category_type: Optional[str] = None,
        with_subcategories: bool = True
    ) -> List[CategoryResponse]:
        """Categories sorted by sort_order then name, optionally with their subcategories."""
        categories = await self.category_repo.list_categories(active_only, category_type)
        responses = [CategoryResponse.model_validate(category) for category in categories]

        if with_subcategories:
            grouped = await self.subcategory_repo.list_for_categories(
                [category.id for category in categories], active_only=active_only
            )
            for response in responses:
                response.subcategories = [
                    SubcategoryResponse.model_validate(sub) for sub in grouped.get(response.id, [])
                ]
        return responses

    async def get_public_category(self, slug: str) -> CategoryResponse:
        category = await self.category_repo.get_by_slug(normalize_slug(slug), active_only=True)
        if not category:
            raise NotFoundError("Category", slug)

        response = CategoryResponse.model_validate(category)
        grouped = await self.subcategory_repo.list_for_categories([category.id], active_only=True)
        response.subcategories = [SubcategoryResponse.model_validate(sub) for sub in grouped[category.id]]
        return response

    async def list_public_subcategories(self, slug: str) -> List[SubcategoryResponse]:
        category = await self.get_public_category(slug)
        return category.subcategories or []

    async def list_public_mini_subcategories(
        self,
        subcategory_id: uuid.UUID,
        with_counts: bool = False
    ) -> List[MiniSubcategoryResponse]:
        """Active mini-subcategories, optionally with their live listing counts."""
        minis = await self.mini_repo.list_active_for_subcategory(subcategory_id)
        responses = [MiniSubcategoryResponse.model_validate(mini) for mini in minis]

        if with_counts:
            counts = await self.property_repo.count_public_by_mini_subcategory([mini.id for mini in minis])
            for response in responses:
                response.property_count = counts.get(response.id, 0)
        return responses

    # Categories

    async def get_category(self, category_id: uuid.UUID) -> Category:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise NotFoundError("Category", str(category_id))
        return category

    async def create_category(self, data: CategoryCreate) -> Category:
        """
        Raises:
            BadRequestError: If no usable slug can be derived
            DuplicateResourceError: If the slug is taken
        """
        slug = normalize_slug(data.slug or data.name)
        if not slug:
            raise BadRequestError("Category slug cannot be empty")
        if await self.category_repo.slug_exists(slug):
            raise DuplicateResourceError("Category", slug)

        category_data = data.model_dump()
        category_data.update({"name": data.name.strip(), "slug": slug})
        category = await self.category_repo.create(category_data)
        logger.info(f"Created category {category.slug} (ID: {category.id})")
        return category

    async def update_category(self, category_id: uuid.UUID, data: CategoryUpdate) -> Category:
        category = await self.get_category(category_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise BadRequestError("Category name cannot be empty")

        if "slug" in changes:
            changes["slug"] = normalize_slug(changes["slug"])
            if not changes["slug"]:
                raise BadRequestError("Category slug cannot be empty")
            if await self.category_repo.slug_exists(changes["slug"], exclude_id=category_id):
                raise DuplicateResourceError("Category", changes["slug"])

        return await self.category_repo.save(category, changes)

    async def toggle_category(self, category_id: uuid.UUID) -> Category:
        category = await self.get_category(category_id)
        return await self.category_repo.save(category, {"is_active": not category.is_active})

    async def delete_category(self, category_id: uuid.UUID) -> None:
        """Delete a category and its children unless listings still reference it."""
        category = await self.get_category(category_id)

        linked = await self.property_repo.count_linked("category_id", category_id)
        if linked:
            raise TaxonomyInUseError("category", linked)

        await self.category_repo.delete_tree(category.id)
        logger.info(f"Deleted category {category.slug} and its subcategories")

    # Subcategories

    async def get_subcategory(self, subcategory_id: uuid.UUID) -> Subcategory:
        subcategory = await self.subcategory_repo.get_by_id(subcategory_id)
        if not subcategory:
            raise NotFoundError("Subcategory", str(subcategory_id))
        return subcategory

    async def list_subcategories(self, category_id: Optional[uuid.UUID] = None) -> List[Subcategory]:
        filters = {"category_id": category_id} if category_id else None
        return await self.subcategory_repo.get_multi(limit=None, filters=filters, order_by="sort_order,name")

    async def create_subcategory(self, data: SubcategoryCreate) -> Subcategory:
        await self.get_category(data.category_id)

        slug = normalize_slug(data.slug or data.name)
        if not slug:
            raise BadRequestError("Subcategory slug cannot be empty")
        if await self.subcategory_repo.slug_exists(data.category_id, slug):
            raise DuplicateResourceError("Subcategory", slug)

        subcategory_data = data.model_dump()
        subcategory_data.update({"name": data.name.strip(), "slug": slug})
        return await self.subcategory_repo.create(subcategory_data)

    async def update_subcategory(self, subcategory_id: uuid.UUID, data: SubcategoryUpdate) -> Subcategory:
        subcategory = await self.get_subcategory(subcategory_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise BadRequestError("Subcategory name cannot be empty")

        if "slug" in changes:
            changes["slug"] = normalize_slug(changes["slug"])
            if not changes["slug"]:
                raise BadRequestError("Subcategory slug cannot be empty")
            if await self.subcategory_repo.slug_exists(
                subcategory.category_id, changes["slug"], exclude_id=subcategory_id
            ):
                raise DuplicateResourceError("Subcategory", changes["slug"])

        return await self.subcategory_repo.save(subcategory, changes)

    async def toggle_subcategory(self, subcategory_id: uuid.UUID) -> Subcategory:
        subcategory = await self.get_subcategory(subcategory_id)
        return await self.subcategory_repo.save(subcategory, {"is_active": not subcategory.is_active})

    async def delete_subcategory(self, subcategory_id: uuid.UUID) -> None:
        await self.get_subcategory(subcategory_id)

        linked = await self.property_repo.count_linked("subcategory_id", subcategory_id)
        if linked:
            raise TaxonomyInUseError("subcategory", linked)

        await self.subcategory_repo.delete_with_children(subcategory_id)

    # Mini-subcategories

    async def get_mini_subcategory(self, mini_id: uuid.UUID) -> MiniSubcategory:
        mini = await self.mini_repo.get_by_id(mini_id)
        if not mini:
            raise NotFoundError("Mini-subcategory", str(mini_id))
        return mini

    async def search_mini_subcategories(
        self,
        subcategory_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[MiniSubcategory], int]:
        return await self.mini_repo.search(subcategory_id, search, is_active, skip, limit)

    async def create_mini_subcategory(self, data: MiniSubcategoryCreate) -> MiniSubcategory:
        """
        Create a mini-subcategory; the slug is made unique inside its subcategory
        by appending -2, -3, ...

        Raises:
            NotFoundError: If the parent subcategory does not exist
            BadRequestError: If the name or derived slug is empty
        """
        try:
            await self.get_subcategory(data.subcategory_id)

            name = (data.name or "").strip()
            if not name:
                raise BadRequestError("Mini-subcategory name is required")

            base = normalize_slug(data.slug or name)
            if not base:
                raise BadRequestError("Mini-subcategory slug cannot be empty")

            slug = await unique_slug(
                base, lambda candidate: self.mini_repo.slug_exists(data.subcategory_id, candidate)
            )

            mini_data = data.model_dump()
            mini_data.update({"name": name, "slug": slug})
            mini = await self.mini_repo.create(mini_data)
            logger.info(f"Created mini-subcategory {slug} under {data.subcategory_id}")
            return mini
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create mini-subcategory: {e}")
            raise BadRequestError(f"Failed to create mini-subcategory: {str(e)}")

    async def update_mini_subcategory(self, mini_id: uuid.UUID, data: MiniSubcategoryUpdate) -> MiniSubcategory:
        mini = await self.get_mini_subcategory(mini_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise BadRequestError("Mini-subcategory name cannot be empty")

        if "slug" in changes:
            changes["slug"] = normalize_slug(changes["slug"])
            if not changes["slug"]:
                raise BadRequestError("Mini-subcategory slug cannot be empty")
            if await self.mini_repo.slug_exists(mini.subcategory_id, changes["slug"], exclude_id=mini_id):
                raise BadRequestError(f"Slug '{changes['slug']}' already exists in this subcategory")

        return await self.mini_repo.save(mini, changes)

    async def toggle_mini_subcategory(self, mini_id: uuid.UUID) -> MiniSubcategory:
        mini = await self.get_mini_subcategory(mini_id)
        return await self.mini_repo.save(mini, {"is_active": not mini.is_active})

    async def delete_mini_subcategory(self, mini_id: uuid.UUID) -> None:
        await self.get_mini_subcategory(mini_id)

        linked = await self.property_repo.count_linked("mini_subcategory_id", mini_id)
        if linked:
            raise TaxonomyInUseError("mini-subcategory", linked)

        await self.mini_repo.delete(mini_id)

    # Seeding

    async def initialize(self, force: bool = False) -> CategorySeedResult:
        """
        Load the default taxonomy and advertisement banners.
        Existing categories make this a no-op unless force is set, which clears the tree first.
        """
        try:
            if await self.category_repo.count() and not force:
                logger.info("Categories already present, skipping initialization")
                return CategorySeedResult(skipped=True, categories=0, subcategories=0, mini_subcategories=0)

            if force:
                await self.category_repo.clear_all()

            counts = {"categories": 0, "subcategories": 0, "mini_subcategories": 0}
            for category_order, seed in enumerate(SEED_CATEGORIES, start=1):
                category = await self.category_repo.create({
                    "name": seed["name"],
                    "slug": seed["slug"],
                    "description": seed["description"],
                    "sort_order": category_order,
                })
                counts["categories"] += 1

                for sub_order, sub_seed in enumerate(seed["subcategories"], start=1):
                    subcategory = await self.subcategory_repo.create({
                        "category_id": category.id,
                        "name": sub_seed["name"],
                        "slug": sub_seed["slug"],
                        "description": sub_seed["description"],
                        "sort_order": sub_order,
                    })
                    counts["subcategories"] += 1

                    minis = await self.mini_repo.bulk_create([
                        {
                            "subcategory_id": subcategory.id,
                            "name": name,
                            "slug": slug,
                            "description": description,
                            "sort_order": mini_order,
                        }
                        for mini_order, (name, slug, description) in enumerate(
                            sub_seed["mini_subcategories"], start=1
                        )
                    ])
                    counts["mini_subcategories"] += len(minis)

            banners = await self._seed_advertisement_banners()
            logger.info(f"Initialized taxonomy: {counts}, {banners} advertisement banners")
            return CategorySeedResult(skipped=False, banners=banners, **counts)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize categories: {e}")
            raise BadRequestError(f"Failed to initialize categories: {str(e)}")

    async def _seed_advertisement_banners(self) -> int:
        banner_repo = BannerRepository(self.db)
        existing = await banner_repo.list_banners(position=ADVERTISEMENT_BANNER_POSITION)
        if len(existing) >= len(SEED_ADVERTISEMENT_BANNERS):
            return 0

        for banner in existing:
            await banner_repo.delete(banner.id)

        created = await banner_repo.bulk_create([
            {**banner, "position": ADVERTISEMENT_BANNER_POSITION, "is_active": True, "link": None}
            for banner in SEED_ADVERTISEMENT_BANNERS
        ])
        return len(created)
