"""
Service for the "other services" directory categories and their Excel attachments.
"""

from typing import Optional, List, Tuple, Union
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from marketplace.repositories.service_catalog import ServiceCategoryRepository, ServiceSubcategoryRepository
from marketplace.models.service_catalog import ServiceCategory, ServiceSubcategory
from marketplace.schemas.service_catalog import (
    ServiceCategoryCreate,
    ServiceCategoryUpdate,
    ServiceSubcategoryCreate,
    ExcelFile,
)
from marketplace.services.upload import UploadService
from marketplace.utils.exceptions import NotFoundError, BadRequestError, DuplicateResourceError
from marketplace.utils.slugs import normalize_slug
import uuid
import logging

logger = logging.getLogger(__name__)


class ServiceCatalogService:
    """Admin CRUD over service categories and subcategories."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.category_repo = ServiceCategoryRepository(db_session)
        self.subcategory_repo = ServiceSubcategoryRepository(db_session)

    # Categories

    async def get_category(self, category_id: uuid.UUID) -> ServiceCategory:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise NotFoundError("Service category", str(category_id))
        return category

    async def list_categories(
        self,
        active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[ServiceCategory], int]:
        return await self.category_repo.search(active, skip, limit)

    async def list_active_categories(self) -> List[ServiceCategory]:
        return await self.category_repo.list_active()

    async def create_category(self, data: ServiceCategoryCreate) -> ServiceCategory:
        """
        Raises:
            BadRequestError: If no usable slug can be derived
            DuplicateResourceError: If the slug is taken
        """
        slug = normalize_slug(data.slug or data.name)
        if not slug:
            raise BadRequestError("Service category slug cannot be empty")
        if await self.category_repo.slug_exists(slug):
            raise DuplicateResourceError("Service category", slug)

        category_data = data.model_dump()
        category_data.update({"name": data.name.strip(), "slug": slug})
        category = await self.category_repo.create(category_data)
        logger.info(f"Created service category {category.slug} (ID: {category.id})")
        return category

    async def update_category(self, category_id: uuid.UUID, data: ServiceCategoryUpdate) -> ServiceCategory:
        category = await self.get_category(category_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise BadRequestError("Service category name cannot be empty")

        if "slug" in changes:
            changes["slug"] = normalize_slug(changes["slug"])
            if not changes["slug"]:
                raise BadRequestError("Service category slug cannot be empty")
            if await self.category_repo.slug_exists(changes["slug"], exclude_id=category_id):
                raise DuplicateResourceError("Service category", changes["slug"])

        return await self.category_repo.save(category, changes)

    async def delete_category(self, category_id: uuid.UUID, uploads: UploadService) -> None:
        """Delete an empty category together with its attached spreadsheet."""
        category = await self.get_category(category_id)

        if await self.subcategory_repo.count_for_category(category_id):
            raise BadRequestError(
                "Cannot delete category with existing subcategories", error_code="TAXONOMY_IN_USE"
            )

        await self.category_repo.delete(category_id)
        if category.excel_file_url:
            uploads.delete_by_url(category.excel_file_url)
        logger.info(f"Deleted service category {category.slug}")

    # Subcategories

    async def get_subcategory(self, subcategory_id: uuid.UUID) -> ServiceSubcategory:
        subcategory = await self.subcategory_repo.get_by_id(subcategory_id)
        if not subcategory:
            raise NotFoundError("Service subcategory", str(subcategory_id))
        return subcategory

    async def list_subcategories(
        self,
        category_id: uuid.UUID,
        active: Optional[bool] = None
    ) -> List[ServiceSubcategory]:
        await self.get_category(category_id)
        return await self.subcategory_repo.list_for_category(category_id, active)

    async def list_public_subcategories(self, category_slug: str) -> List[ServiceSubcategory]:
        category = await self.category_repo.get_by_slug(normalize_slug(category_slug))
        if not category or not category.active:
            raise NotFoundError("Service category", category_slug)
        return await self.subcategory_repo.list_for_category(category.id, active=True)

    async def create_subcategory(self, data: ServiceSubcategoryCreate) -> ServiceSubcategory:
        await self.get_category(data.category_id)

        slug = normalize_slug(data.slug or data.name)
        if not slug:
            raise BadRequestError("Service subcategory slug cannot be empty")
        if await self.subcategory_repo.slug_exists(data.category_id, slug):
            raise DuplicateResourceError("Service subcategory", slug)

        subcategory_data = data.model_dump()
        subcategory_data.update({"name": data.name.strip(), "slug": slug})
        return await self.subcategory_repo.create(subcategory_data)

    async def delete_subcategory(self, subcategory_id: uuid.UUID, uploads: UploadService) -> None:
        subcategory = await self.get_subcategory(subcategory_id)
        await self.subcategory_repo.delete(subcategory_id)
        if subcategory.excel_file_url:
            uploads.delete_by_url(subcategory.excel_file_url)

    # Excel attachments

    async def attach_excel(
        self,
        file: UploadFile,
        uploads: UploadService,
        category_id: Optional[uuid.UUID] = None,
        subcategory_id: Optional[uuid.UUID] = None
    ) -> ExcelFile:
        """
        Store a spreadsheet and attach it to a subcategory or, failing that, a category.
        A previously attached file is removed.

        Raises:
            BadRequestError: If neither target is given
            NotFoundError: If the target does not exist
        """
        if not category_id and not subcategory_id:
            raise BadRequestError("Either category_id or subcategory_id is required")

        target: Union[ServiceCategory, ServiceSubcategory]
        if subcategory_id:
            target = await self.get_subcategory(subcategory_id)
            repo = self.subcategory_repo
        else:
            target = await self.get_category(category_id)
            repo = self.category_repo

        stored = await uploads.save_spreadsheet(file)
        previous_url = target.excel_file_url

        uploaded_at = datetime.now(timezone.utc)
        try:
            await repo.save(target, {
                "excel_file_name": stored.filename,
                "excel_file_url": stored.url,
                "excel_uploaded_at": uploaded_at,
            })
        except Exception:
            uploads.delete_by_url(stored.url)
            raise
        if previous_url:
            uploads.delete_by_url(previous_url)

        logger.info(f"Attached spreadsheet {stored.url} to {target.slug}")
        return ExcelFile(file_name=stored.filename, file_url=stored.url, uploaded_at=uploaded_at)
