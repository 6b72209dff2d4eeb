"""
Property repository for listing search, moderation queries and free listing counts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, and_, Select
from marketplace.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from marketplace.models.property import (
    Property,
    PropertyStatus,
    ApprovalStatus,
    PriceType,
)
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Dict, Any, Tuple, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)

# Marketplace sections mapped to price type and the property types they cover
CATEGORY_SECTIONS = {
    "buy": (PriceType.SALE, ("residential", "plot", "flat")),
    "sale": (PriceType.SALE, ("residential", "plot", "flat")),
    "rent": (PriceType.RENT, ("residential", "flat", "commercial")),
}

SORT_OPTIONS = {
    "price_asc": (Property.price.asc(),),
    "price_desc": (Property.price.desc(),),
    "area_desc": (Property.area.desc(),),
    "date_asc": (Property.created_at.asc(),),
    "date_desc": (Property.created_at.desc(),),
}


class PropertySearchFilters:
    """Data class for public property search filters."""

    def __init__(
        self,
        category: Optional[str] = None,
        property_type: Optional[str] = None,
        sub_category: Optional[str] = None,
        price_type: Optional[PriceType] = None,
        sector: Optional[str] = None,
        mohalla: Optional[str] = None,
        landmark: Optional[str] = None,
        bedrooms: Optional[int] = None,
        min_bedrooms: Optional[int] = None,
        bathrooms: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_area: Optional[int] = None,
        max_area: Optional[int] = None,
        category_id: Optional[uuid.UUID] = None,
        subcategory_id: Optional[uuid.UUID] = None,
        mini_subcategory_id: Optional[uuid.UUID] = None,
        search_text: Optional[str] = None,
        sort_by: str = "date_desc"
    ):
        self.category = category
        self.property_type = property_type
        self.sub_category = sub_category
        self.price_type = price_type
        self.sector = sector
        self.mohalla = mohalla
        self.landmark = landmark
        self.bedrooms = bedrooms
        self.min_bedrooms = min_bedrooms
        self.bathrooms = bathrooms
        self.min_price = min_price
        self.max_price = max_price
        self.min_area = min_area
        self.max_area = max_area
        self.category_id = category_id
        self.subcategory_id = subcategory_id
        self.mini_subcategory_id = mini_subcategory_id
        self.search_text = search_text
        self.sort_by = sort_by


def public_visibility():
    """Clause selecting listings that are live on the marketplace."""
    return and_(
        Property.status == PropertyStatus.ACTIVE,
        Property.approval_status == ApprovalStatus.APPROVED,
        Property.is_deleted.is_(False),
    )


def unpaid_clause():
    """Listings that consume free allowance: no package or not paid."""
    return or_(Property.package_id.is_(None), Property.is_paid.is_(False))


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings with search, moderation and dashboard queries.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property after model-level validation.

        Raises:
            ValueError: If validation fails
        """
        Property(**property_data).validate_all()
        created = await self.create(property_data)
        logger.info(f"Created property: {created.title} (ID: {created.id})")
        return created

    async def get_active_by_id(self, property_id: uuid.UUID) -> Optional[Property]:
        """Get a property unless it has been soft-deleted."""
        result = await self.db.execute(
            select(Property).where(Property.id == property_id, Property.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    def _apply_search_filters(self, query: Select, filters: PropertySearchFilters) -> Select:
        conditions = []

        section = CATEGORY_SECTIONS.get((filters.category or "").lower())
        if section:
            price_type, types = section
            conditions.append(Property.price_type == price_type)
            conditions.append(Property.property_type.in_(types))
            if filters.property_type:
                conditions.append(Property.property_type == filters.property_type)
        elif filters.property_type:
            conditions.append(Property.property_type == filters.property_type)

        if filters.sub_category:
            conditions.append(Property.sub_category == filters.sub_category)

        if filters.price_type:
            conditions.append(Property.price_type == filters.price_type)

        if filters.category_id:
            conditions.append(Property.category_id == filters.category_id)

        if filters.subcategory_id:
            conditions.append(Property.subcategory_id == filters.subcategory_id)

        if filters.mini_subcategory_id:
            conditions.append(Property.mini_subcategory_id == filters.mini_subcategory_id)

        if filters.sector:
            conditions.append(Property.sector == filters.sector)

        if filters.mohalla:
            conditions.append(Property.mohalla == filters.mohalla)

        if filters.landmark:
            conditions.append(
                Property.landmark.ilike(contains_pattern(filters.landmark), escape=LIKE_ESCAPE)
            )

        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms == filters.bedrooms)

        if filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)

        if filters.bathrooms is not None:
            conditions.append(Property.bathrooms == filters.bathrooms)

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)

        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.min_area is not None:
            conditions.append(Property.area >= filters.min_area)

        if filters.max_area is not None:
            conditions.append(Property.area <= filters.max_area)

        if filters.search_text:
            pattern = contains_pattern(filters.search_text)
            conditions.append(
                or_(
                    Property.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Property.description.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        if conditions:
            query = query.where(and_(*conditions))
        return query

    async def search_public(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Search publicly visible properties.

        Returns:
            Tuple of (properties for the page, total matches)
        """
        try:
            query = select(Property).where(public_visibility())
            query = self._apply_search_filters(query, filters)

            ordering = SORT_OPTIONS.get(filters.sort_by, SORT_OPTIONS["date_desc"])
            query = query.order_by(*ordering, Property.id)

            properties, total = await self.paginate(query, skip, limit)
            logger.debug(f"Public search returned {len(properties)} of {total} properties")
            return properties, total
        except Exception as e:
            logger.error(f"Property search failed: {e}")
            raise

    async def get_featured(self, limit: int = 10) -> List[Property]:
        query = (
            select(Property)
            .where(public_visibility(), Property.featured.is_(True))
            .order_by(Property.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search_admin(
        self,
        status: Optional[PropertyStatus] = None,
        approval_statuses: Optional[Sequence[ApprovalStatus]] = None,
        owner_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """Search every non-deleted property for the moderation table."""
        query = select(Property).where(Property.is_deleted.is_(False))

        if status:
            query = query.where(Property.status == status)

        if approval_statuses:
            query = query.where(Property.approval_status.in_(list(approval_statuses)))

        if owner_id:
            query = query.where(Property.owner_id == owner_id)

        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    Property.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Property.sector.ilike(pattern, escape=LIKE_ESCAPE),
                    Property.contact_phone.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        query = query.order_by(Property.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def get_by_owner(self, owner_id: uuid.UUID) -> List[Property]:
        """All non-deleted listings of one owner, newest first."""
        query = (
            select(Property)
            .where(Property.owner_id == owner_id, Property.is_deleted.is_(False))
            .order_by(Property.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_free_listings(
        self,
        owner_id: uuid.UUID,
        since: datetime,
        pending_only: bool = False
    ) -> int:
        """
        Count unpaid listings an owner created since the given instant.
        Soft-deleted listings still count against the allowance.
        """
        query = select(func.count(Property.id)).where(
            Property.owner_id == owner_id,
            Property.created_at >= since,
            unpaid_clause(),
        )
        if pending_only:
            query = query.where(Property.approval_status == ApprovalStatus.PENDING)

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def count_live_listings(self, owner_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Property.id)).where(Property.owner_id == owner_id, public_visibility())
        )
        return result.scalar() or 0

    async def count_by_approval_status(self, owner_id: Optional[uuid.UUID] = None) -> Dict[str, int]:
        """Count non-deleted listings grouped by approval status."""
        query = (
            select(Property.approval_status, func.count(Property.id))
            .where(Property.is_deleted.is_(False))
            .group_by(Property.approval_status)
        )
        if owner_id:
            query = query.where(Property.owner_id == owner_id)

        counts = {status.value: 0 for status in ApprovalStatus}
        for approval_status, total in (await self.db.execute(query)).all():
            counts[approval_status.value] = total
        return counts

    async def count_linked(self, field: str, value: uuid.UUID, public_only: bool = False) -> int:
        """Count non-deleted listings referencing a taxonomy node."""
        query = select(func.count(Property.id)).where(
            getattr(Property, field) == value,
            Property.is_deleted.is_(False),
        )
        if public_only:
            query = query.where(public_visibility())
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def count_public_by_mini_subcategory(self, mini_ids: Sequence[uuid.UUID]) -> Dict[uuid.UUID, int]:
        if not mini_ids:
            return {}
        query = (
            select(Property.mini_subcategory_id, func.count(Property.id))
            .where(Property.mini_subcategory_id.in_(list(mini_ids)), public_visibility())
            .group_by(Property.mini_subcategory_id)
        )
        return {mini_id: total for mini_id, total in (await self.db.execute(query)).all()}

    async def increment_counter(self, property_obj: Property, field: str) -> Property:
        """Atomically bump views or inquiries."""
        column = getattr(Property, field)
        return await self.save(property_obj, {field: column + 1})

    async def soft_delete(self, property_obj: Property) -> Property:
        return await self.save(
            property_obj,
            {"is_deleted": True, "deleted_at": datetime.now(timezone.utc)}
        )
