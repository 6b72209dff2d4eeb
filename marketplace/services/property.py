"""
Property service for listing submission, public search, owner edits and images.
Handles ownership validation, visibility rules and the free listing allowance.
"""

from typing import Optional, List, Tuple
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from marketplace.repositories.property import PropertyRepository, PropertySearchFilters, CATEGORY_SECTIONS
from marketplace.models.property import (
    Property,
    PropertyStatus,
    ApprovalStatus,
    PriceType,
    normalize_property_type,
)
from marketplace.models.user import User
from marketplace.schemas.property import PropertyCreate, PropertyUpdate
from marketplace.services.listing_limit import ListingLimitService
from marketplace.services.upload import UploadService
from marketplace.utils.exceptions import (
    APIException,
    NotFoundError,
    ValidationError,
    BadRequestError,
    InsufficientPermissionsError,
    PropertyOwnershipError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

MAX_IMAGES = 20


def parse_bedrooms(value: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """
    Split the bedrooms filter into an exact and a minimum count.
    "3" is exactly three bedrooms, "4+" is four or more.

    Returns:
        Tuple of (bedrooms, min_bedrooms)
    """
    if value is None or not str(value).strip():
        return None, None

    raw = str(value).strip()
    try:
        if raw.endswith("+"):
            return None, int(raw[:-1])
        return int(raw), None
    except ValueError:
        raise ValidationError(f"Invalid bedrooms filter: {raw}")


class PropertyService:
    """
    Property service for the public marketplace and listing owners.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.limits = ListingLimitService(db_session)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Submit a new listing for moderation.

        New listings are inactive and pending. A listing with a package_id waits in
        pending_approval and does not consume the free allowance.

        Raises:
            InsufficientPermissionsError: If the user cannot post listings
            ListingLimitExceededError: If the free allowance is used up
        """
        try:
            if not current_user.can_post_properties:
                raise InsufficientPermissionsError("create properties")

            if not property_data.package_id:
                await self.limits.ensure_can_post_free(current_user)

            create_data = property_data.to_columns()
            create_data.update({
                "owner_id": current_user.id,
                "status": PropertyStatus.INACTIVE,
                "approval_status": (
                    ApprovalStatus.PENDING_APPROVAL if property_data.package_id else ApprovalStatus.PENDING
                ),
                "is_approved": False,
                "featured": False,
                "is_paid": False,
                "views": 0,
                "inquiries": 0,
            })

            property_obj = await self.property_repo.create_property(create_data)
            logger.info(
                f"Property submitted by {current_user.email}: {property_obj.title} (ID: {property_obj.id})"
            )
            return property_obj
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    def build_filters(
        self,
        category: Optional[str] = None,
        property_type: Optional[str] = None,
        sub_category: Optional[str] = None,
        price_type: Optional[PriceType] = None,
        sector: Optional[str] = None,
        mohalla: Optional[str] = None,
        landmark: Optional[str] = None,
        bedrooms: Optional[str] = None,
        bathrooms: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_area: Optional[int] = None,
        max_area: Optional[int] = None,
        category_id: Optional[uuid.UUID] = None,
        subcategory_id: Optional[uuid.UUID] = None,
        mini_subcategory_id: Optional[uuid.UUID] = None,
        q: Optional[str] = None,
        sort_by: str = "date_desc"
    ) -> PropertySearchFilters:
        """Translate public query parameters into repository filters."""
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("min_price cannot be greater than max_price")
        if min_area is not None and max_area is not None and min_area > max_area:
            raise ValidationError("min_area cannot be greater than max_area")

        exact_bedrooms, min_bedrooms = parse_bedrooms(bedrooms)

        # A category other than buy/rent is a property type slug
        section = (category or "").strip().lower()
        if section and section not in CATEGORY_SECTIONS:
            property_type = property_type or section
            section = None

        return PropertySearchFilters(
            category=section or None,
            property_type=normalize_property_type(property_type),
            sub_category=sub_category.strip().lower() if sub_category else None,
            price_type=price_type,
            sector=sector,
            mohalla=mohalla,
            landmark=landmark,
            bedrooms=exact_bedrooms,
            min_bedrooms=min_bedrooms,
            bathrooms=bathrooms,
            min_price=min_price,
            max_price=max_price,
            min_area=min_area,
            max_area=max_area,
            category_id=category_id,
            subcategory_id=subcategory_id,
            mini_subcategory_id=mini_subcategory_id,
            search_text=q,
            sort_by=sort_by,
        )

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        try:
            return await self.property_repo.search_public(filters, skip, limit)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise BadRequestError(f"Failed to search properties: {str(e)}")

    async def get_featured(self, limit: int = 10) -> List[Property]:
        return await self.property_repo.get_featured(limit)

    async def _get_existing(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_active_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        return property_obj

    async def get_property(self, property_id: uuid.UUID, current_user: Optional[User] = None) -> Property:
        """
        Read one listing.

        Public listings count a view on every read. Owners and admins may also
        open non-public listings; those reads are not counted.

        Raises:
            NotFoundError: If the listing is missing, deleted or not visible to the caller
        """
        property_obj = await self._get_existing(property_id)

        if property_obj.is_public:
            return await self.property_repo.increment_counter(property_obj, "views")

        if current_user and current_user.can_manage_property(property_obj.owner_id):
            return property_obj

        raise NotFoundError("Property", str(property_id))

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Owner edit. An approved or active listing goes back to moderation.

        Raises:
            NotFoundError: If property doesn't exist
            PropertyOwnershipError: If the caller is not the owner
        """
        try:
            existing = await self._get_existing(property_id)

            if existing.owner_id != current_user.id:
                raise PropertyOwnershipError()

            update_data = property_data.to_columns()
            if not update_data:
                raise ValidationError("No valid fields provided for update")

            if existing.approval_status == ApprovalStatus.APPROVED or existing.status == PropertyStatus.ACTIVE:
                update_data.update({
                    "approval_status": ApprovalStatus.PENDING,
                    "status": PropertyStatus.INACTIVE,
                    "is_approved": False,
                })

            updated = await self.property_repo.save(existing, update_data)
            logger.info(f"Property updated by {current_user.email}: {property_id}")
            return updated
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

    async def record_inquiry(self, property_id: uuid.UUID) -> Property:
        property_obj = await self._get_existing(property_id)
        if not property_obj.is_public:
            raise NotFoundError("Property", str(property_id))
        return await self.property_repo.increment_counter(property_obj, "inquiries")

    async def _get_managed(self, property_id: uuid.UUID, current_user: User) -> Property:
        property_obj = await self._get_existing(property_id)
        if not current_user.can_manage_property(property_obj.owner_id):
            raise PropertyOwnershipError()
        return property_obj

    async def add_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        current_user: User,
        uploads: UploadService
    ) -> Property:
        """Store uploaded images and append their URLs to the listing."""
        property_obj = await self._get_managed(property_id, current_user)

        if not files:
            raise ValidationError("At least one image file is required")
        if len(property_obj.images or []) + len(files) > MAX_IMAGES:
            raise BadRequestError(f"A property can have at most {MAX_IMAGES} images")

        urls = []
        try:
            for file in files:
                stored = await uploads.save_image(file, f"properties/{property_id}")
                urls.append(stored.url)
        except APIException:
            # The listing only references complete batches
            for url in urls:
                uploads.delete_by_url(url)
            raise

        images = list(property_obj.images or []) + urls
        logger.info(f"Added {len(urls)} images to property {property_id}")
        return await self.property_repo.save(property_obj, {"images": images})

    async def remove_image(
        self,
        property_id: uuid.UUID,
        url: str,
        current_user: User,
        uploads: UploadService
    ) -> Property:
        property_obj = await self._get_managed(property_id, current_user)

        images = list(property_obj.images or [])
        if url not in images:
            raise NotFoundError("Image")

        images.remove(url)
        uploads.delete_by_url(url)
        return await self.property_repo.save(property_obj, {"images": images})

    async def list_owner_properties(self, current_user: User) -> List[Property]:
        return await self.property_repo.get_by_owner(current_user.id)

    async def delete_own_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        """Soft delete from the seller dashboard; the listing still counts toward the free allowance."""
        property_obj = await self._get_existing(property_id)
        if property_obj.owner_id != current_user.id:
            raise PropertyOwnershipError("You can only delete your own properties")

        deleted = await self.property_repo.soft_delete(property_obj)
        logger.info(f"Property {property_id} deleted by owner {current_user.email}")
        return deleted
