"""
Property model for marketplace listings.
Handles listing content, location, specifications, moderation state and counters.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Boolean, DateTime, JSON, Uuid,
    Enum as SQLEnum, Index, ForeignKey
)
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from datetime import datetime
from decimal import Decimal
import enum
import uuid
from typing import List, Optional


class PriceType(str, enum.Enum):
    """Whether the listing is offered for sale or for rent."""
    SALE = "sale"
    RENT = "rent"


class PropertyStatus(str, enum.Enum):
    """Marketplace availability of a listing."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SOLD = "sold"
    RENTED = "rented"


class ApprovalStatus(str, enum.Enum):
    """Moderation state driving marketplace visibility."""
    PENDING = "pending"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


AWAITING_REVIEW = (ApprovalStatus.PENDING, ApprovalStatus.PENDING_APPROVAL)

CANONICAL_PROPERTY_TYPES = ("residential", "flat", "plot", "commercial", "agricultural", "pg")

TYPE_ALIASES = {
    "co-living": "pg",
    "coliving": "pg",
    "pg": "pg",
    "agricultural-land": "agricultural",
    "agri": "agricultural",
    "agricultural": "agricultural",
    "commercial": "commercial",
    "showroom": "commercial",
    "office": "commercial",
    "residential": "residential",
    "flat": "flat",
    "apartment": "flat",
    "plot": "plot",
}


def normalize_property_type(value: Optional[str]) -> Optional[str]:
    """Map a free-form property type or category slug onto its canonical type."""
    if not value:
        return None
    key = value.strip().lower()
    return TYPE_ALIASES.get(key, key)


class Property(Base):
    """
    Property listing submitted by a seller.
    New listings start inactive and pending; only active, approved, non-deleted rows are public.
    """

    __tablename__ = "properties"

    # Basic listing information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True,
        comment="Asking price or monthly rent"
    )

    price_type: Mapped[PriceType] = mapped_column(
        SQLEnum(PriceType),
        nullable=False,
        default=PriceType.SALE,
        index=True,
        comment="Sale or rent"
    )

    property_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        comment="Normalized property type (residential, flat, plot, commercial, agricultural, pg)"
    )

    sub_category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
        comment="Lower-cased subcategory slug"
    )

    # Category tree references
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    subcategory_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("subcategories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    mini_subcategory_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("mini_subcategories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Location
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    sector: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    mohalla: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    landmark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    latitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=8),
        nullable=True
    )

    longitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=11, scale=8),
        nullable=True
    )

    # Specifications
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    area: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Built-up or plot area")
    area_unit: Mapped[str] = mapped_column(String(20), nullable=False, default="sqft")
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    furnishing: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Contact
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Status and moderation
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.INACTIVE,
        index=True
    )

    approval_status: Mapped[ApprovalStatus] = mapped_column(
        SQLEnum(ApprovalStatus),
        nullable=False,
        default=ApprovalStatus.PENDING,
        index=True
    )

    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    admin_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Paid packages, free listings have no package or are unpaid
    package_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inquiries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who submitted this listing"
    )

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def is_public(self) -> bool:
        """Whether the listing is visible on the marketplace."""
        return (
            self.status == PropertyStatus.ACTIVE
            and self.approval_status == ApprovalStatus.APPROVED
            and not self.is_deleted
        )

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or self.price < 0:
            raise ValueError("Property price cannot be negative")

        if self.price > Decimal('999999999999.99'):
            raise ValueError("Property price exceeds maximum allowed value")

    def validate_specifications(self) -> None:
        for field in ("bedrooms", "bathrooms", "area", "total_floors"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValueError(f"{field} cannot be negative")

    def validate_coordinates(self) -> None:
        if self.latitude is not None and not (-90 <= self.latitude <= 90):
            raise ValueError("Latitude must be between -90 and 90 degrees")

        if self.longitude is not None and not (-180 <= self.longitude <= 180):
            raise ValueError("Longitude must be between -180 and 180 degrees")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_specifications()
        self.validate_coordinates()

    def to_dict(self) -> dict:
        """
        Convert property to dictionary.

        Returns:
            Dictionary representation of property
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "price": float(self.price),
            "price_type": self.price_type.value,
            "property_type": self.property_type,
            "sub_category": self.sub_category,
            "category_id": str(self.category_id) if self.category_id else None,
            "subcategory_id": str(self.subcategory_id) if self.subcategory_id else None,
            "mini_subcategory_id": str(self.mini_subcategory_id) if self.mini_subcategory_id else None,
            "location": {
                "address": self.address,
                "city": self.city,
                "sector": self.sector,
                "mohalla": self.mohalla,
                "landmark": self.landmark,
                "latitude": float(self.latitude) if self.latitude is not None else None,
                "longitude": float(self.longitude) if self.longitude is not None else None,
            },
            "specifications": {
                "bedrooms": self.bedrooms,
                "bathrooms": self.bathrooms,
                "area": self.area,
                "area_unit": self.area_unit,
                "floor": self.floor,
                "total_floors": self.total_floors,
                "furnishing": self.furnishing,
                "parking": self.parking,
            },
            "images": list(self.images or []),
            "amenities": list(self.amenities or []),
            "contact": {
                "name": self.contact_name,
                "phone": self.contact_phone,
                "email": self.contact_email,
            },
            "status": self.status.value,
            "approval_status": self.approval_status.value,
            "is_approved": self.is_approved,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejection_reason": self.rejection_reason,
            "admin_comments": self.admin_comments,
            "featured": self.featured,
            "premium": self.premium,
            "package_id": self.package_id,
            "is_paid": self.is_paid,
            "views": self.views,
            "inquiries": self.inquiries,
            "owner_id": str(self.owner_id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# Public listing: visibility filter plus the default newest-first ordering
public_listing_index = Index(
    'idx_properties_public_listing',
    Property.status,
    Property.approval_status,
    Property.is_deleted,
    Property.created_at.desc()
)

# Type and price filters on the category pages
type_price_index = Index(
    'idx_properties_type_price',
    Property.property_type,
    Property.price_type,
    Property.price
)

# Free listing window count per owner
owner_created_index = Index(
    'idx_properties_owner_created',
    Property.owner_id,
    Property.created_at
)
