"""
Pydantic schemas for property requests and responses.
Handles listing submission, owner edits, moderation actions and validation.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from marketplace.models.property import (
    PriceType,
    PropertyStatus,
    ApprovalStatus,
    CANONICAL_PROPERTY_TYPES,
    normalize_property_type,
)


class PropertyLocation(BaseModel):
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    sector: Optional[str] = Field(None, max_length=100)
    mohalla: Optional[str] = Field(None, max_length=100)
    landmark: Optional[str] = Field(None, max_length=255)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    @model_validator(mode='after')
    def validate_coordinates(self):
        """Both coordinates are provided together or both are None."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class PropertySpecifications(BaseModel):
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    area: Optional[int] = Field(None, ge=0, description="Built-up or plot area")
    area_unit: str = Field("sqft", max_length=20)
    floor: Optional[int] = Field(None, ge=-5, le=200)
    total_floors: Optional[int] = Field(None, ge=0, le=200)
    furnishing: Optional[str] = Field(None, max_length=50)
    parking: bool = False


class PropertyContact(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)
    email: Optional[str] = Field(None, max_length=255)


def _flatten(
    location: Optional[PropertyLocation],
    specifications: Optional[PropertySpecifications],
    contact: Optional[PropertyContact],
    partial: bool = False
) -> Dict[str, Any]:
    """
    Map the nested request blocks onto property columns.
    With partial set, only the fields present in the request are mapped so an
    edit never resets stored values to the block defaults.
    """
    columns: Dict[str, Any] = {}
    if location is not None:
        columns.update(location.model_dump(exclude_unset=partial))
    if specifications is not None:
        columns.update(specifications.model_dump(exclude_unset=partial))
    if contact is not None:
        columns.update({
            f"contact_{key}": value
            for key, value in contact.model_dump(exclude_unset=partial).items()
        })
    return columns


class PropertyBase(BaseModel):
    """Fields shared by submission and edit payloads."""

    title: str = Field(
        ...,
        min_length=5,
        max_length=255,
        description="Property listing title",
        examples=["3 BHK independent house in Sector 14"]
    )

    description: str = Field(
        ...,
        min_length=10,
        max_length=5000,
        description="Detailed property description"
    )

    price: Decimal = Field(
        ...,
        ge=0,
        description="Asking price, or monthly rent for rental listings"
    )

    price_type: PriceType = Field(PriceType.SALE, description="sale or rent")

    property_type: str = Field(
        ...,
        description="Property type or alias, e.g. flat, apartment, plot, co-living",
        examples=["residential"]
    )

    sub_category: Optional[str] = Field(None, max_length=100, description="Subcategory slug")

    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    mini_subcategory_id: Optional[UUID] = None

    @field_validator('title', 'description')
    @classmethod
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator('property_type')
    @classmethod
    def validate_property_type(cls, v):
        """Normalize aliases onto the canonical property types."""
        normalized = normalize_property_type(v)
        if normalized not in CANONICAL_PROPERTY_TYPES:
            raise ValueError(f"Property type must be one of: {', '.join(CANONICAL_PROPERTY_TYPES)}")
        return normalized

    @field_validator('sub_category')
    @classmethod
    def validate_sub_category(cls, v):
        return v.strip().lower() if v else v


class PropertyCreate(PropertyBase):
    """Schema for submitting a new listing."""

    location: PropertyLocation = Field(default_factory=PropertyLocation)
    specifications: PropertySpecifications = Field(default_factory=PropertySpecifications)
    contact: PropertyContact = Field(default_factory=PropertyContact)
    images: List[str] = Field(default_factory=list, max_length=20)
    amenities: List[str] = Field(default_factory=list)
    premium: bool = False
    package_id: Optional[str] = Field(None, max_length=64, description="Paid package identifier")

    def to_columns(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={"location", "specifications", "contact"})
        data.update(_flatten(self.location, self.specifications, self.contact))
        return data


class PropertyUpdate(BaseModel):
    """Owner edit; only provided fields are changed."""

    title: Optional[str] = Field(None, min_length=5, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    price: Optional[Decimal] = Field(None, ge=0)
    price_type: Optional[PriceType] = None
    property_type: Optional[str] = None
    sub_category: Optional[str] = Field(None, max_length=100)
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    mini_subcategory_id: Optional[UUID] = None
    location: Optional[PropertyLocation] = None
    specifications: Optional[PropertySpecifications] = None
    contact: Optional[PropertyContact] = None
    images: Optional[List[str]] = Field(None, max_length=20)
    amenities: Optional[List[str]] = None

    @field_validator('property_type')
    @classmethod
    def validate_property_type(cls, v):
        if v is None:
            return v
        normalized = normalize_property_type(v)
        if normalized not in CANONICAL_PROPERTY_TYPES:
            raise ValueError(f"Property type must be one of: {', '.join(CANONICAL_PROPERTY_TYPES)}")
        return normalized

    @field_validator('sub_category')
    @classmethod
    def validate_sub_category(cls, v):
        return v.strip().lower() if v else v

    def to_columns(self) -> Dict[str, Any]:
        # Existing images are kept unless a new list is sent
        data = self.model_dump(exclude_unset=True, exclude={"location", "specifications", "contact"})
        data.update(_flatten(self.location, self.specifications, self.contact, partial=True))
        return {
            key: value for key, value in data.items()
            if value is not None or key not in REQUIRED_COLUMNS
        }


REQUIRED_COLUMNS = {"title", "description", "price", "price_type", "property_type", "images", "amenities"}


class PropertyResponse(BaseModel):
    """Listing as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    price: float
    price_type: PriceType
    property_type: str
    sub_category: Optional[str] = None
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    mini_subcategory_id: Optional[UUID] = None
    location: PropertyLocation
    specifications: PropertySpecifications
    images: List[str] = []
    amenities: List[str] = []
    contact: PropertyContact
    status: PropertyStatus
    approval_status: ApprovalStatus
    is_approved: bool
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_comments: Optional[str] = None
    featured: bool
    premium: bool
    package_id: Optional[str] = None
    is_paid: bool
    views: int
    inquiries: int
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyApprovalUpdate(BaseModel):
    """Moderation decision on a pending listing."""

    approval_status: Literal["approved", "rejected"] = Field(..., description="Moderation decision")
    rejection_reason: Optional[str] = Field(None, max_length=1000)
    admin_comments: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode='after')
    def require_reason_for_rejection(self):
        if self.approval_status == "rejected" and not (self.rejection_reason or "").strip():
            raise ValueError("A rejection reason is required when rejecting a property")
        return self


class PropertyStatusUpdate(BaseModel):
    status: PropertyStatus


class PropertyFeaturedUpdate(BaseModel):
    featured: bool
