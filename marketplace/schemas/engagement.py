"""
Pydantic schemas for advertisement leads, notifications, listing limits and dashboards.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID
import re
from marketplace.models.engagement import SubmissionStatus, NotificationType
from marketplace.models.user import UserType, ListingPeriod
from marketplace.schemas.property import PropertyResponse

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9\s\-\+\(\)]{10,}$")


class AdvertisementSubmissionCreate(BaseModel):
    """Public advertise-with-us form."""

    full_name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=32)
    company_name: Optional[str] = Field(None, max_length=255)
    project_name: str = Field(..., max_length=255)
    location: str = Field(..., max_length=255)
    budget: Optional[str] = Field(None, max_length=100)
    banner_type: str = Field(..., max_length=100, examples=["homepage_banner"])
    description: str = Field(..., max_length=5000)

    @field_validator("full_name", "project_name", "location", "banner_type", "description")
    @classmethod
    def require_text(cls, v):
        if not v or not v.strip():
            raise ValueError("This field is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = (v or "").strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v.lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        v = (v or "").strip()
        if not PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone number format")
        return v


class AdvertisementSubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: str
    phone: str
    company_name: Optional[str] = None
    project_name: str
    location: str
    budget: Optional[str] = None
    banner_type: str
    description: str
    status: SubmissionStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubmissionStatusUpdate(BaseModel):
    status: SubmissionStatus


class AdvertisementStats(BaseModel):
    total: int
    new: int
    viewed: int
    contacted: int
    by_banner_type: Dict[str, int]


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationType
    property_id: Optional[UUID] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NotificationBroadcast(BaseModel):
    """Admin message to specific users or to every active user of a type."""

    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=2000)
    user_ids: Optional[List[UUID]] = None
    user_type: Optional[UserType] = None

    @model_validator(mode="after")
    def require_audience(self):
        if not self.user_ids and not self.user_type:
            raise ValueError("Provide user_ids or user_type")
        return self


class UnreadCount(BaseModel):
    unread: int


class ListingStats(BaseModel):
    """Free listing usage for one user."""

    total_listings: int = Field(..., description="Live listings (active, approved, not deleted)")
    free_listings_used: int
    free_listing_limit: int
    free_listing_period: ListingPeriod
    free_listing_limit_type: int = Field(..., description="Window length in days")
    remaining_free_listings: int
    pending_free_listings: int


class UserListingStats(ListingStats):
    user_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    user_type: UserType
    has_custom_limit: bool


class FreeListingLimitUpdate(BaseModel):
    limit: int = Field(..., ge=0, le=10000, description="Free listings allowed per period")
    period: ListingPeriod


class FreeListingSettings(BaseModel):
    default_limit: int = Field(..., ge=0, le=10000)
    default_period: ListingPeriod
    default_limit_type: Optional[int] = Field(None, description="Window length in days, derived from the period")


class SellerAnalytics(BaseModel):
    total_properties: int
    total_views: int
    total_inquiries: int
    avg_views_per_property: float
    top_property: Optional[PropertyResponse] = None
    by_approval_status: Dict[str, int]


class AdminStats(BaseModel):
    users_by_type: Dict[str, int]
    properties_by_approval_status: Dict[str, int]
    new_advertisement_submissions: int
    published_blogs: int
