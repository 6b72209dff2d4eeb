"""
Database models for the Property Marketplace API.
"""

from marketplace.models.user import User, UserType, ListingPeriod
from marketplace.models.property import (
    Property,
    PriceType,
    PropertyStatus,
    ApprovalStatus,
    normalize_property_type,
)
from marketplace.models.category import Category, Subcategory, MiniSubcategory
from marketplace.models.content import Banner, AreaMap, Blog, PublishStatus
from marketplace.models.engagement import (
    AdvertisementSubmission,
    SubmissionStatus,
    Notification,
    NotificationType,
    AdminSetting,
)
from marketplace.models.service_catalog import ServiceCategory, ServiceSubcategory

__all__ = [
    "User",
    "UserType",
    "ListingPeriod",
    "Property",
    "PriceType",
    "PropertyStatus",
    "ApprovalStatus",
    "normalize_property_type",
    "Category",
    "Subcategory",
    "MiniSubcategory",
    "Banner",
    "AreaMap",
    "Blog",
    "PublishStatus",
    "AdvertisementSubmission",
    "SubmissionStatus",
    "Notification",
    "NotificationType",
    "AdminSetting",
    "ServiceCategory",
    "ServiceSubcategory",
]
