"""
Repository layer for async data access.
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository, PropertySearchFilters
from marketplace.repositories.category import (
    CategoryRepository,
    SubcategoryRepository,
    MiniSubcategoryRepository,
)
from marketplace.repositories.content import BannerRepository, AreaMapRepository, BlogRepository
from marketplace.repositories.engagement import (
    AdvertisementSubmissionRepository,
    NotificationRepository,
    AdminSettingRepository,
)
from marketplace.repositories.service_catalog import ServiceCategoryRepository, ServiceSubcategoryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "CategoryRepository",
    "SubcategoryRepository",
    "MiniSubcategoryRepository",
    "BannerRepository",
    "AreaMapRepository",
    "BlogRepository",
    "AdvertisementSubmissionRepository",
    "NotificationRepository",
    "AdminSettingRepository",
    "ServiceCategoryRepository",
    "ServiceSubcategoryRepository",
]
