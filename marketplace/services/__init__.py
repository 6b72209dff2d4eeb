"""
Service layer for business logic implementation.
"""

from .auth import AuthService
from .property import PropertyService
from .moderation import ModerationService
from .listing_limit import ListingLimitService
from .category import CategoryService
from .content import BannerService, AreaMapService, BlogService
from .advertisement import AdvertisementService
from .notification import NotificationService
from .seller import SellerService
from .service_catalog import ServiceCatalogService
from .upload import UploadService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "ModerationService",
    "ListingLimitService",
    "CategoryService",
    "BannerService",
    "AreaMapService",
    "BlogService",
    "AdvertisementService",
    "NotificationService",
    "SellerService",
    "ServiceCatalogService",
    "UploadService",
    "ErrorHandlerService",
]
