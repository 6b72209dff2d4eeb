"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.database import get_db
from marketplace.models.user import User
from marketplace.services import (
    AuthService,
    PropertyService,
    ModerationService,
    ListingLimitService,
    CategoryService,
    BannerService,
    AreaMapService,
    BlogService,
    AdvertisementService,
    NotificationService,
    SellerService,
    ServiceCatalogService,
    UploadService,
)
from marketplace.utils.exceptions import (
    APIException,
    UnauthorizedError,
    InactiveUserError,
    InsufficientPermissionsError,
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_moderation_service(db: AsyncSession = Depends(get_db)) -> ModerationService:
    return ModerationService(db)


async def get_listing_limit_service(db: AsyncSession = Depends(get_db)) -> ListingLimitService:
    return ListingLimitService(db)


async def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


async def get_banner_service(db: AsyncSession = Depends(get_db)) -> BannerService:
    return BannerService(db)


async def get_map_service(db: AsyncSession = Depends(get_db)) -> AreaMapService:
    return AreaMapService(db)


async def get_blog_service(db: AsyncSession = Depends(get_db)) -> BlogService:
    return BlogService(db)


async def get_advertisement_service(db: AsyncSession = Depends(get_db)) -> AdvertisementService:
    return AdvertisementService(db)


async def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


async def get_seller_service(db: AsyncSession = Depends(get_db)) -> SellerService:
    return SellerService(db)


async def get_service_catalog_service(db: AsyncSession = Depends(get_db)) -> ServiceCatalogService:
    return ServiceCatalogService(db)


def get_upload_service() -> UploadService:
    return UploadService()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the Bearer access token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        raise UnauthorizedError(f"Authentication failed: {str(e)}")


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise InactiveUserError()
    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Raises:
        InsufficientPermissionsError: If user is not an admin
    """
    if not current_user.is_admin:
        raise InsufficientPermissionsError("access admin resources")
    return current_user


async def get_current_seller_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """Sellers, agents and admins: everyone allowed to post listings."""
    if not current_user.can_post_properties:
        raise InsufficientPermissionsError("access seller resources")
    return current_user


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Current user when a valid token is sent, otherwise None.
    Used by public endpoints that show more to owners and admins.
    """
    if not credentials:
        return None

    try:
        user = await auth_service.get_current_user(credentials.credentials)
    except APIException:
        return None
    return user if user.is_active else None
