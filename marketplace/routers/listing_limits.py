"""
Free listing allowance endpoints for users and administrators.
"""

from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services import ListingLimitService
from marketplace.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta, page_offset, error_responses
from marketplace.schemas.engagement import (
    ListingStats,
    UserListingStats,
    FreeListingLimitUpdate,
    FreeListingSettings,
)
from marketplace.utils.dependencies import (
    get_current_active_user,
    get_current_admin_user,
    get_listing_limit_service,
)


router = APIRouter(tags=["Listing Limits"], responses=error_responses(401))


@router.get("/user/listing-stats", response_model=ApiResponse[ListingStats], summary="My free listing usage")
async def my_listing_stats(
    current_user: User = Depends(get_current_active_user),
    limits: ListingLimitService = Depends(get_listing_limit_service)
) -> ApiResponse[ListingStats]:
    return ApiResponse(data=await limits.get_stats(current_user))


@router.get(
    "/admin/users/listing-stats",
    response_model=PaginatedResponse[UserListingStats],
    summary="Free listing usage of sellers and agents",
    responses=error_responses(403)
)
async def users_listing_stats(
    search: Optional[str] = Query(None, description="Name, email or phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    limits: ListingLimitService = Depends(get_listing_limit_service)
) -> PaginatedResponse[UserListingStats]:
    rows, total = await limits.list_user_stats(search, page_offset(page, limit), limit)
    return PaginatedResponse(data=rows, pagination=PaginationMeta.build(page, limit, total))


@router.put(
    "/admin/users/{user_id}/free-listing-limit",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Override a user's free listing limit",
    responses=error_responses(403, 404, 422)
)
async def set_user_limit(
    user_id: UUID,
    data: FreeListingLimitUpdate,
    admin: User = Depends(get_current_admin_user),
    limits: ListingLimitService = Depends(get_listing_limit_service)
) -> ApiResponse[Dict[str, Any]]:
    result = await limits.set_user_limit(user_id, data.limit, data.period, admin)
    return ApiResponse(data=result, message="Free listing limit updated")


@router.get(
    "/admin/free-listing-settings",
    response_model=ApiResponse[FreeListingSettings],
    summary="Default free listing allowance",
    responses=error_responses(403)
)
async def get_free_listing_settings(
    admin: User = Depends(get_current_admin_user),
    limits: ListingLimitService = Depends(get_listing_limit_service)
) -> ApiResponse[FreeListingSettings]:
    return ApiResponse(data=await limits.get_default_settings())


@router.put(
    "/admin/free-listing-settings",
    response_model=ApiResponse[FreeListingSettings],
    summary="Change the default free listing allowance",
    responses=error_responses(403, 422)
)
async def update_free_listing_settings(
    data: FreeListingSettings,
    admin: User = Depends(get_current_admin_user),
    limits: ListingLimitService = Depends(get_listing_limit_service)
) -> ApiResponse[FreeListingSettings]:
    return ApiResponse(data=await limits.update_default_settings(data, admin), message="Settings saved")
