"""
Admin API endpoints for listing moderation, user accounts and dashboard counters.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from typing import Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User, UserType
from marketplace.models.property import PropertyStatus, ApprovalStatus
from marketplace.services import ModerationService, AuthService
from marketplace.services import mailer
from marketplace.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta, page_offset, error_responses
from marketplace.schemas.property import (
    PropertyResponse,
    PropertyApprovalUpdate,
    PropertyStatusUpdate,
    PropertyFeaturedUpdate,
)
from marketplace.schemas.user import UserResponse, UserStatusUpdate
from marketplace.schemas.engagement import AdminStats
from marketplace.routers.properties import to_response, paginated
from marketplace.utils.dependencies import get_current_admin_user, get_moderation_service, get_auth_service


router = APIRouter(prefix="/admin", tags=["Admin"], responses=error_responses(401, 403))


@router.get("/properties", response_model=PaginatedResponse[PropertyResponse], summary="All properties")
async def list_properties(
    status: Optional[PropertyStatus] = Query(None),
    approval_status: Optional[ApprovalStatus] = Query(None),
    owner_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None, description="Title, sector or contact phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PaginatedResponse[PropertyResponse]:
    properties, total = await moderation.list_properties(
        status, approval_status, owner_id, search, page_offset(page, limit), limit
    )
    return paginated(properties, page, limit, total)


@router.get("/properties/pending", response_model=PaginatedResponse[PropertyResponse], summary="Awaiting review")
async def list_pending_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PaginatedResponse[PropertyResponse]:
    properties, total = await moderation.list_pending(page_offset(page, limit), limit)
    return paginated(properties, page, limit, total)


@router.put(
    "/properties/{property_id}/approval",
    response_model=ApiResponse[PropertyResponse],
    summary="Approve or reject a property",
    responses=error_responses(404, 422)
)
async def update_approval(
    property_id: UUID,
    decision: PropertyApprovalUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> ApiResponse[PropertyResponse]:
    """
    Approval publishes the listing; rejection stores the reason.
    The owner is notified in-app and by email.
    """
    property_obj, owner = await moderation.decide(property_id, decision, admin)

    if owner:
        background_tasks.add_task(
            mailer.send_property_decision,
            owner.email,
            owner.name,
            property_obj.title,
            property_obj.approval_status == ApprovalStatus.APPROVED,
            property_obj.rejection_reason,
        )
    return ApiResponse(data=to_response(property_obj), message=f"Property {decision.approval_status}")


@router.put(
    "/properties/{property_id}/status",
    response_model=ApiResponse[PropertyResponse],
    summary="Set property status",
    responses=error_responses(404)
)
async def update_status(
    property_id: UUID,
    data: PropertyStatusUpdate,
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> ApiResponse[PropertyResponse]:
    return ApiResponse(data=to_response(await moderation.set_status(property_id, data.status)))


@router.put(
    "/properties/{property_id}/featured",
    response_model=ApiResponse[PropertyResponse],
    summary="Feature or unfeature a property",
    responses=error_responses(404)
)
async def update_featured(
    property_id: UUID,
    data: PropertyFeaturedUpdate,
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> ApiResponse[PropertyResponse]:
    return ApiResponse(data=to_response(await moderation.set_featured(property_id, data.featured)))


@router.delete(
    "/properties/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Soft delete a property",
    responses=error_responses(404)
)
async def delete_property(
    property_id: UUID,
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await moderation.delete_property(property_id, admin)
    return ApiResponse(data=to_response(property_obj), message="Property deleted")


@router.get("/stats", response_model=ApiResponse[AdminStats], summary="Dashboard counters")
async def get_stats(
    admin: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> ApiResponse[AdminStats]:
    return ApiResponse(data=await moderation.get_stats())


@router.get("/users", response_model=PaginatedResponse[UserResponse], summary="List users")
async def list_users(
    user_type: Optional[UserType] = Query(None),
    search: Optional[str] = Query(None, description="Name, email or phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> PaginatedResponse[UserResponse]:
    users, total = await auth_service.list_users(user_type, search, page_offset(page, limit), limit)
    return PaginatedResponse(
        data=[UserResponse.model_validate(user.to_dict()) for user in users],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.put(
    "/users/{user_id}/status",
    response_model=ApiResponse[UserResponse],
    summary="Activate or deactivate a user",
    responses=error_responses(400, 404)
)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    admin: User = Depends(get_current_admin_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[UserResponse]:
    user = await auth_service.set_user_status(user_id, data.is_active, admin)
    return ApiResponse(data=UserResponse.model_validate(user.to_dict()))
