"""
Notification inbox for the current user and admin broadcasts.
"""

from fastapi import APIRouter, Depends, Query, status
from uuid import UUID

from marketplace.models.user import User
from marketplace.services import NotificationService
from marketplace.schemas.common import (
    ApiResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    page_offset,
    error_responses,
)
from marketplace.schemas.engagement import NotificationResponse, NotificationBroadcast, UnreadCount
from marketplace.utils.dependencies import get_current_active_user, get_current_admin_user, get_notification_service


router = APIRouter(tags=["Notifications"], responses=error_responses(401))


@router.get("/notifications", response_model=PaginatedResponse[NotificationResponse], summary="My notifications")
async def list_notifications(
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> PaginatedResponse[NotificationResponse]:
    items, total = await notifications.list_for_user(current_user, unread_only, page_offset(page, limit), limit)
    return PaginatedResponse(
        data=[NotificationResponse.model_validate(item) for item in items],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get("/notifications/unread-count", response_model=ApiResponse[UnreadCount])
async def unread_count(
    current_user: User = Depends(get_current_active_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> ApiResponse[UnreadCount]:
    return ApiResponse(data=UnreadCount(unread=await notifications.unread_count(current_user)))


@router.put("/notifications/read-all", response_model=MessageResponse)
async def mark_all_read(
    current_user: User = Depends(get_current_active_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> MessageResponse:
    updated = await notifications.mark_all_read(current_user)
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.put(
    "/notifications/{notification_id}/read",
    response_model=ApiResponse[NotificationResponse],
    responses=error_responses(404)
)
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_active_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> ApiResponse[NotificationResponse]:
    notification = await notifications.mark_read(notification_id, current_user)
    return ApiResponse(data=NotificationResponse.model_validate(notification))


@router.delete("/notifications/{notification_id}", response_model=MessageResponse, responses=error_responses(404))
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(get_current_active_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> MessageResponse:
    await notifications.delete(notification_id, current_user)
    return MessageResponse(message="Notification deleted")


@router.post(
    "/admin/notifications",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Broadcast a notification",
    responses=error_responses(400, 403, 404, 422)
)
async def broadcast(
    data: NotificationBroadcast,
    admin: User = Depends(get_current_admin_user),
    notifications: NotificationService = Depends(get_notification_service)
) -> MessageResponse:
    sent = await notifications.broadcast(data, admin)
    return MessageResponse(message=f"Notification sent to {sent} users")
