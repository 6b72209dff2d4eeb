"""
Advertise-with-us form and the admin lead inbox.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from uuid import UUID

from marketplace.models.user import User
from marketplace.models.engagement import SubmissionStatus
from marketplace.services import AdvertisementService
from marketplace.schemas.common import (
    ApiResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    page_offset,
    error_responses,
)
from marketplace.schemas.engagement import (
    AdvertisementSubmissionCreate,
    AdvertisementSubmissionResponse,
    SubmissionStatusUpdate,
    AdvertisementStats,
)
from marketplace.utils.dependencies import get_current_admin_user, get_advertisement_service


router = APIRouter(tags=["Advertisements"])


@router.post(
    "/advertisement-submissions",
    response_model=ApiResponse[AdvertisementSubmissionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit an advertising request",
    responses=error_responses(422)
)
async def submit_advertisement(
    data: AdvertisementSubmissionCreate,
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> ApiResponse[AdvertisementSubmissionResponse]:
    submission = await advertisements.submit(data)
    return ApiResponse(
        data=AdvertisementSubmissionResponse.model_validate(submission),
        message="Thank you! Our team will contact you shortly.",
    )


@router.get(
    "/admin/advertisement-submissions",
    response_model=PaginatedResponse[AdvertisementSubmissionResponse],
    responses=error_responses(401, 403)
)
async def list_submissions(
    status: Optional[SubmissionStatus] = Query(None),
    banner_type: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Name, email, phone or project"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(get_current_admin_user),
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> PaginatedResponse[AdvertisementSubmissionResponse]:
    items, total = await advertisements.list_submissions(
        status, banner_type, search, page_offset(page, limit), limit
    )
    return PaginatedResponse(
        data=[AdvertisementSubmissionResponse.model_validate(item) for item in items],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get(
    "/admin/advertisement-submissions/stats",
    response_model=ApiResponse[AdvertisementStats],
    responses=error_responses(401, 403)
)
async def submission_stats(
    admin: User = Depends(get_current_admin_user),
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> ApiResponse[AdvertisementStats]:
    return ApiResponse(data=await advertisements.get_stats())


@router.get(
    "/admin/advertisement-submissions/{submission_id}",
    response_model=ApiResponse[AdvertisementSubmissionResponse],
    summary="Open a lead",
    description="Opening a new lead marks it as viewed.",
    responses=error_responses(401, 403, 404)
)
async def get_submission(
    submission_id: UUID,
    admin: User = Depends(get_current_admin_user),
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> ApiResponse[AdvertisementSubmissionResponse]:
    submission = await advertisements.get_submission(submission_id)
    return ApiResponse(data=AdvertisementSubmissionResponse.model_validate(submission))


@router.put(
    "/admin/advertisement-submissions/{submission_id}/status",
    response_model=ApiResponse[AdvertisementSubmissionResponse],
    responses=error_responses(401, 403, 404, 422)
)
async def update_submission_status(
    submission_id: UUID,
    data: SubmissionStatusUpdate,
    admin: User = Depends(get_current_admin_user),
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> ApiResponse[AdvertisementSubmissionResponse]:
    submission = await advertisements.set_status(submission_id, data.status)
    return ApiResponse(data=AdvertisementSubmissionResponse.model_validate(submission))


@router.delete(
    "/admin/advertisement-submissions/{submission_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404)
)
async def delete_submission(
    submission_id: UUID,
    admin: User = Depends(get_current_admin_user),
    advertisements: AdvertisementService = Depends(get_advertisement_service)
) -> MessageResponse:
    await advertisements.delete_submission(submission_id)
    return MessageResponse(message="Submission deleted")
