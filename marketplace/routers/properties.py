"""
Property API endpoints: listing submission, public search, detail, owner edits and images.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Query, UploadFile, status
from typing import Optional, List, Literal
from decimal import Decimal
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.models.property import Property, PriceType
from marketplace.services import PropertyService, UploadService
from marketplace.services import mailer
from marketplace.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta, page_offset, error_responses
from marketplace.schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse
from marketplace.utils.dependencies import (
    get_current_active_user,
    get_current_seller_user,
    get_optional_current_user,
    get_property_service,
    get_upload_service,
)


router = APIRouter(prefix="/properties", tags=["Properties"])

SortOption = Literal["price_asc", "price_desc", "area_desc", "date_asc", "date_desc"]


def to_response(property_obj: Property) -> PropertyResponse:
    return PropertyResponse.model_validate(property_obj.to_dict())


def paginated(properties: List[Property], page: int, limit: int, total: int) -> PaginatedResponse[PropertyResponse]:
    return PaginatedResponse(
        data=[to_response(p) for p in properties],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit a property",
    description="Create a listing for moderation. Free listings count against the owner's allowance.",
    responses=error_responses(401, 403, 422)
)
async def create_property(
    property_data: PropertyCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_seller_user),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.create_property(property_data, current_user)

    background_tasks.add_task(
        mailer.send_property_confirmation,
        current_user.email,
        current_user.name,
        property_obj.title,
        str(property_obj.id),
    )
    return ApiResponse(
        data=to_response(property_obj),
        message="Property submitted successfully and is pending approval",
    )


@router.get(
    "",
    response_model=PaginatedResponse[PropertyResponse],
    summary="Search properties",
    description="Public listing of active, approved properties",
    responses=error_responses(422)
)
async def list_properties(
    category: Optional[str] = Query(None, description="buy, rent or a property type"),
    property_type: Optional[str] = Query(None),
    sub_category: Optional[str] = Query(None),
    price_type: Optional[PriceType] = Query(None),
    sector: Optional[str] = Query(None),
    mohalla: Optional[str] = Query(None),
    landmark: Optional[str] = Query(None, description="Partial match"),
    bedrooms: Optional[str] = Query(None, description="Exact count, or '4+' for four or more"),
    bathrooms: Optional[int] = Query(None, ge=0),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    min_area: Optional[int] = Query(None, ge=0),
    max_area: Optional[int] = Query(None, ge=0),
    category_id: Optional[UUID] = Query(None),
    subcategory_id: Optional[UUID] = Query(None),
    mini_subcategory_id: Optional[UUID] = Query(None),
    q: Optional[str] = Query(None, description="Search in title and description"),
    sort_by: SortOption = Query("date_desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    property_service: PropertyService = Depends(get_property_service)
) -> PaginatedResponse[PropertyResponse]:
    filters = property_service.build_filters(
        category=category,
        property_type=property_type,
        sub_category=sub_category,
        price_type=price_type,
        sector=sector,
        mohalla=mohalla,
        landmark=landmark,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price,
        min_area=min_area,
        max_area=max_area,
        category_id=category_id,
        subcategory_id=subcategory_id,
        mini_subcategory_id=mini_subcategory_id,
        q=q,
        sort_by=sort_by,
    )
    properties, total = await property_service.search_properties(filters, page_offset(page, limit), limit)
    return paginated(properties, page, limit, total)


@router.get(
    "/featured",
    response_model=ApiResponse[List[PropertyResponse]],
    summary="Featured properties"
)
async def featured_properties(
    limit: int = Query(10, ge=1, le=50),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[List[PropertyResponse]]:
    properties = await property_service.get_featured(limit)
    return ApiResponse(data=[to_response(p) for p in properties])


@router.get(
    "/categories/{category}/{sub_category}",
    response_model=PaginatedResponse[PropertyResponse],
    summary="Properties in a category and subcategory"
)
async def properties_by_category(
    category: str,
    sub_category: str,
    sort_by: SortOption = Query("date_desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    property_service: PropertyService = Depends(get_property_service)
) -> PaginatedResponse[PropertyResponse]:
    filters = property_service.build_filters(category=category, sub_category=sub_category, sort_by=sort_by)
    properties, total = await property_service.search_properties(filters, page_offset(page, limit), limit)
    return paginated(properties, page, limit, total)


@router.get(
    "/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Get property",
    description="Public listings count a view. Owners and admins can also open their non-public listings.",
    responses=error_responses(404)
)
async def get_property(
    property_id: UUID,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.get_property(property_id, current_user)
    return ApiResponse(data=to_response(property_obj))


@router.put(
    "/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Edit own property",
    description="Editing an approved or active listing sends it back to moderation.",
    responses=error_responses(401, 403, 404, 422)
)
async def update_property(
    property_id: UUID,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return ApiResponse(data=to_response(property_obj), message="Property updated and sent for review")


@router.post(
    "/{property_id}/inquire",
    response_model=ApiResponse[PropertyResponse],
    summary="Record an inquiry",
    responses=error_responses(404)
)
async def inquire(
    property_id: UUID,
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.record_inquiry(property_id)
    return ApiResponse(data=to_response(property_obj))


@router.post(
    "/{property_id}/images",
    response_model=ApiResponse[PropertyResponse],
    summary="Upload property images",
    responses=error_responses(400, 401, 403, 404)
)
async def upload_images(
    property_id: UUID,
    files: List[UploadFile] = File(..., description="JPEG, PNG, WebP or GIF images"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.add_images(property_id, files, current_user, uploads)
    return ApiResponse(data=to_response(property_obj), message=f"{len(files)} image(s) uploaded")


@router.delete(
    "/{property_id}/images",
    response_model=ApiResponse[PropertyResponse],
    summary="Remove a property image",
    responses=error_responses(401, 403, 404)
)
async def delete_image(
    property_id: UUID,
    url: str = Query(..., description="URL of the image to remove"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.remove_image(property_id, url, current_user, uploads)
    return ApiResponse(data=to_response(property_obj), message="Image removed")
