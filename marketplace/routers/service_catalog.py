"""
"Other services" directory categories: public reads and admin management with Excel attachments.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import List, Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services import ServiceCatalogService, UploadService
from marketplace.schemas.common import (
    ApiResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    page_offset,
    error_responses,
)
from marketplace.schemas.service_catalog import (
    ServiceCategoryCreate,
    ServiceCategoryUpdate,
    ServiceCategoryResponse,
    ServiceSubcategoryCreate,
    ServiceSubcategoryResponse,
    ExcelFile,
)
from marketplace.utils.dependencies import (
    get_current_admin_user,
    get_service_catalog_service,
    get_upload_service,
)


router = APIRouter(tags=["Service Categories"])

admin_errors = error_responses(401, 403, 404)


@router.get("/os/categories", response_model=ApiResponse[List[ServiceCategoryResponse]])
async def list_active_categories(
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[List[ServiceCategoryResponse]]:
    categories = await catalog.list_active_categories()
    return ApiResponse(data=[ServiceCategoryResponse.model_validate(category) for category in categories])


@router.get(
    "/os/subcategories",
    response_model=ApiResponse[List[ServiceSubcategoryResponse]],
    responses=error_responses(404)
)
async def list_active_subcategories(
    cat: str = Query(..., description="Category slug"),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[List[ServiceSubcategoryResponse]]:
    subcategories = await catalog.list_public_subcategories(cat)
    return ApiResponse(data=[ServiceSubcategoryResponse.model_validate(sub) for sub in subcategories])


# Admin

@router.get(
    "/admin/os-categories",
    response_model=PaginatedResponse[ServiceCategoryResponse],
    responses=error_responses(401, 403)
)
async def admin_list_categories(
    active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> PaginatedResponse[ServiceCategoryResponse]:
    categories, total = await catalog.list_categories(active, page_offset(page, limit), limit)
    return PaginatedResponse(
        data=[ServiceCategoryResponse.model_validate(category) for category in categories],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.post(
    "/admin/os-categories",
    response_model=ApiResponse[ServiceCategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 409, 422)
)
async def admin_create_category(
    data: ServiceCategoryCreate,
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[ServiceCategoryResponse]:
    category = await catalog.create_category(data)
    return ApiResponse(data=ServiceCategoryResponse.model_validate(category), message="Category created")


@router.put(
    "/admin/os-categories/{category_id}",
    response_model=ApiResponse[ServiceCategoryResponse],
    responses=error_responses(400, 401, 403, 404, 409)
)
async def admin_update_category(
    category_id: UUID,
    data: ServiceCategoryUpdate,
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[ServiceCategoryResponse]:
    category = await catalog.update_category(category_id, data)
    return ApiResponse(data=ServiceCategoryResponse.model_validate(category))


@router.delete(
    "/admin/os-categories/{category_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404)
)
async def admin_delete_category(
    category_id: UUID,
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service),
    uploads: UploadService = Depends(get_upload_service)
) -> MessageResponse:
    await catalog.delete_category(category_id, uploads)
    return MessageResponse(message="Category deleted")


@router.get(
    "/admin/os-subcategories",
    response_model=ApiResponse[List[ServiceSubcategoryResponse]],
    responses=admin_errors
)
async def admin_list_subcategories(
    category_id: UUID = Query(...),
    active: Optional[bool] = Query(None),
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[List[ServiceSubcategoryResponse]]:
    subcategories = await catalog.list_subcategories(category_id, active)
    return ApiResponse(data=[ServiceSubcategoryResponse.model_validate(sub) for sub in subcategories])


@router.post(
    "/admin/os-subcategories",
    response_model=ApiResponse[ServiceSubcategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 409, 422)
)
async def admin_create_subcategory(
    data: ServiceSubcategoryCreate,
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service)
) -> ApiResponse[ServiceSubcategoryResponse]:
    subcategory = await catalog.create_subcategory(data)
    return ApiResponse(data=ServiceSubcategoryResponse.model_validate(subcategory), message="Subcategory created")


@router.delete("/admin/os-subcategories/{subcategory_id}", response_model=MessageResponse, responses=admin_errors)
async def admin_delete_subcategory(
    subcategory_id: UUID,
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service),
    uploads: UploadService = Depends(get_upload_service)
) -> MessageResponse:
    await catalog.delete_subcategory(subcategory_id, uploads)
    return MessageResponse(message="Subcategory deleted")


@router.post(
    "/admin/os-categories/upload-excel",
    response_model=ApiResponse[ExcelFile],
    summary="Attach an Excel sheet to a category or subcategory",
    responses=error_responses(400, 401, 403, 404)
)
@router.post(
    "/admin/os-subcategories/upload-excel",
    response_model=ApiResponse[ExcelFile],
    include_in_schema=False
)
async def admin_upload_excel(
    file: UploadFile = File(...),
    category_id: Optional[UUID] = Form(None),
    subcategory_id: Optional[UUID] = Form(None),
    admin: User = Depends(get_current_admin_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog_service),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[ExcelFile]:
    excel_file = await catalog.attach_excel(file, uploads, category_id, subcategory_id)
    return ApiResponse(data=excel_file, message="Excel file uploaded")
