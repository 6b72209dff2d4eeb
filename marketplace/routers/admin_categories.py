"""
Admin management of categories, subcategories and mini-subcategories.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services import CategoryService
from marketplace.schemas.common import (
    ApiResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    page_offset,
    error_responses,
)
from marketplace.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    SubcategoryCreate,
    SubcategoryUpdate,
    SubcategoryResponse,
    MiniSubcategoryCreate,
    MiniSubcategoryUpdate,
    MiniSubcategoryResponse,
    CategorySeedRequest,
    CategorySeedResult,
)
from marketplace.utils.dependencies import get_current_admin_user, get_category_service


router = APIRouter(prefix="/admin", tags=["Admin Categories"], responses=error_responses(401, 403))


# Categories

@router.get("/categories", response_model=ApiResponse[List[CategoryResponse]], summary="All categories")
async def list_categories(
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[CategoryResponse]]:
    return ApiResponse(data=await categories.list_categories(active_only=False))


@router.post(
    "/categories",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409, 422)
)
async def create_category(
    data: CategoryCreate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[CategoryResponse]:
    category = await categories.create_category(data)
    return ApiResponse(data=CategoryResponse.model_validate(category), message="Category created")


@router.post(
    "/categories/initialize",
    response_model=ApiResponse[CategorySeedResult],
    summary="Seed the default category tree"
)
async def initialize_categories(
    data: Optional[CategorySeedRequest] = None,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[CategorySeedResult]:
    result = await categories.initialize(force=bool(data and data.force))
    message = "Categories already initialized" if result.skipped else "Categories initialized"
    return ApiResponse(data=result, message=message)


@router.put(
    "/categories/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    responses=error_responses(400, 404, 409)
)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[CategoryResponse]:
    category = await categories.update_category(category_id, data)
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.put(
    "/categories/{category_id}/toggle",
    response_model=ApiResponse[CategoryResponse],
    responses=error_responses(404)
)
async def toggle_category(
    category_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[CategoryResponse]:
    category = await categories.toggle_category(category_id)
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.delete("/categories/{category_id}", response_model=MessageResponse, responses=error_responses(400, 404))
async def delete_category(
    category_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> MessageResponse:
    await categories.delete_category(category_id)
    return MessageResponse(message="Category deleted")


# Subcategories

@router.get("/subcategories", response_model=ApiResponse[List[SubcategoryResponse]])
async def list_subcategories(
    category_id: Optional[UUID] = Query(None),
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[SubcategoryResponse]]:
    subcategories = await categories.list_subcategories(category_id)
    return ApiResponse(data=[SubcategoryResponse.model_validate(sub) for sub in subcategories])


@router.post(
    "/subcategories",
    response_model=ApiResponse[SubcategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 404, 409, 422)
)
async def create_subcategory(
    data: SubcategoryCreate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[SubcategoryResponse]:
    subcategory = await categories.create_subcategory(data)
    return ApiResponse(data=SubcategoryResponse.model_validate(subcategory), message="Subcategory created")


@router.put(
    "/subcategories/{subcategory_id}",
    response_model=ApiResponse[SubcategoryResponse],
    responses=error_responses(400, 404, 409)
)
async def update_subcategory(
    subcategory_id: UUID,
    data: SubcategoryUpdate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[SubcategoryResponse]:
    subcategory = await categories.update_subcategory(subcategory_id, data)
    return ApiResponse(data=SubcategoryResponse.model_validate(subcategory))


@router.put(
    "/subcategories/{subcategory_id}/toggle",
    response_model=ApiResponse[SubcategoryResponse],
    responses=error_responses(404)
)
async def toggle_subcategory(
    subcategory_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[SubcategoryResponse]:
    subcategory = await categories.toggle_subcategory(subcategory_id)
    return ApiResponse(data=SubcategoryResponse.model_validate(subcategory))


@router.delete(
    "/subcategories/{subcategory_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 404)
)
async def delete_subcategory(
    subcategory_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> MessageResponse:
    await categories.delete_subcategory(subcategory_id)
    return MessageResponse(message="Subcategory deleted")


# Mini-subcategories

@router.get("/mini-subcategories", response_model=PaginatedResponse[MiniSubcategoryResponse])
async def list_mini_subcategories(
    subcategory_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None),
    active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> PaginatedResponse[MiniSubcategoryResponse]:
    minis, total = await categories.search_mini_subcategories(
        subcategory_id, search, active, page_offset(page, limit), limit
    )
    return PaginatedResponse(
        data=[MiniSubcategoryResponse.model_validate(mini) for mini in minis],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.post(
    "/mini-subcategories",
    response_model=ApiResponse[MiniSubcategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 404, 422)
)
async def create_mini_subcategory(
    data: MiniSubcategoryCreate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[MiniSubcategoryResponse]:
    mini = await categories.create_mini_subcategory(data)
    return ApiResponse(data=MiniSubcategoryResponse.model_validate(mini), message="Mini-subcategory created")


@router.put(
    "/mini-subcategories/{mini_id}",
    response_model=ApiResponse[MiniSubcategoryResponse],
    responses=error_responses(400, 404)
)
async def update_mini_subcategory(
    mini_id: UUID,
    data: MiniSubcategoryUpdate,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[MiniSubcategoryResponse]:
    mini = await categories.update_mini_subcategory(mini_id, data)
    return ApiResponse(data=MiniSubcategoryResponse.model_validate(mini))


@router.put(
    "/mini-subcategories/{mini_id}/toggle",
    response_model=ApiResponse[MiniSubcategoryResponse],
    responses=error_responses(404)
)
async def toggle_mini_subcategory(
    mini_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[MiniSubcategoryResponse]:
    mini = await categories.toggle_mini_subcategory(mini_id)
    return ApiResponse(data=MiniSubcategoryResponse.model_validate(mini))


@router.delete(
    "/mini-subcategories/{mini_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 404)
)
async def delete_mini_subcategory(
    mini_id: UUID,
    admin: User = Depends(get_current_admin_user),
    categories: CategoryService = Depends(get_category_service)
) -> MessageResponse:
    await categories.delete_mini_subcategory(mini_id)
    return MessageResponse(message="Mini-subcategory deleted")
