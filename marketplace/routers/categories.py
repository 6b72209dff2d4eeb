"""
Public category tree endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from uuid import UUID

from marketplace.services import CategoryService
from marketplace.schemas.common import ApiResponse, error_responses
from marketplace.schemas.category import CategoryResponse, SubcategoryResponse, MiniSubcategoryResponse
from marketplace.utils.dependencies import get_category_service


router = APIRouter(tags=["Categories"])


@router.get("/categories", response_model=ApiResponse[List[CategoryResponse]], summary="Active categories")
async def list_categories(
    type: Optional[str] = Query(None, description="Taxonomy type, e.g. property"),
    with_subcategories: bool = Query(True),
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[CategoryResponse]]:
    return ApiResponse(data=await categories.list_categories(True, type, with_subcategories))


@router.get(
    "/categories/{slug}",
    response_model=ApiResponse[CategoryResponse],
    summary="Category with its subcategories",
    responses=error_responses(404)
)
async def get_category(
    slug: str,
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[CategoryResponse]:
    return ApiResponse(data=await categories.get_public_category(slug))


@router.get(
    "/categories/{slug}/subcategories",
    response_model=ApiResponse[List[SubcategoryResponse]],
    responses=error_responses(404)
)
async def list_subcategories(
    slug: str,
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[SubcategoryResponse]]:
    return ApiResponse(data=await categories.list_public_subcategories(slug))


@router.get(
    "/subcategories/{subcategory_id}/mini-subcategories",
    response_model=ApiResponse[List[MiniSubcategoryResponse]]
)
async def list_mini_subcategories(
    subcategory_id: UUID,
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[MiniSubcategoryResponse]]:
    return ApiResponse(data=await categories.list_public_mini_subcategories(subcategory_id))


@router.get(
    "/subcategories/{subcategory_id}/mini-subcategories/with-counts",
    response_model=ApiResponse[List[MiniSubcategoryResponse]],
    summary="Mini-subcategories with live listing counts"
)
async def list_mini_subcategories_with_counts(
    subcategory_id: UUID,
    categories: CategoryService = Depends(get_category_service)
) -> ApiResponse[List[MiniSubcategoryResponse]]:
    return ApiResponse(data=await categories.list_public_mini_subcategories(subcategory_id, with_counts=True))
