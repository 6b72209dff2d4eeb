"""
Banner, area map and blog endpoints, public reads plus admin management and image uploads.
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from typing import List, Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services import BannerService, AreaMapService, BlogService, UploadService
from marketplace.schemas.common import (
    ApiResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    page_offset,
    error_responses,
)
from marketplace.schemas.content import (
    BannerCreate,
    BannerUpdate,
    BannerResponse,
    AreaMapCreate,
    AreaMapUpdate,
    AreaMapResponse,
    BlogCreate,
    BlogUpdate,
    BlogResponse,
    UploadResponse,
)
from marketplace.utils.dependencies import (
    get_current_admin_user,
    get_banner_service,
    get_map_service,
    get_blog_service,
    get_upload_service,
)


router = APIRouter(tags=["Content"])

admin_errors = error_responses(401, 403)


# Banners

@router.get("/banners", response_model=ApiResponse[List[BannerResponse]], summary="Banners for a page position")
async def list_banners(
    position: Optional[str] = Query(None, examples=["homepage"]),
    active: bool = Query(True),
    banners: BannerService = Depends(get_banner_service)
) -> ApiResponse[List[BannerResponse]]:
    items = await banners.list_banners(position, active)
    return ApiResponse(data=[BannerResponse.model_validate(item) for item in items])


@router.get("/admin/banners", response_model=ApiResponse[List[BannerResponse]], responses=admin_errors)
async def admin_list_banners(
    position: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin_user),
    banners: BannerService = Depends(get_banner_service)
) -> ApiResponse[List[BannerResponse]]:
    items = await banners.list_banners(position, is_active=None)
    return ApiResponse(data=[BannerResponse.model_validate(item) for item in items])


@router.post(
    "/admin/banners",
    response_model=ApiResponse[BannerResponse],
    status_code=status.HTTP_201_CREATED,
    responses=admin_errors
)
async def create_banner(
    data: BannerCreate,
    admin: User = Depends(get_current_admin_user),
    banners: BannerService = Depends(get_banner_service)
) -> ApiResponse[BannerResponse]:
    return ApiResponse(data=BannerResponse.model_validate(await banners.create_banner(data)))


@router.post(
    "/admin/banners/upload",
    response_model=ApiResponse[UploadResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403)
)
async def upload_banner_image(
    file: UploadFile = File(...),
    admin: User = Depends(get_current_admin_user),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[UploadResponse]:
    return ApiResponse(data=await uploads.save_image(file, "banners"))


@router.put("/admin/banners/{banner_id}", response_model=ApiResponse[BannerResponse], responses=admin_errors)
async def update_banner(
    banner_id: UUID,
    data: BannerUpdate,
    admin: User = Depends(get_current_admin_user),
    banners: BannerService = Depends(get_banner_service)
) -> ApiResponse[BannerResponse]:
    return ApiResponse(data=BannerResponse.model_validate(await banners.update_banner(banner_id, data)))


@router.delete("/admin/banners/{banner_id}", response_model=MessageResponse, responses=admin_errors)
async def delete_banner(
    banner_id: UUID,
    admin: User = Depends(get_current_admin_user),
    banners: BannerService = Depends(get_banner_service)
) -> MessageResponse:
    await banners.delete_banner(banner_id)
    return MessageResponse(message="Banner deleted")


# Area maps

@router.get("/maps", response_model=ApiResponse[List[AreaMapResponse]], summary="Active area maps")
async def list_maps(
    maps: AreaMapService = Depends(get_map_service)
) -> ApiResponse[List[AreaMapResponse]]:
    return ApiResponse(data=[AreaMapResponse.model_validate(item) for item in await maps.list_maps()])


@router.get("/admin/maps", response_model=ApiResponse[List[AreaMapResponse]], responses=admin_errors)
async def admin_list_maps(
    admin: User = Depends(get_current_admin_user),
    maps: AreaMapService = Depends(get_map_service)
) -> ApiResponse[List[AreaMapResponse]]:
    items = await maps.list_maps(active_only=False)
    return ApiResponse(data=[AreaMapResponse.model_validate(item) for item in items])


@router.post(
    "/admin/maps",
    response_model=ApiResponse[AreaMapResponse],
    status_code=status.HTTP_201_CREATED,
    responses=admin_errors
)
async def create_map(
    data: AreaMapCreate,
    admin: User = Depends(get_current_admin_user),
    maps: AreaMapService = Depends(get_map_service)
) -> ApiResponse[AreaMapResponse]:
    return ApiResponse(data=AreaMapResponse.model_validate(await maps.create_map(data)))


@router.post(
    "/admin/maps/upload",
    response_model=ApiResponse[UploadResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403)
)
async def upload_map_image(
    file: UploadFile = File(...),
    admin: User = Depends(get_current_admin_user),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[UploadResponse]:
    return ApiResponse(data=await uploads.save_image(file, "maps"))


@router.put("/admin/maps/{map_id}", response_model=ApiResponse[AreaMapResponse], responses=admin_errors)
async def update_map(
    map_id: UUID,
    data: AreaMapUpdate,
    admin: User = Depends(get_current_admin_user),
    maps: AreaMapService = Depends(get_map_service)
) -> ApiResponse[AreaMapResponse]:
    return ApiResponse(data=AreaMapResponse.model_validate(await maps.update_map(map_id, data)))


@router.delete("/admin/maps/{map_id}", response_model=MessageResponse, responses=admin_errors)
async def delete_map(
    map_id: UUID,
    admin: User = Depends(get_current_admin_user),
    maps: AreaMapService = Depends(get_map_service)
) -> MessageResponse:
    await maps.delete_map(map_id)
    return MessageResponse(message="Map deleted")


# Blogs

@router.get("/blogs", response_model=PaginatedResponse[BlogResponse], summary="Published blog posts")
async def list_blogs(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    blogs: BlogService = Depends(get_blog_service)
) -> PaginatedResponse[BlogResponse]:
    items, total = await blogs.list_published(category, search, page_offset(page, limit), limit)
    return PaginatedResponse(
        data=[BlogResponse.model_validate(item) for item in items],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get("/blogs/{slug}", response_model=ApiResponse[BlogResponse], responses=error_responses(404))
async def read_blog(
    slug: str,
    blogs: BlogService = Depends(get_blog_service)
) -> ApiResponse[BlogResponse]:
    return ApiResponse(data=BlogResponse.model_validate(await blogs.read_published(slug)))


@router.get("/admin/blogs", response_model=PaginatedResponse[BlogResponse], responses=admin_errors)
async def admin_list_blogs(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    blogs: BlogService = Depends(get_blog_service)
) -> PaginatedResponse[BlogResponse]:
    items, total = await blogs.list_all(category, search, page_offset(page, limit), limit)
    return PaginatedResponse(
        data=[BlogResponse.model_validate(item) for item in items],
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.post(
    "/admin/blogs",
    response_model=ApiResponse[BlogResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 403, 422)
)
async def create_blog(
    data: BlogCreate,
    admin: User = Depends(get_current_admin_user),
    blogs: BlogService = Depends(get_blog_service)
) -> ApiResponse[BlogResponse]:
    blog = await blogs.create_blog(data, admin)
    return ApiResponse(data=BlogResponse.model_validate(blog), message="Blog post created")


@router.post(
    "/admin/blogs/upload",
    response_model=ApiResponse[UploadResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403)
)
async def upload_blog_image(
    file: UploadFile = File(...),
    admin: User = Depends(get_current_admin_user),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[UploadResponse]:
    return ApiResponse(data=await uploads.save_image(file, "blogs"))


@router.get("/admin/blogs/{blog_id}", response_model=ApiResponse[BlogResponse], responses=admin_errors)
async def admin_get_blog(
    blog_id: UUID,
    admin: User = Depends(get_current_admin_user),
    blogs: BlogService = Depends(get_blog_service)
) -> ApiResponse[BlogResponse]:
    return ApiResponse(data=BlogResponse.model_validate(await blogs.get_blog(blog_id)))


@router.put("/admin/blogs/{blog_id}", response_model=ApiResponse[BlogResponse], responses=admin_errors)
async def update_blog(
    blog_id: UUID,
    data: BlogUpdate,
    admin: User = Depends(get_current_admin_user),
    blogs: BlogService = Depends(get_blog_service)
) -> ApiResponse[BlogResponse]:
    return ApiResponse(data=BlogResponse.model_validate(await blogs.update_blog(blog_id, data)))


@router.delete("/admin/blogs/{blog_id}", response_model=MessageResponse, responses=admin_errors)
async def delete_blog(
    blog_id: UUID,
    admin: User = Depends(get_current_admin_user),
    blogs: BlogService = Depends(get_blog_service)
) -> MessageResponse:
    await blogs.delete_blog(blog_id)
    return MessageResponse(message="Blog post deleted")
