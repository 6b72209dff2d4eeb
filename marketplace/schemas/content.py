"""
Pydantic schemas for banners, area maps, blog posts and uploads.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from marketplace.models.content import PublishStatus


class BannerCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1, max_length=500)
    link: Optional[str] = Field(None, max_length=500)
    position: str = Field("homepage", max_length=64, examples=["homepage", "advertisement_banners"])
    sort_order: int = 0
    is_active: bool = True


class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    link: Optional[str] = Field(None, max_length=500)
    position: Optional[str] = Field(None, max_length=64)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class BannerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    image_url: str
    link: Optional[str] = None
    position: str
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AreaMapCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    area: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1, max_length=500)
    sort_order: int = 0
    is_active: bool = True


class AreaMapUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    area: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class AreaMapResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    area: Optional[str] = None
    description: Optional[str] = None
    image_url: str
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BlogCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=1)
    slug: Optional[str] = Field(None, max_length=280, description="Derived from the title when omitted")
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=320)
    publish_status: PublishStatus = PublishStatus.DRAFT

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v):
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, max_length=280)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    tags: Optional[List[str]] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=320)
    publish_status: Optional[PublishStatus] = None


class BlogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    publish_status: PublishStatus
    published_at: Optional[datetime] = None
    views: int
    author_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UploadResponse(BaseModel):
    url: str = Field(..., description="Public URL of the stored file")
    filename: str
    size: int
    content_type: str


class AppInfo(BaseModel):
    available: bool
    version: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    download_url: Optional[str] = None
