"""
Pydantic schemas for the category, subcategory and mini-subcategory tree.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Buy"])
    slug: Optional[str] = Field(None, max_length=140, description="Derived from the name when omitted")
    type: str = Field("property", max_length=50)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class SubcategoryCreate(BaseModel):
    category_id: UUID
    name: str = Field(..., min_length=1, max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = 0
    is_active: bool = True


class SubcategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class MiniSubcategoryCreate(BaseModel):
    subcategory_id: UUID
    name: str = Field(..., max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = 0
    is_active: bool = True


class MiniSubcategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class MiniSubcategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    subcategory_id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    sort_order: int
    is_active: bool
    property_count: Optional[int] = Field(None, description="Live listings, only on the with-counts endpoint")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubcategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    type: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    sort_order: int
    is_active: bool
    subcategories: Optional[List[SubcategoryResponse]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategorySeedRequest(BaseModel):
    force: bool = Field(False, description="Clear the existing tree before seeding")


class CategorySeedResult(BaseModel):
    skipped: bool
    categories: int
    subcategories: int
    mini_subcategories: int
    banners: int = 0
