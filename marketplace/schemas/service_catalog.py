"""
Pydantic schemas for the "other services" categories and their Excel attachments.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from uuid import UUID


class ServiceCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Home Repair"])
    slug: Optional[str] = Field(None, max_length=140, description="Derived from the name when omitted")
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = 0
    active: bool = True


class ServiceCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    active: Optional[bool] = None


class ServiceSubcategoryCreate(BaseModel):
    category_id: UUID
    name: str = Field(..., min_length=1, max_length=120, examples=["Plumbing"])
    slug: Optional[str] = Field(None, max_length=140)
    description: Optional[str] = None
    sort_order: int = 0
    active: bool = True


class ExcelFile(BaseModel):
    """Spreadsheet attached to a service category or subcategory."""

    file_name: str
    file_url: str
    uploaded_at: datetime


class ServiceCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    sort_order: int
    active: bool
    excel_file_name: Optional[str] = None
    excel_file_url: Optional[str] = None
    excel_uploaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ServiceSubcategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    sort_order: int
    active: bool
    excel_file_name: Optional[str] = None
    excel_file_url: Optional[str] = None
    excel_uploaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
