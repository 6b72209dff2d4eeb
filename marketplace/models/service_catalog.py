"""
"Other services" directory taxonomy: plumbers, electricians, movers and similar
local businesses, grouped into categories and subcategories. Each node can carry
an Excel sheet that admins attach for bulk data.
"""

from sqlalchemy import String, Text, Integer, Boolean, Uuid, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from datetime import datetime
import uuid
from typing import Optional


class ServiceCategory(Base):
    """Top-level service category, e.g. Home Repair."""

    __tablename__ = "os_categories"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    excel_file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    excel_file_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    excel_uploaded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<ServiceCategory(slug='{self.slug}', active={self.active})>"


class ServiceSubcategory(Base):
    """Service subcategory; slugs are unique within the parent category."""

    __tablename__ = "os_subcategories"
    __table_args__ = (
        UniqueConstraint("category_id", "slug", name="uq_os_subcategories_category_slug"),
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("os_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    excel_file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    excel_file_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    excel_uploaded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<ServiceSubcategory(slug='{self.slug}', category_id={self.category_id})>"
