"""
Display content managed from the admin panel: banners, area maps and blog posts.
"""

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON, Uuid, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from datetime import datetime
import enum
import uuid
from typing import List, Optional


class Banner(Base):
    """Carousel or advertisement banner shown at a page position."""

    __tablename__ = "banners"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    position: Mapped[str] = mapped_column(String(64), nullable=False, default="homepage", index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "link": self.link,
            "position": self.position,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class AreaMap(Base):
    """Locality map image shown on the maps page."""

    __tablename__ = "area_maps"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    area: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "area": self.area,
            "description": self.description,
            "image_url": self.image_url,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class PublishStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Blog(Base):
    """Blog post written by an administrator."""

    __tablename__ = "blogs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(280), nullable=False, unique=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    featured_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    publish_status: Mapped[PublishStatus] = mapped_column(
        SQLEnum(PublishStatus),
        nullable=False,
        default=PublishStatus.DRAFT,
        index=True
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    @property
    def is_published(self) -> bool:
        return self.publish_status == PublishStatus.PUBLISHED

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "slug": self.slug,
            "content": self.content,
            "excerpt": self.excerpt,
            "featured_image": self.featured_image,
            "category": self.category,
            "tags": list(self.tags or []),
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "publish_status": self.publish_status.value,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "views": self.views,
            "author_id": str(self.author_id) if self.author_id else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
