"""
Lead capture, user notifications and admin key/value settings.
"""

from sqlalchemy import String, Text, Boolean, DateTime, JSON, Uuid, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from datetime import datetime
import enum
import uuid
from typing import Any, Dict, Optional


class SubmissionStatus(str, enum.Enum):
    NEW = "new"
    VIEWED = "viewed"
    CONTACTED = "contacted"


class AdvertisementSubmission(Base):
    """Contact-form lead from a developer who wants to advertise a project."""

    __tablename__ = "advertisement_submissions"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    budget: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    banner_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[SubmissionStatus] = mapped_column(
        SQLEnum(SubmissionStatus),
        nullable=False,
        default=SubmissionStatus.NEW,
        index=True
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "company_name": self.company_name,
            "project_name": self.project_name,
            "location": self.location,
            "budget": self.budget,
            "banner_type": self.banner_type,
            "description": self.description,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class NotificationType(str, enum.Enum):
    APPROVAL = "approval"
    REJECTION = "rejection"
    LISTING_LIMIT = "listing_limit"
    GENERAL = "general"


class Notification(Base):
    """In-app message addressed to a single user."""

    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType),
        nullable=False,
        default=NotificationType.GENERAL
    )
    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "property_id": str(self.property_id) if self.property_id else None,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AdminSetting(Base):
    """Admin-editable setting stored as a JSON document under a unique key."""

    __tablename__ = "admin_settings"

    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    value: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
