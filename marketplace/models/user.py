"""
User model with authentication, user types and free listing overrides.
Handles accounts for buyers, sellers, agents and administrators.
"""

from sqlalchemy import String, Boolean, Integer, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from marketplace.utils.auth import hash_password, verify_password
from email_validator import validate_email, EmailNotValidError
import enum
import uuid
from typing import Optional


class UserType(str, enum.Enum):
    """User type enumeration for role-based access control."""
    BUYER = "buyer"
    SELLER = "seller"
    AGENT = "agent"
    ADMIN = "admin"


class ListingPeriod(str, enum.Enum):
    """Rolling window used for counting free listings."""
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def days(self) -> int:
        return 365 if self is ListingPeriod.YEARLY else 30


class User(Base):
    """
    User model for authentication and authorization.
    Users are never hard-deleted; deactivation clears is_active.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
        index=True,
        comment="Contact phone number"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(UserType),
        nullable=False,
        default=UserType.BUYER,
        index=True,
        comment="User type for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the user's contact details were verified"
    )

    # Per-user free listing override, NULL means use the admin default
    free_listing_limit: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Free listings allowed per period"
    )

    free_listing_period: Mapped[Optional[ListingPeriod]] = mapped_column(
        SQLEnum(ListingPeriod),
        nullable=True,
        comment="Free listing window (monthly or yearly)"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, user_type={self.user_type})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        return hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        self.hashed_password = self.hash_password(password)

    @property
    def is_admin(self) -> bool:
        """Check if user is an administrator."""
        return self.user_type == UserType.ADMIN

    @property
    def can_post_properties(self) -> bool:
        """Sellers, agents and admins may submit listings."""
        return self.user_type in (UserType.SELLER, UserType.AGENT, UserType.ADMIN)

    def can_manage_property(self, property_owner_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific property.

        Args:
            property_owner_id: UUID of the property's owner

        Returns:
            True if user can manage the property, False otherwise
        """
        if self.is_admin:
            return True
        return self.id == property_owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "user_type": self.user_type.value,
            "is_active": self.is_active,
            "is_verified": self.is_verified,
            "free_listing_limit": self.free_listing_limit,
            "free_listing_period": self.free_listing_period.value if self.free_listing_period else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
