"""
Pydantic schemas for user accounts and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, Literal
from datetime import datetime
from uuid import UUID
from marketplace.models.user import UserType, ListingPeriod


class UserResponse(BaseModel):
    """Public view of a user account."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    user_type: UserType
    is_active: bool
    is_verified: bool = False
    free_listing_limit: Optional[int] = None
    free_listing_period: Optional[ListingPeriod] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegisterRequest(BaseModel):
    """Signup payload; administrators cannot self-register."""

    name: str = Field(..., min_length=2, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email address")
    phone: Optional[str] = Field(None, max_length=32, description="Contact phone number")
    password: str = Field(..., min_length=8, max_length=128, description="Account password")
    user_type: Literal["buyer", "seller", "agent"] = Field("buyer", description="Account type")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token issued at login")


class TokenResponse(BaseModel):
    """
    Session issued at login, registration and refresh.
    Clients keep this single object instead of per-role token keys.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user_type: UserType
    user: UserResponse


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)


class UserStatusUpdate(BaseModel):
    is_active: bool = Field(..., description="Activate or deactivate the account")
