"""
Pydantic schemas for request validation and response serialization.
"""

from marketplace.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta, MessageResponse, ErrorResponse
from marketplace.schemas.user import (
    UserResponse,
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
    ProfileUpdate,
    UserStatusUpdate,
)
from marketplace.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyApprovalUpdate,
    PropertyStatusUpdate,
    PropertyFeaturedUpdate,
)

__all__ = [
    "ApiResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "MessageResponse",
    "ErrorResponse",
    "UserResponse",
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "TokenResponse",
    "ProfileUpdate",
    "UserStatusUpdate",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyApprovalUpdate",
    "PropertyStatusUpdate",
    "PropertyFeaturedUpdate",
]
