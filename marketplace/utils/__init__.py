"""
Utility modules for the Property Marketplace API.
"""

from .auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
    hash_password,
    verify_password,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    InvalidCredentialsError,
    InvalidTokenError,
    InactiveUserError,
    InsufficientPermissionsError,
    PropertyOwnershipError,
    ListingLimitExceededError,
    DuplicateResourceError,
    TaxonomyInUseError,
    FileUploadError,
)

from .slugs import normalize_slug, slugify, unique_slug

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "TokenPayload",
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InactiveUserError",
    "InsufficientPermissionsError",
    "PropertyOwnershipError",
    "ListingLimitExceededError",
    "DuplicateResourceError",
    "TaxonomyInUseError",
    "FileUploadError",
    "normalize_slug",
    "slugify",
    "unique_slug",
]
