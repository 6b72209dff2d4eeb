"""
Exception hierarchy for the marketplace API.
Every class carries an HTTP status and a machine readable error code that
ErrorHandlerService renders into the standard error envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base class; error_code ends up in the envelope's "code" field."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Business validation failure reported like a request validation error (422)."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):

    def __init__(self, resource: str, identifier: Optional[str] = None):
        detail = f"{resource} not found"
        if identifier:
            detail += f": {identifier}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Missing or unusable credentials (401 with a Bearer challenge)."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):

    def __init__(self, detail: str = "Access forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )


class ConflictError(APIException):

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class BadRequestError(APIException):

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )


# Accounts
class InvalidCredentialsError(UnauthorizedError):

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    """Expired, malformed or wrong-type JWT."""

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class InactiveUserError(ForbiddenError):
    """Account deactivated by an administrator."""

    def __init__(self, detail: str = "User account is inactive"):
        super().__init__(detail, error_code="ACCOUNT_INACTIVE")


class InsufficientPermissionsError(ForbiddenError):
    """Caller's role does not allow the action, e.g. a buyer posting a listing."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


# Listings
class PropertyOwnershipError(ForbiddenError):
    """Raised when a user edits a listing they do not own."""

    def __init__(self, detail: str = "You can only edit your own properties"):
        super().__init__(detail)


class ListingLimitExceededError(ForbiddenError):
    """Raised when a free listing would exceed the owner's allowance."""

    def __init__(self, limit: int, period_days: int):
        super().__init__(
            f"Free listing limit reached: {limit} free posts allowed per {period_days} days.",
            error_code="LISTING_LIMIT_EXCEEDED"
        )
        self.limit = limit
        self.period_days = period_days


# Taxonomy
class DuplicateResourceError(ConflictError):
    """Slug or email already taken."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


class TaxonomyInUseError(BadRequestError):
    """A category node cannot be removed while listings still point at it."""

    def __init__(self, node: str, linked: int):
        super().__init__(
            f"Cannot delete {node} with {linked} linked properties",
            error_code="TAXONOMY_IN_USE"
        )
        self.linked = linked


# Uploads
class FileUploadError(BadRequestError):

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}", error_code="UPLOAD_ERROR")


class UnsupportedFileTypeError(BadRequestError):

    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(
            f"Unsupported file type '{file_type}'. Supported types: {supported}",
            error_code="UNSUPPORTED_FILE_TYPE"
        )


class FileSizeExceededError(BadRequestError):

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File size {size} bytes exceeds maximum allowed size {max_size} bytes",
            error_code="FILE_TOO_LARGE"
        )
