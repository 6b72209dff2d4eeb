"""
Response envelopes shared by every endpoint.
Success bodies are {"success": true, "data": ...}; paginated lists add "pagination".
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, List, Optional, TypeVar
import math

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination block returned with list responses."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total matching items")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if total else 0)


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope for paginated collections."""

    success: bool = True
    data: List[T]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope produced by the global exception handlers."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine readable error code", examples=["NOT_FOUND"])
    request_id: Optional[str] = Field(None, description="Request identifier for log correlation")
    details: Optional[List[Dict[str, Any]]] = Field(None, description="Field level validation errors")


def page_offset(page: int, limit: int) -> int:
    """Convert a 1-based page number to a row offset."""
    return (max(page, 1) - 1) * limit


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI response documentation for the given error status codes."""
    descriptions = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        409: "Conflict",
        422: "Validation Error",
    }
    return {
        code: {"model": ErrorResponse, "description": descriptions.get(code, "Error")}
        for code in status_codes
    }
