"""
Request logging middleware.
Assigns a request id, rejects oversized or mistyped bodies and logs every request and response.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time

from marketplace.services.error_handler import ErrorHandlerService
from marketplace.utils.exceptions import APIException, BadRequestError

logger = logging.getLogger(__name__)

ACCEPTED_BODY_TYPES = ("application/json", "multipart/form-data", "application/x-www-form-urlencoded")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds X-Request-ID and X-Processing-Time to every response.
    The request id is kept on request.state so error envelopes can echo it.
    """

    def __init__(self, app: ASGIApp, max_request_size: int = 10 * 1024 * 1024):
        super().__init__(app)
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = ErrorHandlerService.generate_request_id()
        request.state.request_id = request_id
        start_time = time.time()

        try:
            self._validate_request_size(request)
            self._validate_content_type(request)
        except APIException as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        logger.info(
            f"Request [{request_id}]: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "client_ip": self._get_client_ip(request),
            }
        )

        response = await call_next(request)

        processing_time = time.time() - start_time
        logger.info(
            f"Response [{request_id}]: {response.status_code} - {processing_time:.3f}s",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "processing_time": processing_time,
                "path": request.url.path,
                "method": request.method
            }
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}s"
        return response

    def _validate_request_size(self, request: Request) -> None:
        content_length = request.headers.get("content-length")
        if not content_length:
            return
        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")
        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _validate_content_type(self, request: Request) -> None:
        if request.method not in ("POST", "PUT", "PATCH") or not request.url.path.startswith("/api/"):
            return

        content_type = request.headers.get("content-type", "")
        if content_type and not content_type.startswith(ACCEPTED_BODY_TYPES):
            raise BadRequestError(f"Unsupported content type '{content_type}'. Expected 'application/json'")

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
