"""Error kinds and the handlers that turn them into JSON responses."""
import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/health",
    "POST /api/screenshot",
    "POST /api/screenshot/base64",
    "GET /uploads/:filename",
]


class ScreenshotAPIError(Exception):
    """Base class for errors returned to clients as ``{success: false, ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(
        self,
        error: Optional[str] = None,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.error = error or self.error
        self.message = message
        self.extra = extra or {}
        super().__init__(message or self.error)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "error": self.error}
        if self.message is not None:
            body["message"] = self.message
        body.update(self.extra)
        return body


class ValidationError(ScreenshotAPIError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request"


class PayloadTooLargeError(ScreenshotAPIError):
    """Upload exceeds the configured size limit.

    Reported as 400 rather than 413 so existing clients keep working.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error = "File too large"


class NotFoundError(ScreenshotAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class InternalError(ScreenshotAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"


def error_response(err: ScreenshotAPIError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def handle_screenshot_api_errors(request: Request, exc: ScreenshotAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return error_response(exc)


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI's body/query validation failures in the common envelope."""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, errors)
    return error_response(
        ValidationError(
            message="; ".join(err["msg"] for err in errors) or None,
            extra={"details": errors},
        )
    )


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes and methods get the endpoint listing."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        logger.info("No endpoint for %s %s", request.method, request.url.path)
        return error_response(
            NotFoundError(
                error="Endpoint not found",
                extra={"available_endpoints": AVAILABLE_ENDPOINTS},
            )
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:
        logger.exception(err)
        return error_response(InternalError(message=str(err)))
