"""
Application error hierarchy and the FastAPI handlers that render it.

Every error response uses the envelope ``{"code", "message", "details"?}`` so
clients branch on ``code`` instead of parsing the message.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


class TimelineError(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class PayloadValidationError(TimelineError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class UnsupportedTypeChangeError(PayloadValidationError):
    code = "UNSUPPORTED_TYPE_CHANGE"

    def __init__(self, current_type: str, requested_type: str):
        super().__init__(
            message="Changing memory type to/from asset types is not supported.",
            details={"current_type": current_type, "requested_type": requested_type},
        )


class MemoryNotFoundError(TimelineError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "MEMORY_NOT_FOUND"

    def __init__(self, memory_id: str):
        super().__init__(message="Memory not found.", details={"id": memory_id})


class AssetNotFoundError(TimelineError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ASSET_NOT_FOUND"

    def __init__(self, key: str):
        super().__init__(message="Object not found.", details={"key": key})


class NotAuthenticatedError(TimelineError):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "NOT_AUTHENTICATED"

    def __init__(self):
        super().__init__(message="Not authenticated.")


class PayloadTooLargeError(TimelineError):
    http_status = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, max_bytes: int, received: int):
        max_mb = max_bytes // (1024 * 1024)
        super().__init__(
            message=f"File exceeds {max_mb} MB limit.",
            details={"max_bytes": max_bytes, "received": received},
        )


class StorageUnavailableError(TimelineError):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORAGE_UNAVAILABLE"


class StorageError(TimelineError):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "STORAGE_ERROR"


class MemoryWriteError(TimelineError):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "WRITE_FAILED"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def timeline_exception_handler(request: Request, exc: TimelineError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed code=%s details=%s", request.method, request.url.path, exc.code, exc.details)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return a 400 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
