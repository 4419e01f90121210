"""Error types and their JSON responses.

Every error body has the shape ``{"error": "<message>"}``.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TaskTrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskTrackerError):
    """Request data was rejected (missing or blank title)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(TaskTrackerError):
    """No task exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(TaskTrackerError):
    """The underlying database failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_payload(message: str) -> dict[str, str]:
    return {"error": message}


async def task_error_handler(_: Request, exc: TaskTrackerError) -> JSONResponse:
    """Render a typed error with its status code."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request data as 400 instead of FastAPI's default 422."""
    message = "Invalid request"
    errors = exc.errors()
    if errors:
        first = errors[0]
        # loc starts with the source ("body", "path", "query")
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        detail = first.get("msg", "invalid value")
        message = f"Invalid {field}: {detail}" if field else f"Invalid request: {detail}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_payload(message))


async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Keep the error body shape for failures nothing else handled."""
    logger.error("Unhandled error: %r", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload("Internal server error"),
    )
