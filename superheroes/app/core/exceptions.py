"""
Custom HTTP exceptions and global exception handlers for the Superhero API.
All application-level errors are defined here for consistency.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ── Custom exception classes ──────────────────────────────────────────────────

class SuperheroAPIException(Exception):
    """Base exception for all Superhero API domain errors."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code or "SUPERHERO_API_ERROR"
        super().__init__(detail)


class NotFoundException(SuperheroAPIException):
    def __init__(self, resource: str, resource_id: str | int | None = None) -> None:
        detail = f"{resource} not found"
        if resource_id is not None:
            detail = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND",
        )


class ValidationException(SuperheroAPIException):
    """Rejected input. Raised before any upload or metadata write happens."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: str = "VALIDATION_FAILED",
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, error_code=error_code)


class FileTooLargeException(ValidationException):
    def __init__(self, max_mb: int, filenames: Iterable[str] = ()) -> None:
        names = ", ".join(filenames)
        detail = f"Each file must be {max_mb} MB or smaller"
        if names:
            detail = f"{detail} (too large: {names})"
        super().__init__(
            detail=detail,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            error_code="FILE_TOO_LARGE",
        )


class OwnershipMismatchException(ValidationException):
    def __init__(self, missing_ids: Iterable[int] = ()) -> None:
        detail = "Some images do not belong to this superhero"
        missing = sorted(missing_ids)
        if missing:
            detail = f"{detail}: {', '.join(str(i) for i in missing)}"
        super().__init__(detail=detail, error_code="OWNERSHIP_MISMATCH")


class UpstreamStorageException(SuperheroAPIException):
    def __init__(self, operation: str, key: str, reason: str | None = None) -> None:
        detail = f"Object storage {operation} failed for key '{key}'"
        if reason:
            detail = f"{detail}: {reason}"
        self.operation = operation
        self.key = key
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code="STORAGE_ERROR",
        )


class StorageNotConfiguredException(SuperheroAPIException):
    def __init__(self, setting: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Object storage is not configured: {setting} is empty",
            error_code="STORAGE_NOT_CONFIGURED",
        )


class UpstreamMetadataException(SuperheroAPIException):
    def __init__(self, detail: str = "Metadata store operation failed") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="DATABASE_ERROR",
        )


# ── Exception handlers ────────────────────────────────────────────────────────

def _error_response(status_code: int, detail: str, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error_code,
            "detail": detail,
        },
    )


async def superhero_exception_handler(
    request: Request, exc: SuperheroAPIException
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return _error_response(exc.status_code, exc.detail, exc.error_code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({"field": field, "message": error["msg"]})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "VALIDATION_ERROR",
            "detail": "Request validation failed",
            "errors": errors,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected internal server error occurred",
        error_code="INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI application."""
    app.add_exception_handler(SuperheroAPIException, superhero_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
