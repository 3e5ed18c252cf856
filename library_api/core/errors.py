"""
Custom exception hierarchy for the Library API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

if TYPE_CHECKING:
    from library_api.services.validation import ValidationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class LibraryException(Exception):
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


class ResourceValidationError(LibraryException):
    """A payload failed validation against its type descriptor.

    Carries every field error from the validation pass, in order.
    """
    http_status = status.HTTP_400_BAD_REQUEST
    code = "RESOURCE_VALIDATION_FAILED"

    def __init__(self, type_key: str, errors: Sequence[ValidationError]):
        self.type_key = type_key
        self.errors = list(errors)
        super().__init__(
            message=f"Validation failed for resource type '{type_key}'.",
            details={
                "type_key": type_key,
                "errors": [e.to_dict() for e in self.errors],
            },
        )


class ResourceNotFoundError(LibraryException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_id: str):
        super().__init__(
            message=f"Resource {resource_id} not found.",
            details={"id": resource_id},
        )


class TypeDescriptorNotFoundError(LibraryException, LookupError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "TYPE_DESCRIPTOR_NOT_FOUND"

    def __init__(self, type_key: str | None):
        super().__init__(
            message=f"No type descriptor found for type key '{type_key}'.",
            details={"type_key": type_key},
        )


class InvalidResourceTypeError(LibraryException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_RESOURCE_TYPE"

    def __init__(self):
        super().__init__(message="Resource type cannot be null or empty.")


class DescriptorConfigurationError(RuntimeError):
    """Descriptor configuration is unusable. Raised at startup, never per request."""


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def library_exception_handler(request: Request, exc: LibraryException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query")),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
