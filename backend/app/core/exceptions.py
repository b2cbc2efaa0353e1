"""
Custom exceptions and error handlers for consistent error responses.

Services raise these structured failures; the action boundary and the HTTP
exception handlers are the only places that turn them into messages.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("fleet.errors")


class AppException(Exception):
    """Base application exception."""

    kind = "Error"

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(AppException):
    """Raised when there is no valid session (Unauthenticated)."""

    kind = "Unauthenticated"

    def __init__(self, reason: str = "Not authenticated"):
        super().__init__(
            message=reason,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED,
            details={"reason": reason}
        )


class InsufficientPermissionsError(AppException):
    """Raised when the caller's role or ownership does not allow an action (Unauthorized)."""

    kind = "Unauthorized"

    def __init__(self, action: str, resource: str, reason: Optional[str] = None):
        super().__init__(
            message=reason or f"Cannot {action} {resource}",
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details={"action": action, "resource": resource}
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is missing or soft-deleted."""

    kind = "NotFound"

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ValidationFailedError(AppException):
    """Raised for missing or malformed fields and illegal state or role changes."""

    kind = "ValidationError"

    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(
            message=f"{field} {reason}",
            error_code="ERR_VALIDATION_001",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"field": field, "reason": reason}
        )


class ConflictError(AppException):
    """Raised on uniqueness violations and duplicate assignments."""

    kind = "Conflict"

    def __init__(self, resource: str, field: Optional[str] = None, reason: Optional[str] = None):
        if reason is None:
            reason = f"{resource} with this {field} already exists" if field else f"{resource} already exists"
        super().__init__(
            message=reason,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"resource": resource, "field": field}
        )


class StorageError(AppException):
    """Raised when the persistence layer fails."""

    kind = "StorageError"

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=f"Storage failure during {operation}",
            error_code="ERR_STORAGE_001",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"operation": operation, "cause": type(cause).__name__ if cause else None}
        )


def describe_error(exc: AppException) -> str:
    """Human-readable message for a structured failure."""
    if isinstance(exc, (AuthenticationError, InsufficientPermissionsError)):
        return f"Unauthorized: {exc.message}"
    if isinstance(exc, ValidationFailedError):
        return f"Validation error: {exc.message}"
    if isinstance(exc, StorageError):
        return "Storage is temporarily unavailable, please retry"
    return exc.message


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": describe_error(exc),
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        500: "ERR_INTERNAL_SERVER"
    }

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code_map.get(exc.status_code, "ERR_UNKNOWN"),
            "message": exc.detail,
            "details": {}
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": exc.errors()
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
