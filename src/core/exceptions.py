"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    PAGE_PATH_TAKEN = "PAGE_PATH_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    REMOTE_STORE_UNAVAILABLE = "REMOTE_STORE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class PageNotFoundError(AppException):
    """Public page not found in any store."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.PAGE_NOT_FOUND,
            message=message or f"Page not found: {path}",
            status_code=404,
            details={"path": path},
        )


class PagePathTakenError(AppException):
    """Could not allocate a free page path."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            error_code=ErrorCode.PAGE_PATH_TAKEN,
            message="Could not allocate a unique page path",
            status_code=409,
            details={"attempts": attempts},
        )


class RemoteStoreError(AppException):
    """The remote database could not complete the request."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            error_code=ErrorCode.REMOTE_STORE_UNAVAILABLE,
            message="The remote store is currently unavailable",
            status_code=503,
            details={"operation": operation},
        )
