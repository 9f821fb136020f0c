"""Centralized exception hierarchy and handlers for the application.

Every business-rule failure raised by the services maps to one HTTP status
code and a stable machine-readable ``error_code``. Routes never build
``HTTPException`` themselves; they let these exceptions propagate to the
registered handler.

Exception Hierarchy:
    AppException (base, 500)
    ├── ValidationError (422)
    ├── ForbiddenError (403)
    ├── NotFoundError (404)
    ├── ConflictError (409)
    └── InsufficientBalanceError (500)

Usage in Services:
    from ledger.core.exceptions import ForbiddenError

    if not await repo.is_active(user_id, asset_type_id):
        raise ForbiddenError("Account is not active")

Infrastructure errors (SQLAlchemy, asyncpg) are deliberately not wrapped:
they propagate unchanged and surface as a generic 500.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        status_code: HTTP status code for this error type
        detail: User-facing error message
        error_code: Machine-readable error code (optional)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    error_code: str | None = None

    def __init__(
        self,
        detail: str | None = None,
        *,
        error_code: str | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            detail: Custom error message (overrides class default)
            error_code: Machine-readable error identifier
        """
        self.detail = detail or self.__class__.detail
        self.error_code = error_code or self.__class__.error_code
        super().__init__(self.detail)


class ValidationError(AppException):
    """
    Raised when a request references a missing or inactive catalog entry.

    Shape problems (negative amount, too many decimal places) are caught
    earlier by the Pydantic schemas; this covers the checks that need the
    database. The detail always names the offending field.
    Maps to HTTP 422 Unprocessable Entity.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Validation error"
    error_code = "VALIDATION_ERROR"


class ForbiddenError(AppException):
    """
    Raised when an operation targets a deactivated (or missing) account.

    Maps to HTTP 403 Forbidden.
    """

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Account is not active"
    error_code = "FORBIDDEN"


class NotFoundError(AppException):
    """
    Raised when a requested resource is not found.

    Maps to HTTP 404 Not Found.
    """

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    error_code = "NOT_FOUND"


class ConflictError(AppException):
    """
    Raised when an account already exists for a (user, asset type) pair.

    Maps to HTTP 409 Conflict.
    """

    status_code = status.HTTP_409_CONFLICT
    detail = "Resource conflict"
    error_code = "CONFLICT"


class InsufficientBalanceError(AppException):
    """
    Raised when a decrement would leave available or frozen balance negative.

    The whole batch is rejected and rolled back.
    Maps to HTTP 500 Internal Server Error.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Insufficient balance"
    error_code = "INSUFFICIENT_BALANCE"


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """
    Handle application exceptions and convert to HTTP responses.

    Args:
        request: FastAPI request object
        exc: The exception instance

    Returns:
        JSONResponse with error details and HTTP status code

    Response Format:
        {
            "detail": "User-facing error message",
            "error_code": "MACHINE_READABLE_CODE"
        }
    """
    log_extra = {
        "status_code": exc.status_code,
        "error_code": exc.error_code,
        "request_path": request.url.path,
    }
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.detail}", exc_info=exc, extra=log_extra)
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.detail}", extra=log_extra)

    response_body: dict[str, Any] = {"detail": exc.detail}
    if exc.error_code:
        response_body["error_code"] = exc.error_code

    return JSONResponse(
        status_code=exc.status_code,
        content=response_body,
    )
