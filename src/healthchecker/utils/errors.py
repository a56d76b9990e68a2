"""Error types and helpers for consistent error reporting."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class HealthCheckerError(Exception):
    """Base class for errors raised by the health checker."""


class MissingResourceError(HealthCheckerError):
    """A check needs a resource (e.g. a database handle) that was never injected."""

    def __init__(self, slug: str, resource: str = "database"):
        self.slug = slug
        self.resource = resource
        super().__init__(
            f"Health check {slug} requires {resource} access but no {resource} was injected."
        )


class DuplicateCheckError(HealthCheckerError):
    """Two collectors registered checks with the same slug in strict mode."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Duplicate health check slug: {slug}")


class CheckNotFoundError(HealthCheckerError):
    """No registered check has the requested slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Check not found: {slug}")


class CategoryNotFoundError(HealthCheckerError):
    """No registered check belongs to the requested category."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Category not found: {category}")


class NoChecksAvailableError(HealthCheckerError):
    """Nothing was registered; usually every plugin is disabled."""

    def __init__(self):
        super().__init__("No health checks are available. Are the check plugins enabled?")


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Authentication errors
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID = "AUTH_INVALID"

    # Request errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CHECK_NOT_FOUND = "CHECK_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"

    # Check errors
    CHECK_TIMEOUT = "CHECK_TIMEOUT"
    RESOURCE_MISSING = "RESOURCE_MISSING"
    NO_CHECKS_AVAILABLE = "NO_CHECKS_AVAILABLE"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """HTTP error response model."""

    detail: str
    code: ErrorCode | None = None
    request_id: str | None = None


# User-friendly error messages by error code
USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_REQUIRED: "Authentication required",
    ErrorCode.AUTH_INVALID: "Invalid authentication credentials",
    ErrorCode.VALIDATION_ERROR: "Request validation failed",
    ErrorCode.CHECK_NOT_FOUND: "The requested check was not found",
    ErrorCode.CATEGORY_NOT_FOUND: "The requested category was not found",
    ErrorCode.CHECK_TIMEOUT: "The check did not finish in time",
    ErrorCode.RESOURCE_MISSING: "The check is missing a required resource",
    ErrorCode.NO_CHECKS_AVAILABLE: (
        "No health checks are available. Make sure at least one check plugin is enabled."
    ),
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}

# Default message for unknown errors
DEFAULT_USER_MESSAGE = "An unexpected error occurred"

# Maximum length for error details
MAX_ERROR_LENGTH = 500


def get_user_message(code: ErrorCode | None, default: str | None = None) -> str:
    """Get user-appropriate error message for an error code.

    Args:
        code: The error code.
        default: Default message if code not found.

    Returns:
        User-friendly error message.
    """
    if code is None:
        return default or DEFAULT_USER_MESSAGE

    return USER_MESSAGES.get(code, default or DEFAULT_USER_MESSAGE)


def truncate_error(error: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """Truncate error message if too long.

    Args:
        error: The error message.
        max_length: Maximum allowed length.

    Returns:
        Truncated error message.
    """
    if len(error) <= max_length:
        return error

    return error[: max_length - 3] + "..."


def describe_exception(exc: BaseException) -> str:
    """Render an exception as a short human-readable message.

    Falls back to the exception type name when the message is empty.
    """
    message = str(exc).strip()
    return truncate_error(message or type(exc).__name__)


def create_error_response(
    code: ErrorCode,
    detail: str | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Create a standardized error response.

    Args:
        code: The error code.
        detail: Optional custom detail message.
        request_id: Optional request ID.

    Returns:
        ErrorResponse model.
    """
    message = detail if detail else get_user_message(code)
    return ErrorResponse(
        detail=truncate_error(message),
        code=code,
        request_id=request_id,
    )


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception to an error code.

    Args:
        exc: The exception to classify.

    Returns:
        Appropriate error code.
    """
    from pydantic import ValidationError

    if isinstance(exc, ValidationError):
        return ErrorCode.VALIDATION_ERROR

    if isinstance(exc, CheckNotFoundError):
        return ErrorCode.CHECK_NOT_FOUND

    if isinstance(exc, CategoryNotFoundError):
        return ErrorCode.CATEGORY_NOT_FOUND

    if isinstance(exc, NoChecksAvailableError):
        return ErrorCode.NO_CHECKS_AVAILABLE

    if isinstance(exc, MissingResourceError):
        return ErrorCode.RESOURCE_MISSING

    if isinstance(exc, TimeoutError):
        return ErrorCode.CHECK_TIMEOUT

    return ErrorCode.INTERNAL_ERROR


def log_error(
    exc: BaseException,
    code: ErrorCode | None = None,
    request_id: str | None = None,
    **context: Any,
) -> None:
    """Log an error with context.

    Unclassified errors are logged with their traceback; known error
    codes are logged as plain errors.

    Args:
        exc: The exception that occurred.
        code: Optional pre-classified error code.
        request_id: Optional request ID.
        **context: Additional context to include in log.
    """
    if code is None:
        code = classify_exception(exc)

    log_extra = {
        "error_code": code.value,
        "error_type": type(exc).__name__,
        "request_id": request_id,
        **context,
    }

    if code == ErrorCode.INTERNAL_ERROR:
        logger.error("Internal error occurred", exc_info=exc, extra=log_extra)
    else:
        logger.error(f"Request error: {exc}", extra=log_extra)
