"""Error types and error-reporting helpers."""

from healthchecker.utils.errors import (
    CategoryNotFoundError,
    CheckNotFoundError,
    DuplicateCheckError,
    ErrorCode,
    HealthCheckerError,
    MissingResourceError,
    NoChecksAvailableError,
    describe_exception,
    truncate_error,
)

__all__ = [
    "CategoryNotFoundError",
    "CheckNotFoundError",
    "DuplicateCheckError",
    "ErrorCode",
    "HealthCheckerError",
    "MissingResourceError",
    "NoChecksAvailableError",
    "describe_exception",
    "truncate_error",
]
