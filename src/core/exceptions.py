"""Structured exception hierarchy for consistent error handling.

This module defines the exceptions raised by the bootstrap layer and by the
services built on it. Request-time errors carry a ``message`` and an
``errors`` payload; the error translators turn both into the client-facing
``{"message": ..., "details": ...}`` body.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **ServiceError**: Base exception carrying message, details and severity
- **Specialized exceptions**: Validation, negotiation and internal errors
- **ServiceStateError**: Lifecycle misuse of the service façade
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for services."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_ACCEPTABLE = "NOT_ACCEPTABLE"
    """None of the media types the client accepts can be produced."""

    # External resources
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    """The database could not be reached."""


class Severity(Enum):
    """Severity levels used to pick the log level of an error."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ServiceError(Exception):
    """Base exception class for all structured service errors.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        errors: Structured details forwarded to the client as ``details``
        severity: Severity level of the error (defaults to MEDIUM)
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        errors: Any = None,  # noqa: ANN401 - details are free-form JSON
        severity: Severity = Severity.MEDIUM,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.errors = errors
        self.severity = severity
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        errors_str = f", errors={self.errors!r}" if self.errors is not None else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{errors_str})"
        )


class ValidationError(ServiceError):
    """Exception raised when request input is malformed.

    Raised by pipeline steps (query, body, auth, pagination parsing) and by
    handlers that reject their input. Always answered by the validation
    translator.

    Args:
        message: Description of the validation failure
        errors: Field-level details
        error_code: Error code (defaults to VALIDATION_ERROR)
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        errors: Any = None,  # noqa: ANN401
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, errors, Severity.LOW, cause)


class NotAcceptableError(ValidationError):
    """Exception raised when content negotiation finds no servable media type."""

    def __init__(
        self,
        message: str,
        errors: Any = None,  # noqa: ANN401
    ) -> None:
        super().__init__(message, errors, ErrorCode.NOT_ACCEPTABLE)


class InternalServerError(ServiceError):
    """Exception raised for failures that are not the client's fault.

    Args:
        message: Description of the failure
        errors: Structured details
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        errors: Any = None,  # noqa: ANN401
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.INTERNAL_ERROR, message, errors, Severity.HIGH, cause
        )


class DatabaseConnectionError(ServiceError):
    """Exception raised when the database handle cannot open its connection."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.DATABASE_UNAVAILABLE, message, None, Severity.CRITICAL, cause
        )


class ServiceStateError(RuntimeError):
    """Raised when the service façade is used outside its lifecycle contract.

    Routes and initializers can only be registered before ``start()``;
    initializers run exactly once.
    """
