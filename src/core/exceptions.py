"""Structured exception hierarchy for consistent error handling.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **BridgeError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: Unprocessable entity, not found, missing schema

The validation pipe only ever raises ``UnprocessableEntityError``; the other
types surface from collaborators (schema registry, repository) and are
mapped to HTTP responses at the API boundary.
"""

import hashlib
import traceback
from collections.abc import Sequence
from enum import Enum
from typing import Any

from src.core.types import ValidationErrorObject


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Request validation failed before reaching a resource handler."""

    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"
    """A resource document failed schema or constraint validation."""

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    SCHEMA_NOT_FOUND = "SCHEMA_NOT_FOUND"
    """No input schema is registered under the requested key."""


class Severity(Enum):
    """Severity levels used to pick log levels and alerting."""

    LOW = "LOW"
    """Low severity errors that don't significantly impact functionality."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features but not critical ops."""

    HIGH = "HIGH"
    """High severity errors impacting critical functionality or data integrity."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention, may cause system failures."""


class BridgeError(Exception):
    """Base exception class for all application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash built from the error type, code and raising location
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "src/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error stems from client input rather than a fault.

        Returns:
            bool: True if the error is expected (LOW or MEDIUM severity)
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class UnprocessableEntityError(BridgeError):
    """Raised when a resource document fails validation.

    Carries the ordered list of JSON:API error objects, one per violation.

    Args:
        errors: Error objects describing every violation found
        message: Summary message (defaults to a count of the violations)
        context: Additional context information about the error
    """

    def __init__(
        self,
        errors: Sequence[ValidationErrorObject],
        message: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.errors: list[ValidationErrorObject] = list(errors)
        super().__init__(
            ErrorCode.UNPROCESSABLE_ENTITY,
            message or f"Resource document has {len(self.errors)} validation error(s)",
            Severity.LOW,
            context,
        )


class NotFoundError(BridgeError):
    """Exception raised when a requested resource cannot be found.

    Args:
        message: Description of what resource was not found
        error_code: Error code (defaults to NOT_FOUND)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class SchemaNotFoundError(BridgeError):
    """Raised when no compiled schema is registered under a key.

    This points at a wiring mistake (an entity exposed without its schema),
    so it is reported with HIGH severity.

    Args:
        key: The registry key that was looked up
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            ErrorCode.SCHEMA_NOT_FOUND,
            f"No schema registered under '{key}'",
            Severity.HIGH,
            {"schema_key": key},
        )
