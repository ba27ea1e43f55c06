"""Sensitive data sanitization for error logging and responses.

Resource documents arrive straight from clients, so attribute values that
end up in error context (rejected payload fields, exception attributes) are
passed through here before they reach a log sink.

Key features:
- **Pattern matching**: Regex-based detection of sensitive field names
- **Configurable fields**: Additional sensitive fields via configuration
- **Deep sanitization**: Recursive handling of nested data structures
"""

from __future__ import annotations

import re
from functools import lru_cache
from re import Pattern
from typing import Any, Final

from src.core.config import get_settings

SanitizableValue = (
    str | int | float | bool | None | dict[str, Any] | list[Any] | tuple[Any, ...]
)

REDACTED = "[REDACTED]"

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth(?!or)|authorization|"
    r"credential|private[_-]?key|access[_-]?key|secret[_-]?key|session|"
    r"ssn|social[_-]?security|pin|cvv|cvc|card[_-]?number|connection[_-]?string)",
    re.IGNORECASE,
)

MAX_DEPTH: Final[int] = 10

# Exception attributes that are noise in a log line
_SKIPPED_ERROR_ATTRIBUTES: Final[frozenset[str]] = frozenset({"stack_trace"})


@lru_cache(maxsize=1)
def _get_sensitive_fields() -> list[str]:
    """Get the configured sensitive fields from settings.

    Returns:
        list[str]: List of sensitive field names to check.
    """
    return get_settings().log_config.sensitive_fields


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data.

    Args:
        field_name: The field name to check.

    Returns:
        bool: True if the field appears to contain sensitive data.
    """
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True

    field_lower = field_name.lower()
    return any(
        sensitive_field.lower() in field_lower
        for sensitive_field in _get_sensitive_fields()
    )


def sanitize_value(
    value: SanitizableValue, field_name: str = "", depth: int = 0
) -> SanitizableValue:
    """Sanitize a value if it appears to be sensitive.

    Nested dicts, lists and tuples are walked up to MAX_DEPTH.

    Args:
        value: The value to potentially sanitize.
        field_name: The field name for context.
        depth: Current recursion depth.

    Returns:
        SanitizableValue: Sanitized value or original if not sensitive.
    """
    if depth > MAX_DEPTH:
        return REDACTED

    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if isinstance(value, dict):
        return {k: sanitize_value(v, k, depth + 1) for k, v in value.items()}

    if isinstance(value, list):
        return [sanitize_value(item, "", depth + 1) for item in value]

    if isinstance(value, tuple):
        return tuple(sanitize_value(item, "", depth + 1) for item in value)

    return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize a dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize.

    Returns:
        dict[str, Any]: New dictionary with sensitive values redacted.
    """
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_error_context(
    error: Exception, context: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Create sanitized error context for logging.

    Args:
        error: The exception to create context for.
        context: Additional context to include (will be sanitized).

    Returns:
        dict[str, Any]: Sanitized error context safe for logging.
    """
    error_context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(sanitize_dict(context))

    if hasattr(error, "__dict__"):
        error_attrs = {
            k: v
            for k, v in error.__dict__.items()
            if not k.startswith("_") and k not in _SKIPPED_ERROR_ATTRIBUTES
        }
        if error_attrs:
            error_context["error_attributes"] = sanitize_dict(error_attrs)

    return error_context
