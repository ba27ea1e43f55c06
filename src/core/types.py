"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for JSON:API documents and error
objects as they travel between the API, the validation pipe and the
exception handlers.

All types defined here should be JSON-serializable to support logging,
API responses, and persistence layers.
"""

from typing import Any, NotRequired, TypedDict

# Decoded JSON object, as handed over by the framework's body parser
type JsonObject = dict[str, Any]


class ErrorSource(TypedDict):
    """Where a validation error originates.

    ``parameter`` holds the instance path of a schema violation,
    ``pointer`` the JSON pointer of a constraint violation.
    """

    parameter: NotRequired[str]
    pointer: NotRequired[str]


class ValidationErrorObject(TypedDict):
    """One JSON:API error object describing a single violation."""

    source: ErrorSource
    detail: str
