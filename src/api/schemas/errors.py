"""Standardized error response schemas.

Key models:
- **ErrorResponse**: Error envelope returned by every exception handler
- **ResourceValidationError**: JSON:API error object, one per violation
- **ServiceInfo**: Service identification for multi-service debugging

Unprocessable-entity responses fill ``errors`` with the violations found
by the validation pipe, so clients can map each one back to the offending
member through ``source.pointer`` or ``source.parameter``.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(..., description="Name of the service", examples=["Bridge"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorSourceModel(BaseModel):
    """Reference to the part of the request document an error is about."""

    parameter: str | None = Field(
        default=None,
        description="Instance path of a schema violation",
        examples=["/data/attributes/status"],
    )
    pointer: str | None = Field(
        default=None,
        description="JSON pointer of a constraint violation",
        examples=["/data/relationships/author"],
    )


class ResourceValidationError(BaseModel):
    """A single JSON:API error object."""

    source: ErrorSourceModel
    detail: str = Field(
        ...,
        description="Human-readable explanation of the violation",
        examples=['Must be equal to one of the allowed values. Allowed values are: "a,b"'],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["UNPROCESSABLE_ENTITY", "NOT_FOUND"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Resource document has 2 validation error(s)"],
    )

    errors: list[ResourceValidationError] | None = Field(
        default=None,
        description="JSON:API error objects, one per validation failure",
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level",
        examples=["LOW", "HIGH"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique request identifier",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )
