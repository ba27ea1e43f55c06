"""Global exception handlers for the FastAPI application.

This module provides centralized exception handling for all API endpoints,
ensuring consistent error responses and proper logging of exceptions.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import (
    ErrorResponse,
    ErrorSourceModel,
    ResourceValidationError,
    ServiceInfo,
)
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.context import RequestContext, generate_request_id
from src.core.error_context import sanitize_error_context
from src.core.exceptions import (
    BridgeError,
    ErrorCode,
    NotFoundError,
    UnprocessableEntityError,
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings.

    Args:
        settings: Application settings

    Returns:
        ServiceInfo: Instance with current service metadata
    """
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def _status_code_for(exc: BridgeError) -> int:
    if isinstance(exc, UnprocessableEntityError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def bridge_error_handler(request: Request, exc: Exception) -> Response:
    """Handle BridgeError exceptions.

    Unprocessable-entity errors are answered with their JSON:API error
    objects; every error carries sanitized context in development.

    Args:
        request: The FastAPI request that caused the exception
        exc: The BridgeError exception to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not a BridgeError instance
    """
    if not isinstance(exc, BridgeError):
        raise TypeError(f"Expected BridgeError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()
    status_code = _status_code_for(exc)

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
        },
    )

    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        correlation_id=correlation_id,
        status_code=status_code,
        fingerprint=exc.fingerprint,
        **error_context,
    )

    errors = None
    if isinstance(exc, UnprocessableEntityError):
        errors = [ResourceValidationError.model_validate(error) for error in exc.errors]
    elif isinstance(exc, NotFoundError) and "pointer" in exc.context:
        errors = [
            ResourceValidationError(
                source=ErrorSourceModel(pointer=exc.context["pointer"]),
                detail=exc.message,
            )
        ]

    debug_info = None
    if settings.environment == "development":
        debug_info = {
            "stack_trace": exc.stack_trace,
            "error_context": exc.context,
            "exception_type": type(exc).__name__,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        errors=errors,
        details=exc.context or None,
        correlation_id=correlation_id,
        request_id=generate_request_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    These fire before any pipe runs, e.g. when the body is not a JSON
    object. Each error is reported with the path FastAPI located it at.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with validation error details

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    errors = []
    for error in exc.errors():
        # Drop the leading location kind ('body', 'query', ...)
        location = error.get("loc", ())[1:]
        parameter = "".join(f"/{part}" for part in location)
        errors.append(
            ResourceValidationError(
                source=ErrorSourceModel(parameter=parameter),
                detail=str(error.get("msg", "Invalid value")),
            )
        )

    logger.warning(
        "Request validation failed",
        correlation_id=correlation_id,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        **sanitize_error_context(
            exc, {"path": str(request.url.path), "method": request.method}
        ),
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        errors=errors,
        correlation_id=correlation_id,
        request_id=generate_request_id(),
        severity="LOW",
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    error_code = ErrorCode.INTERNAL_ERROR.value
    severity = "MEDIUM"
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND.value
        severity = "LOW"
    elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        error_code = ErrorCode.VALIDATION_ERROR.value
        severity = "LOW"

    logger.warning(
        "HTTP exception",
        correlation_id=correlation_id,
        **sanitize_error_context(
            exc,
            {
                "status": exc.status_code,
                "method": request.method,
                "path": str(request.url.path),
            },
        ),
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc.detail),
        correlation_id=correlation_id,
        request_id=generate_request_id(),
        severity=severity,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle generic exceptions.

    In production, hides internal error details from clients.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with generic error message
    """
    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    logger.exception(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        correlation_id=correlation_id,
        **sanitize_error_context(
            exc,
            {
                "request_method": request.method,
                "request_path": str(request.url.path),
            },
        ),
    )

    if settings.environment == "production":
        message = "An internal server error occurred"
        details = None
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
        request_id=generate_request_id(),
        severity="CRITICAL",
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(BridgeError, bridge_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
