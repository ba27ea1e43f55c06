"""FastAPI application initialization and configuration module.

It handles:
- Application lifecycle management (startup/shutdown)
- Exception handler and middleware registration
- Per-entity create-resource routers sharing one schema registry
- Health check endpoint
"""

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.routes.resources import build_resource_router
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.infrastructure.database.base import ResourceModel
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
)
from src.infrastructure.schema.registry import SchemaRegistry


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Verify the database on startup and release it on shutdown.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Control while the application serves requests.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    is_healthy, error_msg = await check_database_connection()
    if not is_healthy:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    await close_database()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    resources: Sequence[type[ResourceModel]] = (),
    registry: SchemaRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        resources: Entity classes to expose as creatable resources.
        registry: Schema registry to use; a new one is created if omitted.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()
    if registry is None:
        registry = SchemaRegistry()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.schema_registry = registry

    register_exception_handlers(application)
    application.add_middleware(RequestContextMiddleware)

    for model in resources:
        application.include_router(
            build_resource_router(model, registry),
            prefix=settings.jsonapi_config.route_prefix,
        )

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Report liveness and database connectivity.

        Returns:
            dict[str, object]: Status, database flag and registered schemas.
        """
        is_healthy, error_msg = await check_database_connection()
        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)
        return {
            "status": "healthy" if is_healthy else "degraded",
            "database": is_healthy,
            "schemas": len(registry),
        }

    logger.info("Application created with {} resource route(s)", len(resources))

    return application
