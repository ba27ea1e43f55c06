"""Route builders for JSON:API resources."""

from src.api.routes.resources import build_resource_router

__all__ = ["build_resource_router"]
