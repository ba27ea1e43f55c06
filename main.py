"""Main entry point for serving the JSON:API bridge with uvicorn."""

import os

import uvicorn
from loguru import logger

from src.core.config import get_settings
from src.core.logging import setup_logging


def main() -> None:
    """Run the application factory under uvicorn."""
    settings = get_settings()
    setup_logging(settings)

    # Cloud platforms pass the listening port through PORT
    port = int(os.environ.get("PORT", settings.api_port))

    # Route uvicorn's own loggers through Loguru
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {"class": "src.core.logging.InterceptHandler"},
        },
        "loggers": {
            name: {"handlers": ["default"], "level": "INFO", "propagate": False}
            for name in ("uvicorn", "uvicorn.error", "uvicorn.access")
        },
    }

    logger.info(
        "Starting Uvicorn on http://{}:{} ({} mode)",
        settings.api_host,
        port,
        "development" if settings.debug else "production",
    )
    uvicorn.run(
        "src.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=log_config,
    )


if __name__ == "__main__":
    main()
