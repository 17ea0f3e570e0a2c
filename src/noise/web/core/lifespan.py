"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from noise.storage import LocalStorage
from noise.utils.structlog_configurator import configure_structlog
from noise.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Context manager for application startup and shutdown events.

    Handles the complete application lifecycle including:
    - Structured logging setup
    - Database initialization
    - Mounting uploaded audio files when stored locally
    - Realtime broadcaster registration and teardown

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    database_service = container.database_service()
    await database_service.initialize()

    storage = container.storage()
    if isinstance(storage, LocalStorage) and not any(
        getattr(route, "path", None) == "/uploads" for route in app.routes
    ):
        app.mount("/uploads", StaticFiles(directory=storage.upload_dir), name="uploads")

    broadcaster = container.board_broadcaster()
    broadcaster.register_listeners()

    logger.info("NOISE backend started", extra={"port": config.server.port})

    try:
        yield
    finally:
        logger.info("Shutting down NOISE backend...")
        try:
            broadcaster.unregister_listeners()
            await broadcaster.close_all()
            await database_service.dispose()
            logger.info("Shutdown complete")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
            raise
