"""Application factory for creating FastAPI application with dependency injection."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from noise import __version__
from noise.config import ConfigManager
from noise.web.core.container import Container
from noise.web.core.errors import register_exception_handlers
from noise.web.core.lifespan import lifespan
from noise.web.middleware.error_handling import UnhandledErrorMiddleware
from noise.web.middleware.rate_limit import RateLimitMiddleware
from noise.web.middleware.request_logging import StructuredRequestLoggingMiddleware
from noise.web.middleware.security_headers import SecurityHeadersMiddleware
from noise.web.routers import (
    audio_items_api_routes,
    board_api_routes,
    health_api_routes,
    session_api_routes,
    text_items_api_routes,
    websocket_routes,
)


def create_app(container: Container | None = None) -> FastAPI:
    """Create FastAPI application with dependency injection.

    This factory function creates a fully configured FastAPI application with:
    - Dependency injection container setup
    - All routers properly configured with prefixes and tags
    - Middleware for CORS, security headers, rate limiting and request logging
    - Lifespan management for service startup and shutdown

    Args:
        container: Pre-built container, e.g. with test overrides. A fresh one is
            created when omitted.

    Returns:
        FastAPI: The configured application instance.
    """
    if container is None:
        container = Container()
    config = container.config()

    app = FastAPI(
        lifespan=lifespan,
        title="NOISE API",
        description="Shared real-time board of audio recordings and text captions",
        version=__version__,
        debug=ConfigManager.should_enable_debug(),
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/docs.json",
    )
    app.container = container  # type: ignore[attr-defined]

    register_exception_handlers(app, is_production=config.is_production)

    # The last middleware added is the outermost
    app.add_middleware(UnhandledErrorMiddleware, is_production=config.is_production)
    if config.rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            api_limiter=container.api_rate_limiter(),
            upload_limiter=container.upload_rate_limiter(),
        )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(StructuredRequestLoggingMiddleware)

    container.wire(
        modules=[
            "noise.web.core.security",
            "noise.web.routers.audio_items_api_routes",
            "noise.web.routers.board_api_routes",
            "noise.web.routers.health_api_routes",
            "noise.web.routers.session_api_routes",
            "noise.web.routers.text_items_api_routes",
            "noise.web.routers.websocket_routes",
        ]
    )

    # === API Routes ===
    app.include_router(session_api_routes.router, prefix="/api", tags=["Session"])
    app.include_router(board_api_routes.router, prefix="/api", tags=["Board"])
    app.include_router(audio_items_api_routes.router, prefix="/api", tags=["Audio Items"])
    app.include_router(text_items_api_routes.router, prefix="/api", tags=["Text Items"])

    # Health checks live outside /api so they bypass rate limiting
    app.include_router(health_api_routes.router, tags=["Health"])

    # Real-time communication
    app.include_router(websocket_routes.router, prefix="/ws", tags=["WebSocket"])

    return app
