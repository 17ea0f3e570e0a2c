"""Dependency injection container for the NOISE application."""

from dependency_injector import containers, providers

from noise.board.manager import BoardManager
from noise.database.core import DatabaseService
from noise.realtime.broadcaster import BoardBroadcaster
from noise.storage import create_storage
from noise.system.path_resolver import PathResolver
from noise.utils.auth import TokenService
from noise.web.core.config import get_config
from noise.web.middleware.rate_limit import FixedWindowRateLimiter


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Services are configured as singletons or factories based on their usage patterns.
    """

    # Core infrastructure services - singletons
    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    database_path = providers.Factory(
        lambda resolver: resolver.get_database_path(),
        resolver=path_resolver,
    )

    database_service = providers.Singleton(
        DatabaseService,
        db_path=database_path,
    )

    # Audio file storage (local filesystem or S3 stub)
    storage = providers.Singleton(
        create_storage,
        config=config,
        path_resolver=path_resolver,
    )

    token_service = providers.Singleton(
        TokenService,
        config=providers.Factory(lambda c: c.jwt, c=config),
    )

    # Board data access - single source of truth for item reads and writes
    board_manager = providers.Singleton(
        BoardManager,
        database_service=database_service,
        storage=storage,
        max_text_length=providers.Factory(lambda c: c.text.max_length, c=config),
    )

    # Realtime fan-out to the shared board room
    board_broadcaster = providers.Singleton(BoardBroadcaster)

    # Rate limiters - one window per client host
    api_rate_limiter = providers.Singleton(
        FixedWindowRateLimiter,
        max_requests=providers.Factory(lambda c: c.rate_limit.max_requests, c=config),
        window_seconds=providers.Factory(lambda c: c.rate_limit.window_seconds, c=config),
    )

    upload_rate_limiter = providers.Singleton(
        FixedWindowRateLimiter,
        max_requests=providers.Factory(lambda c: c.rate_limit.upload_max_requests, c=config),
        window_seconds=providers.Factory(lambda c: c.rate_limit.upload_window_seconds, c=config),
    )
