import contextlib
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

# Register board tables on SQLModel.metadata
import noise.board.models  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseService:
    """Provides an interface for database operations, including initialization."""

    def __init__(self, db_path: Path | None = None, db_url: str | None = None):
        if db_url is None and db_path is None:
            raise ValueError("Either db_path or db_url is required")

        self.db_path = db_path
        if self.db_path is not None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_url = db_url or f"sqlite+aiosqlite:///{self.db_path}"

        self.async_engine = create_async_engine(
            self.db_url,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

        self.async_session_local = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.async_engine,
            class_=AsyncSession,
        )

    async def initialize(self) -> None:
        """Create tables and apply startup pragmas."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        await self._apply_startup_optimizations()

    @contextlib.asynccontextmanager
    async def get_async_db(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide an async database session for dependency injection."""
        async with self.async_session_local() as session:
            yield session

    async def _apply_startup_optimizations(self) -> None:
        """Apply one-time SQLite pragmas for concurrent readers."""
        if self.db_path is None:
            return
        async with self.get_async_db() as session:
            try:
                await session.execute(text("PRAGMA journal_mode = WAL"))
                await session.execute(text("PRAGMA synchronous = NORMAL"))
                await session.execute(text("PRAGMA temp_store = MEMORY"))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.warning("Failed to apply startup optimizations: %s", e)

    async def get_database_stats(self) -> dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary containing database size, page count and journal mode
        """
        stats: dict[str, Any] = {}

        if self.db_path is not None and self.db_path.exists():
            stats["main_db_size"] = self.db_path.stat().st_size

            wal_path = Path(f"{self.db_path}-wal")
            stats["wal_size"] = wal_path.stat().st_size if wal_path.exists() else 0
            stats["total_size"] = stats["main_db_size"] + stats["wal_size"]

        async with self.get_async_db() as session:
            try:
                page_count_result = await session.execute(text("PRAGMA page_count"))
                page_count_row = page_count_result.fetchone()
                stats["page_count"] = page_count_row[0] if page_count_row else 0

                page_size_result = await session.execute(text("PRAGMA page_size"))
                page_size_row = page_size_result.fetchone()
                stats["page_size"] = page_size_row[0] if page_size_row else 4096

                journal_mode_result = await session.execute(text("PRAGMA journal_mode"))
                journal_mode_row = journal_mode_result.fetchone()
                stats["journal_mode"] = journal_mode_row[0] if journal_mode_row else "unknown"
            except SQLAlchemyError as e:
                logger.warning("Could not retrieve all database stats: %s", e)

        return stats

    async def clear_database(self) -> None:
        """Clear all data from the database tables."""
        async with self.get_async_db() as session:
            try:
                for table in reversed(SQLModel.metadata.sorted_tables):
                    await session.execute(table.delete())
                await session.commit()
                logger.info("Database cleared successfully")
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error clearing database: %s", e)
                raise

    async def dispose(self) -> None:
        """Dispose of the database engine to release resources.

        This should be called when the DatabaseService is no longer needed,
        especially in tests, to prevent file descriptor leaks.
        """
        if self.async_engine:
            await self.async_engine.dispose()
            logger.debug("Async database engine disposed")
