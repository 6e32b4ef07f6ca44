"""
Database engine and session management with async SQLAlchemy.

One DatabaseManager is created per process by the application lifespan and
handed to whatever needs storage. The engine's pool is bounded: when every
connection is checked out, callers wait up to ``pool_timeout`` seconds and then
fail with ``sqlalchemy.exc.TimeoutError``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from contact_intake.config import Settings
from contact_intake.shared.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(
        self,
        database_url: URL | str,
        *,
        pool_size: int = 10,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ) -> None:
        """Initialize database manager.

        Args:
            database_url: SQLAlchemy async URL.
            pool_size: Maximum number of pooled connections.
            pool_timeout: Seconds to wait for a free connection.
            echo: Log emitted SQL.
        """
        self._database_url = database_url
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseManager":
        return cls(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            echo=settings.debug,
        )

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = create_async_engine(
                self._database_url,
                echo=self._echo,
                pool_pre_ping=True,
                **self._pool_options(),
            )
        return self._engine

    def _pool_options(self) -> dict[str, object]:
        # SQLite picks its own pool class and rejects queue-pool sizing.
        if self.engine_url.get_backend_name() == "sqlite":
            return {}
        return {
            "pool_size": self._pool_size,
            "max_overflow": 0,
            "pool_timeout": self._pool_timeout,
        }

    @property
    def engine_url(self) -> URL:
        return make_url(self._database_url)

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Create a new database session context.

        Commits on normal exit, rolls back and re-raises on error.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine, closing pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


async def create_database_if_missing(url: URL | str) -> bool:
    """Create the target database on the server if it does not exist.

    One-time bootstrap step, run at startup only. Only meaningful for MySQL;
    other backends are left alone.

    Returns:
        True if a CREATE DATABASE statement was issued.
    """
    url = make_url(url)
    if url.get_backend_name() != "mysql" or not url.database:
        return False

    server_url = URL.create(
        url.drivername,
        username=url.username,
        password=url.password,
        host=url.host,
        port=url.port,
        query=url.query,
    )
    server_engine = create_async_engine(server_url, pool_pre_ping=True)
    try:
        name = server_engine.dialect.identifier_preparer.quote(url.database)
        async with server_engine.begin() as conn:
            await conn.execute(text(f"CREATE DATABASE IF NOT EXISTS {name}"))
    finally:
        await server_engine.dispose()

    logger.info("Database ensured", extra={"database": url.database})
    return True


__all__ = [
    "Base",
    "DatabaseManager",
    "create_database_if_missing",
]
