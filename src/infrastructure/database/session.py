"""Async database handle owned by the service.

A service configured with a database URL owns exactly one
:class:`DatabaseHandle`. The handle has an explicit lifecycle:

- **connect**: creates the pooled async engine and verifies it with
  ``SELECT 1``; registered as the service's first initializer
- **session**: async sessions committed on success, rolled back on error
- **check_connection**: connectivity probe used by the health route
- **close**: disposes the engine on shutdown; safe when never connected

Handlers and initializers reach the handle through the service
(``service.database``) or the request (``request.app.state.database``)
instead of a module-level global.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import DatabaseConfig
from src.core.constants import SHUTDOWN_NOTE
from src.core.exceptions import DatabaseConnectionError, ServiceStateError
from src.core.types import HealthStatus
from src.infrastructure.constants import COMMAND_TIMEOUT_SECONDS, POOL_RECYCLE_SECONDS


def mask_url(url: str) -> str:
    """Render a database URL with its password hidden."""
    return make_url(url).render_as_string(hide_password=True)


class DatabaseHandle:
    """Engine and session factory of one database, with explicit lifecycle.

    Args:
        config: Database configuration; ``database_url`` must be set.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        if not config.database_url:
            msg = "DatabaseHandle requires a database_url"
            raise ValueError(msg)
        self._config = config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> str:
        """Database URL with the password masked."""
        return mask_url(str(self._config.database_url))

    @property
    def is_connected(self) -> bool:
        """Whether :meth:`connect` succeeded and :meth:`close` was not called."""
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        """The connected engine.

        Raises:
            ServiceStateError: If the handle is not connected.
        """
        if self._engine is None:
            msg = "Database handle is not connected"
            raise ServiceStateError(msg)
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        config = self._config
        return create_async_engine(
            str(config.database_url),
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_pre_ping=config.pool_pre_ping,
            echo=config.echo,
            pool_recycle=POOL_RECYCLE_SECONDS,
            connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
        )

    async def connect(self) -> None:
        """Create the engine and verify the database answers.

        Calling it on a connected handle does nothing.

        Raises:
            DatabaseConnectionError: If the database cannot be reached.
        """
        if self._engine is not None:
            return

        engine = self._create_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection error: {}", e)
            await engine.dispose()
            msg = f"Cannot connect to database at {self.url}"
            raise DatabaseConnectionError(msg, cause=e) from e

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(
            "Database connection open to {} - pool_size: {}, max_overflow: {}",
            self.url,
            self._config.pool_size,
            self._config.max_overflow,
        )

    async def check_connection(self) -> HealthStatus:
        """Check if the database currently answers.

        Returns:
            tuple[bool, str | None]: ``(True, None)`` when healthy,
                ``(False, error message)`` otherwise.
        """
        if self._engine is None:
            return False, "Database handle is not connected"
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            return False, str(e)
        return True, None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session, committed on success and rolled back on error.

        Raises:
            ServiceStateError: If the handle is not connected.

        Example:
            async with service.database.session() as session:
                result = await session.execute(select(User))
        """
        if self._session_factory is None:
            msg = "Database handle is not connected"
            raise ServiceStateError(msg)

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.debug("Database session rolled back due to error")
                raise

    async def close(self) -> None:
        """Dispose the engine.

        Does nothing when the handle never connected. Disposal errors are
        logged and not raised, so shutdown always completes.
        """
        engine, self._engine = self._engine, None
        self._session_factory = None
        if engine is None:
            logger.debug("Database handle was never connected, nothing to close")
            return

        try:
            await engine.dispose()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database disconnection failed: {}", e)
            return
        logger.info(SHUTDOWN_NOTE)
