"""
Database handle: connection pool and schema initialization.

The handle wraps a SQLAlchemy async engine. The engine's queue pool is the
only shared state in the service; it bounds the number of open connections
and makes excess callers wait for one to be released.

IMPORTANT: Database instances are built by the startup pipeline
(core.startup.open_database) and reach request handlers through
core.dependencies.get_database(). There is no module-level instance.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from core.exceptions import SchemaError
from models.patient import metadata

logger = logging.getLogger(__name__)


class Database:
    """
    Pooled async database connection manager.

    Features:
    - Fixed-size pool without overflow
    - Callers queue for a connection instead of failing (no timeout by default)
    - Stale connections detected with pre-ping

    Usage:
        db = Database("mysql+aiomysql://user:pw@host:3306/app", pool_size=10)
        await db.ensure_schema()
        async with db.connect() as conn:
            ...
        await db.dispose()
    """

    def __init__(
        self,
        url: Union[str, URL],
        pool_size: int = 10,
        pool_timeout: Optional[float] = None,
    ):
        """
        Initialize the engine. No connection is opened until first use.

        Args:
            url: SQLAlchemy URL using an async driver.
            pool_size: Maximum number of pooled connections.
            pool_timeout: Seconds to wait for a free connection; None waits indefinitely.
        """
        self.engine: AsyncEngine = create_async_engine(
            url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
        )
        self.url: URL = self.engine.url

    @property
    def display_url(self) -> str:
        """Engine URL with the password masked, safe to log."""
        return self.url.render_as_string(hide_password=True)

    async def ensure_schema(self) -> None:
        """
        Create the patients table if it does not exist.

        Safe to call repeatedly. Runs once at startup; no retry.

        Raises:
            SchemaError: If the store is unreachable or the DDL fails.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all, checkfirst=True)
        except (SQLAlchemyError, OSError) as exc:
            logger.critical(
                "Could not initialize database schema",
                extra={"database": self.display_url, "error": str(exc)},
            )
            raise SchemaError(f"Could not initialize database schema: {exc}") from exc
        logger.info("Table 'patients' is ready", extra={"database": self.display_url})

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a pooled connection for reads."""
        async with self.engine.connect() as conn:
            yield conn

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a pooled connection inside a transaction that commits on exit."""
        async with self.engine.begin() as conn:
            yield conn

    async def ping(self) -> None:
        """Run a trivial query; raises SQLAlchemyError if the store is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database pool closed", extra={"database": self.display_url})
