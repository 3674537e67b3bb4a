"""
Database connection factory utilities for the Storefront product listing.

Provides centralized management of the async PostgreSQL connection pool that
backs the product repository, plus a dedicated sync connection for schema and
seeding utilities. The PoolManager singleton owns the pool so the web app and
the CLI open and close it exactly once.

Includes retry logic for transient connection failures at start-up using
tenacity. Reads issued through an open pool are never retried.
"""

from __future__ import annotations

import threading
from typing import Optional

import psycopg
from psycopg import AsyncConnection, AsyncCursor, Connection
from psycopg_pool import AsyncConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.config import Settings, get_settings
from storefront.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """
    Compose a DSN string from settings.

    `DATABASE_URL` wins when set; otherwise the DSN is assembled from the
    individual `DB_*` components.
    """
    settings = settings or get_settings()
    if settings.database_url:
        return settings.database_url
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


class PoolManager:
    """
    Thread-safe singleton for managing the async connection pool.

    The pool is created closed; call `open_async_pool` from an event loop
    before the first query and `close_async_pool` on shutdown.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._async_pool = None
            return cls._instance

    def get_async_pool(self, settings: Optional[Settings] = None) -> AsyncConnectionPool:
        """
        Get or create the asynchronous connection pool.

        Parameters
        ----------
        settings : Settings | None
            Settings providing the DSN and pool bounds. Defaults to the cached settings.

        Returns
        -------
        AsyncConnectionPool
            The managed async pool instance (not yet opened on first call).
        """
        with self._lock:
            if self._async_pool is None:
                settings = settings or get_settings()
                self._async_pool = AsyncConnectionPool(
                    conninfo=build_dsn(settings),
                    min_size=settings.db_pool_min_size,
                    max_size=settings.db_pool_max_size,
                    open=False,
                )
            return self._async_pool

    async def open_async_pool(self, settings: Optional[Settings] = None) -> AsyncConnectionPool:
        """
        Open the managed pool once the database accepts connections.

        The database is probed with retries first. A pool whose initial fill
        fails is closed by psycopg_pool and cannot be reused, so it is dropped
        and the next call builds a new one.
        """
        pool = self.get_async_pool(settings)
        await _probe_database(pool.conninfo)
        try:
            await pool.open(wait=True, timeout=10.0)
        except Exception:
            with self._lock:
                if self._async_pool is pool:
                    self._async_pool = None
            await pool.close()
            raise
        log.info("Database pool opened", extra={"max_size": pool.max_size})
        return pool

    async def close_async_pool(self) -> None:
        """
        Close the managed pool and release resources. Safe to call repeatedly.
        """
        with self._lock:
            pool, self._async_pool = self._async_pool, None
        if pool is not None:
            await pool.close()
            log.info("Database pool closed")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(psycopg.OperationalError),
    reraise=True,
)
async def _probe_database(dsn: str) -> None:
    """Open and close one connection to check the database is reachable."""
    conn = await AsyncConnection.connect(dsn)
    await conn.close()


async def apply_statement_timeout(cursor: AsyncCursor, timeout_ms: int) -> None:
    """
    Bound the current transaction's statements to `timeout_ms` milliseconds.

    A non-positive timeout leaves the server default in place.
    """
    if timeout_ms <= 0:
        return
    await cursor.execute(
        "SELECT set_config('statement_timeout', %s, true);", (str(timeout_ms),)
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    Used by the schema and seeding utilities; request handling goes through the pool.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


__all__ = [
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
]
