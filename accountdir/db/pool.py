"""asyncpg pool shared by the PostgreSQL document store."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from accountdir.errors import StoreUnavailableError
from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

# Connection failures of either kind surface as StoreUnavailableError
_BACKEND_ERRORS = (OSError, asyncpg.PostgresError)


def dsn_from_env() -> str:
    """Resolve a DSN from the environment.

    ACCOUNTDIR_DATABASE_URL wins over DATABASE_URL; without either the DSN
    is assembled from the POSTGRES_* variables.
    """
    for name in ("ACCOUNTDIR_DATABASE_URL", "DATABASE_URL"):
        if os.environ.get(name):
            return os.environ[name]

    env = os.environ.get
    return (
        f"postgresql://{env('POSTGRES_USER', 'accounts')}:{env('POSTGRES_PASSWORD', 'accounts')}"
        f"@{env('POSTGRES_HOST', 'localhost')}:{env('POSTGRES_PORT', '5432')}"
        f"/{env('POSTGRES_DB', 'accountdb')}"
    )


class PostgresPool:
    """Lazily connected asyncpg pool.

    Args:
        dsn: Connection string, resolved from the environment when omitted
        min_size: Connections kept open
        max_size: Upper bound on open connections
        command_timeout: Per-statement timeout in seconds
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ) -> None:
        self._dsn = dsn or dsn_from_env()
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Open the pool; a second call is a no-op."""
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except _BACKEND_ERRORS as e:
            logger.error("postgres_pool_connect_failed", error=str(e))
            raise StoreUnavailableError(f"Cannot connect to PostgreSQL: {e}", cause=e) from e
        logger.info("postgres_pool_opened", min_size=self._min_size, max_size=self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting first if needed.

        Driver and socket errors raised while the connection is held are
        re-raised as StoreUnavailableError.
        """
        await self.connect()
        try:
            async with self._pool.acquire() as connection:
                yield connection
        except _BACKEND_ERRORS as e:
            logger.error("postgres_query_failed", error=str(e))
            raise StoreUnavailableError(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """True when the pool is open and answers SELECT 1."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as connection:
                await connection.fetchval("SELECT 1")
        except _BACKEND_ERRORS as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
