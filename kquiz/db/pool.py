from __future__ import annotations

import logging

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class DatabasePool:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 4,
        open_timeout: float = 30.0,
    ) -> None:
        self._open_timeout = open_timeout
        self._pool = AsyncConnectionPool(
            conninfo=dsn,
            min_size=min_size,
            max_size=max(min_size, max_size),
            open=False,
            kwargs={"autocommit": False},
            name="kquiz",
        )

    @property
    def pool(self) -> AsyncConnectionPool:
        return self._pool

    async def open(self) -> None:
        await self._pool.open(wait=True, timeout=self._open_timeout)
        logger.info("Connection pool %s opened.", self._pool.name)

    async def close(self) -> None:
        await self._pool.close()
        logger.info("Connection pool %s closed.", self._pool.name)
