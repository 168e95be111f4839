"""Bucketed key-value store on top of a PostgreSQL connection pool.

Buckets are named partitions of byte keys and byte values. Every read and
write happens inside a transaction obtained from :meth:`KeyValueStore.view`
(read-only, always rolled back) or :meth:`KeyValueStore.update` (committed on
success, rolled back on error). Scans return entries in ascending key order.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class BucketNotFoundError(LookupError):
    """Raised when a transaction addresses a bucket that was never created."""


class Bucket:
    def __init__(self, conn: AsyncConnection, name: str) -> None:
        self._conn = conn
        self._name = name

    async def get(self, key: bytes) -> bytes | None:
        query = "SELECT value FROM kv_entries WHERE bucket = %s AND key = %s"
        async with self._conn.cursor() as cursor:
            await cursor.execute(query, (self._name, key))
            row = await cursor.fetchone()
        return bytes(row[0]) if row else None

    async def put(self, key: bytes, value: bytes) -> None:
        query = """
        INSERT INTO kv_entries (bucket, key, value)
        VALUES (%s, %s, %s)
        ON CONFLICT (bucket, key) DO UPDATE SET value = EXCLUDED.value
        """
        async with self._conn.cursor() as cursor:
            await cursor.execute(query, (self._name, key, value))

    async def delete(self, key: bytes) -> bool:
        query = "DELETE FROM kv_entries WHERE bucket = %s AND key = %s"
        async with self._conn.cursor() as cursor:
            await cursor.execute(query, (self._name, key))
            return cursor.rowcount > 0

    async def scan(self, prefix: bytes = b"") -> list[tuple[bytes, bytes]]:
        query = """
        SELECT key, value
        FROM kv_entries
        WHERE bucket = %s AND substring(key FROM 1 FOR %s::int) = %s
        ORDER BY key ASC
        """
        async with self._conn.cursor() as cursor:
            await cursor.execute(query, (self._name, len(prefix), prefix))
            rows = await cursor.fetchall()
        return [(bytes(key), bytes(value)) for key, value in rows]


class Transaction:
    def __init__(self, conn: AsyncConnection, *, writable: bool) -> None:
        self._conn = conn
        self._writable = writable

    @property
    def writable(self) -> bool:
        return self._writable

    async def bucket(self, name: str) -> Bucket:
        async with self._conn.cursor() as cursor:
            await cursor.execute("SELECT 1 FROM kv_buckets WHERE name = %s", (name,))
            row = await cursor.fetchone()
        if row is None:
            raise BucketNotFoundError(name)
        return Bucket(self._conn, name)

    async def create_bucket_if_not_exists(self, name: str) -> Bucket:
        if not self._writable:
            raise RuntimeError("cannot create a bucket in a read-only transaction")
        query = "INSERT INTO kv_buckets (name) VALUES (%s) ON CONFLICT (name) DO NOTHING"
        async with self._conn.cursor() as cursor:
            await cursor.execute(query, (name,))
        return Bucket(self._conn, name)


class KeyValueStore:
    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    @asynccontextmanager
    async def view(self) -> AsyncIterator[Transaction]:
        async with self._pool.connection() as conn:
            try:
                yield Transaction(conn, writable=False)
            finally:
                await conn.rollback()

    @asynccontextmanager
    async def update(self) -> AsyncIterator[Transaction]:
        async with self._pool.connection() as conn:
            try:
                yield Transaction(conn, writable=True)
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def create_buckets(self, *names: str) -> None:
        async with self.update() as tx:
            for name in names:
                await tx.create_bucket_if_not_exists(name)
        logger.info("Buckets ready: %s", ", ".join(names))
