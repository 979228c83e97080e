"""Connection handling for the row store.

When ``init_pool`` has run, connections come from a shared
``AsyncConnectionPool``; otherwise every ``_get_connection`` call opens and
closes its own connection.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import psycopg
from psycopg_pool import AsyncConnectionPool

from chousei.config import get_settings

_logger = logging.getLogger(__name__)

_pool: AsyncConnectionPool | None = None


def _get_dsn() -> str:
    return get_settings().postgres.get_dsn()


async def init_pool() -> None:
    """Open the shared pool and bring the schema up to date. Idempotent."""
    global _pool
    if _pool is not None:
        return
    pg = get_settings().postgres
    pool = AsyncConnectionPool(
        pg.get_dsn(),
        open=False,
        check=AsyncConnectionPool.check_connection,
        **pg.pool_kwargs(),
    )
    await pool.open()
    _pool = pool
    _logger.info(
        "Opened connection pool to %s:%s/%s (size %d-%d)",
        pg.host, pg.port, pg.database, pg.pool_min_size, pg.pool_max_size,
    )

    from chousei.db.schema import _ensure_schema

    try:
        await _ensure_schema()
    except Exception:
        _logger.error("Schema setup failed; closing connection pool")
        await close_pool()
        raise


async def close_pool() -> None:
    global _pool
    pool, _pool = _pool, None
    if pool is None:
        return
    await pool.close()
    _logger.info("Connection pool closed")


@asynccontextmanager
async def _get_connection(autocommit: bool = True) -> AsyncIterator[psycopg.AsyncConnection]:
    if _pool is None:
        conn = await psycopg.AsyncConnection.connect(_get_dsn(), autocommit=autocommit)
        async with conn:
            yield conn
        return
    async with _pool.connection() as conn:
        await conn.set_autocommit(autocommit)
        yield conn


def get_pool() -> AsyncConnectionPool | None:
    return _pool


def get_pool_stats() -> dict[str, object]:
    """Pool counters for the health endpoint."""
    if _pool is None:
        return {"status": "not_initialized"}
    stats = _pool.get_stats()
    return {
        "status": "active",
        "size": stats.get("pool_size", 0),
        "available": stats.get("pool_available", 0),
        "waiting": stats.get("requests_waiting", 0),
    }


__all__ = [
    "_get_connection",
    "close_pool",
    "get_pool",
    "get_pool_stats",
    "init_pool",
]
