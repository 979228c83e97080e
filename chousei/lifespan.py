"""Application startup and shutdown.

The row store is only opened when ``ENABLE_SCHEDULE_DB=1``; without it every
database call falls back to a one-off connection.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import psycopg
from fastapi import FastAPI

from chousei import db
from chousei.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    db_enabled: bool = False


async def init_database() -> bool:
    """Open the connection pool and apply migrations when enabled.

    Returns:
        True if the database was initialized, False otherwise.
    """
    if not get_settings().features.schedule_db:
        logger.info("Schedule database disabled (ENABLE_SCHEDULE_DB not set)")
        return False
    try:
        await db.init_pool()
        return True
    except (psycopg.Error, OSError) as e:
        logger.warning("Failed to initialize database: %s", e)
        return False


async def setup_resources() -> LifespanResources:
    return LifespanResources(db_enabled=await init_database())


async def cleanup_resources(resources: LifespanResources) -> None:
    if resources.db_enabled:
        await db.close_pool()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    resources = await setup_resources()
    try:
        yield
    finally:
        await cleanup_resources(resources)
