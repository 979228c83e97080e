import logging
from typing import Any, Dict

from fastapi import APIRouter

from chousei import db
from chousei.db.core import _get_connection
from chousei.errors import ServiceUnavailableError

logger = logging.getLogger("chousei.health")
router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, Any]:
    database_status = "disabled"
    if db.get_pool() is not None:
        try:
            async with _get_connection() as conn:
                await conn.execute("SELECT 1")
            database_status = "healthy"
        except Exception as e:
            logger.warning("Database health check failed: %s", e)
            database_status = "unhealthy"

    return {"status": "ok", "database": database_status, "pool": db.get_pool_stats()}


@router.get("/health/schema")
async def schema_info() -> Dict[str, Any]:
    if db.get_pool() is None:
        raise ServiceUnavailableError(detail="Database not initialized")
    return await db.get_schema_info()
