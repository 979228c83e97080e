"""Database schema management.

The schema is owned by the versioned migrations in ``migrations/``.
"""

import logging

from chousei.db.core import _get_connection
from chousei.db.migrations import get_current_version, get_migration_history, run_migrations

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("schedule_events", "respondent_entries")


async def _ensure_schema() -> None:
    """Apply pending migrations. Safe to call repeatedly."""
    current_version = await get_current_version()
    logger.info("Current schema version: %d", current_version)
    if await run_migrations():
        logger.info("Schema updated from version %d to %d", current_version, await get_current_version())


async def missing_tables() -> list[str]:
    """Return the required tables that do not exist yet."""
    async with _get_connection() as conn:
        rows = await conn.execute(
            "SELECT table_name FROM information_schema.tables WHERE table_name = ANY(%s)",
            (list(REQUIRED_TABLES),),
        )
        present = {row[0] async for row in rows}
    return [t for t in REQUIRED_TABLES if t not in present]


async def get_schema_info() -> dict:
    return {
        "current_version": await get_current_version(),
        "migration_history": await get_migration_history(),
        "missing_tables": await missing_tables(),
    }
