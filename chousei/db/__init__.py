"""Database access for the schedule service.

Usage:
    from chousei import db
    event = await db.fetch_event(event_id)
"""

from chousei.db.core import close_pool, get_pool, get_pool_stats, init_pool
from chousei.db.schedule import (
    add_respondent_entry,
    create_event,
    delete_respondent_entry,
    fetch_event,
    fetch_respondent_entries,
    fetch_respondent_entry,
    list_events,
    update_respondent_entry,
)
from chousei.db.schema import get_schema_info

__all__ = [
    # Pool
    "close_pool",
    "get_pool",
    "get_pool_stats",
    "init_pool",
    "get_schema_info",
    # Events
    "create_event",
    "fetch_event",
    "list_events",
    # Respondent entries
    "add_respondent_entry",
    "delete_respondent_entry",
    "fetch_respondent_entries",
    "fetch_respondent_entry",
    "update_respondent_entry",
]
