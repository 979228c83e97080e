"""Dependency injection for FastAPI endpoints.

This module loads the event named in the request path, and its respondent
entries, from the row store so controllers receive validated models.

Usage in controllers:
    from chousei.dependencies import CurrentEvent, EventEntries

    @router.get("/events/{event_id}/summary")
    async def summary(event: CurrentEvent, entries: EventEntries):
        ...
"""

import logging
from typing import Annotated

import psycopg
from fastapi import Depends

from chousei import db
from chousei.errors import DatabaseError, NotFoundError
from chousei.models.schedule import Event, RespondentEntry

logger = logging.getLogger(__name__)


async def get_event(event_id: str) -> Event:
    """Load the event for the ``event_id`` path parameter.

    Raises:
        NotFoundError: If no such event exists.
        DatabaseError: If the row store cannot be read.
    """
    try:
        row = await db.fetch_event(event_id)
    except psycopg.Error as e:
        logger.exception("Failed to fetch event %s", event_id)
        raise DatabaseError(detail="Failed to load event") from e
    if row is None:
        raise NotFoundError(detail="Event not found", event_id=event_id)
    return Event.model_validate(row)


async def get_event_entries(event: Annotated[Event, Depends(get_event)]) -> list[RespondentEntry]:
    """Load every respondent entry of the current event, in store order."""
    try:
        rows = await db.fetch_respondent_entries(event.id)
    except psycopg.Error as e:
        logger.exception("Failed to fetch entries for event %s", event.id)
        raise DatabaseError(detail="Failed to load entries") from e
    return [RespondentEntry.model_validate(row) for row in rows]


CurrentEvent = Annotated[Event, Depends(get_event)]
EventEntries = Annotated[list[RespondentEntry], Depends(get_event_entries)]
