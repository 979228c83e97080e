import logging
from typing import Optional

import psycopg
from fastapi import APIRouter, Query
from pydantic import BaseModel, field_validator, model_validator

from chousei import db
from chousei.config import get_settings
from chousei.dependencies import CurrentEvent, EventEntries
from chousei.errors import BadRequestError, DatabaseError
from chousei.models.schedule import (
    TIME_SLOTS,
    Event,
    EventDetailResponse,
    EventsListResponse,
    SummaryResponse,
    TimelineResponse,
)
from chousei.schedule import (
    compute_slot_statistics,
    date_range,
    parse_calendar_date,
    project_timeline,
    top_slots,
)

logger = logging.getLogger("chousei.events")
router = APIRouter(prefix="/events", tags=["events"])


class CreateEventRequest(BaseModel):
    name: str
    start_date: str
    end_date: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        max_length = get_settings().schedule.event_name_max_length
        if not v or len(v) > max_length:
            raise ValueError(f"name must be 1-{max_length} characters")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return parse_calendar_date(v).isoformat()

    @model_validator(mode="after")
    def validate_range(self) -> "CreateEventRequest":
        start = parse_calendar_date(self.start_date)
        end = parse_calendar_date(self.end_date)
        if start > end:
            raise ValueError("start_date must not be after end_date")
        max_days = get_settings().schedule.max_event_days
        if (end - start).days + 1 > max_days:
            raise ValueError(f"event may span at most {max_days} days")
        return self


@router.get("", response_model=EventsListResponse)
async def list_events() -> EventsListResponse:
    try:
        rows = await db.list_events()
    except psycopg.Error as e:
        logger.exception("Failed to list events")
        raise DatabaseError(detail="Failed to load events") from e
    return EventsListResponse(events=[Event.model_validate(row) for row in rows])


@router.post("", status_code=201, response_model=Event)
async def create_event(req: CreateEventRequest) -> Event:
    logger.info("POST /events name=%s range=%s..%s", req.name, req.start_date, req.end_date)
    try:
        row = await db.create_event(name=req.name, start_date=req.start_date, end_date=req.end_date)
    except psycopg.Error as e:
        logger.exception("Failed to create event")
        raise DatabaseError(detail="Failed to create event") from e
    logger.info("Created event id=%s", row["id"])
    return Event.model_validate(row)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event: CurrentEvent) -> EventDetailResponse:
    return EventDetailResponse(
        event=event,
        dates=date_range(event.start_date, event.end_date),
        time_slots=list(TIME_SLOTS),
    )


@router.get("/{event_id}/summary", response_model=SummaryResponse)
async def get_summary(event: CurrentEvent, entries: EventEntries) -> SummaryResponse:
    stats = compute_slot_statistics(event, entries)
    logger.info("Summary for event %s: %d entries, %d slots", event.id, len(entries), len(stats))
    return SummaryResponse(
        event_id=event.id,
        total_entries=len(entries),
        statistics=stats,
        top_slots=top_slots(stats),
    )


@router.get("/{event_id}/timeline", response_model=TimelineResponse)
async def get_timeline(
    event: CurrentEvent,
    entries: EventEntries,
    date: Optional[str] = Query(None, description="YYYY-MM-DD; defaults to the first event date"),
) -> TimelineResponse:
    dates = date_range(event.start_date, event.end_date)
    if not dates:
        raise BadRequestError(detail="Event has no dates", event_id=event.id)
    selected = dates[0] if date is None else parse_calendar_date(date).isoformat()
    if selected not in dates:
        raise BadRequestError(
            detail=f"{selected} is outside the event range",
            start_date=event.start_date,
            end_date=event.end_date,
        )
    return TimelineResponse(event_id=event.id, date=selected, rows=project_timeline(selected, entries))
