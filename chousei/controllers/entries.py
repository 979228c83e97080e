import logging
from datetime import datetime
from typing import Optional

import psycopg
from fastapi import APIRouter, Response
from pydantic import BaseModel, field_validator

from chousei import db
from chousei.config import get_settings
from chousei.dependencies import CurrentEvent, EventEntries
from chousei.errors import BadRequestError, DatabaseError, NotFoundError
from chousei.models.schedule import (
    BlankRecordResponse,
    DailyAvailability,
    EntriesListResponse,
    Event,
    RespondentEntry,
)
from chousei.schedule import (
    check_record_shape,
    initialize_blank_record,
    normalize_record,
    reconcile_record,
    unfilled_slots,
)

logger = logging.getLogger("chousei.entries")
router = APIRouter(prefix="/events/{event_id}/entries", tags=["entries"])


class EntryRequest(BaseModel):
    name: str
    availabilities: list[DailyAvailability]
    comment: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        max_length = get_settings().schedule.respondent_name_max_length
        if len(v) > max_length:
            raise ValueError(f"name must be at most {max_length} characters")
        return v

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


def _validated_availabilities(req: EntryRequest, event: Event) -> list[dict]:
    """Check a submitted entry is final and return its record ready for storage."""
    if not req.name:
        raise BadRequestError(detail="name must not be empty")
    check_record_shape(req.availabilities, event.start_date, event.end_date)
    unfilled = unfilled_slots(req.availabilities, event.start_date, event.end_date)
    if unfilled:
        raise BadRequestError(
            detail="Every slot must be answered",
            error_code="unfilled_slots",
            unfilled=[f"{day}-{slot_id}" for day, slot_id in unfilled],
        )
    return [daily.model_dump(mode="json") for daily in normalize_record(req.availabilities)]


@router.get("", response_model=EntriesListResponse)
async def list_entries(entries: EventEntries) -> EntriesListResponse:
    newest_first = sorted(entries, key=lambda e: datetime.fromisoformat(e.last_updated_at), reverse=True)
    return EntriesListResponse(entries=newest_first)


@router.get("/blank", response_model=BlankRecordResponse)
async def get_blank_record(event: CurrentEvent) -> BlankRecordResponse:
    return BlankRecordResponse(
        event_id=event.id,
        availabilities=initialize_blank_record(event.start_date, event.end_date),
    )


@router.get("/{entry_id}", response_model=RespondentEntry)
async def get_entry(event: CurrentEvent, entry_id: str) -> RespondentEntry:
    try:
        row = await db.fetch_respondent_entry(event.id, entry_id)
    except psycopg.Error as e:
        logger.exception("Failed to fetch entry")
        raise DatabaseError(detail="Failed to load entry") from e
    if row is None:
        raise NotFoundError(detail="Entry not found", entry_id=entry_id)
    entry = RespondentEntry.model_validate(row)
    availabilities = reconcile_record(entry.availabilities, event.start_date, event.end_date)
    return entry.model_copy(update={"availabilities": availabilities})


@router.post("", status_code=201, response_model=RespondentEntry)
async def add_entry(event: CurrentEvent, req: EntryRequest) -> RespondentEntry:
    logger.info("POST /events/%s/entries name=%s days=%d", event.id, req.name, len(req.availabilities))
    availabilities = _validated_availabilities(req, event)
    try:
        row = await db.add_respondent_entry(event.id, req.name, availabilities, req.comment)
    except psycopg.Error as e:
        logger.exception("Failed to add entry")
        raise DatabaseError(detail="Failed to save entry") from e
    logger.info("Added entry id=%s to event %s", row["id"], event.id)
    return RespondentEntry.model_validate(row)


@router.put("/{entry_id}", response_model=RespondentEntry)
async def update_entry(event: CurrentEvent, entry_id: str, req: EntryRequest) -> RespondentEntry:
    logger.info("PUT /events/%s/entries/%s name=%s", event.id, entry_id, req.name)
    availabilities = _validated_availabilities(req, event)
    try:
        row = await db.update_respondent_entry(event.id, entry_id, req.name, availabilities, req.comment)
    except psycopg.Error as e:
        logger.exception("Failed to update entry")
        raise DatabaseError(detail="Failed to save entry") from e
    if row is None:
        raise NotFoundError(detail="Entry not found", entry_id=entry_id)
    return RespondentEntry.model_validate(row)


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(event: CurrentEvent, entry_id: str) -> Response:
    try:
        deleted = await db.delete_respondent_entry(event.id, entry_id)
    except psycopg.Error as e:
        logger.exception("Failed to delete entry")
        raise DatabaseError(detail="Failed to delete entry") from e
    if not deleted:
        raise NotFoundError(detail="Entry not found", entry_id=entry_id)
    logger.info("Deleted entry %s from event %s", entry_id, event.id)
    return Response(status_code=204)
