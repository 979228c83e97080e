"""Persistence for schedule events and respondent entries."""

import logging
import secrets
import string
from datetime import UTC, datetime
from typing import Any

from psycopg import errors as pg_errors
from psycopg.types.json import Jsonb

from chousei.db.core import _get_connection
from chousei.schedule.dates import parse_calendar_date

logger = logging.getLogger(__name__)

EVENT_COLUMNS = "id, name, start_date, end_date, created_at"
ENTRY_COLUMNS = "id, event_id, name, availabilities, comment, last_updated_at"


def _generate_id(length: int = 10) -> str:
    chars = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(chars) for _ in range(length))


def _event_from_row(row) -> dict[str, Any]:
    return {
        "id": row[0],
        "name": row[1],
        "start_date": row[2].isoformat(),
        "end_date": row[3].isoformat(),
        "created_at": row[4].astimezone(UTC).isoformat(),
    }


def _entry_from_row(row) -> dict[str, Any]:
    return {
        "id": row[0],
        "event_id": row[1],
        "name": row[2],
        "availabilities": row[3],
        "comment": row[4],
        "last_updated_at": row[5].astimezone(UTC).isoformat(),
    }


async def create_event(name: str, start_date: str, end_date: str) -> dict[str, Any]:
    now = datetime.now(UTC)
    start = parse_calendar_date(start_date)
    end = parse_calendar_date(end_date)
    async with _get_connection() as conn:
        for _ in range(10):
            event_id = _generate_id()
            try:
                row = await (await conn.execute(
                    f"""INSERT INTO schedule_events ({EVENT_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {EVENT_COLUMNS}""",
                    (event_id, name, start, end, now),
                )).fetchone()
                return _event_from_row(row)
            except pg_errors.UniqueViolation:
                logger.debug("Event id collision on %s, retrying", event_id)
                continue
        raise RuntimeError("Failed to generate unique event ID")


async def list_events() -> list[dict[str, Any]]:
    async with _get_connection() as conn:
        rows = await conn.execute(
            f"SELECT {EVENT_COLUMNS} FROM schedule_events ORDER BY created_at DESC"
        )
        return [_event_from_row(row) async for row in rows]


async def fetch_event(event_id: str) -> dict[str, Any] | None:
    async with _get_connection() as conn:
        row = await (await conn.execute(
            f"SELECT {EVENT_COLUMNS} FROM schedule_events WHERE id = %s",
            (event_id,),
        )).fetchone()
        return _event_from_row(row) if row else None


async def fetch_respondent_entries(event_id: str) -> list[dict[str, Any]]:
    async with _get_connection() as conn:
        rows = await conn.execute(
            f"SELECT {ENTRY_COLUMNS} FROM respondent_entries WHERE event_id = %s",
            (event_id,),
        )
        return [_entry_from_row(row) async for row in rows]


async def fetch_respondent_entry(event_id: str, entry_id: str) -> dict[str, Any] | None:
    async with _get_connection() as conn:
        row = await (await conn.execute(
            f"SELECT {ENTRY_COLUMNS} FROM respondent_entries WHERE event_id = %s AND id = %s",
            (event_id, entry_id),
        )).fetchone()
        return _entry_from_row(row) if row else None


async def add_respondent_entry(
    event_id: str,
    name: str,
    availabilities: list[dict[str, Any]],
    comment: str | None = None,
) -> dict[str, Any]:
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        for _ in range(10):
            entry_id = _generate_id(16)
            try:
                row = await (await conn.execute(
                    f"""INSERT INTO respondent_entries ({ENTRY_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s, %s)
                        RETURNING {ENTRY_COLUMNS}""",
                    (entry_id, event_id, name, Jsonb(availabilities), comment, now),
                )).fetchone()
                return _entry_from_row(row)
            except pg_errors.UniqueViolation:
                logger.debug("Entry id collision on %s, retrying", entry_id)
                continue
        raise RuntimeError("Failed to generate unique entry ID")


async def update_respondent_entry(
    event_id: str,
    entry_id: str,
    name: str,
    availabilities: list[dict[str, Any]],
    comment: str | None = None,
) -> dict[str, Any] | None:
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        row = await (await conn.execute(
            f"""UPDATE respondent_entries
                SET name = %s, availabilities = %s, comment = %s, last_updated_at = %s
                WHERE event_id = %s AND id = %s
                RETURNING {ENTRY_COLUMNS}""",
            (name, Jsonb(availabilities), comment, now, event_id, entry_id),
        )).fetchone()
        return _entry_from_row(row) if row else None


async def delete_respondent_entry(event_id: str, entry_id: str) -> bool:
    async with _get_connection() as conn:
        cur = await conn.execute(
            "DELETE FROM respondent_entries WHERE event_id = %s AND id = %s",
            (event_id, entry_id),
        )
        return cur.rowcount > 0
