import os
import sys
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from chousei.config import clear_settings_cache
from chousei.models.schedule import AvailabilityStatus, Event, MaybeReason, RespondentEntry
from chousei.schedule import initialize_blank_record, set_slot_status, toggle_reason, update_slot

AVAILABLE = AvailabilityStatus.AVAILABLE
MAYBE = AvailabilityStatus.MAYBE
UNAVAILABLE = AvailabilityStatus.UNAVAILABLE


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("ENABLE_SCHEDULE_DB", raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def event():
    return Event(
        id="evt123",
        name="Summer camp",
        start_date="2024-07-01",
        end_date="2024-07-02",
        created_at="2024-06-01T00:00:00+00:00",
    )


@pytest.fixture
def make_entry(event):
    """Build an entry whose unlisted slots default to ``fill``.

    ``answers`` maps (date, slot_id) to a status or to (status, [reasons]).
    """
    def _make(name, answers=None, fill=UNAVAILABLE, entry_id=None, updated="2024-06-02T00:00:00+00:00"):
        answers = answers or {}
        record = initialize_blank_record(event.start_date, event.end_date)
        for daily in record:
            for slot in daily.slots:
                answer = answers.get((daily.date, slot.slot_id), fill)
                if answer is None:
                    continue
                status, reasons = answer if isinstance(answer, tuple) else (answer, [])
                record = update_slot(record, daily.date, slot.slot_id, lambda s, st=status: set_slot_status(s, st))
                for reason in reasons:
                    record = update_slot(
                        record, daily.date, slot.slot_id, lambda s, r=reason: toggle_reason(s, r, True)
                    )
        return RespondentEntry(
            id=entry_id or f"entry-{name.lower()}",
            event_id=event.id,
            name=name,
            availabilities=record,
            last_updated_at=updated,
        )

    return _make


@pytest.fixture
def scenario_entries(make_entry):
    """Three respondents: A and B free on the 1st, B unsure in the afternoon, C busy."""
    a = make_entry("A", {("2024-07-01", "AM"): AVAILABLE, ("2024-07-01", "PM"): AVAILABLE})
    b = make_entry(
        "B",
        {
            ("2024-07-01", "AM"): AVAILABLE,
            ("2024-07-01", "PM"): (MAYBE, [MaybeReason.NEEDS_ADJUSTMENT]),
        },
    )
    c = make_entry("C", {("2024-07-01", "AM"): UNAVAILABLE})
    return [a, b, c]


@pytest.fixture
def mock_db():
    """Replace the row store functions used by the controllers."""
    names = [
        "list_events",
        "create_event",
        "fetch_event",
        "fetch_respondent_entries",
        "fetch_respondent_entry",
        "add_respondent_entry",
        "update_respondent_entry",
        "delete_respondent_entry",
    ]
    patchers = [patch(f"chousei.db.{name}", new_callable=AsyncMock) for name in names]
    mocks = {name: p.start() for name, p in zip(names, patchers)}
    yield mocks
    for p in patchers:
        p.stop()


@pytest.fixture
def client():
    import chousei.main as main

    with TestClient(main.app) as c:
        yield c
