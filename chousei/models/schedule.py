from enum import Enum

from pydantic import BaseModel, ConfigDict


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    MAYBE = "maybe"
    UNAVAILABLE = "unavailable"

    @property
    def symbol(self) -> str:
        return _STATUS_SYMBOLS[self]


_STATUS_SYMBOLS = {
    AvailabilityStatus.AVAILABLE: "⚪",
    AvailabilityStatus.MAYBE: "△",
    AvailabilityStatus.UNAVAILABLE: "×",
}


class MaybeReason(str, Enum):
    PARTIALLY_AVAILABLE = "partially-available"
    NEEDS_ADJUSTMENT = "needs-adjustment"
    OTHER = "other"


class TimeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str


# Defined slots, in display order. Read-only for the process lifetime.
TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot(id="AM", label="9:00 - 14:00"),
    TimeSlot(id="PM", label="14:00 - 20:00"),
)


class SlotAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot_id: str
    status: AvailabilityStatus | None = None
    reasons: list[MaybeReason] = []
    other_reason_comment: str = ""


class DailyAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    slots: list[SlotAvailability]


class Event(BaseModel):
    id: str
    name: str
    start_date: str
    end_date: str
    created_at: str


class RespondentEntry(BaseModel):
    id: str
    event_id: str
    name: str
    availabilities: list[DailyAvailability]
    comment: str | None = None
    last_updated_at: str


class SlotStatistic(BaseModel):
    date: str
    slot_id: str
    slot_label: str
    available_count: int = 0
    maybe_count: int = 0
    unavailable_count: int = 0
    total_entries: int = 0


class TimelineSlot(BaseModel):
    slot_id: str
    status: AvailabilityStatus | None = None
    reasons: list[MaybeReason] = []


class TimelineRow(BaseModel):
    respondent_name: str
    slots: list[TimelineSlot]


class EventDetailResponse(BaseModel):
    event: Event
    dates: list[str]
    time_slots: list[TimeSlot]


class EventsListResponse(BaseModel):
    events: list[Event]


class SummaryResponse(BaseModel):
    event_id: str
    total_entries: int
    statistics: list[SlotStatistic]
    top_slots: list[SlotStatistic]


class TimelineResponse(BaseModel):
    event_id: str
    date: str
    rows: list[TimelineRow]


class EntriesListResponse(BaseModel):
    entries: list[RespondentEntry]


class BlankRecordResponse(BaseModel):
    event_id: str
    availabilities: list[DailyAvailability]
