"""Respondent availability records: blank form, reconcile merge, slot edits.

A record is the ordered list of ``DailyAvailability`` a respondent declares
for an event. Every function here returns new model instances; inputs are
never modified.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import date

from chousei.models.schedule import (
    TIME_SLOTS,
    AvailabilityStatus,
    DailyAvailability,
    MaybeReason,
    SlotAvailability,
)
from chousei.schedule.dates import date_range
from chousei.schedule.errors import MalformedRecord

logger = logging.getLogger(__name__)

SlotChange = Callable[[SlotAvailability], SlotAvailability]


def _blank_day(day: str) -> DailyAvailability:
    return DailyAvailability(date=day, slots=[SlotAvailability(slot_id=slot.id) for slot in TIME_SLOTS])


def initialize_blank_record(start: str | date, end: str | date) -> list[DailyAvailability]:
    """Return the blank form for a range: every defined slot of every date, unset."""
    return [_blank_day(day) for day in date_range(start, end)]


def index_record(record: Sequence[DailyAvailability]) -> dict[str, dict[str, SlotAvailability]]:
    """Map date -> slot id -> slot entry. The first entry for a date or slot wins."""
    index: dict[str, dict[str, SlotAvailability]] = {}
    for daily in record:
        if daily.date in index:
            continue
        slots: dict[str, SlotAvailability] = {}
        for slot in daily.slots:
            slots.setdefault(slot.slot_id, slot)
        index[daily.date] = slots
    return index


def _merge_day(blank: DailyAvailability, current: DailyAvailability) -> DailyAvailability:
    current_slots: dict[str, SlotAvailability] = {}
    for slot in current.slots:
        current_slots.setdefault(slot.slot_id, slot)
    known = {slot.slot_id for slot in blank.slots}
    slots = [current_slots.get(slot.slot_id, slot) for slot in blank.slots]
    slots.extend(slot for slot_id, slot in current_slots.items() if slot_id not in known)
    if slots == list(current.slots):
        return current
    return DailyAvailability(date=blank.date, slots=slots)


def merge_availabilities(
    template: Mapping[str, DailyAvailability],
    existing: Mapping[str, DailyAvailability],
) -> dict[str, DailyAvailability]:
    """Merge an existing date-keyed record onto a template.

    Template dates come first, in template order, with existing slot entries
    taking precedence and missing slots backfilled from the template. Dates
    only present in ``existing`` follow, in their original order.
    """
    merged: dict[str, DailyAvailability] = {}
    for key, blank in template.items():
        current = existing.get(key)
        merged[key] = blank if current is None else _merge_day(blank, current)
    for key, current in existing.items():
        if key not in merged:
            merged[key] = current
    return merged


def reconcile_record(
    existing: Sequence[DailyAvailability],
    start: str | date,
    end: str | date,
) -> list[DailyAvailability]:
    """Bring a stored record back to the shape of the event's current range."""
    template = {daily.date: daily for daily in initialize_blank_record(start, end)}
    current: dict[str, DailyAvailability] = {}
    for daily in existing:
        current.setdefault(daily.date, daily)
    return list(merge_availabilities(template, current).values())


def set_slot_status(slot: SlotAvailability, status: AvailabilityStatus) -> SlotAvailability:
    """Select a status; selecting the current status again unsets it.

    Any resulting status other than Maybe drops reasons and the other-reason
    comment.
    """
    new_status = None if slot.status == status else status
    if new_status == AvailabilityStatus.MAYBE:
        return slot.model_copy(update={"status": new_status})
    return slot.model_copy(update={"status": new_status, "reasons": [], "other_reason_comment": ""})


def toggle_reason(slot: SlotAvailability, reason: MaybeReason, checked: bool) -> SlotAvailability:
    """Check or uncheck one Maybe reason. Slots that are not Maybe are returned as-is."""
    if slot.status != AvailabilityStatus.MAYBE:
        return slot
    if checked:
        reasons = list(slot.reasons) if reason in slot.reasons else [*slot.reasons, reason]
    else:
        reasons = [r for r in slot.reasons if r != reason]
    comment = slot.other_reason_comment if MaybeReason.OTHER in reasons else ""
    return slot.model_copy(update={"reasons": reasons, "other_reason_comment": comment})


def set_other_reason_comment(slot: SlotAvailability, comment: str) -> SlotAvailability:
    if MaybeReason.OTHER not in slot.reasons:
        return slot
    return slot.model_copy(update={"other_reason_comment": comment})


def normalize_slot(slot: SlotAvailability) -> SlotAvailability:
    """Drop reasons a slot may not carry: any reason off Maybe, the comment without "other"."""
    if slot.status != AvailabilityStatus.MAYBE:
        reasons: list[MaybeReason] = []
    else:
        reasons = list(dict.fromkeys(slot.reasons))
    comment = slot.other_reason_comment if MaybeReason.OTHER in reasons else ""
    if reasons == slot.reasons and comment == slot.other_reason_comment:
        return slot
    return slot.model_copy(update={"reasons": reasons, "other_reason_comment": comment})


def normalize_record(record: Sequence[DailyAvailability]) -> list[DailyAvailability]:
    return [
        daily.model_copy(update={"slots": [normalize_slot(s) for s in daily.slots]})
        for daily in record
    ]


def update_slot(
    record: Sequence[DailyAvailability],
    day: str,
    slot_id: str,
    change: SlotChange,
) -> list[DailyAvailability]:
    """Apply ``change`` to one slot of a record and return the new record."""
    updated = []
    for daily in record:
        if daily.date == day:
            slots = [change(s) if s.slot_id == slot_id else s for s in daily.slots]
            daily = daily.model_copy(update={"slots": slots})
        updated.append(daily)
    return updated


def unfilled_slots(
    record: Sequence[DailyAvailability],
    start: str | date,
    end: str | date,
) -> list[tuple[str, str]]:
    """List (date, slot id) pairs of the event range that have no status yet.

    Any status counts as filled, Unavailable included. Dates outside the
    range are ignored.
    """
    index = index_record(record)
    unfilled = []
    for day in date_range(start, end):
        slots = index.get(day, {})
        for slot in TIME_SLOTS:
            entry = slots.get(slot.id)
            if entry is None or entry.status is None:
                unfilled.append((day, slot.id))
    return unfilled


def is_complete(record: Sequence[DailyAvailability], start: str | date, end: str | date) -> bool:
    return not unfilled_slots(record, start, end)


def check_record_shape(record: Sequence[DailyAvailability], start: str | date, end: str | date) -> None:
    """Require exactly one entry per date of the range and per defined slot.

    Raises:
        MalformedRecord: On missing, extra or repeated dates or slots.
    """
    expected = date_range(start, end)
    seen = [daily.date for daily in record]
    repeated = sorted({day for day in seen if seen.count(day) > 1})
    if repeated:
        raise MalformedRecord(f"dates listed more than once: {', '.join(repeated)}", dates=repeated)
    missing = [day for day in expected if day not in seen]
    extra = [day for day in seen if day not in expected]
    if missing or extra:
        logger.debug("Record dates do not match range %s..%s: missing=%s extra=%s", start, end, missing, extra)
        raise MalformedRecord(
            "availability dates do not match the event range",
            missing=missing,
            extra=extra,
        )
    defined = sorted(slot.id for slot in TIME_SLOTS)
    for daily in record:
        slot_ids = sorted(slot.slot_id for slot in daily.slots)
        if slot_ids != defined:
            raise MalformedRecord(
                f"slots for {daily.date} must be exactly {', '.join(defined)}",
                date=daily.date,
                slots=slot_ids,
            )
