"""Per-date timeline of every respondent's answers."""

from collections.abc import Sequence

from chousei.models.schedule import (
    TIME_SLOTS,
    AvailabilityStatus,
    RespondentEntry,
    TimelineRow,
    TimelineSlot,
)
from chousei.schedule.records import index_record


def project_timeline(selected_date: str, entries: Sequence[RespondentEntry]) -> list[TimelineRow]:
    """Build one row per respondent, in input order, for ``selected_date``.

    Returns an empty list when there are no entries or when no entry has any
    answers for the date. Reasons are only reported for Maybe answers.
    """
    indexes = [index_record(entry.availabilities) for entry in entries]
    if not any(selected_date in index for index in indexes):
        return []
    rows = []
    for entry, index in zip(entries, indexes):
        day = index.get(selected_date, {})
        slots = []
        for slot in TIME_SLOTS:
            entry_slot = day.get(slot.id)
            status = entry_slot.status if entry_slot else None
            reasons = list(entry_slot.reasons) if status == AvailabilityStatus.MAYBE else []
            slots.append(TimelineSlot(slot_id=slot.id, status=status, reasons=reasons))
        rows.append(TimelineRow(respondent_name=entry.name, slots=slots))
    return rows
