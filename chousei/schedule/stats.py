"""Slot statistics across all respondents of an event."""

import logging
from collections.abc import Sequence

from chousei.models.schedule import (
    TIME_SLOTS,
    AvailabilityStatus,
    Event,
    RespondentEntry,
    SlotStatistic,
)
from chousei.schedule.dates import date_range
from chousei.schedule.records import index_record

logger = logging.getLogger(__name__)


def _ranking_key(stat: SlotStatistic) -> tuple[int, int, str, str]:
    # ISO date keys sort chronologically.
    return (-stat.available_count, -stat.maybe_count, stat.date, stat.slot_id)


def compute_slot_statistics(event: Event, entries: Sequence[RespondentEntry]) -> list[SlotStatistic]:
    """Count Available/Maybe/Unavailable answers for every (date, slot) of an event.

    Rows are ranked by most Available, then most Maybe, then earliest date,
    then slot id. Unset answers count only toward ``total_entries``; a date
    missing from an entry is treated as unset.
    """
    indexes = [index_record(entry.availabilities) for entry in entries]
    total = len(entries)
    stats = []
    for day in date_range(event.start_date, event.end_date):
        missing = sum(1 for index in indexes if day not in index)
        if missing:
            logger.debug("Event %s: %d entries have no answers for %s", event.id, missing, day)
        for slot in TIME_SLOTS:
            stat = SlotStatistic(date=day, slot_id=slot.id, slot_label=slot.label, total_entries=total)
            for index in indexes:
                entry_slot = index.get(day, {}).get(slot.id)
                status = entry_slot.status if entry_slot else None
                if status == AvailabilityStatus.AVAILABLE:
                    stat.available_count += 1
                elif status == AvailabilityStatus.MAYBE:
                    stat.maybe_count += 1
                elif status == AvailabilityStatus.UNAVAILABLE:
                    stat.unavailable_count += 1
            stats.append(stat)
    stats.sort(key=_ranking_key)
    return stats


def top_slots(stats: Sequence[SlotStatistic]) -> list[SlotStatistic]:
    """Return the leading ranked rows that share the best (available, maybe) counts.

    Empty when nobody answered Available or Maybe anywhere.
    """
    if not stats:
        return []
    best = stats[0]
    if best.available_count == 0 and best.maybe_count == 0:
        return []
    return [
        s for s in stats
        if (s.available_count, s.maybe_count) == (best.available_count, best.maybe_count)
    ]
