"""Availability aggregation and timeline derivation.

Pure functions over snapshots of an event and its respondent entries.
Nothing in this package touches the database or the network.
"""

from chousei.schedule.dates import date_range, parse_calendar_date
from chousei.schedule.errors import InvalidDateRange, MalformedRecord, ScheduleError
from chousei.schedule.records import (
    check_record_shape,
    initialize_blank_record,
    is_complete,
    merge_availabilities,
    normalize_record,
    normalize_slot,
    reconcile_record,
    set_other_reason_comment,
    set_slot_status,
    toggle_reason,
    unfilled_slots,
    update_slot,
)
from chousei.schedule.stats import compute_slot_statistics, top_slots
from chousei.schedule.timeline import project_timeline

__all__ = [
    # Dates
    "date_range",
    "parse_calendar_date",
    # Errors
    "InvalidDateRange",
    "MalformedRecord",
    "ScheduleError",
    # Records
    "check_record_shape",
    "initialize_blank_record",
    "is_complete",
    "merge_availabilities",
    "normalize_record",
    "normalize_slot",
    "reconcile_record",
    "set_other_reason_comment",
    "set_slot_status",
    "toggle_reason",
    "unfilled_slots",
    "update_slot",
    # Derived views
    "compute_slot_statistics",
    "project_timeline",
    "top_slots",
]
