"""Calendar range generation.

Dates are handled as naive ``datetime.date`` values, which carry no time of
day and no timezone, so stepping one day at a time never skips or repeats a
day across DST changes.
"""

import logging
import re
from datetime import date, datetime, timedelta

from chousei.schedule.errors import InvalidDateRange

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: str | date) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a date.

    Raises:
        InvalidDateRange: If the value is not a calendar date.
    """
    if isinstance(value, datetime):
        raise InvalidDateRange(f"expected a calendar date, got a timestamp: {value!r}", value=str(value))
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise InvalidDateRange(f"invalid date format: {value!r}", value=str(value))
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateRange(f"invalid calendar date: {value!r}", value=value) from e


def date_range(start: str | date, end: str | date) -> list[str]:
    """Return every date from start to end inclusive as ``YYYY-MM-DD`` keys.

    An empty list means there are no applicable dates: either start is after
    end, or a bound could not be parsed (logged, never partial).
    """
    try:
        start_date = parse_calendar_date(start)
        end_date = parse_calendar_date(end)
    except InvalidDateRange as e:
        logger.error("Invalid date range %r..%r: %s", start, end, e)
        return []
    if start_date > end_date:
        return []
    days = (end_date - start_date).days
    return [(start_date + timedelta(days=i)).isoformat() for i in range(days + 1)]
