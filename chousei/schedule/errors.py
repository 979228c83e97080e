"""Error conditions raised by the schedule engine."""

from typing import Any


class ScheduleError(Exception):
    """Base class for schedule engine errors."""

    def __init__(self, message: str, **context: Any) -> None:
        self.context = context if context else None
        super().__init__(message)


class InvalidDateRange(ScheduleError, ValueError):
    """A date bound is not a valid YYYY-MM-DD calendar date."""


class MalformedRecord(ScheduleError, ValueError):
    """An availability record does not match the event's dates and slots."""
