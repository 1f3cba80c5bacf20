"""
Business-calendar elapsed time.

Converts a task's start and end timestamps into the number of hours that
fall inside the office window of working days. This is pure domain logic:
no I/O, no shared state, safe to call from any number of threads.

Algorithm:
1. Walk the calendar days touched by the span, starting at ``start``
2. On a working day, intersect the remaining span with that day's window
3. Jump to the next calendar day at the office start hour, whether or not
   anything was counted
4. Sum the intersections and round to two decimals
"""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, List, Tuple, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidTimestampError
from .models import DEFAULT_CALENDAR, TimeRange, WorkingCalendar, WorkingSegment

Timestamp = Union[str, datetime]

_SECONDS_PER_HOUR = 3600
_HUNDREDTH = Decimal("0.01")


def to_local(value: Timestamp, timezone: str) -> DateTime:
    """
    Coerce an ISO 8601 string or datetime to a pendulum DateTime in ``timezone``.

    Naive values are taken as wall-clock time in ``timezone``; aware values
    are converted to it.

    Raises:
        InvalidTimestampError: If a string cannot be parsed as a date-time
    """
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value, tz=timezone)
        except ValueError as exc:
            raise InvalidTimestampError(f"Could not parse timestamp: {value!r}") from exc

        if not isinstance(parsed, DateTime):
            raise InvalidTimestampError(f"Not a date-time value: {value!r}")
        return parsed.in_timezone(timezone)

    return pendulum.instance(value, tz=timezone).in_timezone(timezone)


def round_hours(seconds: float) -> float:
    """
    Convert seconds to hours, rounded half up to two decimals.

    Rounds the binary float quotient, so 3618 s (1.00499.. h) gives 1.0.
    """
    hours = Decimal(seconds / _SECONDS_PER_HOUR).quantize(_HUNDREDTH, rounding=ROUND_HALF_UP)
    return max(0.0, float(hours))


class ElapsedHoursCalculator:
    """
    Calculates time-on-the-clock between two timestamps for a working calendar.

    The calculator keeps no state besides the calendar it was built with, so
    results always reflect exactly that calendar.
    """

    def __init__(self, calendar: WorkingCalendar = DEFAULT_CALENDAR):
        self.calendar = calendar

    def elapsed_hours(self, start: Timestamp, end: Timestamp) -> float:
        """
        Hours between ``start`` and ``end`` inside working-day office windows.

        Returns 0.0 when ``start >= end``.
        """
        start_dt, end_dt = self._localize(start, end)

        if start_dt >= end_dt:
            return 0.0

        total = math.fsum(
            segment.time_range.duration_seconds()
            for segment in self._iter_segments(start_dt, end_dt)
        )

        return round_hours(total)

    def working_segments(self, start: Timestamp, end: Timestamp) -> List[WorkingSegment]:
        """
        Per-day portions of the span that were counted, in chronological order.
        """
        start_dt, end_dt = self._localize(start, end)

        if start_dt >= end_dt:
            return []

        return list(self._iter_segments(start_dt, end_dt))

    def _localize(self, start: Timestamp, end: Timestamp) -> Tuple[DateTime, DateTime]:
        tz = self.calendar.timezone
        return to_local(start, tz), to_local(end, tz)

    def _iter_day_cursors(self, start: DateTime, end: DateTime) -> Iterator[DateTime]:
        """
        Yield one cursor per calendar day: ``start`` itself, then every
        following day at the office start hour, while before ``end``.
        """
        cursor = start

        while cursor < end:
            yield cursor

            # Always moves forward at least one calendar day
            cursor = cursor.add(days=1).set(
                hour=self.calendar.office_start_hour,
                minute=0,
                second=0,
                microsecond=0,
            )

    def _iter_segments(self, start: DateTime, end: DateTime) -> Iterator[WorkingSegment]:
        for cursor in self._iter_day_cursors(start, end):
            if not self.calendar.is_working_date(cursor):
                continue

            window = self.calendar.office_window_for(cursor)
            counted = TimeRange(start=cursor, end=end).intersect(window)

            if counted is not None:
                yield WorkingSegment(time_range=counted)


def compute_elapsed_hours(
    start: Timestamp,
    end: Timestamp,
    calendar: WorkingCalendar = DEFAULT_CALENDAR,
) -> float:
    """
    Elapsed working hours between two timestamps.

    Args:
        start: Task start, ISO 8601 string or datetime
        end: Task end, ISO 8601 string or datetime
        calendar: Working days and office window to count against

    Returns:
        Non-negative hours rounded to two decimals
    """
    return ElapsedHoursCalculator(calendar).elapsed_hours(start, end)
