"""
Calendar dates -- Day-of-week enum and calendar-interval helpers.

Responsibility:
    Supplies the calendar-date vocabulary used by date specifications and
    business calendars: ``DayOfWeek``, constructors for ``Interval[date]``
    (a *calendar interval*), forward/backward day iteration, the n-th
    weekday of a month, and month arithmetic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Uses ``datetime.date`` as the calendar-date type and
    ``dateutil.relativedelta`` for month arithmetic.

Failure modes:
    - UnboundedIntervalError when day iteration is asked of an interval
      that is unbounded on the side iteration starts from.
    - InvalidSpecificationError from ``nth_weekday_of_month`` for an
      occurrence outside 1..5.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, timedelta
from enum import IntEnum, unique

from dateutil.relativedelta import relativedelta

from schedule_kernel.domain.interval import Interval
from schedule_kernel.exceptions import (
    InvalidSpecificationError,
    UnboundedIntervalError,
)

CalendarInterval = Interval[date]

ONE_DAY = timedelta(days=1)

MAX_WEEKDAY_OCCURRENCE = 5


@unique
class DayOfWeek(IntEnum):
    """Day of week numbered like ``date.weekday()`` (Monday is 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> DayOfWeek:
        return cls(day.weekday())


WEEKEND: frozenset[DayOfWeek] = frozenset({DayOfWeek.SATURDAY, DayOfWeek.SUNDAY})


# ---------------------------------------------------------------------------
# Calendar interval constructors
# ---------------------------------------------------------------------------


def inclusive(start: date | None, end: date | None) -> CalendarInterval:
    """Calendar interval ``[start, end]``; None leaves that side unbounded."""
    return Interval.closed(start, end)


def year(value: int) -> CalendarInterval:
    return Interval.closed(date(value, 1, 1), date(value, 12, 31))


def month(year_value: int, month_value: int) -> CalendarInterval:
    return Interval.closed(
        date(year_value, month_value, 1), last_day_of_month(year_value, month_value)
    )


def ever_from(start: date) -> CalendarInterval:
    return Interval.and_more(start)


def ever_preceding(end: date) -> CalendarInterval:
    return Interval.up_to(end)


# ---------------------------------------------------------------------------
# Iteration
# ---------------------------------------------------------------------------


def first_day(interval: CalendarInterval) -> date | None:
    """Earliest date included by the interval, or None when empty."""
    if interval.is_empty():
        return None
    if interval.lower_limit is None:
        raise UnboundedIntervalError(str(interval), "first_day")
    start = interval.lower_limit
    if interval.lower_included:
        return start
    # (date.max, ...) holds no date
    return None if start == date.max else start + ONE_DAY


def last_day(interval: CalendarInterval) -> date | None:
    """Latest date included by the interval, or None when empty."""
    if interval.is_empty():
        return None
    if interval.upper_limit is None:
        raise UnboundedIntervalError(str(interval), "last_day")
    end = interval.upper_limit
    if interval.upper_included:
        return end
    return None if end == date.min else end - ONE_DAY


def require_bounded(interval: CalendarInterval, operation: str) -> None:
    if interval.is_empty():
        return
    if interval.lower_limit is None or interval.upper_limit is None:
        raise UnboundedIntervalError(str(interval), operation)


def days_in(interval: CalendarInterval) -> Iterator[date]:
    """Ascending dates of the interval; unbounded above runs to ``date.max``."""
    day = first_day(interval)
    if day is None:
        return
    end = date.max if interval.upper_limit is None else last_day(interval)
    while day <= end:
        yield day
        if day == end:
            return
        day += ONE_DAY


def days_in_reverse(interval: CalendarInterval) -> Iterator[date]:
    """Descending dates of the interval; unbounded below runs to ``date.min``."""
    day = last_day(interval)
    if day is None:
        return
    start = date.min if interval.lower_limit is None else first_day(interval)
    while day >= start:
        yield day
        if day == start:
            return
        day -= ONE_DAY


# ---------------------------------------------------------------------------
# Month arithmetic
# ---------------------------------------------------------------------------


def last_day_of_month(year_value: int, month_value: int) -> date:
    return date(year_value, month_value, calendar.monthrange(year_value, month_value)[1])


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the end of shorter months."""
    return day + relativedelta(months=months)


def months_between(start: date, end: date) -> Iterator[tuple[int, int]]:
    """(year, month) pairs from the month of ``start`` to that of ``end``."""
    cursor = start.replace(day=1)
    while cursor <= end:
        yield cursor.year, cursor.month
        if (cursor.year, cursor.month) == (end.year, end.month):
            return
        cursor = add_months(cursor, 1)


def nth_weekday_of_month(
    year_value: int, month_value: int, weekday: DayOfWeek, n: int
) -> date | None:
    """The ``n``-th ``weekday`` of the month, or None if the month has fewer."""
    if not 1 <= n <= MAX_WEEKDAY_OCCURRENCE:
        raise InvalidSpecificationError("nth_weekday_of_month", "n", n)
    first = date(year_value, month_value, 1)
    offset = weekday - first.weekday()
    first_match = offset + (8 if offset < 0 else 1)
    day_value = (n - 1) * 7 + first_match
    if day_value > calendar.monthrange(year_value, month_value)[1]:
        return None
    return first.replace(day=day_value)


def day_of_month(year_value: int, month_value: int, day_value: int) -> date | None:
    """The date, or None when the month is too short (e.g. February 30)."""
    if day_value > calendar.monthrange(year_value, month_value)[1]:
        return None
    return date(year_value, month_value, day_value)
