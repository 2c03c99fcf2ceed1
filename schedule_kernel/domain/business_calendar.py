"""
BusinessCalendar -- Weekends plus holiday specification.

Responsibility:
    Decides whether a date is a business day and walks the calendar in
    business days: counting them over an interval, adding or subtracting
    them, and shifting a date onto the nearest business day.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Holidays are a DateSpecification, so annual rules (e.g. the fourth
    Thursday of November) and one-off dates compose the same way.

Invariants enforced:
    IMMUTABLE_VALUES -- ``with_holidays`` returns a new calendar.
    FINITE_SCANS -- every forward/backward walk gives up after a fixed
    horizon instead of looping forever.

Failure modes:
    - InvalidArgumentError for a negative business-day count, or a weekend
      set covering the whole week.
    - NoBusinessDayError when no business day exists within the horizon
      (e.g. a holiday specification of ``Always``).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, unique
from itertools import islice

from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain.calendar_dates import CalendarInterval, DayOfWeek
from schedule_kernel.domain.date_specification import (
    DateSpecification,
    Fixed,
    Never,
    any_of,
    is_satisfied_by,
    or_,
)
from schedule_kernel.exceptions import (
    InvalidArgumentError,
    MissingArgumentError,
    NoBusinessDayError,
)

SCAN_HORIZON_DAYS = 366 * 10


@unique
class BusinessDayShift(str, Enum):
    """Direction in which a non-business day moves."""

    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True, slots=True)
class BusinessCalendar:
    """
    Business-day rules: a weekend set and a holiday specification.

    Contract:
        A date is a business day when it is neither a weekend day nor a
        holiday. Weekend defaults to Saturday and Sunday; holidays default
        to ``Never``.

    Guarantees:
        - Immutable and shareable; adding holidays returns a new calendar.
        - Forward and backward walks terminate (bounded horizon).

    Non-goals:
        - Does NOT know about time zones or business hours.
    """

    holidays: DateSpecification = field(default_factory=Never)
    weekend: frozenset[DayOfWeek] = cal.WEEKEND

    def __post_init__(self) -> None:
        if self.holidays is None:
            raise MissingArgumentError("holidays", "BusinessCalendar")
        weekend = frozenset(DayOfWeek(d) for d in self.weekend)
        if len(weekend) == len(DayOfWeek):
            raise InvalidArgumentError("weekend", sorted(weekend), "covers every day")
        object.__setattr__(self, "weekend", weekend)

    def with_holidays(self, *holidays: DateSpecification | date) -> BusinessCalendar:
        """New calendar whose holidays also include ``holidays``."""
        added = any_of(h if isinstance(h, DateSpecification) else Fixed(h) for h in holidays)
        if isinstance(added, Never):
            return self
        combined = added if isinstance(self.holidays, Never) else or_(self.holidays, added)
        return BusinessCalendar(holidays=combined, weekend=self.weekend)

    # ------------------------------------------------------------------
    # Day tests
    # ------------------------------------------------------------------

    def is_weekend(self, day: date) -> bool:
        if day is None:
            raise MissingArgumentError("day", "BusinessCalendar.is_weekend")
        return DayOfWeek.of(day) in self.weekend

    def is_holiday(self, day: date) -> bool:
        return is_satisfied_by(self.holidays, day)

    def is_business_day(self, day: date) -> bool:
        return not self.is_weekend(day) and not self.is_holiday(day)

    # ------------------------------------------------------------------
    # Iteration and counting
    # ------------------------------------------------------------------

    def business_days_only(self, days: Iterable[date]) -> Iterator[date]:
        """Filter an iterable of dates down to business days, lazily."""
        return (day for day in days if self.is_business_day(day))

    def business_days_in(self, interval: CalendarInterval) -> Iterator[date]:
        cal.require_bounded(interval, "business_days_in")
        return self.business_days_only(cal.days_in(interval))

    def elapsed_business_days(self, interval: CalendarInterval) -> int:
        return sum(1 for _ in self.business_days_in(interval))

    # ------------------------------------------------------------------
    # Shifting
    # ------------------------------------------------------------------

    def plus_business_days(self, start: date, count: int) -> date:
        """The ``count``-th business day after ``start``.

        A count of 0 returns ``start`` when it is a business day, otherwise
        the next business day.
        """
        return self._walk(start, count, cal.days_in(cal.ever_from(start)), "after")

    def minus_business_days(self, start: date, count: int) -> date:
        """The ``count``-th business day before ``start`` (0: on or before)."""
        return self._walk(
            start, count, cal.days_in_reverse(cal.ever_preceding(start)), "before"
        )

    def nearest_next_business_day(self, day: date) -> date:
        return self.plus_business_days(day, 0)

    def nearest_prev_business_day(self, day: date) -> date:
        return self.minus_business_days(day, 0)

    def next_business_day(self, day: date) -> date:
        """Strictly after ``day``."""
        return self.plus_business_days(day, 1 if self.is_business_day(day) else 0)

    def prev_business_day(self, day: date) -> date:
        """Strictly before ``day``."""
        return self.minus_business_days(day, 1 if self.is_business_day(day) else 0)

    def shift(self, day: date, direction: BusinessDayShift) -> date:
        """Move a non-business day onto the nearest business day."""
        if direction is BusinessDayShift.NEXT:
            return self.nearest_next_business_day(day)
        return self.nearest_prev_business_day(day)

    def _walk(self, start: date, count: int, days: Iterator[date], direction: str) -> date:
        if start is None:
            raise MissingArgumentError("start", f"business days {direction}")
        if count < 0:
            raise InvalidArgumentError("count", count, "negative business-day counts are not supported")
        horizon = islice(days, SCAN_HORIZON_DAYS * (count + 1))
        business_days = self.business_days_only(horizon)
        result = next(islice(business_days, count, None), None)
        if result is None:
            raise NoBusinessDayError(start, direction, SCAN_HORIZON_DAYS * (count + 1))
        return result
