"""
DateSpecification -- Composable predicates over calendar dates.

Responsibility:
    Describes which calendar dates satisfy a recurrence rule ("every
    Monday, Wednesday and Friday in October, except the 12th") as an
    immutable tree of specification nodes, and answers three questions of
    any tree: does a date satisfy it, what is its first (or last)
    occurrence in a calendar interval, and which dates of an interval
    satisfy it, in order.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends on Interval and the calendar_dates helpers. Consumed by
    BusinessCalendar, the recurrence engine and the calendar-set compiler.

Design:
    The node kinds form a closed tagged union of frozen dataclasses. A single
    function, ``is_satisfied_by``, dispatches on the node kind with
    ``match``; nodes carry no evaluation logic of their own. Combinators are
    free functions (``and_``, ``or_``, ``not_``) with ``&``, ``|`` and ``~``
    as operator sugar.

Invariants enforced:
    IMMUTABLE_VALUES -- combinators return new nodes; operands are shared,
    never mutated.
    FINITE_SCANS -- iteration and first/last lookups reject calendar
    intervals unbounded on either side.

Failure modes:
    - MissingOperandError when a node or combinator is given None.
    - InvalidSpecificationError for a month outside 1..12, a day outside
      1..31 (or past the month's length), an occurrence outside 1..5, or an
      empty weekday set.
    - UnboundedIntervalError for scans over unbounded intervals.
    - No match is ``None`` / an empty sequence, never an exception.

Usage:
    from schedule_kernel.domain import calendar_dates as cal
    from schedule_kernel.domain.date_specification import (
        day_of_week, fixed, nth_weekday_of_month,
    )

    thanksgiving = nth_weekday_of_month(11, cal.DayOfWeek.THURSDAY, 4)
    thanksgiving.first_occurrence_in(cal.year(2005))   # date(2005, 11, 24)

    classes = day_of_week(cal.DayOfWeek.MONDAY, cal.DayOfWeek.FRIDAY)
    classes &= ~fixed(date(2005, 10, 14))
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date

from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain.calendar_dates import CalendarInterval, DayOfWeek
from schedule_kernel.exceptions import (
    InvalidSpecificationError,
    MissingArgumentError,
    MissingOperandError,
)

# Longest month in a leap year, per month number.
_MAX_DAY_IN_MONTH = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class DateSpecification:
    """
    Common base of every specification node.

    Contract:
        Provides operator sugar and method forms that delegate to the
        module-level functions. Evaluation itself lives in
        ``is_satisfied_by``.
    """

    __slots__ = ()

    def __and__(self, other: DateSpecification) -> DateSpecification:
        return and_(self, other)

    def __or__(self, other: DateSpecification) -> DateSpecification:
        return or_(self, other)

    def __invert__(self) -> DateSpecification:
        return not_(self)

    def and_(self, other: DateSpecification) -> DateSpecification:
        return and_(self, other)

    def or_(self, other: DateSpecification) -> DateSpecification:
        return or_(self, other)

    def not_(self) -> DateSpecification:
        return not_(self)

    def is_satisfied_by(self, day: date) -> bool:
        return is_satisfied_by(self, day)

    def first_occurrence_in(self, interval: CalendarInterval) -> date | None:
        return first_occurrence_in(self, interval)

    def last_occurrence_in(self, interval: CalendarInterval) -> date | None:
        return last_occurrence_in(self, interval)

    def iterate_over(self, interval: CalendarInterval) -> Occurrences:
        return iterate_over(self, interval)


def _require(value: object, kind: str, field: str) -> None:
    if value is None:
        raise MissingOperandError(kind, field)


def _check_month(kind: str, month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidSpecificationError(kind, "month", month)


def _check_occurrence(kind: str, n: int) -> None:
    if not 1 <= n <= cal.MAX_WEEKDAY_OCCURRENCE:
        raise InvalidSpecificationError(kind, "n", n)


def _to_weekday(kind: str, weekday: DayOfWeek | int) -> DayOfWeek:
    try:
        return DayOfWeek(weekday)
    except ValueError as exc:
        raise InvalidSpecificationError(kind, "weekday", weekday) from exc


# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Fixed(DateSpecification):
    """Satisfied by exactly one date."""

    day: date

    def __post_init__(self) -> None:
        _require(self.day, "Fixed", "day")


@dataclass(frozen=True, slots=True)
class DayOfWeekSet(DateSpecification):
    """Satisfied by every date falling on one of ``days``."""

    days: frozenset[DayOfWeek]

    def __post_init__(self) -> None:
        _require(self.days, "DayOfWeekSet", "days")
        normalized = frozenset(_to_weekday("DayOfWeekSet", d) for d in self.days)
        if not normalized:
            raise InvalidSpecificationError("DayOfWeekSet", "days", self.days)
        object.__setattr__(self, "days", normalized)


@dataclass(frozen=True, slots=True)
class NthWeekdayOfMonth(DateSpecification):
    """The ``n``-th ``weekday`` of ``month``, every year (e.g. Thanksgiving)."""

    month: int
    weekday: DayOfWeek
    n: int

    def __post_init__(self) -> None:
        _check_month("NthWeekdayOfMonth", self.month)
        object.__setattr__(self, "weekday", _to_weekday("NthWeekdayOfMonth", self.weekday))
        _check_occurrence("NthWeekdayOfMonth", self.n)


@dataclass(frozen=True, slots=True)
class MonthlyNthWeekday(DateSpecification):
    """The ``n``-th ``weekday`` of every month."""

    weekday: DayOfWeek
    n: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekday", _to_weekday("MonthlyNthWeekday", self.weekday))
        _check_occurrence("MonthlyNthWeekday", self.n)


@dataclass(frozen=True, slots=True)
class AnnualDate(DateSpecification):
    """The same month and day every year; February 29 matches leap years only."""

    month: int
    day: int

    def __post_init__(self) -> None:
        _check_month("AnnualDate", self.month)
        if not 1 <= self.day <= _MAX_DAY_IN_MONTH[self.month - 1]:
            raise InvalidSpecificationError("AnnualDate", "day", self.day)


@dataclass(frozen=True, slots=True)
class MonthlyDay(DateSpecification):
    """The same day of every month; months too short for it are skipped."""

    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.day <= 31:
            raise InvalidSpecificationError("MonthlyDay", "day", self.day)


@dataclass(frozen=True, slots=True)
class CalendarIntervalBound(DateSpecification):
    """Satisfied by every date included by ``interval``."""

    interval: CalendarInterval

    def __post_init__(self) -> None:
        _require(self.interval, "CalendarIntervalBound", "interval")


@dataclass(frozen=True, slots=True)
class And(DateSpecification):
    left: DateSpecification
    right: DateSpecification

    def __post_init__(self) -> None:
        _require(self.left, "And", "left")
        _require(self.right, "And", "right")


@dataclass(frozen=True, slots=True)
class Or(DateSpecification):
    left: DateSpecification
    right: DateSpecification

    def __post_init__(self) -> None:
        _require(self.left, "Or", "left")
        _require(self.right, "Or", "right")


@dataclass(frozen=True, slots=True)
class Not(DateSpecification):
    spec: DateSpecification

    def __post_init__(self) -> None:
        _require(self.spec, "Not", "spec")


@dataclass(frozen=True, slots=True)
class Always(DateSpecification):
    """Satisfied by every date."""


@dataclass(frozen=True, slots=True)
class Never(DateSpecification):
    """Satisfied by no date."""


# ---------------------------------------------------------------------------
# Constructors and combinators
# ---------------------------------------------------------------------------


def fixed(day: date) -> Fixed:
    return Fixed(day)


def day_of_week(*days: DayOfWeek | int) -> DayOfWeekSet:
    return DayOfWeekSet(frozenset(days))


def nth_weekday_of_month(month: int, weekday: DayOfWeek | int, n: int) -> NthWeekdayOfMonth:
    return NthWeekdayOfMonth(month, weekday, n)  # type: ignore[arg-type]


def monthly_nth_weekday(weekday: DayOfWeek | int, n: int) -> MonthlyNthWeekday:
    return MonthlyNthWeekday(weekday, n)  # type: ignore[arg-type]


def annual_date(month: int, day: int) -> AnnualDate:
    return AnnualDate(month, day)


def monthly_day(day: int) -> MonthlyDay:
    return MonthlyDay(day)


def calendar_interval(interval: CalendarInterval) -> CalendarIntervalBound:
    return CalendarIntervalBound(interval)


def always() -> Always:
    return Always()


def never() -> Never:
    return Never()


def and_(left: DateSpecification, right: DateSpecification) -> And:
    """Satisfied when both operands are."""
    return And(left, right)


def or_(left: DateSpecification, right: DateSpecification) -> Or:
    """Satisfied when either operand is."""
    return Or(left, right)


def not_(spec: DateSpecification) -> DateSpecification:
    """Negation; negating a negation returns the original operand."""
    _require(spec, "Not", "spec")
    if isinstance(spec, Not):
        return spec.spec
    return Not(spec)


def any_of(specs: Iterable[DateSpecification]) -> DateSpecification:
    """Left-folded ``or_`` over ``specs``; ``Never`` when there are none."""
    result: DateSpecification | None = None
    for spec in specs:
        result = spec if result is None else or_(result, spec)
    return Never() if result is None else result


def all_of(specs: Iterable[DateSpecification]) -> DateSpecification:
    """Left-folded ``and_`` over ``specs``; ``Always`` when there are none."""
    result: DateSpecification | None = None
    for spec in specs:
        result = spec if result is None else and_(result, spec)
    return Always() if result is None else result


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def is_satisfied_by(spec: DateSpecification, day: date) -> bool:
    """True when ``day`` satisfies ``spec``.

    Both operands of ``And`` and ``Or`` are always evaluated.
    """
    if day is None:
        raise MissingArgumentError("day", "is_satisfied_by")
    match spec:
        case Fixed(day=fixed_day):
            return day == fixed_day
        case DayOfWeekSet(days=days):
            return DayOfWeek.of(day) in days
        case NthWeekdayOfMonth(month=month, weekday=weekday, n=n):
            return day.month == month and cal.nth_weekday_of_month(
                day.year, month, weekday, n
            ) == day
        case MonthlyNthWeekday(weekday=weekday, n=n):
            return cal.nth_weekday_of_month(day.year, day.month, weekday, n) == day
        case AnnualDate(month=month, day=day_of_month):
            return day.month == month and day.day == day_of_month
        case MonthlyDay(day=day_of_month):
            return day.day == day_of_month
        case CalendarIntervalBound(interval=interval):
            return interval.includes(day)
        case And(left=left, right=right):
            left_ok = is_satisfied_by(left, day)
            right_ok = is_satisfied_by(right, day)
            return left_ok and right_ok
        case Or(left=left, right=right):
            left_ok = is_satisfied_by(left, day)
            right_ok = is_satisfied_by(right, day)
            return left_ok or right_ok
        case Not(spec=inner):
            return not is_satisfied_by(inner, day)
        case Always():
            return True
        case Never():
            return False
        case _:
            raise InvalidSpecificationError(type(spec).__name__, "kind", spec)


# ---------------------------------------------------------------------------
# Occurrences
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Occurrences:
    """
    Dates of a bounded calendar interval that satisfy a specification.

    Contract:
        Restartable: every ``iter()`` starts a fresh ascending pass, so the
        same object can be consumed any number of times. Lazy: dates are
        produced on demand.

    Guarantees:
        - Ascending, without duplicates.
        - The first element equals ``first_occurrence_in`` for the same
          specification and interval.
    """

    specification: DateSpecification
    interval: CalendarInterval

    def __post_init__(self) -> None:
        _require(self.specification, "Occurrences", "specification")
        if self.interval is None:
            raise MissingArgumentError("interval", "iterate_over")
        cal.require_bounded(self.interval, "iterate_over")

    def __iter__(self) -> Iterator[date]:
        for day in _candidates(self.specification, self.interval):
            if is_satisfied_by(self.specification, day):
                yield day

    def first(self) -> date | None:
        return next(iter(self), None)

    def to_tuple(self) -> tuple[date, ...]:
        return tuple(self)


def iterate_over(spec: DateSpecification, interval: CalendarInterval) -> Occurrences:
    """Restartable ascending sequence of matching dates in ``interval``."""
    return Occurrences(spec, interval)


def first_occurrence_in(spec: DateSpecification, interval: CalendarInterval) -> date | None:
    """Earliest date of ``interval`` satisfying ``spec``, or None."""
    return Occurrences(spec, interval).first()


def last_occurrence_in(spec: DateSpecification, interval: CalendarInterval) -> date | None:
    """Latest date of ``interval`` satisfying ``spec``, or None."""
    occurrences = Occurrences(spec, interval)
    if _is_sparse(spec):
        last = None
        for last in occurrences:
            pass
        return last
    for day in cal.days_in_reverse(interval):
        if is_satisfied_by(spec, day):
            return day
    return None


def _is_sparse(spec: DateSpecification) -> bool:
    """True when ``_candidates`` jumps between dates instead of scanning."""
    match spec:
        case Fixed() | Never() | NthWeekdayOfMonth() | AnnualDate():
            return True
        case MonthlyDay() | MonthlyNthWeekday():
            return True
        case And(left=left, right=right):
            return _is_sparse(left) or _is_sparse(right)
        case Or(left=left, right=right):
            return _is_sparse(left) and _is_sparse(right)
        case _:
            return False


def _candidates(spec: DateSpecification, interval: CalendarInterval) -> Iterator[date]:
    """Ascending superset of the matching dates of ``interval``.

    Annual and monthly kinds jump straight to their candidate dates; every
    other kind falls back to a day-by-day scan.
    """
    if interval.is_empty():
        return
    match spec:
        case Fixed(day=day):
            if interval.includes(day):
                yield day
        case Never():
            return
        case CalendarIntervalBound(interval=bound):
            yield from cal.days_in(interval.intersection(bound))
        case NthWeekdayOfMonth(month=month, weekday=weekday, n=n):
            for year_value in _years(interval):
                day = cal.nth_weekday_of_month(year_value, month, weekday, n)
                if day is not None and interval.includes(day):
                    yield day
        case AnnualDate(month=month, day=day_of_month):
            for year_value in _years(interval):
                day = cal.day_of_month(year_value, month, day_of_month)
                if day is not None and interval.includes(day):
                    yield day
        case MonthlyNthWeekday(weekday=weekday, n=n):
            for year_value, month in _months(interval):
                day = cal.nth_weekday_of_month(year_value, month, weekday, n)
                if day is not None and interval.includes(day):
                    yield day
        case MonthlyDay(day=day_of_month):
            for year_value, month in _months(interval):
                day = cal.day_of_month(year_value, month, day_of_month)
                if day is not None and interval.includes(day):
                    yield day
        case And(left=left, right=right) if _is_sparse(left) or _is_sparse(right):
            yield from _candidates(left if _is_sparse(left) else right, interval)
        case Or(left=left, right=right) if _is_sparse(left) and _is_sparse(right):
            previous = None
            for day in heapq.merge(_candidates(left, interval), _candidates(right, interval)):
                if day != previous:
                    yield day
                previous = day
        case _:
            yield from cal.days_in(interval)


def _years(interval: CalendarInterval) -> range:
    start = cal.first_day(interval)
    end = cal.last_day(interval)
    return range(start.year, end.year + 1)


def _months(interval: CalendarInterval) -> Iterator[tuple[int, int]]:
    return cal.months_between(cal.first_day(interval), cal.last_day(interval))
