"""
Pure domain layer.

This module contains immutable value types and pure functions with NO
dependencies on:
- Configuration files
- The system clock (except SystemClock)
- I/O

Interval, Ratio, DateSpecification nodes and BusinessCalendar are immutable
and deterministic. IntervalMap is the one mutable container.
"""

from schedule_kernel.domain.business_calendar import BusinessCalendar, BusinessDayShift
from schedule_kernel.domain.calendar_dates import CalendarInterval, DayOfWeek
from schedule_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from schedule_kernel.domain.date_specification import (
    Always,
    And,
    AnnualDate,
    CalendarIntervalBound,
    DateSpecification,
    DayOfWeekSet,
    Fixed,
    MonthlyDay,
    MonthlyNthWeekday,
    Never,
    Not,
    NthWeekdayOfMonth,
    Occurrences,
    Or,
    and_,
    first_occurrence_in,
    is_satisfied_by,
    iterate_over,
    last_occurrence_in,
    not_,
    or_,
)
from schedule_kernel.domain.interval import Interval
from schedule_kernel.domain.interval_map import Binding, IntervalMap
from schedule_kernel.domain.interval_sequence import IntervalSequence
from schedule_kernel.domain.ratio import Ratio
from schedule_kernel.domain.rounding import Rounding, round_to_scale

__all__ = [
    # Intervals
    "Interval",
    "IntervalSequence",
    "IntervalMap",
    "Binding",
    # Calendar
    "CalendarInterval",
    "DayOfWeek",
    "BusinessCalendar",
    "BusinessDayShift",
    # Date specifications
    "DateSpecification",
    "Fixed",
    "DayOfWeekSet",
    "NthWeekdayOfMonth",
    "MonthlyNthWeekday",
    "AnnualDate",
    "MonthlyDay",
    "CalendarIntervalBound",
    "And",
    "Or",
    "Not",
    "Always",
    "Never",
    "Occurrences",
    "and_",
    "or_",
    "not_",
    "is_satisfied_by",
    "first_occurrence_in",
    "last_occurrence_in",
    "iterate_over",
    # Arithmetic
    "Ratio",
    "Rounding",
    "round_to_scale",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
