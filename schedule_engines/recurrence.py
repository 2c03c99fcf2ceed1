"""
Module: schedule_engines.recurrence
Responsibility:
    Materialise the dates a recurrence rule produces: plain occurrences in a
    calendar interval, occurrences moved onto business days, occurrences
    under a timeline of rules that change over time, and upcoming
    occurrences relative to an injected clock.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes DateSpecification, BusinessCalendar, IntervalMap and Clock from
    schedule_kernel. The clock is always an argument; the engine never reads
    the system time itself.

Invariants enforced:
    - FINITE_SCANS: every operation runs over a bounded calendar interval.
    - Determinism: results are ascending tuples without duplicates.

Failure modes:
    - UnboundedIntervalError for intervals unbounded on either side.
    - InvalidArgumentError for a horizon shorter than one day.
    - NoBusinessDayError propagated from the business calendar.

Usage:
    from schedule_engines.recurrence import RecurrenceEngine

    engine = RecurrenceEngine()
    paydays = engine.business_occurrences(
        monthly_day(15), cal.year(2024), calendar, BusinessDayShift.PREV,
    )
"""

from __future__ import annotations

from datetime import date, timedelta

from schedule_engines.tracer import traced_engine
from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain.business_calendar import BusinessCalendar, BusinessDayShift
from schedule_kernel.domain.calendar_dates import CalendarInterval
from schedule_kernel.domain.clock import Clock
from schedule_kernel.domain.date_specification import (
    DateSpecification,
    iterate_over,
)
from schedule_kernel.domain.interval_map import IntervalMap
from schedule_kernel.exceptions import InvalidArgumentError
from schedule_kernel.logging_config import get_logger

logger = get_logger("engines.recurrence")


class RecurrenceEngine:
    """
    Expands date specifications into concrete dates.

    Contract:
        Pure functions; every result is an ascending tuple of dates.
    Non-goals:
        - Does not persist schedules or remember previous expansions.
    """

    @traced_engine("recurrence", "1.0", fingerprint_fields=("spec", "interval"))
    def occurrences(
        self,
        spec: DateSpecification,
        interval: CalendarInterval,
    ) -> tuple[date, ...]:
        """All dates of ``interval`` satisfying ``spec``."""
        result = tuple(iterate_over(spec, interval))
        logger.debug(
            "recurrence_expanded",
            extra={"interval": str(interval), "occurrence_count": len(result)},
        )
        return result

    @traced_engine(
        "recurrence", "1.0", fingerprint_fields=("spec", "interval", "shift")
    )
    def business_occurrences(
        self,
        spec: DateSpecification,
        interval: CalendarInterval,
        calendar: BusinessCalendar,
        shift: BusinessDayShift = BusinessDayShift.NEXT,
    ) -> tuple[date, ...]:
        """Occurrences moved onto business days.

        Each occurrence falling on a weekend or holiday moves to the nearest
        business day in the ``shift`` direction. Shifted dates outside
        ``interval`` are dropped; two occurrences landing on the same
        business day yield that day once.
        """
        shifted: set[date] = set()
        moved = 0
        for day in iterate_over(spec, interval):
            business_day = calendar.shift(day, shift)
            if business_day != day:
                moved += 1
            if not interval.includes(business_day):
                continue
            shifted.add(business_day)
        result = tuple(sorted(shifted))
        logger.info(
            "recurrence_business_shifted",
            extra={
                "interval": str(interval),
                "shift": shift.value,
                "occurrence_count": len(result),
                "moved_count": moved,
            },
        )
        return result

    @traced_engine("recurrence", "1.0", fingerprint_fields=("interval",))
    def timeline_occurrences(
        self,
        timeline: IntervalMap[date, DateSpecification],
        interval: CalendarInterval,
    ) -> tuple[date, ...]:
        """Dates satisfying whichever specification is in force on each day.

        Days of ``interval`` not covered by any binding of ``timeline``
        never match.
        """
        cal.require_bounded(interval, "timeline_occurrences")
        result: list[date] = []
        for binding in timeline:
            window = binding.interval.intersection(interval)
            if window.is_empty():
                continue
            result.extend(iterate_over(binding.value, window))
        logger.debug(
            "recurrence_timeline_expanded",
            extra={
                "interval": str(interval),
                "binding_count": len(timeline),
                "occurrence_count": len(result),
            },
        )
        return tuple(result)

    def upcoming(
        self,
        spec: DateSpecification,
        clock: Clock,
        horizon_days: int,
    ) -> tuple[date, ...]:
        """Occurrences from today through ``horizon_days - 1`` days ahead."""
        if horizon_days < 1:
            raise InvalidArgumentError("horizon_days", horizon_days, "must be at least 1")
        today = clock.today()
        window = cal.inclusive(today, today + timedelta(days=horizon_days - 1))
        return self.occurrences(spec, window)

    def next_occurrence(
        self,
        spec: DateSpecification,
        after: date,
        horizon_days: int,
    ) -> date | None:
        """First occurrence strictly after ``after`` within the horizon, or None."""
        if horizon_days < 1:
            raise InvalidArgumentError("horizon_days", horizon_days, "must be at least 1")
        window = cal.inclusive(after + cal.ONE_DAY, after + timedelta(days=horizon_days))
        return iterate_over(spec, window).first()
