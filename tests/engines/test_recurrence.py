"""
Tests for RecurrenceEngine.

Covers:
- Plain occurrences
- Occurrences moved onto business days
- Timelines of rules changing over time
- Upcoming and next occurrences relative to a clock
"""

from datetime import date

import pytest

from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain import date_specification as ds
from schedule_kernel.domain.business_calendar import BusinessDayShift
from schedule_kernel.domain.calendar_dates import DayOfWeek
from schedule_kernel.domain.interval import Interval
from schedule_kernel.domain.interval_map import IntervalMap
from schedule_kernel.exceptions import InvalidArgumentError, UnboundedIntervalError


class TestOccurrences:
    """Tests for occurrences()."""

    def test_thanksgivings(self, recurrence_engine, thanksgiving):
        interval = cal.inclusive(date(2002, 1, 1), date(2004, 12, 31))
        assert recurrence_engine.occurrences(thanksgiving, interval) == (
            date(2002, 11, 28),
            date(2003, 11, 27),
            date(2004, 11, 25),
        )

    def test_unbounded_interval_rejected(self, recurrence_engine, thanksgiving):
        with pytest.raises(UnboundedIntervalError):
            recurrence_engine.occurrences(thanksgiving, cal.ever_from(date(2005, 1, 1)))


class TestBusinessOccurrences:
    """Tests for business_occurrences()."""

    def test_weekend_paydays_move_back(self, recurrence_engine, weekday_calendar):
        interval = cal.inclusive(date(2005, 1, 1), date(2005, 3, 31))
        result = recurrence_engine.business_occurrences(
            ds.monthly_day(15), interval, weekday_calendar, BusinessDayShift.PREV
        )
        # 2005-01-15 is a Saturday
        assert result == (date(2005, 1, 14), date(2005, 2, 15), date(2005, 3, 15))

    def test_holiday_moves_forward(self, recurrence_engine, holiday_calendar, thanksgiving):
        result = recurrence_engine.business_occurrences(
            thanksgiving, cal.year(2005), holiday_calendar
        )
        assert result == (date(2005, 11, 25),)

    def test_shift_outside_interval_dropped(self, recurrence_engine, weekday_calendar):
        # 2005-12-25 is a Sunday; the next business day is outside the interval
        interval = cal.inclusive(date(2005, 12, 1), date(2005, 12, 25))
        result = recurrence_engine.business_occurrences(
            ds.annual_date(12, 25), interval, weekday_calendar, BusinessDayShift.NEXT
        )
        assert result == ()

    def test_collisions_collapse(self, recurrence_engine, weekday_calendar):
        weekend = ds.day_of_week(DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)
        interval = cal.inclusive(date(2005, 11, 26), date(2005, 11, 28))
        result = recurrence_engine.business_occurrences(weekend, interval, weekday_calendar)
        assert result == (date(2005, 11, 28),)


class TestTimelineOccurrences:
    """Tests for timeline_occurrences()."""

    def test_rule_change_mid_year(self, recurrence_engine):
        timeline: IntervalMap[date, ds.DateSpecification] = IntervalMap()
        timeline.put(cal.inclusive(date(2005, 1, 1), date(2005, 6, 30)), ds.monthly_day(1))
        timeline.put(cal.ever_from(date(2005, 7, 1)), ds.monthly_day(15))

        result = recurrence_engine.timeline_occurrences(timeline, cal.year(2005))

        assert result[:6] == tuple(date(2005, m, 1) for m in range(1, 7))
        assert result[6:] == tuple(date(2005, m, 15) for m in range(7, 13))

    def test_uncovered_days_never_match(self, recurrence_engine):
        timeline: IntervalMap[date, ds.DateSpecification] = IntervalMap()
        timeline.put(cal.month(2005, 3), ds.always())
        result = recurrence_engine.timeline_occurrences(
            timeline, cal.inclusive(date(2005, 2, 27), date(2005, 3, 2))
        )
        assert result == (date(2005, 3, 1), date(2005, 3, 2))

    def test_later_rule_overrides_earlier(self, recurrence_engine):
        timeline: IntervalMap[date, ds.DateSpecification] = IntervalMap()
        timeline.put(cal.year(2005), ds.monthly_day(1))
        timeline.put(cal.month(2005, 2), ds.never())
        result = recurrence_engine.timeline_occurrences(
            timeline, cal.inclusive(date(2005, 1, 1), date(2005, 3, 31))
        )
        assert result == (date(2005, 1, 1), date(2005, 3, 1))

    def test_unbounded_interval_rejected(self, recurrence_engine):
        with pytest.raises(UnboundedIntervalError):
            recurrence_engine.timeline_occurrences(IntervalMap(), Interval.all_values())


class TestClockRelative:
    """Tests for upcoming() and next_occurrence()."""

    def test_upcoming_uses_injected_clock(self, recurrence_engine, deterministic_clock):
        result = recurrence_engine.upcoming(ds.monthly_day(15), deterministic_clock, 31)
        assert result == (date(2024, 1, 15),)

    def test_upcoming_follows_clock_changes(self, recurrence_engine, deterministic_clock):
        deterministic_clock.set_date(date(2024, 1, 16))
        result = recurrence_engine.upcoming(ds.monthly_day(15), deterministic_clock, 31)
        assert result == (date(2024, 2, 15),)

    def test_upcoming_horizon_must_be_positive(self, recurrence_engine, deterministic_clock):
        with pytest.raises(InvalidArgumentError):
            recurrence_engine.upcoming(ds.always(), deterministic_clock, 0)

    def test_next_occurrence_is_strictly_after(self, recurrence_engine, thanksgiving):
        assert recurrence_engine.next_occurrence(
            thanksgiving, date(2005, 11, 24), 400
        ) == date(2006, 11, 23)
        assert recurrence_engine.next_occurrence(
            thanksgiving, date(2005, 11, 23), 400
        ) == date(2005, 11, 24)

    def test_next_occurrence_beyond_horizon(self, recurrence_engine, thanksgiving):
        assert recurrence_engine.next_occurrence(thanksgiving, date(2005, 11, 24), 30) is None
