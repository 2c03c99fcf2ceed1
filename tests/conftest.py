"""
Pytest fixtures for the schedule kernel test suite.

Provides:
- Deterministic clock
- Engines
- Business calendars with and without holidays
- Logging reset between tests
"""

from datetime import date

import pytest

from schedule_engines.proration import ProrationEngine
from schedule_engines.recurrence import RecurrenceEngine
from schedule_kernel.domain import date_specification as ds
from schedule_kernel.domain.business_calendar import BusinessCalendar
from schedule_kernel.domain.calendar_dates import DayOfWeek
from schedule_kernel.domain.clock import DeterministicClock
from schedule_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock fixed at 2024-01-01."""
    return DeterministicClock(date(2024, 1, 1))


@pytest.fixture
def proration_engine() -> ProrationEngine:
    return ProrationEngine()


@pytest.fixture
def recurrence_engine() -> RecurrenceEngine:
    return RecurrenceEngine()


@pytest.fixture
def thanksgiving() -> ds.DateSpecification:
    return ds.nth_weekday_of_month(11, DayOfWeek.THURSDAY, 4)


@pytest.fixture
def weekday_calendar() -> BusinessCalendar:
    """Saturday/Sunday weekend, no holidays."""
    return BusinessCalendar()


@pytest.fixture
def holiday_calendar(thanksgiving) -> BusinessCalendar:
    """Saturday/Sunday weekend plus New Year, Independence Day, Thanksgiving, Christmas."""
    return BusinessCalendar().with_holidays(
        ds.annual_date(1, 1),
        ds.annual_date(7, 4),
        thanksgiving,
        ds.annual_date(12, 25),
    )
