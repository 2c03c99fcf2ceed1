"""
Clock -- Deterministic source of "today".

Responsibility:
    Provides an injectable clock interface so that engine code never calls
    ``date.today()`` directly. Anything that needs the current date (e.g.
    listing upcoming occurrences) receives a Clock instance explicitly.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - None; DeterministicClock only moves when told to.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta, tzinfo


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Callers that need the current date receive a Clock via their
        arguments or constructor. There is no process-wide default clock.

    Guarantees:
        - ``today()`` returns a ``date``.
        - ``now()`` returns a timezone-aware ``datetime``.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...

    def today(self) -> date:
        """Get the current calendar date in the clock's time zone."""
        return self.now().date()


class SystemClock(Clock):
    """
    Production clock that returns actual system time.

    Contract:
        The sole sanctioned I/O boundary for time in the kernel. The calendar
        date is taken in ``tz`` (UTC unless given).

    Non-goals:
        Not suitable for deterministic tests.
    """

    def __init__(self, tz: tzinfo = UTC):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """
    Test clock with a controlled date.

    Guarantees:
        - ``today()`` returns the same value on repeated calls until
          ``advance()`` or ``set_date()`` is called.
    """

    def __init__(self, fixed_date: date | None = None):
        """
        Initialize with an optional fixed date.

        Args:
            fixed_date: Date the clock reports. Defaults to 2024-01-01.
        """
        self._date = fixed_date or date(2024, 1, 1)

    def now(self) -> datetime:
        return datetime(self._date.year, self._date.month, self._date.day, 12, tzinfo=UTC)

    def today(self) -> date:
        return self._date

    def set_date(self, value: date) -> None:
        """Set the clock to a specific date."""
        self._date = value

    def advance(self, days: int = 1) -> None:
        """Advance the clock by whole days (negative moves it back)."""
        self._date += timedelta(days=days)
