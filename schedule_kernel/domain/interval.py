"""
Interval -- Generic range over a totally ordered value.

Responsibility:
    Represents a contiguous range with independently open, closed or
    unbounded endpoints, and answers relational questions about pairs of
    ranges (intersection, gap, abutment, coverage, complement) without
    enumerating the values they contain.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Leaf module: imported by IntervalMap, IntervalSequence, the calendar
    helpers and the date specification algebra.

Invariants enforced:
    ORDERED_LIMITS -- a bounded interval never has lower > upper
    IMMUTABLE_VALUES -- frozen dataclass; every operation returns a new value

Failure modes:
    - InvalidIntervalError when lower limit > upper limit.
    - EmptyIntervalError from ``over(..., allow_empty=False)`` on an empty
      result.
    - MissingArgumentError when ``includes(None)`` is asked.
    - DisjointIntervalsError from ``union`` of non-touching intervals.

Usage:
    from schedule_kernel.domain.interval import Interval

    october = Interval.closed(date(2005, 10, 1), date(2005, 10, 31))
    if october.includes(some_day):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from schedule_kernel.exceptions import (
    DisjointIntervalsError,
    EmptyIntervalError,
    InvalidIntervalError,
    MissingArgumentError,
)

T = TypeVar("T")


class _Nowhere:
    """Anchor for an empty interval that has no natural limit value."""

    __slots__ = ()

    def __lt__(self, other: object) -> bool:
        return False

    def __gt__(self, other: object) -> bool:
        return False

    def __repr__(self) -> str:
        return "nowhere"


_NOWHERE = _Nowhere()


@dataclass(frozen=True, slots=True, eq=False)
class Interval(Generic[T]):
    """
    Contiguous range between two optional limits.

    Contract:
        ``None`` as a limit means unbounded on that side. The inclusion flag
        of an unbounded side is normalized to False. Equal limits with both
        sides included denote a single value; equal limits with either side
        excluded denote the empty set.

    Guarantees:
        - Immutable and hashable.
        - All empty intervals compare equal to each other.
        - Unbounded limits are never compared against values.

    Non-goals:
        - Does NOT enumerate members (the value type need not be discrete).
        - Does NOT coalesce a collection of intervals (see IntervalSequence).
    """

    lower_limit: T | None
    lower_included: bool
    upper_limit: T | None
    upper_included: bool

    def __post_init__(self) -> None:
        if self.lower_limit is None and self.lower_included:
            object.__setattr__(self, "lower_included", False)
        if self.upper_limit is None and self.upper_included:
            object.__setattr__(self, "upper_included", False)
        # INVARIANT: ORDERED_LIMITS
        if (
            self.lower_limit is not None
            and self.upper_limit is not None
            and self.lower_limit > self.upper_limit
        ):
            raise InvalidIntervalError(self.lower_limit, self.upper_limit)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def closed(cls, lower: T | None, upper: T | None) -> Interval[T]:
        """Both limits included: ``[lower, upper]``."""
        return cls(lower, True, upper, True)

    @classmethod
    def open(cls, lower: T | None, upper: T | None) -> Interval[T]:
        """Both limits excluded: ``(lower, upper)``."""
        return cls(lower, False, upper, False)

    @classmethod
    def over(
        cls,
        lower: T | None,
        lower_included: bool,
        upper: T | None,
        upper_included: bool,
        *,
        allow_empty: bool = True,
    ) -> Interval[T]:
        """General constructor; optionally rejects an empty result."""
        interval = cls(lower, lower_included, upper, upper_included)
        if not allow_empty and interval.is_empty():
            raise EmptyIntervalError(lower)
        return interval

    @classmethod
    def single_element(cls, value: T) -> Interval[T]:
        return cls(value, True, value, True)

    @classmethod
    def under(cls, upper: T) -> Interval[T]:
        """Everything strictly below ``upper``."""
        return cls(None, False, upper, False)

    @classmethod
    def up_to(cls, upper: T) -> Interval[T]:
        """Everything below ``upper``, inclusive."""
        return cls(None, False, upper, True)

    @classmethod
    def more_than(cls, lower: T) -> Interval[T]:
        """Everything strictly above ``lower``."""
        return cls(lower, False, None, False)

    @classmethod
    def and_more(cls, lower: T) -> Interval[T]:
        """Everything above ``lower``, inclusive."""
        return cls(lower, True, None, False)

    @classmethod
    def all_values(cls) -> Interval[Any]:
        return cls(None, False, None, False)

    @classmethod
    def empty(cls, at: T | None = None) -> Interval[T]:
        """The empty interval, anchored at ``at`` when given."""
        anchor = _NOWHERE if at is None else at
        return cls(anchor, False, anchor, False)

    # ------------------------------------------------------------------
    # Basic queries
    # ------------------------------------------------------------------

    def lower_bounded(self) -> bool:
        return self.lower_limit is not None

    def upper_bounded(self) -> bool:
        return self.upper_limit is not None

    def is_empty(self) -> bool:
        if self.lower_limit is None or self.upper_limit is None:
            return False
        return self.lower_limit == self.upper_limit and not (
            self.lower_included and self.upper_included
        )

    def is_single_element(self) -> bool:
        if self.lower_limit is None or self.upper_limit is None:
            return False
        return (
            self.lower_limit == self.upper_limit
            and self.lower_included
            and self.upper_included
        )

    def includes(self, value: T) -> bool:
        """True if ``value`` lies within both limits."""
        if value is None:
            raise MissingArgumentError("value", "Interval.includes")
        return self._admits_above_lower(value) and self._admits_below_upper(value)

    def _admits_above_lower(self, value: T) -> bool:
        if self.lower_limit is None:
            return True
        if value > self.lower_limit:
            return True
        return value == self.lower_limit and self.lower_included

    def _admits_below_upper(self, value: T) -> bool:
        if self.upper_limit is None:
            return True
        if value < self.upper_limit:
            return True
        return value == self.upper_limit and self.upper_included

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def _tighter_lower(self, other: Interval[T]) -> tuple[T | None, bool]:
        if self.lower_limit is None:
            return other.lower_limit, other.lower_included
        if other.lower_limit is None:
            return self.lower_limit, self.lower_included
        if self.lower_limit > other.lower_limit:
            return self.lower_limit, self.lower_included
        if other.lower_limit > self.lower_limit:
            return other.lower_limit, other.lower_included
        return self.lower_limit, self.lower_included and other.lower_included

    def _tighter_upper(self, other: Interval[T]) -> tuple[T | None, bool]:
        if self.upper_limit is None:
            return other.upper_limit, other.upper_included
        if other.upper_limit is None:
            return self.upper_limit, self.upper_included
        if self.upper_limit < other.upper_limit:
            return self.upper_limit, self.upper_included
        if other.upper_limit < self.upper_limit:
            return other.upper_limit, other.upper_included
        return self.upper_limit, self.upper_included and other.upper_included

    def _looser_lower(self, other: Interval[T]) -> tuple[T | None, bool]:
        if self.lower_limit is None or other.lower_limit is None:
            return None, False
        if self.lower_limit < other.lower_limit:
            return self.lower_limit, self.lower_included
        if other.lower_limit < self.lower_limit:
            return other.lower_limit, other.lower_included
        return self.lower_limit, self.lower_included or other.lower_included

    def _looser_upper(self, other: Interval[T]) -> tuple[T | None, bool]:
        if self.upper_limit is None or other.upper_limit is None:
            return None, False
        if self.upper_limit > other.upper_limit:
            return self.upper_limit, self.upper_included
        if other.upper_limit > self.upper_limit:
            return other.upper_limit, other.upper_included
        return self.upper_limit, self.upper_included or other.upper_included

    def intersection(self, other: Interval[T]) -> Interval[T]:
        """Largest interval included by both; empty when they are disjoint."""
        if self.is_empty() or other.is_empty():
            return Interval.empty(_anchor_of(self, other))
        lower, lower_included = self._tighter_lower(other)
        upper, upper_included = self._tighter_upper(other)
        if lower is not None and upper is not None and lower > upper:
            return Interval.empty(lower)
        return Interval(lower, lower_included, upper, upper_included)

    def intersects(self, other: Interval[T]) -> bool:
        """True iff some value is included by both intervals."""
        return not self.intersection(other).is_empty()

    def gap(self, other: Interval[T]) -> Interval[T]:
        """The values strictly between two disjoint intervals.

        Empty when the intervals intersect or abut.
        """
        if self.is_empty() or other.is_empty() or self.intersects(other):
            return Interval.empty(_anchor_of(self, other))
        if (
            self.upper_limit is not None
            and other.lower_limit is not None
            and self.upper_limit <= other.lower_limit
        ):
            left, right = self, other
        else:
            left, right = other, self
        return Interval(
            left.upper_limit,
            not left.upper_included,
            right.lower_limit,
            not right.lower_included,
        )

    def abuts(self, other: Interval[T]) -> bool:
        """True when the intervals touch at one point without overlapping."""
        if self.is_empty() or other.is_empty() or self.intersects(other):
            return False
        return self.gap(other).is_empty()

    def covers(self, other: Interval[T]) -> bool:
        """True when every bound of ``other`` lies on or inside this interval."""
        if self.lower_limit is None:
            lower_ok = True
        elif other.lower_limit is None:
            lower_ok = False
        elif self.lower_limit < other.lower_limit:
            lower_ok = True
        elif self.lower_limit == other.lower_limit:
            lower_ok = self.lower_included or not other.lower_included
        else:
            lower_ok = False

        if self.upper_limit is None:
            upper_ok = True
        elif other.upper_limit is None:
            upper_ok = False
        elif self.upper_limit > other.upper_limit:
            upper_ok = True
        elif self.upper_limit == other.upper_limit:
            upper_ok = self.upper_included or not other.upper_included
        else:
            upper_ok = False

        return lower_ok and upper_ok

    def complement_relative_to(self, other: Interval[T]) -> tuple[Interval[T], ...]:
        """The zero, one or two pieces of ``other`` outside this interval."""
        if self.is_empty() or not self.intersects(other):
            return () if other.is_empty() else (other,)
        pieces: list[Interval[T]] = []
        if self.lower_limit is not None:
            left = other.intersection(
                Interval(None, False, self.lower_limit, not self.lower_included)
            )
            if not left.is_empty():
                pieces.append(left)
        if self.upper_limit is not None:
            right = other.intersection(
                Interval(self.upper_limit, not self.upper_included, None, False)
            )
            if not right.is_empty():
                pieces.append(right)
        return tuple(pieces)

    def union(self, other: Interval[T]) -> Interval[T]:
        """Single interval spanning two intersecting or abutting intervals."""
        if other.is_empty():
            return self
        if self.is_empty():
            return other
        if not (self.intersects(other) or self.abuts(other)):
            raise DisjointIntervalsError(str(self), str(other))
        return self.hull(other)

    def hull(self, other: Interval[T]) -> Interval[T]:
        """Smallest interval covering both, including any gap between them."""
        if other.is_empty():
            return self
        if self.is_empty():
            return other
        lower, lower_included = self._looser_lower(other)
        upper, upper_included = self._looser_upper(other)
        return Interval(lower, lower_included, upper, upper_included)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def compare(self, other: Interval[T]) -> int:
        """Order by lower bound, then by upper bound.

        Unbounded-below sorts first and unbounded-above sorts last. On equal
        limits an excluded bound sorts before an included one.
        """
        if self.lower_limit is None or other.lower_limit is None:
            lower = (other.lower_limit is None) - (self.lower_limit is None)
        elif self.lower_limit != other.lower_limit:
            lower = -1 if self.lower_limit < other.lower_limit else 1
        else:
            lower = self.lower_included - other.lower_included
        if lower:
            return lower

        if self.upper_limit is None or other.upper_limit is None:
            return (self.upper_limit is None) - (other.upper_limit is None)
        if self.upper_limit != other.upper_limit:
            return -1 if self.upper_limit < other.upper_limit else 1
        return self.upper_included - other.upper_included

    def __lt__(self, other: Interval[T]) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Interval[T]) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Interval[T]) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Interval[T]) -> bool:
        return self.compare(other) >= 0

    # ------------------------------------------------------------------
    # Equality and text form
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        if self.is_empty() or other.is_empty():
            return self.is_empty() and other.is_empty()
        return (
            self.lower_limit == other.lower_limit
            and self.lower_included == other.lower_included
            and self.upper_limit == other.upper_limit
            and self.upper_included == other.upper_included
        )

    def __hash__(self) -> int:
        if self.is_empty():
            return hash(("Interval", "empty"))
        return hash(
            (self.lower_limit, self.lower_included, self.upper_limit, self.upper_included)
        )

    def __str__(self) -> str:
        if self.is_empty():
            return "{}"
        if self.is_single_element():
            return "{" + str(self.lower_limit) + "}"
        return "".join(
            (
                "[" if self.lower_included else "(",
                "Infinity" if self.lower_limit is None else str(self.lower_limit),
                ", ",
                "Infinity" if self.upper_limit is None else str(self.upper_limit),
                "]" if self.upper_included else ")",
            )
        )


def _anchor_of(*intervals: Interval[Any]) -> Any:
    for interval in intervals:
        for limit in (interval.lower_limit, interval.upper_limit):
            if limit is not None and limit is not _NOWHERE:
                return limit
    return None
