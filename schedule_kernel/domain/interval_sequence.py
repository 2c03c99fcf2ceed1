"""
IntervalSequence -- Sorted collection of intervals with extent and gaps.

Responsibility:
    Keeps a list of (possibly overlapping) intervals in interval order and
    derives the overall extent and the uncovered gaps between neighbours.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends only on Interval.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from schedule_kernel.domain.interval import Interval

T = TypeVar("T")


class IntervalSequence(Generic[T]):
    """
    Intervals kept in ascending interval order.

    Contract:
        ``add`` inserts at the sorted position; nothing is merged. Empty
        intervals are ignored.

    Non-goals:
        - Does NOT resolve overlaps (see IntervalMap for last-write-wins).
    """

    def __init__(self, intervals: Iterable[Interval[T]] = ()):
        self._intervals: list[Interval[T]] = []
        for interval in intervals:
            self.add(interval)

    def add(self, interval: Interval[T]) -> None:
        if interval.is_empty():
            return
        bisect.insort(self._intervals, interval)

    def is_empty(self) -> bool:
        return not self._intervals

    def extent(self) -> Interval[T] | None:
        """Smallest interval covering every member, or None when empty."""
        if not self._intervals:
            return None
        result = self._intervals[0]
        for interval in self._intervals[1:]:
            result = result.hull(interval)
        return result

    def gaps(self) -> IntervalSequence[T]:
        """Non-empty gaps between consecutive members."""
        gaps: IntervalSequence[T] = IntervalSequence()
        if len(self._intervals) < 2:
            return gaps
        covered = self._intervals[0]
        for interval in self._intervals[1:]:
            gap = covered.gap(interval)
            if not gap.is_empty():
                gaps.add(gap)
            covered = covered.hull(interval)
        return gaps

    def __iter__(self) -> Iterator[Interval[T]]:
        return iter(tuple(self._intervals))

    def __len__(self) -> int:
        return len(self._intervals)

    def __repr__(self) -> str:
        return "IntervalSequence(" + ", ".join(str(i) for i in self._intervals) + ")"
