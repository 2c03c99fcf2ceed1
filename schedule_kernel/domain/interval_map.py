"""
IntervalMap -- Piecewise mapping from disjoint intervals to values.

Responsibility:
    Accepts possibly-overlapping insertions and maintains an ordered list of
    non-overlapping (interval, value) bindings in which the most recent
    insertion owns every value it covers (last write wins).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends on Interval. Used by the recurrence engine for specification
    timelines.

Invariants enforced:
    DISJOINT_BINDINGS -- bindings never overlap and stay ordered by where
    they start on the line. ``put`` and ``remove`` carve every intersecting
    binding down to its remainders before anything new is inserted.

Failure modes:
    - MissingArgumentError when ``put``/``remove``/``contains_intersecting_key``
      receive None instead of an interval.

Audit relevance:
    Each mutation emits a debug record (``interval_map_put``,
    ``interval_map_remove``) with the interval and the number of bindings
    that were carved.

Usage:
    rates = IntervalMap()
    rates.put(Interval.closed(1, 3), "a")
    rates.put(Interval.closed(2, 5), "b")   # [1, 2) -> "a", [2, 5] -> "b"
    rates.get(2)                            # "b"
"""

from __future__ import annotations

import bisect
import functools
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from schedule_kernel.domain.interval import Interval
from schedule_kernel.exceptions import MissingArgumentError
from schedule_kernel.logging_config import get_logger

logger = get_logger("domain.interval_map")

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class Binding(Generic[K, V]):
    """One interval and the value it maps to."""

    interval: Interval[K]
    value: V


def _by_start(first: Binding[Any, Any], second: Binding[Any, Any]) -> int:
    """Order disjoint bindings by where they start; an included limit starts first."""
    a, b = first.interval, second.interval
    if a.lower_limit is None or b.lower_limit is None:
        return int(b.lower_limit is None) - int(a.lower_limit is None)
    if a.lower_limit != b.lower_limit:
        return -1 if a.lower_limit < b.lower_limit else 1
    return int(b.lower_included) - int(a.lower_included)


_START_KEY = functools.cmp_to_key(_by_start)


class IntervalMap(Generic[K, V]):
    """
    Ordered, non-overlapping interval -> value bindings.

    Contract:
        ``put`` gives the new binding exclusive ownership of its interval;
        older bindings are truncated or split around it. Adjacent bindings
        with equal values are NOT merged. Putting or removing an empty
        interval is a no-op.

    Guarantees:
        - Iteration yields bindings in ascending order of where they start.
          ``Interval.compare`` places an excluded lower limit first at a tie,
          which for disjoint bindings such as ``[3, 3]`` and ``(3, 5]`` is
          not their order on the line.
        - ``get`` returns None when no binding includes the key.

    Non-goals:
        - Not thread-safe; callers synchronize mutation externally.
    """

    def __init__(self) -> None:
        self._bindings: list[Binding[K, V]] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def put(self, interval: Interval[K], value: V) -> None:
        """Bind ``value`` to every key in ``interval``, replacing older values."""
        if interval is None:
            raise MissingArgumentError("interval", "IntervalMap.put")
        if interval.is_empty():
            return
        carved = self._carve(interval)
        bisect.insort(self._bindings, Binding(interval, value), key=_START_KEY)
        logger.debug(
            "interval_map_put",
            extra={
                "interval": str(interval),
                "carved": carved,
                "bindings": len(self._bindings),
            },
        )

    def remove(self, interval: Interval[K]) -> None:
        """Unbind every key in ``interval``."""
        if interval is None:
            raise MissingArgumentError("interval", "IntervalMap.remove")
        if interval.is_empty():
            return
        carved = self._carve(interval)
        logger.debug(
            "interval_map_remove",
            extra={
                "interval": str(interval),
                "carved": carved,
                "bindings": len(self._bindings),
            },
        )

    def _carve(self, interval: Interval[K]) -> int:
        """Replace each intersecting binding by its remainders outside ``interval``.

        Remainders lie inside the binding they came from and keep its
        position, so start order survives without a re-sort. Returns the
        number of bindings that were carved.
        """
        kept: list[Binding[K, V]] = []
        carved = 0
        for binding in self._bindings:
            if not binding.interval.intersects(interval):
                kept.append(binding)
                continue
            carved += 1
            for remainder in interval.complement_relative_to(binding.interval):
                kept.append(Binding(remainder, binding.value))
        self._bindings = kept
        return carved

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _binding_for(self, key: K) -> Binding[K, V] | None:
        # Only the last binding starting at or before key can include it
        at_key = _START_KEY(Binding(Interval.single_element(key), None))
        index = bisect.bisect_right(self._bindings, at_key, key=_START_KEY)
        if index == 0:
            return None
        binding = self._bindings[index - 1]
        return binding if binding.interval.includes(key) else None

    def get(self, key: K) -> V | None:
        """Value bound to ``key``, or None when no binding includes it."""
        if key is None:
            return None
        binding = self._binding_for(key)
        return None if binding is None else binding.value

    def contains_key(self, key: K) -> bool:
        if key is None:
            return False
        return self._binding_for(key) is not None

    def contains_intersecting_key(self, interval: Interval[K]) -> bool:
        if interval is None:
            raise MissingArgumentError("interval", "IntervalMap.contains_intersecting_key")
        return any(b.interval.intersects(interval) for b in self._bindings)

    def intervals(self) -> tuple[Interval[K], ...]:
        return tuple(b.interval for b in self._bindings)

    def values(self) -> tuple[V, ...]:
        return tuple(b.value for b in self._bindings)

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Binding[K, V]]:
        return iter(tuple(self._bindings))

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        inner = ", ".join(f"{b.interval}: {b.value!r}" for b in self._bindings)
        return "IntervalMap({" + inner + "})"
