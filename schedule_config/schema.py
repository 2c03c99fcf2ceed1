"""
CalendarSetDef schema.

Defines the human-authored, reviewable source artifact for calendar
configuration. YAML documents are parsed into these types by the loader and
compiled into a CompiledCalendarSet by the compiler.

Key distinction:
  CalendarSetDef       = source artifact (human-authored, versioned)
  CompiledCalendarSet  = runtime artifact (specification trees, calendars)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Specification nodes (declarative data, no evaluation logic)
# ---------------------------------------------------------------------------

LEAF_KINDS: frozenset[str] = frozenset(
    {
        "fixed",
        "day_of_week",
        "nth_weekday_of_month",
        "monthly_nth_weekday",
        "annual_date",
        "monthly_day",
        "between",
        "always",
        "never",
        "ref",
    }
)

COMPOSITE_KINDS: frozenset[str] = frozenset({"all_of", "any_of", "not"})

NODE_KINDS: frozenset[str] = LEAF_KINDS | COMPOSITE_KINDS


@dataclass(frozen=True)
class SpecificationNodeDef:
    """One node of a specification tree as written in YAML.

    ``params`` holds the leaf parameters as sorted (name, value) pairs;
    ``children`` holds operands of ``all_of``, ``any_of`` and ``not``.
    """

    kind: str
    params: tuple[tuple[str, Any], ...] = ()
    children: tuple[SpecificationNodeDef, ...] = ()

    def param(self, name: str, default: Any = None) -> Any:
        for key, value in self.params:
            if key == name:
                return value
        return default


@dataclass(frozen=True)
class SpecificationDef:
    """A named specification."""

    name: str
    node: SpecificationNodeDef


# ---------------------------------------------------------------------------
# Business calendars
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarDef:
    """A named business calendar: weekend day names and holiday nodes."""

    name: str
    weekend: tuple[str, ...] = ("SATURDAY", "SUNDAY")
    holidays: tuple[SpecificationNodeDef, ...] = ()


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarSetDef:
    """Root of a calendar-set document."""

    name: str
    version: int
    checksum: str
    description: str = ""
    specifications: tuple[SpecificationDef, ...] = ()
    calendars: tuple[CalendarDef, ...] = ()
