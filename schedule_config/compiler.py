"""
Calendar-set compiler.

Takes a CalendarSetDef (parsed YAML) and produces a CompiledCalendarSet:
  1. Resolves ``ref`` nodes against the named specifications
  2. Detects reference cycles and unknown names
  3. Builds DateSpecification trees through the kernel constructors
  4. Builds one BusinessCalendar per calendar definition

Every problem found is collected; compilation fails once, at the end, with
the full list so an author can fix a document in one pass.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

from schedule_config.schema import (
    CalendarDef,
    CalendarSetDef,
    SpecificationNodeDef,
)
from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain import date_specification as ds
from schedule_kernel.domain.business_calendar import BusinessCalendar
from schedule_kernel.domain.calendar_dates import DayOfWeek
from schedule_kernel.domain.date_specification import DateSpecification
from schedule_kernel.exceptions import ScheduleKernelError
from schedule_kernel.logging_config import get_logger

logger = get_logger("config.compiler")


@dataclass(frozen=True)
class CompilationIssue:
    """A single problem found while compiling a calendar set."""

    category: str  # "reference", "cycle", "node", "calendar"
    message: str
    name: str | None = None


class ConfigCompilationError(ScheduleKernelError):
    """A calendar set could not be compiled."""

    code: str = "CONFIG_COMPILATION_FAILED"

    def __init__(self, calendar_set: str, issues: list[CompilationIssue]):
        self.calendar_set = calendar_set
        self.issues = issues
        details = "; ".join(
            f"[{issue.category}] {issue.name or '-'}: {issue.message}" for issue in issues
        )
        super().__init__(
            f"Calendar set {calendar_set!r} failed to compile "
            f"({len(issues)} issue(s)): {details}"
        )


@dataclass(frozen=True)
class CompiledCalendarSet:
    """Runtime artifact: named specifications and business calendars."""

    name: str
    version: int
    checksum: str
    specifications: Mapping[str, DateSpecification] = field(
        default_factory=lambda: MappingProxyType({})
    )
    calendars: Mapping[str, BusinessCalendar] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def specification(self, name: str) -> DateSpecification:
        """Named specification. Raises KeyError when absent."""
        return self.specifications[name]

    def calendar(self, name: str) -> BusinessCalendar:
        """Named business calendar. Raises KeyError when absent."""
        return self.calendars[name]


class _SpecificationBuilder:
    """Builds specification trees, memoising named ones and tracking refs."""

    def __init__(self, nodes: Mapping[str, SpecificationNodeDef]):
        self._nodes = nodes
        self._built: dict[str, DateSpecification] = {}
        self._resolving: list[str] = []

    def named(self, name: str) -> DateSpecification:
        if name in self._built:
            return self._built[name]
        if name in self._resolving:
            chain = " -> ".join([*self._resolving[self._resolving.index(name):], name])
            raise _CycleFound(chain)
        if name not in self._nodes:
            raise _UnknownReference(name)
        self._resolving.append(name)
        try:
            spec = self.build(self._nodes[name])
        finally:
            self._resolving.pop()
        self._built[name] = spec
        return spec

    def build(self, node: SpecificationNodeDef) -> DateSpecification:
        match node.kind:
            case "fixed":
                return ds.fixed(_date(node, "day"))
            case "day_of_week":
                return ds.day_of_week(*(_weekday(d) for d in node.param("days")))
            case "nth_weekday_of_month":
                return ds.nth_weekday_of_month(
                    _integer(node, "month"), _weekday(node.param("weekday")), _integer(node, "n")
                )
            case "monthly_nth_weekday":
                return ds.monthly_nth_weekday(_weekday(node.param("weekday")), _integer(node, "n"))
            case "annual_date":
                return ds.annual_date(_integer(node, "month"), _integer(node, "day"))
            case "monthly_day":
                return ds.monthly_day(_integer(node, "day"))
            case "between":
                return ds.calendar_interval(
                    cal.inclusive(_optional_date(node, "start"), _optional_date(node, "end"))
                )
            case "always":
                return ds.always()
            case "never":
                return ds.never()
            case "ref":
                return self.named(node.param("name"))
            case "all_of":
                return ds.all_of(self.build(child) for child in node.children)
            case "any_of":
                return ds.any_of(self.build(child) for child in node.children)
            case "not":
                return ds.not_(self.build(node.children[0]))
            case _:
                raise _BadNode(f"unknown node kind {node.kind!r}")


class _CycleFound(Exception):
    pass


class _UnknownReference(Exception):
    pass


class _BadNode(Exception):
    pass


def _weekday(value: Any) -> DayOfWeek:
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return DayOfWeek(value)
        except ValueError as exc:
            raise _BadNode(f"unknown weekday {value!r}") from exc
    try:
        return DayOfWeek[str(value).upper()]
    except KeyError as exc:
        raise _BadNode(f"unknown weekday {value!r}") from exc


def _integer(node: SpecificationNodeDef, name: str) -> int:
    value = node.param(name)
    if not isinstance(value, int) or isinstance(value, bool):
        raise _BadNode(f"{node.kind}.{name} must be an integer, got {value!r}")
    return value


def _date(node: SpecificationNodeDef, name: str) -> date:
    value = node.param(name)
    if not isinstance(value, date) or isinstance(value, datetime):
        raise _BadNode(f"{node.kind}.{name} must be a date, got {value!r}")
    return value


def _optional_date(node: SpecificationNodeDef, name: str) -> date | None:
    if node.param(name) is None:
        return None
    return _date(node, name)


def _compile_node(
    build: Callable[[], DateSpecification],
    name: str,
    issues: list[CompilationIssue],
) -> DateSpecification | None:
    try:
        return build()
    except _CycleFound as exc:
        issues.append(CompilationIssue("cycle", f"reference cycle {exc}", name))
    except _UnknownReference as exc:
        issues.append(CompilationIssue("reference", f"unknown specification {exc}", name))
    except (_BadNode, ScheduleKernelError) as exc:
        issues.append(CompilationIssue("node", str(exc), name))
    return None


def _compile_calendar(
    builder: _SpecificationBuilder,
    calendar_def: CalendarDef,
    issues: list[CompilationIssue],
) -> BusinessCalendar | None:
    name = f"calendars.{calendar_def.name}"
    before = len(issues)
    weekend: list[DayOfWeek] = []
    for day in calendar_def.weekend:
        try:
            weekend.append(_weekday(day))
        except _BadNode as exc:
            issues.append(CompilationIssue("calendar", str(exc), name))
    holidays = [
        _compile_node(lambda node=node: builder.build(node), name, issues)
        for node in calendar_def.holidays
    ]
    if len(issues) > before:
        return None
    try:
        return BusinessCalendar(weekend=frozenset(weekend)).with_holidays(*holidays)
    except ScheduleKernelError as exc:
        issues.append(CompilationIssue("calendar", str(exc), name))
        return None


def compile_calendar_set(calendar_set: CalendarSetDef) -> CompiledCalendarSet:
    """
    Compile a calendar set into runtime specifications and calendars.

    Raises:
        ConfigCompilationError: listing every unknown reference, reference
            cycle, invalid node and invalid calendar found.
    """
    nodes = {spec.name: spec.node for spec in calendar_set.specifications}
    builder = _SpecificationBuilder(nodes)
    issues: list[CompilationIssue] = []

    specifications: dict[str, DateSpecification] = {}
    for name in nodes:
        spec = _compile_node(lambda name=name: builder.named(name), name, issues)
        if spec is not None:
            specifications[name] = spec

    calendars: dict[str, BusinessCalendar] = {}
    for calendar_def in calendar_set.calendars:
        calendar = _compile_calendar(builder, calendar_def, issues)
        if calendar is not None:
            calendars[calendar_def.name] = calendar

    if issues:
        logger.warning(
            "calendar_set_compilation_failed",
            extra={"calendar_set": calendar_set.name, "issue_count": len(issues)},
        )
        raise ConfigCompilationError(calendar_set.name, issues)

    logger.info(
        "calendar_set_compiled",
        extra={
            "calendar_set": calendar_set.name,
            "version": calendar_set.version,
            "specification_count": len(specifications),
            "calendar_count": len(calendars),
        },
    )
    return CompiledCalendarSet(
        name=calendar_set.name,
        version=calendar_set.version,
        checksum=calendar_set.checksum,
        specifications=MappingProxyType(specifications),
        calendars=MappingProxyType(calendars),
    )
