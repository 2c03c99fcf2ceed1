"""
Configuration Loader (``schedule_config.loader``).

Responsibility
--------------
Loads a calendar-set YAML document and parses it into typed
``schedule_config.schema`` dataclass instances. Callers use
``schedule_config.load_calendar_set()``; the loader itself only parses.

Architecture position
---------------------
**Config layer** -- infrastructure tooling. Consumed by
``schedule_config.load_calendar_set``. It has no dependency on the kernel
domain or the engines.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Every specification node is a mapping with exactly one known key.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  document for configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Structurally invalid document  -> ``ConfigParseError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from schedule_config.schema import (
    COMPOSITE_KINDS,
    NODE_KINDS,
    CalendarDef,
    CalendarSetDef,
    SpecificationDef,
    SpecificationNodeDef,
)
from schedule_kernel.exceptions import ScheduleKernelError


class ConfigParseError(ScheduleKernelError):
    """A calendar-set document does not have the expected structure."""

    code: str = "CONFIG_PARSE_ERROR"

    def __init__(self, location: str, message: str):
        self.location = location
        super().__init__(f"{location}: {message}")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """
    Parse a date from YAML (string or date object).

    YAML already turns unquoted ``2005-11-24`` into a ``date``; quoted
    strings are parsed as ISO dates.
    """
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigParseError("date", f"cannot parse {value!r}") from exc
    raise ConfigParseError("date", f"cannot parse {value!r}")


def _params(location: str, value: Any, required: tuple[str, ...]) -> tuple[tuple[str, Any], ...]:
    if not isinstance(value, dict):
        raise ConfigParseError(location, f"expected a mapping, got {value!r}")
    missing = [name for name in required if name not in value]
    if missing:
        raise ConfigParseError(location, f"missing {', '.join(missing)}")
    return tuple(sorted(value.items()))


def parse_node(data: Any, location: str = "node") -> SpecificationNodeDef:
    """
    Parse one specification node.

    A node is a mapping with exactly one key naming its kind, e.g.
    ``{annual_date: {month: 7, day: 4}}`` or ``{all_of: [...]}``.
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ConfigParseError(location, f"expected a single-key mapping, got {data!r}")
    ((kind, value),) = data.items()
    if kind not in NODE_KINDS:
        raise ConfigParseError(location, f"unknown node kind {kind!r}")
    where = f"{location}.{kind}"

    if kind in COMPOSITE_KINDS:
        if kind == "not":
            return SpecificationNodeDef(kind=kind, children=(parse_node(value, where),))
        if not isinstance(value, list):
            raise ConfigParseError(where, "expected a list of nodes")
        children = tuple(parse_node(item, f"{where}[{i}]") for i, item in enumerate(value))
        return SpecificationNodeDef(kind=kind, children=children)

    match kind:
        case "fixed":
            params = (("day", parse_date(value)),)
        case "day_of_week":
            names = value if isinstance(value, list) else [value]
            params = (("days", tuple(str(n) for n in names)),)
        case "nth_weekday_of_month":
            params = _params(where, value, ("month", "weekday", "n"))
        case "monthly_nth_weekday":
            params = _params(where, value, ("weekday", "n"))
        case "annual_date":
            params = _params(where, value, ("month", "day"))
        case "monthly_day":
            params = (("day", value),)
        case "between":
            raw = _params(where, value, ())
            params = tuple(
                (key, None if val is None else parse_date(val)) for key, val in raw
            )
        case "ref":
            params = (("name", str(value)),)
        case _:
            params = ()
    return SpecificationNodeDef(kind=kind, params=params)


def parse_calendar(name: str, data: Any) -> CalendarDef:
    """Parse a named business calendar."""
    if not isinstance(data, dict):
        raise ConfigParseError(f"calendars.{name}", "expected a mapping")
    holidays = tuple(
        parse_node(item, f"calendars.{name}.holidays[{i}]")
        for i, item in enumerate(data.get("holidays", []))
    )
    weekend = tuple(str(d) for d in data.get("weekend", ("SATURDAY", "SUNDAY")))
    return CalendarDef(name=name, weekend=weekend, holidays=holidays)


def parse_calendar_set(data: dict[str, Any]) -> CalendarSetDef:
    """
    Parse a full calendar-set document.

    Raises:
        ConfigParseError: if ``name`` or ``version`` is missing, or any
            node is malformed.
    """
    if "name" not in data or "version" not in data:
        raise ConfigParseError("root", "calendar set requires name and version")
    specifications = tuple(
        SpecificationDef(name=name, node=parse_node(node, f"specifications.{name}"))
        for name, node in (data.get("specifications") or {}).items()
    )
    calendars = tuple(
        parse_calendar(name, body) for name, body in (data.get("calendars") or {}).items()
    )
    return CalendarSetDef(
        name=str(data["name"]),
        version=int(data["version"]),
        description=data.get("description", ""),
        checksum=compute_checksum(data),
        specifications=specifications,
        calendars=calendars,
    )


def load_calendar_set_def(path: Path) -> CalendarSetDef:
    """Load and parse one calendar-set YAML file."""
    return parse_calendar_set(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
