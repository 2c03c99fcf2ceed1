"""
schedule_config -- single public entrypoint for calendar configuration.

Responsibility:
    Provides the ONLY way to obtain named date specifications and business
    calendars from configuration: ``load_calendar_set()``. It returns a
    ``CompiledCalendarSet``, the sole runtime artifact. YAML parsing is an
    internal detail of this package.

Architecture position:
    Configuration -- YAML-driven, validated at load time.
    This package sits above ``schedule_kernel`` and ``schedule_engines``.
    Neither of them may import from ``schedule_config``.

Invariants enforced:
    - Single entrypoint: all runtime calendar config flows through
      ``load_calendar_set()``.
    - Deterministic compilation: the same YAML always produces the same
      checksum and the same specification trees.

Failure modes:
    - ``FileNotFoundError`` -- no calendar-set file with the requested name.
    - ``ConfigParseError`` -- structurally invalid document.
    - ``ConfigCompilationError`` -- unknown references, reference cycles,
      invalid nodes or invalid calendars.

Audit relevance:
    Every successful ``load_calendar_set()`` call emits a
    ``SCHEDULE_CONFIG_TRACE`` log entry with the set name, version,
    checksum and counts, tying computed schedules back to the exact
    configuration that produced them.
"""

from __future__ import annotations

from pathlib import Path

from schedule_config.compiler import (
    CompilationIssue,
    CompiledCalendarSet,
    ConfigCompilationError,
    compile_calendar_set,
)
from schedule_config.loader import ConfigParseError, load_calendar_set_def
from schedule_kernel.logging_config import get_logger

logger = get_logger("config")

# Default calendar sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def load_calendar_set(
    name: str = "us_federal",
    config_dir: Path | None = None,
) -> CompiledCalendarSet:
    """The ONLY public configuration entrypoint.

    Args:
        name: Calendar-set name; the file ``<name>.yaml`` is loaded.
        config_dir: Override path to the calendar sets directory.
            Defaults to schedule_config/sets/.

    Returns:
        CompiledCalendarSet -- the sole runtime artifact.

    Raises:
        FileNotFoundError: If no ``<name>.yaml`` exists in the directory.
        ConfigParseError: If the document is malformed.
        ConfigCompilationError: If compilation produces issues.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Calendar set not found: {path}")

    calendar_set = compile_calendar_set(load_calendar_set_def(path))

    logger.info(
        "SCHEDULE_CONFIG_TRACE",
        extra={
            "trace_type": "SCHEDULE_CONFIG_TRACE",
            "calendar_set": calendar_set.name,
            "calendar_set_version": calendar_set.version,
            "checksum": calendar_set.checksum,
            "specification_count": len(calendar_set.specifications),
            "calendar_count": len(calendar_set.calendars),
        },
    )
    return calendar_set


__all__ = [
    "load_calendar_set",
    "CompiledCalendarSet",
    "CompilationIssue",
    "ConfigCompilationError",
    "ConfigParseError",
]
