"""
Module: schedule_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines. This is the canonical import surface for callers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import schedule_kernel (and sibling engine modules).
    MUST NOT import schedule_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Callers pass a Clock where "today" matters.
    - Decimal-only arithmetic: quantities are ``Decimal`` (or int/str read as
      Decimal); floats are rejected.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine invocation is traced via the ``@traced_engine`` decorator
    (see ``schedule_engines.tracer``), emitting SCHEDULE_ENGINE_TRACE log
    records that include engine name, version, input fingerprint, and
    duration.

Usage:
    from schedule_engines import ProrationEngine, RecurrenceEngine
"""

from schedule_engines.proration import ProrationEngine, ProrationResult
from schedule_engines.recurrence import RecurrenceEngine
from schedule_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "ProrationEngine",
    "ProrationResult",
    "RecurrenceEngine",
    "traced_engine",
    "compute_input_fingerprint",
]
