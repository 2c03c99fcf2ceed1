"""
Kernel Invariants Contract.

These invariants are structural law for every value type in the kernel. No
calendar-set configuration, engine option or caller preference may override
them.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across Interval construction, IntervalMap.put and
remove, the specification evaluator, and the proration engine.
"""

from enum import Enum, unique


@unique
class KernelInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that the kernel provides
    unconditionally.
    """

    ORDERED_LIMITS = "ordered_limits"
    """A bounded interval never has its lower limit above its upper limit.
    Enforced by Interval.__post_init__."""

    DISJOINT_BINDINGS = "disjoint_bindings"
    """IntervalMap bindings never overlap and stay ordered by where they start.
    Enforced by IntervalMap.put and IntervalMap.remove."""

    IMMUTABLE_VALUES = "immutable_values"
    """Intervals, specifications, ratios and business calendars are frozen.
    Combinators build new nodes and never mutate their operands."""

    EXACT_SUM = "exact_sum"
    """Proration parts always sum exactly to the prorated total. Enforced by
    ProrationEngine remainder distribution."""

    FINITE_SCANS = "finite_scans"
    """Date scans run only over intervals bounded on both sides. Enforced by
    the specification iteration functions."""


# All invariants as a frozenset for programmatic checks.
ALL_KERNEL_INVARIANTS: frozenset[KernelInvariant] = frozenset(KernelInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "schedule_engines",
    "schedule_config",
)

# The engines package may not import configuration.
FORBIDDEN_ENGINE_IMPORTS: tuple[str, ...] = ("schedule_config",)
