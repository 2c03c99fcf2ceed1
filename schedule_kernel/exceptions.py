"""
Typed Exception Hierarchy for the Schedule Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers composing intervals, specifications and prorations need to react to
failures precisely. Generic exceptions like ValueError force callers to parse
messages, which breaks as soon as the wording changes.

Every error in this package therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, log-safe)
  3. Carries structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        Interval.closed(start, end)
    except Exception as e:
        if "lower" in str(e):  # FRAGILE - message might change
            swap_and_retry()

Example - RIGHT way (what this module enables):
    try:
        Interval.closed(start, end)
    except InvalidIntervalError as e:
        log.warning("bad_range", extra={"lower": e.lower, "upper": e.upper})

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from ScheduleKernelError:

    ScheduleKernelError (base)
    |
    +-- ArgumentError
    |   +-- MissingArgumentError
    |   +-- MissingOperandError
    |   +-- InvalidArgumentError
    |
    +-- IntervalError
    |   +-- InvalidIntervalError
    |   +-- EmptyIntervalError
    |   +-- DisjointIntervalsError
    |   +-- UnboundedIntervalError
    |
    +-- SpecificationError
    |   +-- InvalidSpecificationError
    |
    +-- CalendarError
    |   +-- NoBusinessDayError
    |
    +-- RatioError
    |   +-- ZeroDenominatorError
    |
    +-- RoundingError
    |   +-- RoundingNecessaryError
    |
    +-- ProrationError
        +-- InvalidPartCountError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Argument        | MISSING_ARGUMENT            | Required argument is None
                | MISSING_OPERAND             | Specification combinator given None
                | INVALID_ARGUMENT            | Argument outside its legal domain
----------------|-----------------------------|-----------------------------------------
Interval        | INVALID_INTERVAL            | Lower limit greater than upper limit
                | EMPTY_INTERVAL              | Empty result where non-empty required
                | DISJOINT_INTERVALS          | Union of non-touching intervals
                | UNBOUNDED_INTERVAL          | Finite range required for a date scan
----------------|-----------------------------|-----------------------------------------
Specification   | INVALID_SPECIFICATION       | Month/day/occurrence out of range
----------------|-----------------------------|-----------------------------------------
Calendar        | NO_BUSINESS_DAY             | No business day within scan horizon
----------------|-----------------------------|-----------------------------------------
Ratio           | ZERO_DENOMINATOR            | Ratio with a zero denominator
----------------|-----------------------------|-----------------------------------------
Rounding        | ROUNDING_NECESSARY          | UNNECESSARY policy on inexact value
----------------|-----------------------------|-----------------------------------------
Proration       | PRORATION_ERROR             | Remainder cannot be distributed
                | INVALID_PART_COUNT          | Fewer than one part requested

===============================================================================
DESIGN DECISIONS
===============================================================================

1. WHY INHERIT FROM Exception (not ValueError, etc.)?
   Domain exceptions should be catchable as a group. Inheriting from
   built-in types mixes domain errors with programming errors.

2. WHY code CLASS ATTRIBUTE (not instance)?
   Codes are static per exception type, so ``ZeroDenominatorError.code``
   is available without instantiation.

3. WHY IS "NOT FOUND" NOT AN EXCEPTION?
   An interval map without a binding for a key, or a specification with no
   occurrence in a range, is an ordinary answer. Those return ``None`` or an
   empty sequence.

===============================================================================
"""

from typing import Any


class ScheduleKernelError(Exception):
    """
    Base exception for all schedule kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SCHEDULE_KERNEL_ERROR"


# Argument exceptions


class ArgumentError(ScheduleKernelError):
    """Base exception for malformed arguments."""

    code: str = "ARGUMENT_ERROR"


class MissingArgumentError(ArgumentError):
    """A required argument was None."""

    code: str = "MISSING_ARGUMENT"

    def __init__(self, argument: str, operation: str):
        self.argument = argument
        self.operation = operation
        super().__init__(f"{operation} requires '{argument}', got None")


class MissingOperandError(ArgumentError):
    """A specification combinator was given an absent operand."""

    code: str = "MISSING_OPERAND"

    def __init__(self, combinator: str, position: str):
        self.combinator = combinator
        self.position = position
        super().__init__(f"{combinator} is missing its {position} operand")


class InvalidArgumentError(ArgumentError):
    """An argument was present but outside its legal domain."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, value: Any, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}={value!r}: {reason}")


# Interval exceptions


class IntervalError(ScheduleKernelError):
    """Base exception for interval errors."""

    code: str = "INTERVAL_ERROR"


class InvalidIntervalError(IntervalError):
    """Lower limit is greater than upper limit."""

    code: str = "INVALID_INTERVAL"

    def __init__(self, lower: Any, upper: Any):
        self.lower = lower
        self.upper = upper
        super().__init__(f"Lower limit {lower!r} is greater than upper limit {upper!r}")


class EmptyIntervalError(IntervalError):
    """An empty interval was produced where a non-empty one is required."""

    code: str = "EMPTY_INTERVAL"

    def __init__(self, limit: Any):
        self.limit = limit
        super().__init__(f"Interval at {limit!r} is empty")


class DisjointIntervalsError(IntervalError):
    """Two intervals neither intersect nor abut, so they have no union."""

    code: str = "DISJOINT_INTERVALS"

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(f"Intervals {first} and {second} are disjoint")


class UnboundedIntervalError(IntervalError):
    """A finite interval is required (e.g. for a day-by-day scan)."""

    code: str = "UNBOUNDED_INTERVAL"

    def __init__(self, interval: str, operation: str):
        self.interval = interval
        self.operation = operation
        super().__init__(f"{operation} requires a bounded interval, got {interval}")


# Specification exceptions


class SpecificationError(ScheduleKernelError):
    """Base exception for date specification errors."""

    code: str = "SPECIFICATION_ERROR"


class InvalidSpecificationError(SpecificationError):
    """A specification parameter is outside its calendar range."""

    code: str = "INVALID_SPECIFICATION"

    def __init__(self, kind: str, field: str, value: Any):
        self.kind = kind
        self.field = field
        self.value = value
        super().__init__(f"{kind}: invalid {field} {value!r}")


# Calendar exceptions


class CalendarError(ScheduleKernelError):
    """Base exception for business calendar errors."""

    code: str = "CALENDAR_ERROR"


class NoBusinessDayError(CalendarError):
    """No business day was found within the scan horizon."""

    code: str = "NO_BUSINESS_DAY"

    def __init__(self, start: Any, direction: str, horizon_days: int):
        self.start = start
        self.direction = direction
        self.horizon_days = horizon_days
        super().__init__(
            f"No business day {direction} {start} within {horizon_days} days"
        )


# Ratio exceptions


class RatioError(ScheduleKernelError):
    """Base exception for ratio errors."""

    code: str = "RATIO_ERROR"


class ZeroDenominatorError(RatioError):
    """Ratio constructed with a zero denominator."""

    code: str = "ZERO_DENOMINATOR"

    def __init__(self, numerator: Any):
        self.numerator = numerator
        super().__init__(f"Ratio {numerator}/0 has a zero denominator")


# Rounding exceptions


class RoundingError(ScheduleKernelError):
    """Base exception for rounding errors."""

    code: str = "ROUNDING_ERROR"


class RoundingNecessaryError(RoundingError):
    """UNNECESSARY rounding requested for a value that is inexact at scale."""

    code: str = "ROUNDING_NECESSARY"

    def __init__(self, value: str, scale: int):
        self.value = value
        self.scale = scale
        super().__init__(f"Value {value} is not exact at scale {scale}")


# Proration exceptions


class ProrationError(ScheduleKernelError):
    """Base exception for proration errors."""

    code: str = "PRORATION_ERROR"

    def __init__(self, message: str, total: Any = None):
        self.total = total
        super().__init__(message)


class InvalidPartCountError(ProrationError):
    """Fewer than one part was requested."""

    code: str = "INVALID_PART_COUNT"

    def __init__(self, parts: int):
        self.parts = parts
        super().__init__(f"Cannot divide into {parts} parts")
