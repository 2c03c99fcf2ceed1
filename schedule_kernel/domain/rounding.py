"""
Rounding -- Explicit rounding policies applied exactly.

Responsibility:
    Names the eight rounding policies and rounds an exact rational value to
    a decimal scale under one of them with ``Decimal.quantize``. Rounding
    happens once, on the exact quotient, so no intermediate precision loss
    can move a result across a rounding boundary.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Used by Ratio and the proration engine.

Invariants enforced:
    - The numerator / denominator quotient is carried with guard digits
      under ROUND_05UP before quantize(), which keeps ties and exact
      integers distinguishable from their inexact neighbours.
    - UNNECESSARY traps decimal.Inexact instead of rounding.

Failure modes:
    - RoundingNecessaryError when UNNECESSARY is requested and the value is
      not exactly representable at the scale.
"""

from __future__ import annotations

from decimal import (
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
    Inexact,
    localcontext,
)
from enum import Enum, unique
from fractions import Fraction

from schedule_kernel.exceptions import InvalidArgumentError, RoundingNecessaryError

_ONE = Decimal(1)

# Digits kept past the units place while dividing
_GUARD_DIGITS = 3


@unique
class Rounding(str, Enum):
    """Rounding policy. Callers always pick one; nothing defaults silently."""

    CEILING = ROUND_CEILING
    """Toward positive infinity."""

    UP = ROUND_UP
    """Away from zero."""

    DOWN = ROUND_DOWN
    """Toward zero (truncation)."""

    FLOOR = ROUND_FLOOR
    """Toward negative infinity."""

    HALF_UP = ROUND_HALF_UP
    """Nearest neighbour; ties away from zero."""

    HALF_DOWN = ROUND_HALF_DOWN
    """Nearest neighbour; ties toward zero."""

    HALF_EVEN = ROUND_HALF_EVEN
    """Nearest neighbour; ties to the even neighbour (banker's rounding)."""

    UNNECESSARY = "ROUND_UNNECESSARY"
    """Assert the value is already exact; raise otherwise."""

    @property
    def decimal_rounding(self) -> str:
        """The ``decimal`` constant passed to quantize().

        UNNECESSARY never rounds (Inexact is trapped), so any mode serves.
        """
        if self is Rounding.UNNECESSARY:
            return ROUND_DOWN
        return self.value


def round_fraction(value: Fraction, rounding: Rounding) -> int:
    """Round an exact rational to an integer under ``rounding``."""
    return int(round_to_scale(value, 0, rounding))


def round_to_scale(value: Decimal | Fraction | int, scale: int, rounding: Rounding) -> Decimal:
    """Round ``value`` to ``scale`` fractional digits under ``rounding``.

    The result is an exact Decimal with exponent ``-scale`` (so
    ``round_to_scale(0, 2, ...)`` is ``Decimal("0.00")``).
    """
    if not isinstance(rounding, Rounding):
        raise InvalidArgumentError("rounding", rounding, "unknown rounding policy")
    scaled = Fraction(value) * Fraction(10) ** scale
    whole_digits = len(str(abs(scaled.numerator) // scaled.denominator))
    with localcontext() as ctx:
        ctx.prec = whole_digits + _GUARD_DIGITS
        ctx.rounding = ROUND_05UP
        ctx.traps[Inexact] = False
        quotient = Decimal(scaled.numerator) / Decimal(scaled.denominator)
        ctx.traps[Inexact] = rounding is Rounding.UNNECESSARY
        try:
            units = quotient.quantize(_ONE, rounding=rounding.decimal_rounding)
        except Inexact:
            raise RoundingNecessaryError(str(value), scale) from None
    return decimal_from_units(int(units), scale)


def decimal_from_units(units: int, scale: int) -> Decimal:
    """``units * 10**-scale`` as an exact Decimal with exponent ``-scale``."""
    digits = tuple(int(c) for c in str(abs(units)))
    return Decimal((1 if units < 0 else 0, digits, -scale))


def scale_of(value: Decimal) -> int:
    """Number of fractional digits carried by ``value`` (never negative)."""
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        raise InvalidArgumentError("value", value, "not a finite decimal")
    return max(-exponent, 0)
