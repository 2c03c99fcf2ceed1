"""
Ratio -- Exact quotient of two decimals.

Responsibility:
    Holds a numerator and denominator without dividing them, so the
    quotient can be rounded exactly once, at the scale and under the policy
    the caller chooses.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Used by the proration engine for part-of-whole calculations.

Invariants enforced:
    IMMUTABLE_VALUES -- frozen dataclass.
    The denominator is never zero.

Failure modes:
    - ZeroDenominatorError on construction with a zero denominator.
    - RoundingNecessaryError from ``decimal_value`` with UNNECESSARY when
      the quotient is inexact at the requested scale.
    - InvalidArgumentError when an operand cannot be read as a decimal.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any

from schedule_kernel.domain.rounding import Rounding, round_to_scale
from schedule_kernel.exceptions import InvalidArgumentError, ZeroDenominatorError


def _to_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(name, value, "expected a decimal value")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidArgumentError(name, value, "expected a decimal value") from exc


@dataclass(frozen=True, slots=True)
class Ratio:
    """
    Numerator over denominator, kept undivided.

    Contract:
        Equality is structural over the (numerator, denominator) pair:
        ``Ratio.of(2, 4) != Ratio.of(1, 2)``.

    Guarantees:
        - Immutable and hashable.
        - Both terms are Decimal; ints and strings are converted on
          construction.

    Non-goals:
        - Does NOT reduce to lowest terms.
    """

    numerator: Decimal
    denominator: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "numerator", _to_decimal("numerator", self.numerator))
        object.__setattr__(
            self, "denominator", _to_decimal("denominator", self.denominator)
        )
        if self.denominator == 0:
            raise ZeroDenominatorError(self.numerator)

    @classmethod
    def of(cls, numerator: Decimal | int | str, denominator: Decimal | int | str = 1) -> Ratio:
        """Ratio from two terms; a single term is taken over 1."""
        return cls(numerator, denominator)  # type: ignore[arg-type]

    @classmethod
    def of_pair(cls, pair: tuple[Decimal | int | str, Decimal | int | str]) -> Ratio:
        """Ratio from a ``(portion, whole)`` pair."""
        portion, whole = pair
        return cls(portion, whole)  # type: ignore[arg-type]

    def as_fraction(self) -> Fraction:
        return Fraction(self.numerator) / Fraction(self.denominator)

    def decimal_value(self, scale: int, rounding: Rounding) -> Decimal:
        """The quotient at ``scale`` fractional digits, rounded once."""
        return round_to_scale(self.as_fraction(), scale, rounding)

    def times(self, multiplier: Decimal | int | str | Ratio) -> Ratio:
        """Product with a decimal or another ratio, still undivided."""
        if isinstance(multiplier, Ratio):
            return Ratio(
                self.numerator * multiplier.numerator,
                self.denominator * multiplier.denominator,
            )
        return Ratio(self.numerator * _to_decimal("multiplier", multiplier), self.denominator)

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"
