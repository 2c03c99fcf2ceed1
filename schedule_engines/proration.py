"""
Module: schedule_engines.proration
Responsibility:
    Divide a decimal quantity into parts (evenly, or in proportion to
    weights) so that the parts always sum exactly to the quantity, and
    scale a quantity by a ratio under an explicit rounding policy.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import schedule_kernel (domain values, rounding, logging).

Invariants enforced:
    - EXACT_SUM: the parts of every division sum to the total exactly.
      Each part is first rounded toward zero at the smallest unit
      (``10 ** -scale``); the remainder is then handed out one smallest
      unit at a time to parts 0, 1, 2, ... in order.
    - Determinism: the same inputs always give the same parts in the same
      order. All arithmetic is done on exact integers of smallest units.

Failure modes:
    - InvalidPartCountError when fewer than one part is requested.
    - ProrationError when the total carries more decimal places than the
      scale, or when a remainder needs more increments than there are parts.
    - ZeroDenominatorError when the proportions sum to zero.
    - InvalidArgumentError for negative proportions.

Audit relevance:
    Every public operation is traced (``SCHEDULE_ENGINE_TRACE``) and logs a
    ``proration_completed`` record with the residual increment count, so a
    reviewer can see exactly which parts received the extra unit.

Usage:
    from decimal import Decimal
    from schedule_engines.proration import ProrationEngine

    engine = ProrationEngine()
    result = engine.divided_evenly_into_parts(total=Decimal("100.00"), parts=3)
    result.parts   # (Decimal("33.34"), Decimal("33.33"), Decimal("33.33"))
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction

from schedule_engines.tracer import traced_engine
from schedule_kernel.domain.ratio import Ratio
from schedule_kernel.domain.rounding import (
    Rounding,
    decimal_from_units,
    round_fraction,
    round_to_scale,
    scale_of,
)
from schedule_kernel.exceptions import (
    InvalidArgumentError,
    InvalidPartCountError,
    ProrationError,
    ZeroDenominatorError,
)
from schedule_kernel.logging_config import get_logger

logger = get_logger("engines.proration")

Amount = Decimal | int | str


def _as_decimal(name: str, value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            return Decimal(value)
        except InvalidOperation as exc:
            raise InvalidArgumentError(name, value, "expected a decimal value") from exc
    raise InvalidArgumentError(name, value, "expected Decimal, int or str")


@dataclass(frozen=True)
class ProrationResult:
    """
    Outcome of one division.

    Contract:
        Frozen dataclass; ``parts`` are in the order the caller asked for.
    Guarantees:
        - ``sum(parts) == total`` (EXACT_SUM).
        - Every part carries exactly ``scale`` fractional digits.
        - ``residual_increments`` leading parts received one extra smallest
          unit (in the direction of the total's sign).
    Non-goals:
        - Does not carry units or currency.
    """

    total: Decimal
    scale: int
    parts: tuple[Decimal, ...]
    residual_increments: int

    def __post_init__(self) -> None:
        # INVARIANT: EXACT_SUM
        if sum(self.parts, Decimal("0")) != self.total:
            raise ProrationError(
                f"Parts sum to {sum(self.parts, Decimal('0'))}, expected {self.total}",
                total=self.total,
            )

    @property
    def smallest_unit(self) -> Decimal:
        return decimal_from_units(1, self.scale)

    @property
    def part_count(self) -> int:
        return len(self.parts)

    def __iter__(self) -> Iterator[Decimal]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def __getitem__(self, index: int) -> Decimal:
        return self.parts[index]


class ProrationEngine:
    """
    Exact-sum division of decimal quantities.

    Contract:
        Pure functions over exact smallest-unit integers.
        No I/O, no clock access.
    Guarantees:
        - Rounding Strategy:
            * Each share is rounded toward zero at the smallest unit.
            * The remainder goes one unit at a time to the leading parts.
            * The scale defaults to the number of decimal places of the
              total; an explicit scale may be larger.
    Non-goals:
        - Does not decide the scale of a currency; callers pass it.
    """

    @traced_engine("proration", "1.0", fingerprint_fields=("total", "parts", "scale"))
    def divided_evenly_into_parts(
        self,
        total: Amount,
        parts: int,
        scale: int | None = None,
    ) -> ProrationResult:
        """Split ``total`` into ``parts`` near-equal shares.

        Example: 100.00 into 3 parts gives 33.34, 33.33, 33.33.
        """
        if parts < 1:
            raise InvalidPartCountError(parts)
        total = _as_decimal("total", total)
        scale = self._resolve_scale(total, scale)
        total_units = self._to_units(total, scale)

        share_units = round_fraction(Fraction(total_units, parts), Rounding.DOWN)
        remainder_units = total_units - share_units * parts
        units = self._distribute_units([share_units] * parts, remainder_units)

        return self._result("divided_evenly", total, scale, units, remainder_units)

    @traced_engine("proration", "1.0", fingerprint_fields=("total", "proportions", "scale"))
    def prorated_over(
        self,
        total: Amount,
        proportions: Sequence[Amount],
        scale: int | None = None,
    ) -> ProrationResult:
        """Split ``total`` in proportion to ``proportions``.

        Example: 0.10 over (17, 2, 1, 35, 35, 10) gives
        0.02, 0.01, 0.00, 0.03, 0.03, 0.01.
        """
        if not proportions:
            raise InvalidPartCountError(0)
        weights = [_as_decimal("proportions", p) for p in proportions]
        for weight in weights:
            if weight < 0:
                raise InvalidArgumentError("proportions", weight, "must not be negative")
        total = _as_decimal("total", total)
        whole = sum(weights, Decimal("0"))
        if whole == 0:
            raise ZeroDenominatorError(total)

        scale = self._resolve_scale(total, scale)
        total_units = self._to_units(total, scale)

        share_units = [
            round_fraction(
                Fraction(total_units) * Ratio(weight, whole).as_fraction(), Rounding.DOWN
            )
            for weight in weights
        ]
        remainder_units = total_units - sum(share_units)
        units = self._distribute_units(share_units, remainder_units)

        return self._result("prorated_over", total, scale, units, remainder_units)

    @traced_engine("proration", "1.0", fingerprint_fields=("total", "ratio", "scale", "rounding"))
    def part_of_whole(
        self,
        total: Amount,
        ratio: Ratio | tuple[Amount, Amount],
        *,
        scale: int,
        rounding: Rounding,
    ) -> Decimal:
        """``total`` scaled by ``ratio`` (or ``(portion, whole)``), rounded once."""
        if not isinstance(ratio, Ratio):
            ratio = Ratio.of_pair(ratio)
        total = _as_decimal("total", total)
        result = round_to_scale(Fraction(total) * ratio.as_fraction(), scale, rounding)
        logger.info(
            "proration_completed",
            extra={
                "operation": "part_of_whole",
                "total": str(total),
                "ratio": str(ratio),
                "scale": scale,
                "rounding": rounding.value,
                "result": str(result),
            },
        )
        return result

    @traced_engine("proration", "1.0", fingerprint_fields=("parts", "remainder", "scale"))
    def distribute_remainder_over(
        self,
        parts: Sequence[Amount],
        remainder: Amount,
        scale: int | None = None,
    ) -> tuple[Decimal, ...]:
        """Add one smallest unit to each of the leading ``|remainder|`` parts.

        Example: (1, 2, 3, 4) with remainder 0.02 gives 1.01, 2.01, 3.00, 4.00.
        """
        values = [_as_decimal("parts", p) for p in parts]
        remainder = _as_decimal("remainder", remainder)
        if scale is None:
            scale = max([scale_of(remainder), *(scale_of(v) for v in values)])
        units = [self._to_units(v, scale) for v in values]
        remainder_units = self._to_units(remainder, scale)
        distributed = self._distribute_units(units, remainder_units)
        return tuple(decimal_from_units(u, scale) for u in distributed)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_scale(total: Decimal, scale: int | None) -> int:
        if scale is None:
            return scale_of(total)
        return scale

    @staticmethod
    def _to_units(value: Decimal, scale: int) -> int:
        scaled = Fraction(value) * Fraction(10) ** scale
        if scaled.denominator != 1:
            raise ProrationError(
                f"{value} has more decimal places than scale {scale}", total=value
            )
        return scaled.numerator

    @staticmethod
    def _distribute_units(units: list[int], remainder_units: int) -> list[int]:
        count = abs(remainder_units)
        if count > len(units):
            raise ProrationError(
                f"Remainder of {remainder_units} units exceeds {len(units)} parts"
            )
        step = 1 if remainder_units > 0 else -1
        return [u + step if i < count else u for i, u in enumerate(units)]

    def _result(
        self,
        operation: str,
        total: Decimal,
        scale: int,
        units: list[int],
        remainder_units: int,
    ) -> ProrationResult:
        result = ProrationResult(
            total=total,
            scale=scale,
            parts=tuple(decimal_from_units(u, scale) for u in units),
            residual_increments=abs(remainder_units),
        )
        logger.info(
            "proration_completed",
            extra={
                "operation": operation,
                "total": str(total),
                "scale": scale,
                "part_count": result.part_count,
                "residual_increments": result.residual_increments,
            },
        )
        return result
