"""
Tests for ProrationEngine.

Covers:
- Even division with residual increments
- Proportional division
- Part of a whole by ratio
- Remainder distribution
- Exact-sum guarantee and error handling
"""

import logging
from decimal import Decimal

import pytest

from schedule_engines.proration import ProrationEngine, ProrationResult
from schedule_kernel.domain.ratio import Ratio
from schedule_kernel.domain.rounding import Rounding
from schedule_kernel.exceptions import (
    InvalidArgumentError,
    InvalidPartCountError,
    ProrationError,
    RoundingNecessaryError,
    ZeroDenominatorError,
)


def _d(*values: str) -> tuple[Decimal, ...]:
    return tuple(Decimal(v) for v in values)


class TestDividedEvenly:
    """Tests for divided_evenly_into_parts."""

    def setup_method(self):
        self.engine = ProrationEngine()

    def test_hundred_into_three(self):
        result = self.engine.divided_evenly_into_parts(Decimal("100.00"), 3)
        assert result.parts == _d("33.34", "33.33", "33.33")
        assert result.residual_increments == 1
        assert result.scale == 2

    def test_small_total_into_ten(self):
        result = self.engine.divided_evenly_into_parts(Decimal("1.09"), 10)
        assert result.parts == _d(*["0.11"] * 9, "0.10")

    def test_eighty_thousand_into_fifty_two(self):
        result = self.engine.divided_evenly_into_parts(Decimal("80000.00"), 52)

        assert sum(result, Decimal("0")) == Decimal("80000.00")
        assert set(result.parts) == set(_d("1538.46", "1538.47"))
        heavier = [i for i, part in enumerate(result) if part == Decimal("1538.47")]
        assert heavier == list(range(8))
        assert result.residual_increments == 8

    def test_exact_division_has_no_residual(self):
        result = self.engine.divided_evenly_into_parts("90.00", 3)
        assert result.parts == _d("30.00", "30.00", "30.00")
        assert result.residual_increments == 0

    def test_negative_total(self):
        result = self.engine.divided_evenly_into_parts(Decimal("-100.00"), 3)
        assert result.parts == _d("-33.34", "-33.33", "-33.33")

    def test_explicit_finer_scale(self):
        result = self.engine.divided_evenly_into_parts(Decimal("1"), 3, scale=2)
        assert result.parts == _d("0.34", "0.33", "0.33")
        assert result.smallest_unit == Decimal("0.01")

    def test_total_finer_than_scale_rejected(self):
        with pytest.raises(ProrationError):
            self.engine.divided_evenly_into_parts(Decimal("1.005"), 3, scale=2)

    @pytest.mark.parametrize("parts", [0, -1])
    def test_part_count_must_be_positive(self, parts):
        with pytest.raises(InvalidPartCountError) as exc_info:
            self.engine.divided_evenly_into_parts(Decimal("10"), parts)
        assert exc_info.value.parts == parts

    def test_float_total_rejected(self):
        with pytest.raises(InvalidArgumentError):
            self.engine.divided_evenly_into_parts(10.5, 2)

    def test_result_behaves_as_sequence(self):
        result = self.engine.divided_evenly_into_parts(Decimal("1.00"), 4)
        assert len(result) == 4
        assert result[0] == Decimal("0.25")
        assert result.part_count == 4


class TestProratedOver:
    """Tests for prorated_over."""

    def setup_method(self):
        self.engine = ProrationEngine()

    def test_weights_leave_remainder_on_leading_parts(self):
        result = self.engine.prorated_over(Decimal("0.10"), [17, 2, 1, 35, 35, 10])
        assert result.parts == _d("0.02", "0.01", "0.00", "0.03", "0.03", "0.01")
        assert sum(result, Decimal("0")) == Decimal("0.10")

    def test_three_to_seven(self):
        result = self.engine.prorated_over(Decimal("100.00"), [3, 7])
        assert result.parts == _d("30.00", "70.00")

    def test_equal_weights_with_odd_unit(self):
        result = self.engine.prorated_over(Decimal("0.05"), [1, 1])
        assert result.parts == _d("0.03", "0.02")

    def test_decimal_weights(self):
        result = self.engine.prorated_over(Decimal("10.00"), ["0.5", "0.25", "0.25"])
        assert result.parts == _d("5.00", "2.50", "2.50")

    def test_empty_proportions_rejected(self):
        with pytest.raises(InvalidPartCountError):
            self.engine.prorated_over(Decimal("1.00"), [])

    def test_zero_weights_rejected(self):
        with pytest.raises(ZeroDenominatorError):
            self.engine.prorated_over(Decimal("1.00"), [0, 0])

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidArgumentError):
            self.engine.prorated_over(Decimal("1.00"), [3, -1])


class TestPartOfWhole:
    """Tests for part_of_whole."""

    def setup_method(self):
        self.engine = ProrationEngine()

    def test_with_ratio(self):
        result = self.engine.part_of_whole(
            Decimal("100.00"), Ratio.of(1, 3), scale=2, rounding=Rounding.HALF_EVEN
        )
        assert result == Decimal("33.33")

    def test_with_pair(self):
        result = self.engine.part_of_whole(
            Decimal("100.00"), (2, 3), scale=2, rounding=Rounding.UP
        )
        assert result == Decimal("66.67")

    def test_unnecessary_rounding_on_inexact_share(self):
        with pytest.raises(RoundingNecessaryError):
            self.engine.part_of_whole(
                Decimal("100.00"), (1, 3), scale=2, rounding=Rounding.UNNECESSARY
            )

    def test_zero_whole_rejected(self):
        with pytest.raises(ZeroDenominatorError):
            self.engine.part_of_whole(
                Decimal("100.00"), (1, 0), scale=2, rounding=Rounding.DOWN
            )


class TestDistributeRemainder:
    """Tests for distribute_remainder_over."""

    def setup_method(self):
        self.engine = ProrationEngine()

    def test_two_cents_over_four_parts(self):
        result = self.engine.distribute_remainder_over([1, 2, 3, 4], Decimal("0.02"))
        assert result == _d("1.01", "2.01", "3.00", "4.00")

    def test_negative_remainder(self):
        result = self.engine.distribute_remainder_over(
            _d("1.00", "1.00"), Decimal("-0.01")
        )
        assert result == _d("0.99", "1.00")

    def test_remainder_larger_than_part_count_rejected(self):
        with pytest.raises(ProrationError):
            self.engine.distribute_remainder_over([1, 2], Decimal("0.03"))


class TestExactSum:
    """The result type enforces the exact-sum guarantee."""

    def test_mismatched_parts_rejected(self):
        with pytest.raises(ProrationError) as exc_info:
            ProrationResult(
                total=Decimal("1.00"),
                scale=2,
                parts=_d("0.50", "0.49"),
                residual_increments=0,
            )
        assert exc_info.value.total == Decimal("1.00")

    def test_completion_logged(self, caplog):
        engine = ProrationEngine()
        with caplog.at_level(logging.INFO, logger="schedule_kernel"):
            engine.divided_evenly_into_parts(Decimal("100.00"), 3)
        messages = [r.getMessage() for r in caplog.records]
        assert "proration_completed" in messages
        assert "SCHEDULE_ENGINE_TRACE" in messages
        completed = next(r for r in caplog.records if r.getMessage() == "proration_completed")
        assert completed.residual_increments == 1
