"""Unit tests for amount parsing and checked arithmetic."""

from decimal import Decimal

import pytest

from omnivault.core.exceptions import AmountOverflowError, InvariantViolationError, ValidationError
from omnivault.utils import (
    MAX_AMOUNT,
    MAX_DECIMALS,
    ZERO,
    checked_add,
    checked_sub,
    exact_add,
    to_amount,
)


class TestToAmount:
    """Tests for to_amount."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("12.50"), Decimal("12.50")),
            (7, Decimal("7")),
            ("  3.25 ", Decimal("3.25")),
            (0.5, Decimal("0.5")),
            ("0", Decimal("0")),
        ],
    )
    def test_parses_numbers(self, value, expected):
        assert to_amount(value) == expected

    def test_negative_zero_normalized(self):
        amount = to_amount(Decimal("-0"))
        assert amount == ZERO
        assert not amount.is_signed()

    @pytest.mark.parametrize("value", [None, True, "abc", "", Decimal("NaN"), "Infinity"])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError):
            to_amount(value)

    def test_rejects_negative(self):
        with pytest.raises(ValidationError, match="must not be negative"):
            to_amount("-1")

    def test_maximum_accepted(self):
        assert to_amount(MAX_AMOUNT) == MAX_AMOUNT

    def test_above_maximum_rejected(self):
        with pytest.raises(ValidationError, match="maximum"):
            to_amount(Decimal(2**256))

    def test_finest_fraction_accepted(self):
        assert to_amount("0.000000000000000001") == Decimal(1).scaleb(-MAX_DECIMALS)

    def test_trailing_zeros_beyond_scale_accepted(self):
        assert to_amount("2.50000000000000000000000000") == Decimal("2.5")

    @pytest.mark.parametrize("value", [Decimal("1E-150"), "0.0000000000000000001", "1.0000000000000000001"])
    def test_finer_than_scale_rejected(self, value):
        with pytest.raises(ValidationError, match="decimal places"):
            to_amount(value)

    def test_full_scale_at_maximum_accepted(self):
        value = Decimal(f"{2**256 - 2}.999999999999999999")
        assert to_amount(value) == value

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError, match="capacity"):
            to_amount("x", field="capacity")


class TestCheckedArithmetic:
    """Tests for checked_add / checked_sub / exact_add."""

    def test_add(self):
        assert checked_add(Decimal("0.1"), Decimal("0.2")) == Decimal("0.3")

    def test_add_at_bound(self):
        assert checked_add(Decimal(2**256 - 2), Decimal("1")) == MAX_AMOUNT

    def test_add_overflow(self):
        with pytest.raises(AmountOverflowError) as exc_info:
            checked_add(MAX_AMOUNT, Decimal("1"), "credit total")
        assert exc_info.value.operation == "credit total"

    def test_overflow_is_invariant_violation(self):
        with pytest.raises(InvariantViolationError):
            checked_add(MAX_AMOUNT, MAX_AMOUNT)

    def test_exact_add_ignores_bound(self):
        assert exact_add(MAX_AMOUNT, Decimal("1")) == Decimal(2**256)

    def test_exact_add_keeps_fractional_digits(self):
        result = exact_add(Decimal(2**256 - 2), Decimal("0.000001"))
        assert result == Decimal(f"{2**256 - 2}.000001")

    def test_sub(self):
        assert checked_sub(Decimal("10"), Decimal("2.5")) == Decimal("7.5")

    def test_sub_to_zero(self):
        assert checked_sub(Decimal("10"), Decimal("10")).is_zero()

    def test_sub_underflow(self):
        with pytest.raises(AmountOverflowError, match="underflow"):
            checked_sub(Decimal("1"), Decimal("2"))
