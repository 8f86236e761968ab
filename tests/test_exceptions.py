"""Unit tests for exceptions module."""

from decimal import Decimal

import pytest

from omnivault.core.exceptions import (
    AdmissionError,
    AmountOverflowError,
    CapacityExceededError,
    ConfigurationError,
    InsufficientBalanceError,
    InvariantViolationError,
    OmniVaultError,
    TransferFailedError,
    ValidationError,
    WithdrawalLimitExceededError,
    ZeroAmountError,
)


class TestOmniVaultError:
    """Tests for base exception."""

    def test_basic_error(self) -> None:
        """Test basic error creation."""
        error = OmniVaultError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details == {}

    def test_error_with_details(self) -> None:
        """Test error with details dict."""
        error = OmniVaultError("Journal write failed", details={"collection": "journal_entries"})

        assert "Journal write failed" in str(error)
        assert "Details:" in str(error)
        assert error.details["collection"] == "journal_entries"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("bad"),
            ValidationError("bad"),
            ZeroAmountError("deposit"),
            CapacityExceededError(Decimal("11"), Decimal("10")),
            InsufficientBalanceError(Decimal("1"), Decimal("2")),
            WithdrawalLimitExceededError(Decimal("2"), Decimal("1")),
            TransferFailedError("alice", Decimal("1")),
            AmountOverflowError("overflow", operation="credit"),
        ],
    )
    def test_is_catchable_as_base_type(self, error) -> None:
        """Test that specific errors can be caught as base type."""
        with pytest.raises(OmniVaultError):
            raise error


class TestAdmissionErrors:
    """Tests for admission errors."""

    def test_zero_amount(self) -> None:
        error = ZeroAmountError("deposit")

        assert isinstance(error, AdmissionError)
        assert str(error) == "Deposit amount must be greater than zero"
        assert error.check_name == "non_zero_amount"

    def test_capacity_exceeded(self) -> None:
        error = CapacityExceededError(Decimal("1100"), Decimal("1000"))

        assert error.check_name == "capacity"
        assert "Attempted total: 1100" in str(error)
        assert "Capacity: 1000" in str(error)

    def test_insufficient_balance(self) -> None:
        error = InsufficientBalanceError(Decimal("450"), Decimal("1000"), account="A")

        assert error.shortfall == Decimal("550")
        assert error.account == "A"
        assert "Shortfall: 550" in str(error)

    def test_withdrawal_limit(self) -> None:
        error = WithdrawalLimitExceededError(Decimal("150"), Decimal("100"))

        assert error.check_name == "withdrawal_limit"
        assert str(error) == "Withdrawal exceeds per-operation limit | Requested: 150, Limit: 100"


class TestTransferFailedError:
    """Tests for TransferFailedError."""

    def test_without_reason(self) -> None:
        error = TransferFailedError("alice", Decimal("5"))
        assert str(error) == "Fund transfer failed | Recipient: alice, Amount: 5"

    def test_with_reason(self) -> None:
        error = TransferFailedError("alice", Decimal("5"), reason="Recipient rejects transfers")

        assert error.reason == "Recipient rejects transfers"
        assert str(error).endswith("Reason: Recipient rejects transfers")

    def test_not_an_admission_error(self) -> None:
        assert not isinstance(TransferFailedError("a", Decimal("1")), AdmissionError)


class TestInvariantErrors:
    """Tests for invariant errors."""

    def test_overflow_is_invariant_violation(self) -> None:
        error = AmountOverflowError("Amount overflow", operation="credit total")

        assert isinstance(error, InvariantViolationError)
        assert error.operation == "credit total"
