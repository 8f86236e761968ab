"""
Exception hierarchy for OmniVault.

All vault-specific exceptions inherit from OmniVaultError for easy catching.
Every failure aborts the whole operation, so an exception reaching the caller
always means the vault state is exactly what it was before the call.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class OmniVaultError(Exception):
    """
    Base exception for all OmniVault errors.

    Catch this to handle any vault-related exception.

    Example:
        >>> try:
        ...     await vault.withdraw("alice", Decimal("10"))
        ... except OmniVaultError as e:
        ...     print(f"Withdrawal rejected: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(OmniVaultError):
    """
    Configuration is missing or invalid.

    Raised when:
    - Capacity or withdrawal limit is missing, malformed or not positive
    - Environment variables hold unparsable values
    """

    pass


class ValidationError(OmniVaultError):
    """
    Input validation error.

    Raised when:
    - An amount is negative, NaN, infinite or not numeric
    - An amount exceeds the representable maximum
    - Value is attached to an instruction that does not accept value
    - An amount is finer than the smallest representable unit
    - A call has no caller
    """

    pass


class AdmissionError(OmniVaultError):
    """
    Base exception for admission check failures.

    Raised before any state mutation, so a caught AdmissionError never
    leaves partial effects behind.
    """

    def __init__(
        self,
        message: str,
        check_name: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.check_name = check_name


class ZeroAmountError(AdmissionError):
    """A deposit or withdrawal was requested with amount zero."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"{operation.capitalize()} amount must be greater than zero",
            check_name="non_zero_amount",
            details=details,
        )
        self.operation = operation

    def __str__(self) -> str:
        return self.message


class CapacityExceededError(AdmissionError):
    """
    A deposit would push the total held above the vault capacity.

    ``attempted_total`` is the post-deposit total (current total plus the
    deposit), not the current total.
    """

    def __init__(
        self,
        attempted_total: Decimal,
        capacity: Decimal,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "Deposit would exceed vault capacity",
            check_name="capacity",
            details=details,
        )
        self.attempted_total = attempted_total
        self.capacity = capacity

    def __str__(self) -> str:
        return f"{self.message} | Attempted total: {self.attempted_total}, Capacity: {self.capacity}"


class InsufficientBalanceError(AdmissionError):
    """
    Account does not hold enough balance for the withdrawal.
    """

    def __init__(
        self,
        available: Decimal,
        requested: Decimal,
        account: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "Insufficient balance for withdrawal",
            check_name="sufficient_balance",
            details=details,
        )
        self.available = available
        self.requested = requested
        self.account = account
        self.shortfall = requested - available

    def __str__(self) -> str:
        return (
            f"{self.message} | "
            f"Available: {self.available}, Requested: {self.requested}, "
            f"Shortfall: {self.shortfall}"
        )


class WithdrawalLimitExceededError(AdmissionError):
    """A single withdrawal exceeds the per-operation ceiling."""

    def __init__(
        self,
        requested: Decimal,
        limit: Decimal,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "Withdrawal exceeds per-operation limit",
            check_name="withdrawal_limit",
            details=details,
        )
        self.requested = requested
        self.limit = limit

    def __str__(self) -> str:
        return f"{self.message} | Requested: {self.requested}, Limit: {self.limit}"


class TransferFailedError(OmniVaultError):
    """
    Releasing funds to the recipient failed.

    Raised after the withdrawal's effects have been rolled back. The
    underlying releaser exception, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        recipient: str,
        amount: Decimal,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__("Fund transfer failed", details)
        self.recipient = recipient
        self.amount = amount
        self.reason = reason

    def __str__(self) -> str:
        text = f"{self.message} | Recipient: {self.recipient}, Amount: {self.amount}"
        if self.reason:
            text += f", Reason: {self.reason}"
        return text


class InvariantViolationError(OmniVaultError):
    """
    The vault's internal accounting is inconsistent.

    Never expected in normal operation; indicates a bug or corrupted state.
    """

    pass


class AmountOverflowError(InvariantViolationError):
    """Checked arithmetic on amounts overflowed, underflowed or lost precision."""

    def __init__(
        self,
        message: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
