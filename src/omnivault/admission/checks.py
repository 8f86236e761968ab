"""
Concrete admission checks.

Deposit chain: NonZeroAmountCheck, CapacityCheck.
Withdrawal chain: NonZeroAmountCheck, SufficientBalanceCheck, WithdrawalLimitCheck.
"""

from __future__ import annotations

from decimal import Decimal

from omnivault.admission.base import AdmissionChain, AdmissionCheck, AdmissionResult, OperationContext
from omnivault.core.exceptions import (
    CapacityExceededError,
    InsufficientBalanceError,
    WithdrawalLimitExceededError,
    ZeroAmountError,
)
from omnivault.utils.amounts import checked_sub, exact_add


class NonZeroAmountCheck(AdmissionCheck):
    """Rejects zero-amount deposits and withdrawals."""

    @property
    def name(self) -> str:
        return "non_zero_amount"

    def check(self, context: OperationContext) -> AdmissionResult:
        if context.amount.is_zero():
            return AdmissionResult.reject(
                self.name,
                ZeroAmountError(context.operation.value),
                path=context.path.value,
            )
        return AdmissionResult(allowed=True, check_name=self.name)


class CapacityCheck(AdmissionCheck):
    """
    Rejects deposits that would push the total held above capacity.

    The reported total is the attempted post-deposit total.
    """

    def __init__(self, capacity: Decimal) -> None:
        self._capacity = capacity

    @property
    def name(self) -> str:
        return "capacity"

    @property
    def capacity(self) -> Decimal:
        return self._capacity

    def check(self, context: OperationContext) -> AdmissionResult:
        attempted_total = exact_add(context.total_held, context.amount, "capacity check")
        if attempted_total > self._capacity:
            return AdmissionResult.reject(
                self.name,
                CapacityExceededError(attempted_total, self._capacity),
                attempted_total=str(attempted_total),
                capacity=str(self._capacity),
            )
        remaining = checked_sub(self._capacity, attempted_total, "capacity check")
        return AdmissionResult(
            allowed=True,
            check_name=self.name,
            metadata={"remaining": str(remaining)},
        )


class SufficientBalanceCheck(AdmissionCheck):
    """Rejects withdrawals larger than the caller's balance."""

    @property
    def name(self) -> str:
        return "sufficient_balance"

    def check(self, context: OperationContext) -> AdmissionResult:
        if context.amount > context.balance:
            return AdmissionResult.reject(
                self.name,
                InsufficientBalanceError(context.balance, context.amount, account=context.account),
                available=str(context.balance),
                requested=str(context.amount),
            )
        return AdmissionResult(allowed=True, check_name=self.name)


class WithdrawalLimitCheck(AdmissionCheck):
    """Rejects withdrawals above the per-operation ceiling."""

    def __init__(self, limit: Decimal) -> None:
        self._limit = limit

    @property
    def name(self) -> str:
        return "withdrawal_limit"

    @property
    def limit(self) -> Decimal:
        return self._limit

    def check(self, context: OperationContext) -> AdmissionResult:
        if context.amount > self._limit:
            return AdmissionResult.reject(
                self.name,
                WithdrawalLimitExceededError(context.amount, self._limit),
                requested=str(context.amount),
                limit=str(self._limit),
            )
        return AdmissionResult(allowed=True, check_name=self.name)


def deposit_chain(capacity: Decimal) -> AdmissionChain:
    """Build the admission chain shared by every deposit entry path."""
    return AdmissionChain([NonZeroAmountCheck(), CapacityCheck(capacity)])


def withdrawal_chain(limit: Decimal) -> AdmissionChain:
    """Build the withdrawal admission chain, in its fixed precedence order."""
    return AdmissionChain([NonZeroAmountCheck(), SufficientBalanceCheck(), WithdrawalLimitCheck(limit)])
