"""
Admission module - pre-condition checks for vault operations.

Every check is a pure predicate evaluated before any state mutation:
- NonZeroAmountCheck: rejects zero amounts
- CapacityCheck: caps the total value held by the vault
- SufficientBalanceCheck: withdrawals never exceed the caller's balance
- WithdrawalLimitCheck: caps the size of a single withdrawal

Example:
    >>> from omnivault.admission import withdrawal_chain, OperationContext
    >>> chain = withdrawal_chain(limit=Decimal("100"))
    >>> chain.enforce(context)  # raises the first failing check's error
"""

from omnivault.admission.base import (
    AdmissionChain,
    AdmissionCheck,
    AdmissionResult,
    OperationContext,
)
from omnivault.admission.checks import (
    CapacityCheck,
    NonZeroAmountCheck,
    SufficientBalanceCheck,
    WithdrawalLimitCheck,
    deposit_chain,
    withdrawal_chain,
)

__all__ = [
    # Base classes
    "AdmissionCheck",
    "AdmissionChain",
    "AdmissionResult",
    "OperationContext",
    # Concrete checks
    "NonZeroAmountCheck",
    "CapacityCheck",
    "SufficientBalanceCheck",
    "WithdrawalLimitCheck",
    # Chains
    "deposit_chain",
    "withdrawal_chain",
]
