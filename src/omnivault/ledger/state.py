"""
Vault ledger state.

Holds every balance, the running total, the audit counters and the
notification log of one vault. All mutation goes through ``credit`` and
``debit``, which apply overflow-checked arithmetic and keep the total in step
with the balances. ``snapshot``/``restore`` give the vault its transactional
boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from omnivault.core.events import VaultNotification
from omnivault.core.exceptions import InvariantViolationError
from omnivault.utils.amounts import ZERO, checked_add, checked_sub, exact_add


@dataclass
class VaultState:
    """
    Mutable accounting state of a vault.

    Attributes:
        capacity: Maximum total value the vault may hold (immutable)
        withdrawal_limit: Maximum value movable by one withdrawal (immutable)
        total_held: Running sum of all balances
        balances: Per-account balance; absent means zero
        deposit_count: Global deposit counter
        withdrawal_count: Global withdrawal counter
        deposit_count_by_account: Per-account deposit counters
        withdrawal_count_by_account: Per-account withdrawal counters
        notifications: Emitted notification log, oldest first
    """

    capacity: Decimal
    withdrawal_limit: Decimal
    total_held: Decimal = ZERO
    balances: dict[str, Decimal] = field(default_factory=dict)
    deposit_count: int = 0
    withdrawal_count: int = 0
    deposit_count_by_account: dict[str, int] = field(default_factory=dict)
    withdrawal_count_by_account: dict[str, int] = field(default_factory=dict)
    notifications: list[VaultNotification] = field(default_factory=list)

    def balance_of(self, account: str) -> Decimal:
        return self.balances.get(account, ZERO)

    def credit(self, account: str, amount: Decimal) -> Decimal:
        """
        Apply a deposit's effects and return the new balance.

        Both sums are computed before anything is written, so an overflow
        leaves the state untouched.
        """
        new_balance = checked_add(self.balance_of(account), amount, "credit balance")
        new_total = checked_add(self.total_held, amount, "credit total")

        self.balances[account] = new_balance
        self.total_held = new_total
        self.deposit_count += 1
        self.deposit_count_by_account[account] = self.deposit_count_by_account.get(account, 0) + 1
        return new_balance

    def debit(self, account: str, amount: Decimal) -> Decimal:
        """Apply a withdrawal's effects and return the new balance."""
        new_balance = checked_sub(self.balance_of(account), amount, "debit balance")
        new_total = checked_sub(self.total_held, amount, "debit total")

        self.balances[account] = new_balance
        self.total_held = new_total
        self.withdrawal_count += 1
        self.withdrawal_count_by_account[account] = (
            self.withdrawal_count_by_account.get(account, 0) + 1
        )
        return new_balance

    def emit(self, notification: VaultNotification) -> None:
        self.notifications.append(notification)

    def snapshot(self) -> StateSnapshot:
        """Capture everything an operation may change."""
        return StateSnapshot(
            total_held=self.total_held,
            balances=dict(self.balances),
            deposit_count=self.deposit_count,
            withdrawal_count=self.withdrawal_count,
            deposit_count_by_account=dict(self.deposit_count_by_account),
            withdrawal_count_by_account=dict(self.withdrawal_count_by_account),
            notification_count=len(self.notifications),
        )

    def restore(self, snapshot: StateSnapshot) -> None:
        """Roll the state back to a snapshot taken earlier."""
        self.total_held = snapshot.total_held
        self.balances = dict(snapshot.balances)
        self.deposit_count = snapshot.deposit_count
        self.withdrawal_count = snapshot.withdrawal_count
        self.deposit_count_by_account = dict(snapshot.deposit_count_by_account)
        self.withdrawal_count_by_account = dict(snapshot.withdrawal_count_by_account)
        del self.notifications[snapshot.notification_count :]

    def verify_invariants(self) -> None:
        """
        Check the accounting invariants.

        Raises:
            InvariantViolationError: If the total differs from the sum of
                balances, exceeds capacity, or any balance is negative
        """
        negative = [account for account, balance in self.balances.items() if balance < 0]
        if negative:
            raise InvariantViolationError(
                "Negative balance recorded", details={"accounts": negative}
            )

        balance_sum = ZERO
        for balance in self.balances.values():
            balance_sum = exact_add(balance_sum, balance, "invariant sum")

        if balance_sum != self.total_held:
            raise InvariantViolationError(
                "Total held does not match sum of balances",
                details={"total_held": str(self.total_held), "sum": str(balance_sum)},
            )
        if self.total_held > self.capacity:
            raise InvariantViolationError(
                "Total held exceeds capacity",
                details={"total_held": str(self.total_held), "capacity": str(self.capacity)},
            )


@dataclass(frozen=True)
class StateSnapshot:
    """Point-in-time copy of a VaultState's mutable fields."""

    total_held: Decimal
    balances: dict[str, Decimal]
    deposit_count: int
    withdrawal_count: int
    deposit_count_by_account: dict[str, int]
    withdrawal_count_by_account: dict[str, int]
    notification_count: int
