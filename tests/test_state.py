"""
Unit tests for VaultState.

Tests credit/debit effects, snapshot/restore and invariant verification.
"""

from decimal import Decimal

import pytest

from omnivault.core.events import DepositNotification, WithdrawalNotification
from omnivault.core.exceptions import AmountOverflowError, InvariantViolationError
from omnivault.core.types import EntryPath
from omnivault.ledger import StateSnapshot, VaultState
from omnivault.utils import MAX_AMOUNT


@pytest.fixture
def state() -> VaultState:
    return VaultState(capacity=Decimal("1000"), withdrawal_limit=Decimal("100"))


class TestCreditDebit:
    """Tests for credit and debit."""

    def test_initial_state(self, state):
        assert state.total_held == Decimal("0")
        assert state.balances == {}
        assert state.deposit_count == 0
        assert state.withdrawal_count == 0

    def test_credit(self, state):
        assert state.credit("alice", Decimal("40")) == Decimal("40")
        assert state.credit("alice", Decimal("2")) == Decimal("42")

        assert state.total_held == Decimal("42")
        assert state.deposit_count == 2
        assert state.deposit_count_by_account == {"alice": 2}

    def test_debit(self, state):
        state.credit("alice", Decimal("40"))
        assert state.debit("alice", Decimal("15")) == Decimal("25")

        assert state.total_held == Decimal("25")
        assert state.withdrawal_count == 1
        assert state.withdrawal_count_by_account == {"alice": 1}

    def test_debit_underflow_leaves_state_untouched(self, state):
        state.credit("alice", Decimal("10"))

        with pytest.raises(AmountOverflowError):
            state.debit("alice", Decimal("11"))

        assert state.balance_of("alice") == Decimal("10")
        assert state.withdrawal_count == 0

    def test_credit_overflow_leaves_state_untouched(self):
        state = VaultState(capacity=MAX_AMOUNT, withdrawal_limit=Decimal("1"))
        state.credit("alice", MAX_AMOUNT)

        with pytest.raises(AmountOverflowError):
            state.credit("bob", Decimal("1"))

        assert state.balance_of("bob") == Decimal("0")
        assert state.total_held == MAX_AMOUNT
        assert state.deposit_count == 1

    def test_balance_of_does_not_insert(self, state):
        assert state.balance_of("ghost") == Decimal("0")
        assert "ghost" not in state.balances


class TestSnapshot:
    """Tests for snapshot and restore."""

    def test_snapshot_is_independent_copy(self, state):
        state.credit("alice", Decimal("10"))
        snapshot = state.snapshot()
        state.credit("alice", Decimal("5"))

        assert isinstance(snapshot, StateSnapshot)
        assert snapshot.balances == {"alice": Decimal("10")}
        assert snapshot.deposit_count == 1

    def test_restore(self, state):
        state.credit("alice", Decimal("10"))
        state.emit(
            DepositNotification(
                account="alice",
                amount=Decimal("10"),
                new_balance=Decimal("10"),
                path=EntryPath.DEPOSIT,
            )
        )
        snapshot = state.snapshot()

        state.debit("alice", Decimal("10"))
        state.credit("bob", Decimal("7"))
        state.emit(
            WithdrawalNotification(
                account="alice",
                amount=Decimal("10"),
                new_balance=Decimal("0"),
                path=EntryPath.WITHDRAW,
            )
        )

        state.restore(snapshot)

        assert state.balances == {"alice": Decimal("10")}
        assert state.total_held == Decimal("10")
        assert state.deposit_count == 1
        assert state.withdrawal_count == 0
        assert state.deposit_count_by_account == {"alice": 1}
        assert state.withdrawal_count_by_account == {}
        assert len(state.notifications) == 1

    def test_restore_twice(self, state):
        snapshot = state.snapshot()
        state.credit("alice", Decimal("1"))
        state.restore(snapshot)
        state.credit("alice", Decimal("2"))
        state.restore(snapshot)

        assert state.balances == {}


class TestInvariants:
    """Tests for verify_invariants."""

    def test_consistent_state_passes(self, state):
        state.credit("alice", Decimal("600"))
        state.credit("bob", Decimal("400"))
        state.debit("bob", Decimal("100"))
        state.verify_invariants()

    def test_total_mismatch(self, state):
        state.credit("alice", Decimal("10"))
        state.total_held = Decimal("11")

        with pytest.raises(InvariantViolationError, match="sum of balances"):
            state.verify_invariants()

    def test_negative_balance(self, state):
        state.balances["alice"] = Decimal("-1")
        state.total_held = Decimal("-1")

        with pytest.raises(InvariantViolationError, match="Negative"):
            state.verify_invariants()

    def test_total_above_capacity(self, state):
        state.balances["alice"] = Decimal("1001")
        state.total_held = Decimal("1001")

        with pytest.raises(InvariantViolationError, match="exceeds capacity"):
            state.verify_invariants()
