"""
Vault - single-asset custodial ledger.

Entry points run admission checks, then apply state effects, then (for
withdrawals) release funds, in strict checks-effects-interactions order.
Each operation is one transaction: on any failure the state is restored to
the snapshot taken when the operation started.
"""

from __future__ import annotations

import inspect
from collections import deque
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any, TypeVar

from omnivault.admission import AdmissionChain, OperationContext, deposit_chain, withdrawal_chain
from omnivault.core.config import VaultConfig
from omnivault.core.events import DepositNotification, VaultNotification, WithdrawalNotification
from omnivault.core.exceptions import AdmissionError, TransferFailedError, ValidationError
from omnivault.core.logging import configure_logging, get_logger
from omnivault.core.types import EntryPath, Instruction, VaultCall
from omnivault.journal import Journal, JournalEntry
from omnivault.ledger import SerialExecutor, VaultState
from omnivault.protocols import DirectReleaser, FundReleaser, HttpReleaser, ReleaseResult
from omnivault.storage import storage_from_config
from omnivault.utils.amounts import checked_sub, to_amount

T = TypeVar("T")

Listener = Callable[[VaultNotification], Awaitable[None] | None]
# (notification, total held after it, release reference)
Delivery = tuple[VaultNotification, Decimal, str | None]


class Vault:
    """
    Custodial vault with a global capacity and a per-withdrawal limit.

    Example:
        >>> vault = Vault(capacity=Decimal("1000"), withdrawal_limit=Decimal("100"))
        >>> await vault.deposit("alice", Decimal("500"))
        >>> await vault.withdraw("alice", Decimal("50"))
        >>> vault.balance_of("alice")
        Decimal('450')
    """

    def __init__(
        self,
        capacity: Decimal | int | str | None = None,
        withdrawal_limit: Decimal | int | str | None = None,
        *,
        config: VaultConfig | None = None,
        releaser: FundReleaser | None = None,
        journal: Journal | None = None,
    ) -> None:
        """
        Initialize the vault.

        Args:
            capacity: Maximum total value the vault may hold
            withdrawal_limit: Maximum value movable by one withdrawal
            config: Full configuration (replaces capacity/withdrawal_limit)
            releaser: Fund releaser for withdrawals (DirectReleaser if None)
            journal: Optional audit journal of committed operations

        Raises:
            ConfigurationError: If capacity or withdrawal limit is not a
                positive amount
        """
        if config is None:
            config = VaultConfig(capacity=capacity, withdrawal_limit=withdrawal_limit)  # type: ignore[arg-type]

        self._config = config
        self._state = VaultState(
            capacity=config.capacity,
            withdrawal_limit=config.withdrawal_limit,
        )
        self._deposit_chain = deposit_chain(config.capacity)
        self._withdrawal_chain = withdrawal_chain(config.withdrawal_limit)
        self._releaser = releaser or DirectReleaser()
        self._journal = journal
        self._executor = SerialExecutor()
        self._listeners: list[Listener] = []
        # Emitted by the open operation, delivered once the outermost commits
        self._pending: list[Delivery] = []
        # Releases made by the open operation, reverted if it rolls back
        self._open_releases: list[str] = []
        # Committed and waiting for delivery, in commit order
        self._outbox: deque[Delivery] = deque()
        self._delivering = False
        self._logger = get_logger("vault")

        self._logger.debug(
            f"Vault initialized (capacity: {config.capacity}, "
            f"withdrawal limit: {config.withdrawal_limit}, releaser: {self._releaser.name})"
        )

    @classmethod
    def from_config(
        cls,
        config: VaultConfig,
        *,
        releaser: FundReleaser | None = None,
        journal: Journal | None = None,
    ) -> Vault:
        """
        Build a vault wired from configuration.

        Applies the configured log level, and uses an HttpReleaser when
        ``payout_url`` is configured and a journal on the configured storage
        backend, unless given explicitly.
        """
        configure_logging(config.log_level)
        if releaser is None and config.payout_url:
            releaser = HttpReleaser.from_config(config)
        if journal is None:
            journal = Journal(storage_from_config(config))
        return cls(config=config, releaser=releaser, journal=journal)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def capacity(self) -> Decimal:
        return self._state.capacity

    @property
    def withdrawal_limit(self) -> Decimal:
        return self._state.withdrawal_limit

    @property
    def releaser(self) -> FundReleaser:
        return self._releaser

    @property
    def journal(self) -> Journal | None:
        return self._journal

    @property
    def notifications(self) -> tuple[VaultNotification, ...]:
        """Emitted notifications, oldest first. Includes in-flight operations."""
        return tuple(self._state.notifications)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> Decimal:
        return self._state.balance_of(account)

    def total_held(self) -> Decimal:
        return self._state.total_held

    def available_capacity(self) -> Decimal:
        return checked_sub(self._state.capacity, self._state.total_held, "available capacity")

    def deposit_count(self) -> int:
        return self._state.deposit_count

    def withdrawal_count(self) -> int:
        return self._state.withdrawal_count

    def deposit_count_of(self, account: str) -> int:
        return self._state.deposit_count_by_account.get(account, 0)

    def withdrawal_count_of(self, account: str) -> int:
        return self._state.withdrawal_count_by_account.get(account, 0)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Deliver every committed notification to ``listener``."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def deposit(self, caller: str, value: Decimal | int | str) -> DepositNotification:
        """
        Credit the value attached to the call to the caller's account.

        Raises:
            ZeroAmountError: If value is zero
            CapacityExceededError: If the vault would exceed capacity
            ValidationError: If value is not a valid amount
        """
        return await self._run(lambda: self._admit_and_credit(caller, value, EntryPath.DEPOSIT))

    async def receive(self, caller: str, value: Decimal | int | str) -> DepositNotification:
        """Value arriving with no instruction. Same admission and effects as deposit."""
        return await self._run(lambda: self._admit_and_credit(caller, value, EntryPath.RECEIVE))

    async def fallback(
        self,
        caller: str,
        value: Decimal | int | str,
        instruction: str | None = None,
    ) -> DepositNotification | None:
        """
        Value arriving with an unrecognized instruction.

        Non-zero value is deposited exactly like ``deposit``. Zero value is
        accepted as a no-op and returns None, unlike the other two deposit
        paths which reject it.
        """
        amount = to_amount(value, field="value")
        if amount.is_zero():
            self._logger.debug(
                f"Ignoring zero-value call from {caller} (instruction: {instruction!r})",
                extra={"account": caller, "operation": EntryPath.FALLBACK.value},
            )
            return None
        return await self._run(lambda: self._admit_and_credit(caller, amount, EntryPath.FALLBACK))

    async def withdraw(self, caller: str, amount: Decimal | int | str) -> WithdrawalNotification:
        """
        Debit the caller's account and release the funds to the caller.

        Raises:
            ZeroAmountError: If amount is zero
            InsufficientBalanceError: If amount exceeds the caller's balance
            WithdrawalLimitExceededError: If amount exceeds the withdrawal limit
            TransferFailedError: If the release failed; nothing is changed
        """
        return await self._run(lambda: self._debit_and_release(caller, amount))

    async def dispatch(self, call: VaultCall) -> VaultNotification | None:
        """
        Route a host call to its entry point.

        No instruction goes to ``receive``, ``deposit``/``withdraw`` to their
        operations, and anything else to ``fallback``.
        """
        if call.is_bare:
            return await self.receive(call.caller, call.value)

        instruction = Instruction.parse(call.instruction)
        if instruction is Instruction.DEPOSIT:
            return await self.deposit(call.caller, call.value)
        if instruction is Instruction.WITHDRAW:
            if not to_amount(call.value, field="value").is_zero():
                raise ValidationError("withdraw does not accept attached value")
            if "amount" not in call.args:
                raise ValidationError("withdraw requires an 'amount' argument")
            return await self.withdraw(call.caller, call.args["amount"])

        return await self.fallback(call.caller, call.value, call.instruction)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run one operation as a serialized, all-or-nothing transaction.

        Notifications are delivered after the outermost operation commits,
        outside the serial lock. If another task is already delivering, this
        call returns and that task delivers these notifications after its own.
        """
        async with self._executor.serialize() as depth:
            snapshot = self._state.snapshot()
            mark = len(self._pending)
            release_mark = len(self._open_releases)
            try:
                result = await operation()
                self._state.verify_invariants()
            except BaseException:
                await self._revert_releases(release_mark)
                self._state.restore(snapshot)
                del self._pending[mark:]
                raise

            if depth > 1:
                # The outermost operation commits and delivers nested work
                return result

            self._open_releases.clear()
            self._outbox.extend(self._pending)
            self._pending = []

        await self._drain_outbox()
        return result

    async def _revert_releases(self, mark: int) -> None:
        """Undo releases made since ``mark``, newest first."""
        while len(self._open_releases) > mark:
            reference = self._open_releases.pop()
            try:
                reverted = await self._releaser.revert(reference)
            except Exception:
                self._logger.exception(f"Failed to revert release {reference}")
                continue
            if not reverted:
                self._logger.warning(f"Release {reference} was not reverted: unknown reference")

    async def _admit_and_credit(
        self,
        caller: str,
        value: Decimal | int | str,
        path: EntryPath,
    ) -> DepositNotification:
        """Shared admission and effects for every deposit entry path."""
        account = _require_account(caller)
        amount = to_amount(value, field="value")

        self._admit(
            self._deposit_chain,
            OperationContext(
                account=account,
                amount=amount,
                operation=path.operation,
                balance=self._state.balance_of(account),
                total_held=self._state.total_held,
                path=path,
            ),
        )

        new_balance = self._state.credit(account, amount)
        notification = DepositNotification(
            account=account, amount=amount, new_balance=new_balance, path=path
        )
        self._state.emit(notification)
        self._pending.append((notification, self._state.total_held, None))

        self._logger.debug(
            f"Deposited {amount} for {account} via {path.value} (balance: {new_balance})",
            extra={"account": account, "operation": path.value, "amount": amount},
        )
        return notification

    async def _debit_and_release(
        self,
        caller: str,
        value: Decimal | int | str,
    ) -> WithdrawalNotification:
        account = _require_account(caller)
        amount = to_amount(value, field="amount")

        # Checks
        self._admit(
            self._withdrawal_chain,
            OperationContext(
                account=account,
                amount=amount,
                operation=EntryPath.WITHDRAW.operation,
                balance=self._state.balance_of(account),
                total_held=self._state.total_held,
                path=EntryPath.WITHDRAW,
            ),
        )

        if self._executor.depth > 1 and not self._releaser.reversible:
            # A rollback of the enclosing operation could not take these funds back
            reason = f"{self._releaser.name} releaser cannot revert nested releases"
            self._logger.warning(
                f"Withdrawal of {amount} by {account} refused: {reason}",
                extra={"account": account, "operation": "withdraw", "amount": amount},
            )
            raise TransferFailedError(account, amount, reason=reason)

        # Effects
        new_balance = self._state.debit(account, amount)
        total_after = self._state.total_held
        notification = WithdrawalNotification(
            account=account, amount=amount, new_balance=new_balance, path=EntryPath.WITHDRAW
        )
        self._state.emit(notification)
        # Reserve the slot now so delivery follows emission order
        slot = len(self._pending)
        self._pending.append((notification, total_after, None))

        # Interaction
        result = await self._release(account, amount, notification.id)
        self._open_releases.append(result.reference or notification.id)

        self._pending[slot] = (notification, total_after, result.reference)
        self._logger.debug(
            f"Withdrew {amount} for {account} (balance: {new_balance}, ref: {result.reference})",
            extra={"account": account, "operation": "withdraw", "amount": amount},
        )
        return notification

    async def _release(self, account: str, amount: Decimal, reference: str) -> ReleaseResult:
        try:
            result = await self._releaser.release(account, amount, reference=reference)
        except Exception as e:
            self._logger.warning(
                f"Release of {amount} to {account} raised {type(e).__name__}: {e}; rolling back",
                extra={"account": account, "operation": "withdraw", "amount": amount},
            )
            raise TransferFailedError(account, amount, reason=str(e)) from e

        if not result.success:
            self._logger.warning(
                f"Release of {amount} to {account} failed: {result.error}; rolling back",
                extra={"account": account, "operation": "withdraw", "amount": amount},
            )
            raise TransferFailedError(account, amount, reason=result.error)
        return result

    def _admit(self, chain: AdmissionChain, context: OperationContext) -> None:
        try:
            chain.enforce(context)
        except AdmissionError as e:
            self._logger.info(
                f"{context.operation.value.capitalize()} of {context.amount} by "
                f"{context.account} rejected: {e}",
                extra={
                    "account": context.account,
                    "operation": context.path.value,
                    "amount": context.amount,
                    "check": e.check_name,
                },
            )
            raise

    async def _drain_outbox(self) -> None:
        """Deliver committed notifications one at a time, in commit order."""
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._outbox:
                await self._deliver(*self._outbox.popleft())
        finally:
            self._delivering = False

    async def _deliver(
        self,
        notification: VaultNotification,
        total_after: Decimal,
        reference: str | None,
    ) -> None:
        """Journal and publish one notification. Its operation stays committed."""
        if self._journal is not None:
            try:
                await self._journal.record(
                    JournalEntry.from_notification(notification, total_after, reference)
                )
            except Exception:
                self._logger.exception(f"Failed to journal notification {notification.id}")

        for listener in list(self._listeners):
            try:
                outcome = listener(notification)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                self._logger.exception(
                    f"Listener {listener!r} failed on notification {notification.id}"
                )


def _require_account(caller: Any) -> str:
    if not isinstance(caller, str) or not caller.strip():
        raise ValidationError(f"caller must be a non-empty account id, got {caller!r}")
    return caller
