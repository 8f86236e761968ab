"""
DirectReleaser - in-process fund hand-off.

Recipients may register an async handler that is awaited with the released
amount. The handler runs inside the withdrawal that released the funds, so
it may call back into the vault; it observes the post-withdrawal state.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from decimal import Decimal

from omnivault.core.logging import get_logger
from omnivault.protocols.base import FundReleaser, ReleaseResult
from omnivault.utils.amounts import ZERO, checked_add, checked_sub

# Returning False rejects the transfer; None or True accepts it
RecipientHandler = Callable[[Decimal], Awaitable[bool | None]]


class DirectReleaser(FundReleaser):
    """Releaser that hands funds to recipients living in the same process."""

    def __init__(self, accept_unknown: bool = True) -> None:
        """
        Initialize DirectReleaser.

        Args:
            accept_unknown: Whether recipients without a handler accept funds
        """
        self._accept_unknown = accept_unknown
        self._handlers: dict[str, RecipientHandler] = {}
        self._rejecting: set[str] = set()
        self._released: dict[str, Decimal] = {}
        # reference -> (recipient, amount) of completed releases
        self._releases: dict[str, tuple[str, Decimal]] = {}
        self._logger = get_logger("release.direct")

    @property
    def name(self) -> str:
        return "direct"

    @property
    def reversible(self) -> bool:
        return True

    def register(self, recipient: str, handler: RecipientHandler) -> None:
        """Register the handler awaited whenever ``recipient`` receives funds."""
        self._handlers[recipient] = handler

    def unregister(self, recipient: str) -> bool:
        return self._handlers.pop(recipient, None) is not None

    def reject(self, recipient: str) -> None:
        """Make ``recipient`` refuse every transfer."""
        self._rejecting.add(recipient)

    def accept(self, recipient: str) -> None:
        self._rejecting.discard(recipient)

    def released_to(self, recipient: str) -> Decimal:
        """Total released to a recipient so far."""
        return self._released.get(recipient, ZERO)

    async def release(
        self,
        recipient: str,
        amount: Decimal,
        reference: str | None = None,
    ) -> ReleaseResult:
        reference = reference or str(uuid.uuid4())

        if recipient in self._rejecting:
            return self._failed(recipient, amount, reference, "Recipient rejects transfers")

        handler = self._handlers.get(recipient)
        if handler is None and not self._accept_unknown:
            return self._failed(recipient, amount, reference, "Unknown recipient")

        if handler is not None:
            # Exceptions propagate; the vault turns them into TransferFailedError
            accepted = await handler(amount)
            if accepted is False:
                return self._failed(recipient, amount, reference, "Recipient handler refused funds")

        self._released[recipient] = checked_add(
            self.released_to(recipient), amount, "direct release"
        )
        self._releases[reference] = (recipient, amount)
        self._logger.debug(f"Released {amount} to {recipient} (ref: {reference})")
        return ReleaseResult(success=True, recipient=recipient, amount=amount, reference=reference)

    async def revert(self, reference: str) -> bool:
        """Return a completed release to the vault side."""
        entry = self._releases.pop(reference, None)
        if entry is None:
            return False
        recipient, amount = entry
        self._released[recipient] = checked_sub(
            self.released_to(recipient), amount, "direct release revert"
        )
        self._logger.debug(f"Reverted release of {amount} to {recipient} (ref: {reference})")
        return True

    def _failed(self, recipient: str, amount: Decimal, reference: str, error: str) -> ReleaseResult:
        self._logger.info(f"Release of {amount} to {recipient} failed: {error}")
        return ReleaseResult(
            success=False,
            recipient=recipient,
            amount=amount,
            reference=reference,
            error=error,
        )
