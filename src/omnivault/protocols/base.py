"""
Fund release interface.

A FundReleaser is the host's value-transfer primitive: it attempts to hand
an amount to a recipient outside the vault and reports whether that worked.
The vault calls it strictly after a withdrawal's effects are applied.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class ReleaseResult:
    """
    Outcome of a fund release attempt.

    Attributes:
        success: Whether the recipient received the funds
        recipient: Recipient the funds were sent to
        amount: Amount released
        reference: Releaser-specific reference (transfer or payout ID)
        error: Failure reason when success is False
        metadata: Additional releaser data
    """

    success: bool
    recipient: str
    amount: Decimal
    reference: str | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.success


class FundReleaser(ABC):
    """
    Abstract base class for fund releasers.

    Implementations:
    - DirectReleaser: in-process hand-off to registered recipient handlers
    - HttpReleaser: payout request to an external custody service

    A failed release must be reported, either as a ReleaseResult with
    ``success=False`` or by raising; it must never be reported as success.

    A release made by a withdrawal nested inside another operation is undone
    with ``revert`` if the outer operation rolls back. Releasers that cannot
    take funds back leave ``reversible`` False, and the vault refuses nested
    withdrawals through them.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in logs."""
        ...

    @abstractmethod
    async def release(
        self,
        recipient: str,
        amount: Decimal,
        reference: str | None = None,
    ) -> ReleaseResult:
        """
        Attempt to move ``amount`` to ``recipient``.

        Args:
            recipient: Account receiving the funds
            amount: Amount to release
            reference: Caller-supplied reference, used as idempotency key
                where the releaser supports one

        Returns:
            ReleaseResult describing the outcome
        """
        ...

    @property
    def reversible(self) -> bool:
        """Whether completed releases can be taken back with ``revert``."""
        return False

    async def revert(self, reference: str) -> bool:
        """
        Take back a completed release.

        Args:
            reference: Reference reported by the successful release

        Returns:
            True if the release was reverted, False if it was unknown
        """
        raise NotImplementedError(f"{self.name} releases cannot be reverted")
