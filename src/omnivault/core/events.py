"""
Vault notifications.

Emitted on every successful deposit and withdrawal. A notification is
appended to the vault's notification log the moment its operation's effects
are applied, and delivered to subscribers once the outermost operation
commits.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from omnivault.core.types import EntryPath


class NotificationType(str, Enum):
    """Types of vault notifications."""

    DEPOSIT = "vault.deposit"
    WITHDRAWAL = "vault.withdrawal"


@dataclass(frozen=True)
class VaultNotification:
    """
    Base notification carrying (account, amount, new balance).

    Attributes:
        account: Account whose balance changed
        amount: Amount deposited or withdrawn
        new_balance: Account balance after the operation
        path: Entry point the operation came through
        id: Unique notification ID
        timestamp: When the effects were applied
    """

    type: ClassVar[NotificationType]

    account: str
    amount: Decimal
    new_balance: Decimal
    path: EntryPath
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for delivery or storage."""
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(),
            "account": self.account,
            "amount": str(self.amount),
            "new_balance": str(self.new_balance),
            "path": self.path.value,
        }


@dataclass(frozen=True)
class DepositNotification(VaultNotification):
    type: ClassVar[NotificationType] = NotificationType.DEPOSIT


@dataclass(frozen=True)
class WithdrawalNotification(VaultNotification):
    type: ClassVar[NotificationType] = NotificationType.WITHDRAWAL
