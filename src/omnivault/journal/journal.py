"""
Audit journal of committed vault operations.

Every deposit and withdrawal that commits is written here through the
StorageBackend. Rolled-back operations never reach the journal.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from omnivault.core.events import VaultNotification, WithdrawalNotification
from omnivault.core.types import EntryPath
from omnivault.utils.amounts import ZERO, exact_add

if TYPE_CHECKING:
    from omnivault.storage.base import StorageBackend


class JournalEntryType(str, Enum):
    """Types of journal entries."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass
class JournalEntry:
    """
    A single committed vault operation.

    Attributes:
        id: Unique entry ID (the notification ID)
        timestamp: When the operation's effects were applied
        account: Account whose balance changed
        amount: Amount deposited or withdrawn
        entry_type: Deposit or withdrawal
        path: Entry point the operation came through
        balance_after: Account balance after the operation
        total_held_after: Vault total after the operation
        reference: Release reference for withdrawals
        metadata: Additional data
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    account: str = ""
    amount: Decimal = ZERO
    entry_type: JournalEntryType = JournalEntryType.DEPOSIT
    path: EntryPath = EntryPath.DEPOSIT
    balance_after: Decimal = ZERO
    total_held_after: Decimal = ZERO
    reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_notification(
        cls,
        notification: VaultNotification,
        total_held_after: Decimal,
        reference: str | None = None,
    ) -> JournalEntry:
        entry_type = (
            JournalEntryType.WITHDRAWAL
            if isinstance(notification, WithdrawalNotification)
            else JournalEntryType.DEPOSIT
        )
        return cls(
            id=notification.id,
            timestamp=notification.timestamp,
            account=notification.account,
            amount=notification.amount,
            entry_type=entry_type,
            path=notification.path,
            balance_after=notification.new_balance,
            total_held_after=total_held_after,
            reference=reference,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "account": self.account,
            "amount": str(self.amount),
            "entry_type": self.entry_type.value,
            "path": self.path.value,
            "balance_after": str(self.balance_after),
            "total_held_after": str(self.total_held_after),
            "reference": self.reference,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JournalEntry:
        """Create JournalEntry from dictionary."""
        ts_str = data.get("timestamp")
        timestamp = datetime.fromisoformat(ts_str) if ts_str else datetime.now()

        return cls(
            id=data.get("id", str(uuid.uuid4())),
            timestamp=timestamp,
            account=data.get("account", ""),
            amount=Decimal(str(data.get("amount", "0"))),
            entry_type=JournalEntryType(data.get("entry_type", JournalEntryType.DEPOSIT.value)),
            path=EntryPath(data.get("path", EntryPath.DEPOSIT.value)),
            balance_after=Decimal(str(data.get("balance_after", "0"))),
            total_held_after=Decimal(str(data.get("total_held_after", "0"))),
            reference=data.get("reference"),
            metadata=data.get("metadata", {}),
        )


class Journal:
    """
    Audit journal using StorageBackend.

    Append-only in normal operation; ``clear`` exists for tests and resets.
    """

    COLLECTION = "journal_entries"

    def __init__(self, storage: StorageBackend, collection: str | None = None) -> None:
        """
        Initialize journal with storage backend.

        Args:
            storage: Storage backend (InMemory, ...)
            collection: Collection name, to keep several vaults apart
        """
        self._storage = storage
        self._collection = collection or self.COLLECTION

    async def record(self, entry: JournalEntry) -> str:
        """Record an entry and return its ID."""
        await self._storage.save(self._collection, entry.id, entry.to_dict())
        return entry.id

    async def get(self, entry_id: str) -> JournalEntry | None:
        data = await self._storage.get(self._collection, entry_id)
        if not data:
            return None
        return JournalEntry.from_dict(data)

    async def query(
        self,
        account: str | None = None,
        entry_type: JournalEntryType | None = None,
        path: EntryPath | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 100,
    ) -> list[JournalEntry]:
        """
        Query journal entries, newest first.

        Args:
            account: Filter by account
            entry_type: Filter by deposit/withdrawal
            path: Filter by entry path
            from_date: Entries at or after this time
            to_date: Entries at or before this time
            limit: Maximum entries to return
        """
        filters: dict[str, Any] = {}
        if account:
            filters["account"] = account
        if entry_type:
            filters["entry_type"] = entry_type.value
        if path:
            filters["path"] = path.value

        # ISO timestamps sort chronologically as strings
        raw_results = await self._storage.query(
            self._collection, filters=filters, order_by="timestamp", descending=True
        )
        entries = [JournalEntry.from_dict(d) for d in raw_results]

        if from_date or to_date:
            entries = [
                e
                for e in entries
                if (not from_date or e.timestamp >= from_date)
                and (not to_date or e.timestamp <= to_date)
            ]

        return entries[:limit]

    async def get_total(
        self,
        account: str,
        entry_type: JournalEntryType,
        from_date: datetime | None = None,
    ) -> Decimal:
        """Sum of an account's journaled deposits or withdrawals."""
        raw_results = await self._storage.query(
            self._collection,
            filters={"account": account, "entry_type": entry_type.value},
        )

        total = ZERO
        for data in raw_results:
            entry = JournalEntry.from_dict(data)
            if from_date and entry.timestamp < from_date:
                continue
            total = exact_add(total, entry.amount, "journal total")
        return total

    async def count(
        self,
        account: str | None = None,
        entry_type: JournalEntryType | None = None,
    ) -> int:
        filters: dict[str, Any] = {}
        if account:
            filters["account"] = account
        if entry_type:
            filters["entry_type"] = entry_type.value
        return await self._storage.count(self._collection, filters or None)

    async def clear(self) -> int:
        """Clear all journal entries and return how many were removed."""
        return await self._storage.clear(self._collection)
