"""
Abstract storage backend for OmniVault.

Persistence layer for the audit journal. Records are JSON-serializable
dicts grouped into named collections.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from omnivault.core.config import VaultConfig


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Simple async CRUD over collections of dict records. Implementations
    can use any persistence layer (memory, Redis, SQL, ...).
    """

    @classmethod
    def from_config(cls, config: VaultConfig) -> StorageBackend:
        """Build the backend from vault configuration. Defaults take no settings."""
        return cls()

    @abstractmethod
    async def save(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """
        Save a record, replacing any existing record under the same key.

        Args:
            collection: Collection name
            key: Unique key for the record
            data: Record (must be JSON-serializable)
        """
        ...

    @abstractmethod
    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Get a record by key, or None if not found."""
        ...

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Query records with optional exact-match filters.

        Args:
            collection: Collection name
            filters: Field/value pairs that must all match exactly
            limit: Maximum records to return
            offset: Number of records to skip
            order_by: Field to sort by before offset/limit apply
            descending: Sort direction when order_by is given

        Returns:
            Matching records, each with its key under ``_key``
        """
        ...

    @abstractmethod
    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        """Count records matching the optional filters."""
        ...

    @abstractmethod
    async def clear(self, collection: str) -> int:
        """Delete every record in a collection and return how many were removed."""
        ...

    async def health_check(self) -> bool:
        """Check if storage is reachable."""
        return True


# Storage backend registry, resolved by name from configuration
_STORAGE_BACKENDS: dict[str, type[StorageBackend]] = {}


def register_storage_backend(name: str, backend_class: type[StorageBackend]) -> None:
    """Register a storage backend by name."""
    _STORAGE_BACKENDS[name] = backend_class


def get_storage_backend(name: str) -> type[StorageBackend] | None:
    """Get a registered storage backend by name."""
    return _STORAGE_BACKENDS.get(name)


def list_storage_backends() -> list[str]:
    """List all registered storage backend names."""
    return list(_STORAGE_BACKENDS.keys())


def order_records(
    records: list[dict[str, Any]],
    order_by: str,
    descending: bool = False,
) -> list[dict[str, Any]]:
    """Sort query results by a field; records missing the field sort as smallest."""
    present = [r for r in records if r.get(order_by) is not None]
    missing = [r for r in records if r.get(order_by) is None]
    present.sort(key=lambda r: r[order_by], reverse=descending)
    return present + missing if descending else missing + present
