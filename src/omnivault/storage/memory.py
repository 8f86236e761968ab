"""
In-memory storage backend.

Default backend. Keeps every collection in process memory; data is lost
when the process ends, which suits tests and single-process deployments.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from omnivault.storage.base import StorageBackend, order_records, register_storage_backend


class InMemoryStorage(StorageBackend):
    """
    In-memory storage backend.

    Records are deep-copied on the way in and out so callers can never
    mutate stored state by reference.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    async def save(self, collection: str, key: str, data: dict[str, Any]) -> None:
        self._collection(collection)[key] = deepcopy(data)

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        data = self._collection(collection).get(key)
        return deepcopy(data) if data is not None else None

    async def delete(self, collection: str, key: str) -> bool:
        return self._collection(collection).pop(key, None) is not None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        results = []
        for key, data in self._collection(collection).items():
            if filters and any(data.get(k) != v for k, v in filters.items()):
                continue
            result = deepcopy(data)
            result["_key"] = key
            results.append(result)

        if order_by:
            results = order_records(results, order_by, descending)

        results = results[offset:]
        if limit is not None:
            results = results[:limit]
        return results

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        if filters:
            return len(await self.query(collection, filters))
        return len(self._collection(collection))

    async def clear(self, collection: str) -> int:
        coll = self._collection(collection)
        count = len(coll)
        coll.clear()
        return count


register_storage_backend("memory", InMemoryStorage)
