"""
Redis storage backend.

Persists the audit journal in Redis so it survives process restarts. Each
record is a JSON string under ``<prefix>:<collection>:<key>``; a set at
``<prefix>:<collection>:_index`` lists the keys of a collection.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from omnivault.core.logging import get_logger
from omnivault.storage.base import StorageBackend, order_records, register_storage_backend

if TYPE_CHECKING:
    from omnivault.core.config import VaultConfig

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


class RedisStorage(StorageBackend):
    """
    Redis storage backend.

    Filtering and ordering happen client-side after loading a collection's
    records, which is fine for journal-sized collections.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "omnivault",
        client: redis.Redis | None = None,
    ) -> None:
        """
        Initialize Redis storage.

        Args:
            redis_url: Redis connection URL (or from OMNIVAULT_REDIS_URL env)
            prefix: Key prefix for all storage keys
            client: Pre-built client (must use decode_responses=True)
        """
        self._redis_url = redis_url or os.environ.get("OMNIVAULT_REDIS_URL", DEFAULT_REDIS_URL)
        self._prefix = prefix
        self._client = client
        self._logger = get_logger("storage.redis")

    @classmethod
    def from_config(cls, config: VaultConfig) -> RedisStorage:
        """Connect to ``config.redis_url``, falling back to OMNIVAULT_REDIS_URL."""
        return cls(redis_url=config.redis_url)

    def _get_client(self) -> redis.Redis:
        """Lazy-create the Redis client."""
        if self._client is None:
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def _make_key(self, collection: str, key: str) -> str:
        return f"{self._prefix}:{collection}:{key}"

    def _index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:_index"

    async def save(self, collection: str, key: str, data: dict[str, Any]) -> None:
        client = self._get_client()
        await client.set(self._make_key(collection, key), json.dumps(data))
        await client.sadd(self._index_key(collection), key)

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        client = self._get_client()
        data = await client.get(self._make_key(collection, key))
        if data is None:
            return None
        return json.loads(data)

    async def delete(self, collection: str, key: str) -> bool:
        client = self._get_client()
        result = await client.delete(self._make_key(collection, key))
        await client.srem(self._index_key(collection), key)
        return result > 0

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))

        results = []
        for key in sorted(keys):
            data = await self.get(collection, key)
            if data is None:
                # Index entry left behind by an interrupted delete
                continue
            if filters and any(data.get(k) != v for k, v in filters.items()):
                continue
            data["_key"] = key
            results.append(data)

        if order_by:
            results = order_records(results, order_by, descending)

        results = results[offset:]
        if limit is not None:
            results = results[:limit]
        return results

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        if filters:
            return len(await self.query(collection, filters))
        client = self._get_client()
        return await client.scard(self._index_key(collection))

    async def clear(self, collection: str) -> int:
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))
        for key in keys:
            await client.delete(self._make_key(collection, key))
        await client.delete(self._index_key(collection))
        return len(keys)

    async def health_check(self) -> bool:
        """Check the Redis connection."""
        try:
            await self._get_client().ping()
        except RedisError as e:
            self._logger.warning(f"Redis health check failed: {e}")
            return False
        return True

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


register_storage_backend("redis", RedisStorage)
