"""
Journal storage for OmniVault.

Backends register under a name; a vault's journal picks one through
``VaultConfig.storage_backend`` and each backend reads its own settings
(such as ``redis_url``) from the same config.

Example:
    >>> config = VaultConfig.from_env()   # OMNIVAULT_STORAGE_BACKEND=redis
    >>> journal = Journal(storage_from_config(config))
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from omnivault.core.exceptions import ConfigurationError
from omnivault.storage.base import (
    StorageBackend,
    get_storage_backend,
    list_storage_backends,
    order_records,
    register_storage_backend,
)
from omnivault.storage.memory import InMemoryStorage
from omnivault.storage.redis import RedisStorage

if TYPE_CHECKING:
    from omnivault.core.config import VaultConfig


def _backend_class(name: str) -> type[StorageBackend]:
    backend_class = get_storage_backend(name)
    if backend_class is None:
        raise ConfigurationError(
            f"Unknown storage backend: '{name}'. "
            f"Available: {', '.join(list_storage_backends())}",
            details={"field": "storage_backend"},
        )
    return backend_class


def storage_from_config(config: VaultConfig) -> StorageBackend:
    """
    Build the journal storage named by ``config.storage_backend``.

    Raises:
        ConfigurationError: If the backend name is not registered
    """
    return _backend_class(config.storage_backend).from_config(config)


def get_storage(backend_name: str | None = None) -> StorageBackend:
    """Build a backend with default settings, by name or from OMNIVAULT_STORAGE_BACKEND."""
    if backend_name is None:
        backend_name = os.environ.get("OMNIVAULT_STORAGE_BACKEND", "memory")
    return _backend_class(backend_name)()


__all__ = [
    "StorageBackend",
    "InMemoryStorage",
    "RedisStorage",
    "get_storage",
    "storage_from_config",
    "get_storage_backend",
    "list_storage_backends",
    "register_storage_backend",
    "order_records",
]
