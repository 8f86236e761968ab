"""
Serial executor for vault operations.

Vault operations must run one at a time, but a recipient receiving funds may
call back into the vault before the outer withdrawal finishes. The executor
is a task-reentrant lock: operations from other tasks queue behind the
running one, while nested calls made by the running task pass straight
through.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class SerialExecutor:
    """
    Serializes operations on a single vault.

    Nested calls are recognized by task identity, so a callback must be
    awaited in the task that invoked it. A callback scheduled on a separate
    task would wait for the outer operation and deadlock it.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task | None = None
        self._depth = 0

    @property
    def depth(self) -> int:
        """Nesting depth of the running operation (0 when idle)."""
        return self._depth

    @property
    def busy(self) -> bool:
        return self._owner is not None

    @asynccontextmanager
    async def serialize(self) -> AsyncIterator[int]:
        """
        Run the enclosed block as one serialized operation.

        Yields:
            The nesting depth of this operation, 1 for the outermost
        """
        task = asyncio.current_task()

        if self._owner is not None and self._owner is task:
            self._depth += 1
            try:
                yield self._depth
            finally:
                self._depth -= 1
            return

        if self._lock.locked():
            logger.debug("Vault busy, queueing operation")

        async with self._lock:
            self._owner = task
            self._depth = 1
            try:
                yield self._depth
            finally:
                self._depth = 0
                self._owner = None
