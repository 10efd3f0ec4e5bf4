"""
Per-handle serialization of conversation turns.

Each customer's read-state -> transition -> write-state sequence runs under
that customer's lock; different customers never wait on each other. Locks
are dropped once no turn holds or awaits them.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator


class HandleLocks:
    """Registry of asyncio locks keyed by sender handle."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: defaultdict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, handle: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(handle, asyncio.Lock())
        self._waiters[handle] += 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[handle] -= 1
            if self._waiters[handle] == 0:
                del self._waiters[handle]
                self._locks.pop(handle, None)

    def __len__(self) -> int:
        return len(self._locks)
