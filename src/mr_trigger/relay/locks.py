import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class CommitLocks:
    """In-process registry of per-key asyncio locks.

    Entries are dropped once nobody holds or waits for them. Only serializes
    requests served by the same process.
    """

    def __init__(self):
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]
