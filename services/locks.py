"""Per-event serialization of load-modify-save cycles."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from weakref import WeakValueDictionary


class EventLocks:
    """One ``asyncio.Lock`` per event id.

    Locks are held in a weak-valued map: once no coroutine holds or waits
    on a lock it is garbage collected, so the map does not grow with the
    number of events ever touched.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _lock_for(self, event_id: str) -> asyncio.Lock:
        lock = self._locks.get(event_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[event_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, event_id: str) -> AsyncIterator[None]:
        lock = self._lock_for(event_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)
