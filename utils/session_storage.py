"""FSM storage for wizard sessions with idle expiry.

aiogram's MemoryStorage keeps a record per chat/user forever. Wizards here
are short, so a record that nobody touched for ``ttl`` seconds is dropped
and the next read sees an empty session.
"""

import time
from collections.abc import Callable
from typing import Any

from aiogram.fsm.state import State
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from logger import app_logger


class ExpiringMemoryStorage(MemoryStorage):
    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self.ttl = ttl
        self._clock = clock
        self._touched: dict[StorageKey, float] = {}

    def _expire(self, key: StorageKey) -> None:
        touched = self._touched.get(key)
        if touched is None:
            return
        if self._clock() - touched >= self.ttl:
            self._drop(key)
            app_logger.info(f"⌛ Сессия мастера истекла: chat={key.chat_id} user={key.user_id}")

    def _drop(self, key: StorageKey) -> None:
        self.storage.pop(key, None)
        self._touched.pop(key, None)

    def _touch(self, key: StorageKey) -> None:
        self.purge_expired()
        record = self.storage.get(key)
        if record is None or (record.state is None and not record.data):
            # очищенная сессия не занимает память
            self._drop(key)
            return
        self._touched[key] = self._clock()

    def purge_expired(self) -> int:
        """Drop every expired record, return how many were removed."""
        now = self._clock()
        stale = [key for key, touched in self._touched.items() if now - touched >= self.ttl]
        for key in stale:
            self._drop(key)
        return len(stale)

    async def set_state(self, key: StorageKey, state: str | State | None = None) -> None:
        self._expire(key)
        await super().set_state(key, state)
        self._touch(key)

    async def get_state(self, key: StorageKey) -> str | None:
        self._expire(key)
        if key not in self.storage:
            return None
        return await super().get_state(key)

    async def set_data(self, key: StorageKey, data: dict[str, Any]) -> None:
        self._expire(key)
        await super().set_data(key, data)
        self._touch(key)

    async def get_data(self, key: StorageKey) -> dict[str, Any]:
        self._expire(key)
        if key not in self.storage:
            return {}
        return await super().get_data(key)

    async def get_value(self, storage_key: StorageKey, dict_key: str, default: Any | None = None) -> Any | None:
        data = await self.get_data(storage_key)
        return data.get(dict_key, default)

    def __len__(self) -> int:
        return len(self.storage)
