"""
Keyed Lock

In-process critical sections keyed by entity identity (e.g. "item:<id>",
"user:<id>"). One asyncio.Lock per key, created on first use and dropped once
nobody holds or waits for it.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from comic_collector.platform.logging.loguru_io import Logger


class KeyedLock:
    """
    Per-key lock registry

    hold() takes several keys at once; they are always acquired in sorted
    order so two callers asking for overlapping key sets cannot deadlock.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @staticmethod
    def item_key(item_id: object) -> str:
        return f'item:{item_id}'

    @staticmethod
    def user_key(user_id: object) -> str:
        return f'user:{user_id}'

    def _checkout(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        return lock

    def _checkin(self, key: str) -> None:
        remaining = self._waiters[key] - 1
        if remaining:
            self._waiters[key] = remaining
            return
        del self._waiters[key]
        del self._locks[key]

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        """
        Acquire every key's lock for the duration of the block

        Args:
            keys: Lock keys, duplicates are ignored

        Example:
            async with keyed_lock.hold(KeyedLock.item_key(item.id), KeyedLock.user_key(user.id)):
                ...
        """
        ordered = sorted(set(keys))
        acquired: list[str] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                try:
                    await lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append(key)
                Logger.base.debug(f'🔒 [LOCK] Acquired lock: {key}')
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
                self._checkin(key)
                Logger.base.debug(f'🔓 [LOCK] Released lock: {key}')
