"""Shared caches.

These caches are process-global, managed by `~dnlookup.factory.ProcessContext`.
Cached data is guarded by a per-key `asyncio.Lock` so that at most one lookup
is in flight for a given key.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Protocol

from cachetools import TTLCache

from .constants import USER_CACHE_LIFETIME, USER_CACHE_SIZE
from .models.userinfo import UserRecord

__all__ = [
    "CacheGateway",
    "RecordFactory",
    "UserRecordCache",
]

RecordFactory = Callable[[], Awaitable[UserRecord]]
"""Type of the callback that computes a user record on a cache miss."""


class CacheGateway(Protocol):
    """Interface to a cache of user records keyed by principal."""

    async def get_or_compute(
        self, key: str, compute: RecordFactory
    ) -> UserRecord:
        """Return the cached record for a key, computing it if missing."""
        ...

    async def invalidate_and_recompute(
        self, key: str, compute: RecordFactory
    ) -> UserRecord:
        """Compute a record for a key, replacing any cached record."""
        ...


@dataclass
class _KeyLock:
    """Lock for one key and the number of tasks holding or awaiting it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class UserRecordCache:
    """A cache of resolved user records.

    Records expire after a fixed lifetime. Failed computations are not
    cached, so the next request for the same key tries again.

    Parameters
    ----------
    maxsize
        Maximum number of records to cache.
    lifetime
        Lifetime of cached records in seconds.

    Notes
    -----
    When there's a cache miss for a key, the goal is to block the expensive
    directory lookups for that key until the first requester finishes and
    adds the result to the cache. Subsequent requests that were blocked on
    the lock can then be answered from the cache.

    Per-key locks are created on demand and discarded as soon as no task
    holds or is waiting for them, so the number of locks is bounded by the
    number of lookups in flight rather than the number of keys ever seen.
    The bookkeeping happens without any ``await`` between reading and
    updating the lock table, so it needs no lock of its own under asyncio.
    """

    def __init__(
        self,
        maxsize: int = USER_CACHE_SIZE,
        lifetime: float = USER_CACHE_LIFETIME.total_seconds(),
    ) -> None:
        self._maxsize = maxsize
        self._lifetime = lifetime
        self._cache: TTLCache[str, UserRecord] = TTLCache(maxsize, lifetime)
        self._key_locks: dict[str, _KeyLock] = {}

    async def clear(self) -> None:
        """Invalidate the cache.

        Locks held by lookups in flight are left alone and are discarded
        when those lookups finish.
        """
        self._cache = TTLCache(self._maxsize, self._lifetime)

    def get(self, key: str) -> UserRecord | None:
        """Retrieve a record from the cache.

        Parameters
        ----------
        key
            String form of the principal.

        Returns
        -------
        UserRecord or None
            The cached record or `None` if there is no record in the cache.
        """
        return self._cache.get(key)

    async def get_or_compute(
        self, key: str, compute: RecordFactory
    ) -> UserRecord:
        """Return the cached record for a key, computing it on a miss.

        Parameters
        ----------
        key
            String form of the principal.
        compute
            Called to build the record if it is not cached.

        Returns
        -------
        UserRecord
            The cached or newly-computed record.
        """
        record = self.get(key)
        if record is not None:
            return record
        async with self._lock(key):
            record = self.get(key)
            if record is not None:
                return record
            record = await compute()
            self._cache[key] = record
            return record

    async def invalidate_and_recompute(
        self, key: str, compute: RecordFactory
    ) -> UserRecord:
        """Compute a fresh record for a key and replace any cached record.

        Parameters
        ----------
        key
            String form of the principal.
        compute
            Called to build the record.

        Returns
        -------
        UserRecord
            The newly-computed record.
        """
        async with self._lock(key):
            self._cache.pop(key, None)
            record = await compute()
            self._cache[key] = record
            return record

    @asynccontextmanager
    async def _lock(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for a key, discarding it once no one needs it.

        Parameters
        ----------
        key
            Key to lock.
        """
        key_lock = self._key_locks.get(key)
        if key_lock is None:
            key_lock = _KeyLock()
            self._key_locks[key] = key_lock
        key_lock.users += 1
        try:
            async with key_lock.lock:
                yield
        finally:
            key_lock.users -= 1
            if key_lock.users == 0:
                del self._key_locks[key]
