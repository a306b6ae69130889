"""In-process cache backend."""

import logging
import re
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, TypeVar

from talentpool.cache.base import CacheService, deserialize, serialize

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Entry:
    payload: str
    absolute_expiry: float
    sliding: float | None
    last_access: float

    def expired(self, now: float) -> bool:
        if now >= self.absolute_expiry:
            return True
        return self.sliding is not None and now >= self.last_access + self.sliding


class MemoryCacheService(CacheService):
    """
    Dictionary-backed cache with absolute and sliding expiration.

    An entry expires at its absolute deadline, or earlier if it is not
    read for one sliding window. Values are stored serialized so they
    behave the same as values read back from Redis.
    """

    def __init__(
        self,
        default_expiration: timedelta = timedelta(minutes=30),
        sliding_expiration: timedelta | None = timedelta(minutes=5),
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(default_expiration, sliding_expiration)
        self._entries: dict[str, _Entry] = {}
        self._clock = clock

    def _lookup(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        now = self._clock()
        if entry.expired(now):
            del self._entries[key]
            logger.debug("Cache entry evicted for key: %s, reason: expired", key)
            return None

        entry.last_access = now
        return entry

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))

    async def get(self, key: str, value_type: type[T]) -> T | None:
        try:
            entry = self._lookup(key)
            if entry is None:
                logger.debug("Cache miss for key: %s", key)
                return None

            value = deserialize(entry.payload, value_type)
            logger.debug("Cache hit for key: %s", key)
            return value
        except Exception:
            logger.exception("Error retrieving cached value for key: %s", key)
            return None

    async def set(
        self,
        key: str,
        value: Any,
        value_type: Any,
        expiration: timedelta | None = None,
    ) -> None:
        try:
            ttl = self._ttl(expiration)
            now = self._clock()
            self._purge_expired(now)
            sliding = (
                self.sliding_expiration.total_seconds()
                if self.sliding_expiration is not None
                else None
            )
            self._entries[key] = _Entry(
                payload=serialize(value, value_type),
                absolute_expiry=now + ttl.total_seconds(),
                sliding=sliding,
                last_access=now,
            )
            logger.debug("Cached value for key: %s with expiration: %s", key, ttl)
        except Exception:
            logger.exception("Error caching value for key: %s", key)

    async def remove(self, key: str) -> None:
        self._entries.pop(key, None)
        logger.debug("Removed cached value for key: %s", key)

    async def remove_by_pattern(self, pattern: str) -> None:
        try:
            regex = re.compile(pattern, re.I)
            keys = [key for key in self._entries if regex.search(key)]
            for key in keys:
                del self._entries[key]
            logger.debug("Removed %d cached values matching pattern: %s", len(keys), pattern)
        except re.error:
            logger.exception("Error removing cached values for pattern: %s", pattern)

    async def exists(self, key: str) -> bool:
        return self._lookup(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
