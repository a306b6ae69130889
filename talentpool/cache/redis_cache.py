"""Redis cache backend.

Entries are stored as hashes holding the serialized value and the
absolute deadline, with the key's own TTL set to the sliding window.
Reads push the TTL forward by one window, never past the deadline.
"""

import logging
import re
import time
from datetime import timedelta
from typing import Any, TypeVar

import redis.asyncio as aioredis

from talentpool.cache.base import CacheService, deserialize, serialize

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATA_FIELD = "data"
DEADLINE_FIELD = "absexp"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode()
    return value


class RedisCacheService(CacheService):
    """Cache backed by a shared Redis instance."""

    def __init__(
        self,
        client: aioredis.Redis,
        default_expiration: timedelta = timedelta(minutes=30),
        sliding_expiration: timedelta | None = timedelta(minutes=5),
        key_prefix: str = "",
    ):
        super().__init__(default_expiration, sliding_expiration)
        self._redis = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisCacheService":
        return cls(aioredis.from_url(url), **kwargs)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _window_ms(self, remaining_ms: int) -> int:
        if self.sliding_expiration is None:
            return remaining_ms
        sliding_ms = int(self.sliding_expiration.total_seconds() * 1000)
        return min(sliding_ms, remaining_ms)

    async def _read(self, key: str) -> str | None:
        full_key = self._key(key)
        payload, deadline = await self._redis.hmget(full_key, [DATA_FIELD, DEADLINE_FIELD])
        if payload is None:
            return None

        remaining = int(_text(deadline)) - _now_ms() if deadline is not None else 0
        if remaining <= 0:
            await self._redis.delete(full_key)
            return None

        await self._redis.pexpire(full_key, self._window_ms(remaining))
        return _text(payload)

    async def get(self, key: str, value_type: type[T]) -> T | None:
        try:
            payload = await self._read(key)
            if payload is None:
                logger.debug("Cache miss for key: %s", key)
                return None

            value = deserialize(payload, value_type)
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
            ttl_ms = int(ttl.total_seconds() * 1000)
            full_key = self._key(key)

            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.hset(
                    full_key,
                    mapping={
                        DATA_FIELD: serialize(value, value_type),
                        DEADLINE_FIELD: str(_now_ms() + ttl_ms),
                    },
                )
                pipe.pexpire(full_key, self._window_ms(ttl_ms))
                await pipe.execute()

            logger.debug("Cached value for key: %s with expiration: %s", key, ttl)
        except Exception:
            logger.exception("Error caching value for key: %s", key)

    async def remove(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
            logger.debug("Removed cached value for key: %s", key)
        except Exception:
            logger.exception("Error removing cached value for key: %s", key)

    async def remove_by_pattern(self, pattern: str) -> None:
        try:
            regex = re.compile(pattern, re.I)
            doomed = []
            async for raw_key in self._redis.scan_iter(match=f"{self.key_prefix}*"):
                key = _text(raw_key)[len(self.key_prefix):]
                if regex.search(key):
                    doomed.append(self._key(key))

            if doomed:
                await self._redis.delete(*doomed)
            logger.debug("Removed %d cached values matching pattern: %s", len(doomed), pattern)
        except Exception:
            logger.exception("Error removing cached values for pattern: %s", pattern)

    async def exists(self, key: str) -> bool:
        try:
            return await self._read(key) is not None
        except Exception:
            logger.exception("Error checking if cached value exists for key: %s", key)
            return False

    async def aclose(self) -> None:
        await self._redis.aclose()
