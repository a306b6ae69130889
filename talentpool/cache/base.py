"""Cache service interface and shared serialization."""

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from functools import lru_cache
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import TypeAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


def serialize(value: Any, value_type: Any) -> str:
    """Encode a value as camelCase JSON."""
    return _adapter(value_type).dump_json(value, by_alias=True).decode()


def deserialize(payload: str | bytes, value_type: Any) -> Any:
    """Decode JSON written by :func:`serialize` (keys in any casing)."""
    return _adapter(value_type).validate_json(payload)


class CacheService(ABC):
    """
    Key-value cache with per-entry TTL.

    Backends are fail-open: any failure inside the cache is logged and
    reported as a miss (or ignored, for writes) instead of raised.
    """

    def __init__(
        self,
        default_expiration: timedelta = timedelta(minutes=30),
        sliding_expiration: timedelta | None = timedelta(minutes=5),
    ):
        self.default_expiration = default_expiration
        self.sliding_expiration = sliding_expiration

    @abstractmethod
    async def get(self, key: str, value_type: type[T]) -> T | None:
        """Return the cached value for ``key``, or None on miss."""
        ...

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        value_type: Any,
        expiration: timedelta | None = None,
    ) -> None:
        """Store ``value`` under ``key`` for ``expiration`` (default TTL if None)."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        ...

    @abstractmethod
    async def remove_by_pattern(self, pattern: str) -> None:
        """Remove every key matching the regular expression ``pattern`` (case-insensitive)."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        value_type: Any,
        expiration: timedelta | None = None,
    ) -> T:
        """
        Return the cached value or populate it from ``factory``.

        On a hit ``factory`` is not called. On a miss it is called exactly
        once; a non-None result is stored before being returned. Errors
        raised by ``factory`` propagate and nothing is cached.

        Concurrent misses on the same key may each call ``factory``.
        """
        cached = await self.get(key, value_type)
        if cached is not None:
            return cached

        logger.debug("Cache miss for key: %s, fetching from source", key)
        value = await factory()

        if value is not None:
            await self.set(key, value, value_type, expiration)

        return value

    def _ttl(self, expiration: timedelta | None) -> timedelta:
        return expiration if expiration is not None else self.default_expiration

    async def aclose(self) -> None:
        """Release backend resources."""
        return None
