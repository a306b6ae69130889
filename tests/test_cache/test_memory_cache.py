"""Tests for the in-memory cache backend."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from talentpool.cache.memory import MemoryCacheService
from talentpool.models.listing import AggregatedJobListing, SalaryInfo


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCacheService(
        default_expiration=timedelta(minutes=30),
        sliding_expiration=timedelta(minutes=5),
        clock=clock,
    )


class TestGetOrSet:
    """Tests for get-or-populate."""

    @pytest.mark.asyncio
    async def test_factory_not_called_on_hit(self, cache):
        """A populated key never invokes the factory again."""
        factory = AsyncMock(return_value=["a", "b"])

        first = await cache.get_or_set("key", factory, list[str])
        second = await cache.get_or_set("key", factory, list[str])

        assert first == ["a", "b"]
        assert second == ["a", "b"]
        assert factory.await_count == 1

    @pytest.mark.asyncio
    async def test_none_not_cached(self, cache):
        factory = AsyncMock(return_value=None)

        assert await cache.get_or_set("key", factory, list[str]) is None
        assert await cache.get_or_set("key", factory, list[str]) is None

        assert factory.await_count == 2
        assert not await cache.exists("key")

    @pytest.mark.asyncio
    async def test_factory_error_propagates(self, cache):
        factory = AsyncMock(side_effect=RuntimeError("upstream down"))

        with pytest.raises(RuntimeError):
            await cache.get_or_set("key", factory, list[str])

        assert not await cache.exists("key")

    @pytest.mark.asyncio
    async def test_models_round_trip(self, cache):
        listing = AggregatedJobListing(
            id="1",
            title="Analyst",
            salary=SalaryInfo(min_salary=50000, max_salary=70000),
        )

        await cache.set("listing", [listing], list[AggregatedJobListing])
        cached = await cache.get("listing", list[AggregatedJobListing])

        assert [c.model_dump() for c in cached] == [listing.model_dump()]
        assert cached[0] is not listing


class TestExpiration:
    """Tests for absolute and sliding expiration."""

    @pytest.mark.asyncio
    async def test_absolute_expiration(self, clock):
        cache = MemoryCacheService(
            default_expiration=timedelta(minutes=10),
            sliding_expiration=None,
            clock=clock,
        )
        await cache.set("key", "value", str)

        clock.advance(9 * 60)
        assert await cache.get("key", str) == "value"

        clock.advance(60)
        assert await cache.get("key", str) is None

    @pytest.mark.asyncio
    async def test_explicit_expiration_overrides_default(self, cache, clock):
        await cache.set("key", "value", str, expiration=timedelta(seconds=30))

        clock.advance(31)
        assert await cache.get("key", str) is None

    @pytest.mark.asyncio
    async def test_sliding_window_expires_idle_entries(self, cache, clock):
        await cache.set("key", "value", str)

        clock.advance(5 * 60)
        assert await cache.get("key", str) is None

    @pytest.mark.asyncio
    async def test_reads_extend_sliding_window(self, cache, clock):
        await cache.set("key", "value", str)

        for _ in range(5):
            clock.advance(4 * 60)
            assert await cache.get("key", str) == "value"

    @pytest.mark.asyncio
    async def test_writes_evict_unread_expired_entries(self, cache, clock):
        """Expired entries that are never read again are dropped on the next write."""
        for i in range(1000):
            await cache.set(f"search:{i}", i, int, expiration=timedelta(seconds=1))
        assert len(cache) == 1000

        clock.advance(10)
        await cache.set("fresh", 1, int)

        assert len(cache) == 1
        assert await cache.get("fresh", int) == 1

    @pytest.mark.asyncio
    async def test_sliding_never_outlives_absolute(self, cache, clock):
        await cache.set("key", "value", str, expiration=timedelta(minutes=6))

        clock.advance(4 * 60)
        assert await cache.get("key", str) == "value"
        clock.advance(2 * 60)
        assert await cache.get("key", str) is None


class TestRemoval:
    """Tests for removal operations."""

    @pytest.mark.asyncio
    async def test_remove(self, cache):
        await cache.set("key", "value", str)
        await cache.remove("key")

        assert not await cache.exists("key")

    @pytest.mark.asyncio
    async def test_remove_missing_key_is_noop(self, cache):
        await cache.remove("missing")

    @pytest.mark.asyncio
    async def test_remove_by_pattern(self, cache):
        await cache.set("usajobs_codelist_payplans", "a", str)
        await cache.set("usajobs_codelist_countries", "b", str)
        await cache.set("usajobs_search:kw_engineer", "c", str)

        await cache.remove_by_pattern("^USAJOBS_CODELIST_")

        assert not await cache.exists("usajobs_codelist_payplans")
        assert not await cache.exists("usajobs_codelist_countries")
        assert await cache.exists("usajobs_search:kw_engineer")

    @pytest.mark.asyncio
    async def test_invalid_pattern_is_swallowed(self, cache):
        await cache.set("key", "value", str)

        await cache.remove_by_pattern("([")

        assert await cache.exists("key")


class TestFailOpen:
    """Cache failures are reported as misses."""

    @pytest.mark.asyncio
    async def test_unserializable_value_is_not_cached(self, cache):
        await cache.set("key", object(), int)

        assert not await cache.exists("key")

    @pytest.mark.asyncio
    async def test_corrupt_payload_reads_as_miss(self, cache):
        await cache.set("key", "not a number", str)

        assert await cache.get("key", int) is None
