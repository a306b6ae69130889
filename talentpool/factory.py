"""Wiring of settings into the service graph."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from talentpool.adapters.cached import CachedJobSourceClient
from talentpool.adapters.codelists import CodeListService
from talentpool.adapters.usajobs import USAJobsClient, create_http_client
from talentpool.aggregation.service import JobAggregationService
from talentpool.cache.base import CacheService
from talentpool.cache.memory import MemoryCacheService
from talentpool.cache.redis_cache import RedisCacheService
from talentpool.config import Settings
from talentpool.http.client import HTTPClient
from talentpool.matching.scorer import CandidateMatcher, ScoringStrategy
from talentpool.models.enums import CacheProvider
from talentpool.sources import EmployeeSource, PositionSource

logger = logging.getLogger(__name__)


def create_cache_service(settings: Settings) -> CacheService:
    """Build the cache backend named by ``settings.cache_provider``."""
    options = dict(
        default_expiration=timedelta(minutes=settings.cache_default_expiration_minutes),
        sliding_expiration=settings.sliding_expiration,
    )

    if settings.cache_provider == CacheProvider.REDIS:
        if not settings.redis_url:
            raise ValueError("Redis cache selected but redis_url is not configured")
        logger.info("Using Redis cache")
        return RedisCacheService.from_url(
            settings.redis_url, key_prefix=settings.redis_key_prefix, **options
        )

    logger.info("Using in-memory cache")
    return MemoryCacheService(**options)


@dataclass
class Services:
    """Everything a caller needs, sharing one cache and one HTTP client."""

    settings: Settings
    cache: CacheService
    http: HTTPClient
    job_source: CachedJobSourceClient | None
    code_lists: CodeListService
    aggregation: JobAggregationService

    async def aclose(self):
        await self.http.aclose()
        await self.cache.aclose()


def build_services(
    settings: Settings,
    position_source: PositionSource,
    employee_source: EmployeeSource,
    strategy: ScoringStrategy | None = None,
) -> Services:
    """
    Compose the cache, USAJobs clients and aggregation service.

    Without an API key the external source is left out; searches that
    ask for it report it as unavailable.
    """
    cache = create_cache_service(settings)
    http = create_http_client(settings)

    job_source = None
    if settings.usajobs_api_key:
        job_source = CachedJobSourceClient(
            USAJobsClient(settings, http_client=http),
            cache,
            search_expiration=settings.job_search_ttl,
            details_expiration=settings.job_details_ttl,
        )
    else:
        logger.warning("USAJobs API key not configured, external search disabled")

    matcher = CandidateMatcher(
        employee_source,
        strategy=strategy,
        pool_size=settings.employee_pool_size,
    )
    aggregation = JobAggregationService(
        position_source,
        employee_source,
        cache,
        external_client=job_source,
        matcher=matcher,
        internal_page_size=settings.internal_positions_page_size,
        internal_expiration=settings.internal_jobs_ttl,
    )

    return Services(
        settings=settings,
        cache=cache,
        http=http,
        job_source=job_source,
        code_lists=CodeListService(cache, settings, http_client=http),
        aggregation=aggregation,
    )
