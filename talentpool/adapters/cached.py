"""Caching wrapper around a job source client."""

import logging
from datetime import timedelta
from urllib.parse import quote

from talentpool.adapters.base import JobSourceClient
from talentpool.cache.base import CacheService
from talentpool.models.usajobs import (
    ExternalSearchRequest,
    MatchedObjectDescriptor,
    USAJobsResponse,
)

logger = logging.getLogger(__name__)

SEARCH_KEY_PREFIX = "usajobs_search"
DETAILS_KEY_PREFIX = "usajobs_details_"


def _part(prefix: str, value: object) -> str:
    text = str(value).strip().lower()
    return f"{prefix}_{quote(text, safe='')}"


def search_cache_key(request: ExternalSearchRequest) -> str:
    """
    Deterministic cache key for a search request.

    Fields appear in a fixed order with short prefixes; values are
    lower-cased and percent-encoded so no value can bleed into the next
    part.
    """
    fields = [
        ("kw", request.keyword),
        ("loc", request.location_name),
        ("p", request.page),
        ("rpp", request.results_per_page),
        ("sf", request.sort_field),
        ("sd", request.sort_direction),
        ("org", request.organization),
        ("pgh", request.pay_grade_high),
        ("pgl", request.pay_grade_low),
        ("pst", request.position_schedule_type_code),
        ("pot", request.position_offering_type_code),
        ("dp", request.date_posted.strftime("%Y%m%d") if request.date_posted else None),
    ]
    parts = [SEARCH_KEY_PREFIX]
    parts.extend(_part(prefix, value) for prefix, value in fields if value not in (None, ""))
    return ":".join(parts)


def details_cache_key(position_id: str) -> str:
    return f"{DETAILS_KEY_PREFIX}{position_id}"


class CachedJobSourceClient(JobSourceClient):
    """
    Serve searches and detail lookups through the cache.

    Cache failures are invisible (the cache fails open); failures of the
    wrapped client are logged and re-raised.
    """

    def __init__(
        self,
        inner: JobSourceClient,
        cache: CacheService,
        search_expiration: timedelta = timedelta(minutes=15),
        details_expiration: timedelta = timedelta(minutes=60),
    ):
        self.inner = inner
        self.cache = cache
        self.search_expiration = search_expiration
        self.details_expiration = details_expiration

    async def search_jobs(self, request: ExternalSearchRequest) -> USAJobsResponse | None:
        cache_key = search_cache_key(request)
        logger.debug("Checking cache for USAJobs search: %s", cache_key)

        async def fetch():
            logger.info("Cache miss - calling USAJobs API for search")
            return await self.inner.search_jobs(request)

        try:
            return await self.cache.get_or_set(
                cache_key, fetch, USAJobsResponse, self.search_expiration
            )
        except Exception:
            logger.exception("Error in cached USAJobs search")
            raise

    async def get_job_details(self, position_id: str) -> MatchedObjectDescriptor | None:
        cache_key = details_cache_key(position_id)
        logger.debug("Checking cache for USAJobs job details: %s", cache_key)

        async def fetch():
            logger.info("Cache miss - calling USAJobs API for job details: %s", position_id)
            return await self.inner.get_job_details(position_id)

        try:
            return await self.cache.get_or_set(
                cache_key, fetch, MatchedObjectDescriptor, self.details_expiration
            )
        except Exception:
            logger.exception(
                "Error in cached USAJobs job details for position: %s", position_id
            )
            raise

    async def validate_connection(self) -> bool:
        return await self.inner.validate_connection()
