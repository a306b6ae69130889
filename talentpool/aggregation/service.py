"""Aggregated job search over internal positions and USAJobs."""

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from uuid import UUID

from talentpool.adapters.base import JobSourceClient
from talentpool.aggregation.filters import apply_filters, paginate, sort_listings
from talentpool.aggregation.mapping import map_external_listing, map_internal_position
from talentpool.cache.base import CacheService
from talentpool.matching.scorer import CandidateMatcher
from talentpool.models.enums import JobSource, WarningType
from talentpool.models.internal import Employee
from talentpool.models.listing import (
    AggregatedJobListing,
    JobSearchMetadata,
    JobSearchRequest,
    JobSearchResult,
    MatchingCandidate,
    SearchWarning,
)
from talentpool.models.usajobs import ExternalSearchRequest
from talentpool.sources import EmployeeSource, PositionSource

logger = logging.getLogger(__name__)

EXTERNAL_POOL_SIZE = 100
EXTERNAL_SORT_FIELD = "ApplicationCloseDate"
EXTERNAL_SORT_DIRECTION = "Desc"


class JobAggregationService:
    """
    Merges internal positions and external postings into one result set.

    Each search fans out to the requested sources concurrently. A source
    that fails (or whose branch is cancelled on its own) contributes no
    listings and a ``ServiceUnavailable`` warning; the search itself
    still returns a result.
    """

    def __init__(
        self,
        position_source: PositionSource,
        employee_source: EmployeeSource,
        cache: CacheService,
        external_client: JobSourceClient | None = None,
        matcher: CandidateMatcher | None = None,
        internal_page_size: int = 100,
        internal_expiration: timedelta = timedelta(minutes=15),
    ):
        self.position_source = position_source
        self.employee_source = employee_source
        self.cache = cache
        self.external_client = external_client
        self.matcher = matcher or CandidateMatcher(employee_source)
        self.internal_page_size = internal_page_size
        self.internal_expiration = internal_expiration

    async def search_jobs(self, request: JobSearchRequest) -> JobSearchResult:
        started = time.perf_counter()
        logger.info(
            "Starting job search with keywords: %s, sources: %s",
            request.keywords,
            ", ".join(s.value for s in request.sources),
        )

        metadata = JobSearchMetadata(
            search_timestamp=datetime.now(timezone.utc),
            search_sources=[s.value for s in request.sources],
        )
        parent = asyncio.current_task()

        branches = []
        if JobSource.INTERNAL in request.sources:
            branches.append(self._run_branch(
                "Internal",
                "Failed to search internal positions",
                self._search_internal(request),
                metadata,
                parent,
            ))
        if JobSource.EXTERNAL_API in request.sources:
            branches.append(self._run_branch(
                "ExternalAPI",
                "Failed to search external job postings",
                self._search_external(request),
                metadata,
                parent,
            ))

        results = dict(await asyncio.gather(*branches))
        internal = results.get("Internal", [])
        external = results.get("ExternalAPI", [])
        metadata.internal_jobs_count = len(internal)
        metadata.external_jobs_count = len(external)

        ordered = sort_listings(internal + external, request.sort_by, request.sort_direction)
        page = paginate(ordered, request.page, request.page_size)
        await self._enrich(page)

        total = len(ordered)
        metadata.has_more_results = total > request.page * request.page_size
        metadata.search_duration = timedelta(seconds=time.perf_counter() - started)

        logger.info(
            "Job search completed in %.0fms. Found %d jobs (%d internal, %d external)",
            metadata.search_duration.total_seconds() * 1000,
            total,
            metadata.internal_jobs_count,
            metadata.external_jobs_count,
        )

        return JobSearchResult(
            total_count=total,
            page=request.page,
            page_size=request.page_size,
            jobs=page,
            metadata=metadata,
        )

    async def _run_branch(self, source, message, branch, metadata, parent):
        """Await one source branch, converting its failure into a warning."""
        try:
            return source, await branch
        except asyncio.CancelledError:
            # Cancelling the whole search must still cancel it.
            if parent is not None and parent.cancelling():
                raise
            logger.warning("Search branch %s was cancelled", source)
        except Exception:
            logger.exception("Error searching %s jobs", source)

        metadata.warnings.append(
            SearchWarning(source=source, message=message, type=WarningType.SERVICE_UNAVAILABLE)
        )
        return source, []

    async def _load_internal_listings(self) -> list[AggregatedJobListing]:
        positions = await self.position_source.get_page(1, self.internal_page_size)
        return [map_internal_position(p) for p in positions or []]

    async def _search_internal(self, request: JobSearchRequest) -> list[AggregatedJobListing]:
        # Only the first page of positions is considered.
        cache_key = f"internal_positions_p1_s{self.internal_page_size}"
        listings = await self.cache.get_or_set(
            cache_key,
            self._load_internal_listings,
            list[AggregatedJobListing],
            self.internal_expiration,
        )
        filtered = apply_filters(listings or [], request)
        logger.debug("Found %d internal jobs", len(filtered))
        return filtered

    async def _search_external(self, request: JobSearchRequest) -> list[AggregatedJobListing]:
        if self.external_client is None:
            raise RuntimeError("No external job source configured")

        external_request = ExternalSearchRequest(
            keyword=request.keywords,
            location_name=request.location,
            page=1,
            results_per_page=EXTERNAL_POOL_SIZE,
            sort_field=EXTERNAL_SORT_FIELD,
            sort_direction=EXTERNAL_SORT_DIRECTION,
        )
        response = await self.external_client.search_jobs(external_request)
        if response is None:
            return []

        listings = [map_external_listing(d) for d in response.descriptors]
        filtered = apply_filters(listings, request)
        logger.debug("Found %d USAJobs positions", len(filtered))
        return filtered

    async def _enrich(self, jobs: list[AggregatedJobListing]):
        if not jobs:
            return
        try:
            pool = await self.matcher.load_pool()
        except Exception:
            logger.exception("Error loading employee pool for candidate matching")
            pool = []
        for job in jobs:
            job.matching_candidates = self.matcher.match(job, pool)

    async def get_job_details(self, job_id: str, source: JobSource) -> AggregatedJobListing | None:
        """Look up one listing; any failure or miss returns None."""
        try:
            if source == JobSource.INTERNAL:
                return await self._internal_details(job_id)
            if source == JobSource.EXTERNAL_API:
                return await self._external_details(job_id)
            return None
        except Exception:
            logger.exception("Error getting job details for %s from %s", job_id, source.value)
            return None

    async def _internal_details(self, job_id: str) -> AggregatedJobListing | None:
        try:
            position_id = UUID(job_id)
        except ValueError:
            return None
        position = await self.position_source.get_by_id(position_id)
        return map_internal_position(position) if position else None

    async def _external_details(self, job_id: str) -> AggregatedJobListing | None:
        if self.external_client is None:
            return None
        descriptor = await self.external_client.get_job_details(job_id)
        return map_external_listing(descriptor) if descriptor else None

    async def find_matching_candidates(
        self, job_id: str, source: JobSource
    ) -> list[MatchingCandidate]:
        job = await self.get_job_details(job_id, source)
        if job is None:
            return []
        return await self.matcher.find_candidates(job)

    async def get_recommended_jobs(self, employee_id: UUID, page_size: int = 10) -> JobSearchResult:
        """Search both sources using the employee's current position title."""
        try:
            employee: Employee | None = await self.employee_source.get_by_id(employee_id)
            if employee is None:
                return JobSearchResult(page=1, page_size=page_size)

            request = JobSearchRequest(
                keywords=employee.position_title,
                page_size=page_size,
                sources=[JobSource.INTERNAL, JobSource.EXTERNAL_API],
            )
            return await self.search_jobs(request)
        except Exception:
            logger.exception("Error getting recommended jobs for employee: %s", employee_id)
            return JobSearchResult(page=1, page_size=page_size)
