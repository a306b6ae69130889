"""USAJobs search API client."""

import logging
from urllib.parse import quote, urlencode

from pydantic import ValidationError

from talentpool.adapters.base import ClientError, JobSourceClient
from talentpool.config import Settings
from talentpool.http.client import HTTPClient, RateLimiter
from talentpool.models.enums import ClientErrorType
from talentpool.models.usajobs import (
    ExternalSearchRequest,
    MatchedObjectDescriptor,
    USAJobsResponse,
)

logger = logging.getLogger(__name__)


def build_search_query(request: ExternalSearchRequest) -> str:
    """Build the search query string from the request's non-empty fields."""
    params: list[tuple[str, str]] = []

    def add(name: str, value: str | None):
        if value:
            params.append((name, value))

    add("Keyword", request.keyword)
    add("LocationName", request.location_name)
    if request.page and request.page > 0:
        params.append(("Page", str(request.page)))
    if request.results_per_page and request.results_per_page > 0:
        params.append(("ResultsPerPage", str(request.results_per_page)))
    add("SortField", request.sort_field)
    add("SortDirection", request.sort_direction)
    add("Organization", request.organization)
    add("PayGradeHigh", request.pay_grade_high)
    add("PayGradeLow", request.pay_grade_low)
    add("PositionScheduleTypeCode", request.position_schedule_type_code)
    add("PositionOfferingTypeCode", request.position_offering_type_code)
    if request.date_posted:
        params.append(("DatePosted", request.date_posted.strftime("%Y-%m-%d")))

    return urlencode(params, quote_via=quote)


def create_http_client(settings: Settings) -> HTTPClient:
    """HTTP client carrying the USAJobs authorization headers."""
    return HTTPClient(
        base_url=settings.usajobs_base_url,
        headers={
            "Authorization-Key": settings.usajobs_api_key,
            "User-Agent": settings.usajobs_user_agent,
        },
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        rate_limiter=RateLimiter(settings.default_rps),
    )


class USAJobsClient(JobSourceClient):
    """Client for the USAJobs search endpoint (data.usajobs.gov)."""

    def __init__(self, settings: Settings, http_client: HTTPClient | None = None):
        if not settings.usajobs_api_key:
            raise ValueError("USAJobs API key not configured")
        self.settings = settings
        self._http = http_client

    async def _get_http(self) -> HTTPClient:
        if self._http is None:
            self._http = create_http_client(self.settings)
            await self._http.__aenter__()
        return self._http

    async def _fetch(
        self, endpoint: str, position_id: str | None = None
    ) -> USAJobsResponse | None:
        http = await self._get_http()
        response = await http.get(endpoint)

        if not response.is_success:
            logger.warning(
                "USAJobs API returned error status: %s - %s",
                response.status_code,
                response.reason_phrase,
            )
            return None

        content = response.text
        if not content.strip():
            if position_id is None:
                logger.warning("USAJobs API returned empty response")
            else:
                logger.warning(
                    "USAJobs API returned empty response for position: %s", position_id
                )
            return None

        try:
            return USAJobsResponse.model_validate_json(content)
        except ValidationError as e:
            raise ClientError(
                "Failed to parse USAJobs API response",
                error_type=ClientErrorType.PARSE_ERROR,
                details={"endpoint": endpoint, "error": str(e)},
            ) from e

    async def search_jobs(self, request: ExternalSearchRequest) -> USAJobsResponse | None:
        endpoint = f"/search?{build_search_query(request)}"
        logger.info("Searching USAJobs with endpoint: %s", endpoint)

        try:
            result = await self._fetch(endpoint)
        except ClientError as e:
            logger.error("USAJobs search failed (%s): %s", e.error_type.value, e)
            raise
        except Exception:
            logger.exception("Unexpected error occurred while calling USAJobs API")
            raise

        if result is not None:
            logger.info(
                "Successfully retrieved %d jobs from USAJobs API",
                len(result.descriptors),
            )
        return result

    async def get_job_details(self, position_id: str) -> MatchedObjectDescriptor | None:
        endpoint = f"/search?{urlencode([('PositionID', position_id)], quote_via=quote)}"
        logger.info("Getting job details for position: %s", position_id)

        try:
            result = await self._fetch(endpoint, position_id)
        except Exception:
            logger.exception(
                "Error occurred while getting job details for position: %s", position_id
            )
            raise

        descriptors = result.descriptors if result else []
        if not descriptors:
            logger.warning("No job details found for position: %s", position_id)
            return None
        return descriptors[0]

    async def validate_connection(self) -> bool:
        try:
            response = await self.search_jobs(
                ExternalSearchRequest(keyword="test", results_per_page=1)
            )
            return response is not None
        except Exception:
            logger.exception("API connection validation failed")
            return False

    async def aclose(self):
        if self._http is not None:
            await self._http.aclose()
