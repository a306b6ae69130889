"""USAJobs code list service.

Code lists change rarely, so each one is cached under its own key with a
long TTL. Fetch failures yield None rather than raising.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Any

from talentpool.adapters.usajobs import create_http_client
from talentpool.cache.base import CacheService
from talentpool.config import Settings
from talentpool.http.client import HTTPClient
from talentpool.models.codelists import (
    HOT_CODE_LISTS,
    CodeList,
    CodeListItem,
    CodeListResponse,
    OccupationalSeriesItem,
)

logger = logging.getLogger(__name__)


class CodeListService:
    """Cached access to the USAJobs ``/codelist/*`` endpoints."""

    def __init__(
        self,
        cache: CacheService,
        settings: Settings,
        http_client: HTTPClient | None = None,
    ):
        self.cache = cache
        self.settings = settings
        self.expiration: timedelta = settings.code_list_ttl
        self._http = http_client

    async def _get_http(self) -> HTTPClient:
        if self._http is None:
            self._http = create_http_client(self.settings)
            await self._http.__aenter__()
        return self._http

    async def get_code_list(self, code_list: CodeList) -> list[Any] | None:
        """Return the full (cached) list, or None if it could not be fetched."""
        item_type = code_list.item_type
        return await self.cache.get_or_set(
            code_list.cache_key,
            lambda: self._fetch(code_list),
            list[item_type],
            self.expiration,
        )

    async def _fetch(self, code_list: CodeList) -> list[CodeListItem] | None:
        endpoint = code_list.endpoint
        try:
            logger.debug("Fetching code list from USAJobs API: %s", endpoint)
            http = await self._get_http()
            response = await http.get(endpoint)

            if not response.is_success:
                logger.warning(
                    "USAJobs CodeList API returned %s for endpoint: %s",
                    response.status_code,
                    endpoint,
                )
                return None

            content = response.text
            if not content.strip():
                logger.warning(
                    "USAJobs CodeList API returned empty response for endpoint: %s", endpoint
                )
                return None

            envelope = CodeListResponse[code_list.item_type].model_validate_json(content)
            items = envelope.flatten()
            logger.info(
                "Successfully retrieved %d items from USAJobs CodeList: %s",
                len(items),
                endpoint,
            )
            return items
        except Exception:
            logger.exception(
                "Error occurred while calling USAJobs CodeList API for endpoint: %s", endpoint
            )
            return None

    async def find_by_code(self, code_list: CodeList, code: str) -> CodeListItem | None:
        """Case-insensitive exact match on ``code``."""
        items = await self.get_code_list(code_list)
        if not items:
            return None
        wanted = code.lower()
        for item in items:
            if item.code is not None and item.code.lower() == wanted:
                return item
        return None

    async def search(self, code_list: CodeList, keyword: str) -> list[Any] | None:
        """Active items whose code or value contains ``keyword``, ordered by code."""
        if not keyword or not keyword.strip():
            return []

        items = await self.get_code_list(code_list)
        if items is None:
            return None

        term = keyword.lower()
        matches = [
            item
            for item in items
            if item.is_active
            and (term in (item.code or "").lower() or term in (item.value or "").lower())
        ]
        return sorted(matches, key=lambda item: item.code or "")

    async def refresh_all(self):
        """Evict every code list, then re-warm the frequently used ones."""
        logger.info("Refreshing all USAJobs code lists from API")

        for code_list in CodeList:
            await self.cache.remove(code_list.cache_key)

        await asyncio.gather(*(self.get_code_list(code_list) for code_list in HOT_CODE_LISTS))

        logger.info("Completed refreshing USAJobs code lists")

    async def is_available(self) -> bool:
        try:
            http = await self._get_http()
            response = await http.get(CodeList.OCCUPATIONAL_SERIES.endpoint)
            return response.is_success
        except Exception:
            logger.warning("USAJobs CodeList service is not available", exc_info=True)
            return False

    async def aclose(self):
        if self._http is not None:
            await self._http.aclose()

    # Typed lists

    async def get_occupational_series(self) -> list[OccupationalSeriesItem] | None:
        return await self.get_code_list(CodeList.OCCUPATIONAL_SERIES)

    async def get_occupational_series_by_code(self, code: str) -> OccupationalSeriesItem | None:
        return await self.find_by_code(CodeList.OCCUPATIONAL_SERIES, code)

    async def search_occupational_series(self, keyword: str) -> list[OccupationalSeriesItem] | None:
        return await self.search(CodeList.OCCUPATIONAL_SERIES, keyword)

    async def get_pay_plans(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.PAY_PLANS)

    async def get_pay_plan_by_code(self, code: str) -> CodeListItem | None:
        return await self.find_by_code(CodeList.PAY_PLANS, code)

    async def get_hiring_paths(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.HIRING_PATHS)

    async def get_position_schedule_types(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.POSITION_SCHEDULE_TYPES)

    async def get_work_schedules(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.WORK_SCHEDULES)

    async def get_security_clearances(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.SECURITY_CLEARANCES)

    async def get_countries(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.COUNTRIES)

    async def get_postal_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.POSTAL_CODES)

    async def get_geo_locations(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.GEO_LOCATIONS)

    async def get_travel_requirements(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.TRAVEL_REQUIREMENTS)

    async def get_remote_work_options(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.REMOTE_WORK)

    # Additional lists

    async def get_agency_subelements(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.AGENCY_SUBELEMENTS)

    async def get_gsa_geo_location_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.GSA_GEO_LOCATION_CODES)

    async def get_country_subdivisions(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.COUNTRY_SUBDIVISIONS)

    async def get_travel_percentages(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.TRAVEL_PERCENTAGES)

    async def get_position_offering_types(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.POSITION_OFFERING_TYPES)

    async def get_who_may_apply(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.WHO_MAY_APPLY)

    async def get_academic_honors(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.ACADEMIC_HONORS)

    async def get_action_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.ACTION_CODES)

    async def get_degree_type_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.DEGREE_TYPE_CODES)

    async def get_document_formats(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.DOCUMENT_FORMATS)

    async def get_race_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.RACE_CODES)

    async def get_ethnicities(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.ETHNICITIES)

    async def get_documentations(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.DOCUMENTATIONS)

    async def get_federal_employment_statuses(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.FEDERAL_EMPLOYMENT_STATUSES)

    async def get_language_proficiencies(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.LANGUAGE_PROFICIENCIES)

    async def get_language_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.LANGUAGE_CODES)

    async def get_military_status_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.MILITARY_STATUS_CODES)

    async def get_referee_type_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.REFEREE_TYPE_CODES)

    async def get_special_hirings(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.SPECIAL_HIRINGS)

    async def get_remuneration_rate_interval_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.REMUNERATION_RATE_INTERVAL_CODES)

    async def get_application_statuses(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.APPLICATION_STATUSES)

    async def get_academic_levels(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.ACADEMIC_LEVELS)

    async def get_key_standard_requirements(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.KEY_STANDARD_REQUIREMENTS)

    async def get_required_standard_documents(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.REQUIRED_STANDARD_DOCUMENTS)

    async def get_disabilities(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.DISABILITIES)

    async def get_applicant_suppliers(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.APPLICANT_SUPPLIERS)

    async def get_mission_critical_codes(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.MISSION_CRITICAL_CODES)

    async def get_announcement_closing_types(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.ANNOUNCEMENT_CLOSING_TYPES)

    async def get_service_types(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.SERVICE_TYPES)

    async def get_location_expansions(self) -> list[CodeListItem] | None:
        return await self.get_code_list(CodeList.LOCATION_EXPANSIONS)
