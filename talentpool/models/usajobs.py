"""USAJobs search request and response models.

The response models mirror the provider's search payload
(``SearchResult.SearchResultItems[].MatchedObjectDescriptor``). They are
read and projected, never mutated.
"""

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from talentpool.models.base import CamelModel, one_or_many


def _as_text(value: Any) -> Any:
    """Coerce the provider's loosely typed scalars to text."""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) if value else None
    if isinstance(value, (bool, int, float)):
        return str(value)
    return value


def _name_only(value: Any) -> Any:
    if isinstance(value, str):
        return {"name": value}
    return value


def _text_section(value: Any) -> Any:
    if isinstance(value, str):
        return {"label_description": value}
    return value


def _summary_text(value: Any) -> Any:
    if isinstance(value, dict):
        for key, text in value.items():
            if key.replace("_", "").lower() == "qualificationsummarytext":
                return text
        return None
    return _as_text(value)


Text = Annotated[str | None, BeforeValidator(_as_text)]
TextList = Annotated[list[str], BeforeValidator(one_or_many)]


class ExternalSearchRequest(BaseModel):
    """Immutable search parameters for the USAJobs search endpoint."""

    model_config = ConfigDict(frozen=True)

    keyword: str | None = None
    location_name: str | None = None
    page: int | None = 1
    results_per_page: int | None = 25
    sort_field: str | None = None
    sort_direction: str | None = None
    organization: str | None = None
    pay_grade_high: str | None = None
    pay_grade_low: str | None = None
    position_schedule_type_code: str | None = None
    position_offering_type_code: str | None = None
    date_posted: date | None = None


class PositionLocation(CamelModel):
    location_name: Text = None
    country_code: Text = None
    country_sub_division_code: Text = None
    city_name: Text = None
    longitude: float | None = None
    latitude: float | None = None


class CodedName(CamelModel):
    """A ``{Name, Code}`` pair used for categories, grades and schedules."""

    name: Text = None
    code: Text = None


NamedList = Annotated[
    list[Annotated[CodedName, BeforeValidator(_name_only)]],
    BeforeValidator(one_or_many),
]


class PositionRemuneration(CamelModel):
    minimum_range: Text = None
    maximum_range: Text = None
    rate_interval_code: Text = None
    description: Text = None


class FormattedDescription(CamelModel):
    label: Text = None
    label_description: Text = None


class JobDetails(CamelModel):
    """Extended fields nested under ``UserArea.Details``."""

    job_summary: Text = None
    who_may_apply: CodedName | None = None
    low_grade: Text = None
    high_grade: Text = None
    promotion_potential: Text = None
    organization_codes: Text = None
    relocation: Text = None
    hiring_path: TextList = Field(default_factory=list)
    total_openings: Text = None
    agency_marketing_statement: Text = None
    travel_code: Text = None
    detail_status_url: Text = None
    major_duties: TextList = Field(default_factory=list)
    education: Text = None
    requirements: Text = None
    evaluations: Text = None
    how_to_apply: Text = None
    what_to_expect_next: Text = None
    required_documents: Text = None
    benefits: Text = None
    benefits_url: Text = None
    other_information: Text = None
    key_requirements: TextList = Field(default_factory=list)
    within_area: Text = None
    commute_distance: Text = None
    service_type: Text = None
    announcement_closing_type: Text = None
    agency_contact_email: Text = None
    agency_contact_phone: Text = None
    security_clearance: Text = None
    drug_test: Text = None
    adjudication_type: TextList = Field(default_factory=list)
    telework_eligible: bool | str | None = None
    remote_indicator: bool | str | None = None


class UserArea(CamelModel):
    details: JobDetails | None = None
    is_radial_search: bool | None = None


class MatchedObjectDescriptor(CamelModel):
    """A single job posting as delivered by the provider."""

    position_id: Text = None
    position_title: Text = None
    position_uri: Text = None
    apply_uri: TextList = Field(default_factory=list)
    position_location_display: Text = None
    position_location: Annotated[
        list[PositionLocation], BeforeValidator(one_or_many)
    ] = Field(default_factory=list)
    organization_name: Text = None
    department_name: Text = None
    sub_agency: Text = None
    job_category: NamedList = Field(default_factory=list)
    job_grade: NamedList = Field(default_factory=list)
    position_schedule: NamedList = Field(default_factory=list)
    position_offering_type: NamedList = Field(default_factory=list)
    qualification_summary: Annotated[str | None, BeforeValidator(_summary_text)] = None
    position_remuneration: Annotated[
        list[PositionRemuneration], BeforeValidator(one_or_many)
    ] = Field(default_factory=list)
    position_start_date: datetime | None = None
    position_end_date: datetime | None = None
    publication_start_date: datetime | None = None
    application_close_date: datetime | None = None
    position_formatted_description: Annotated[
        list[Annotated[FormattedDescription, BeforeValidator(_text_section)]],
        BeforeValidator(one_or_many),
    ] = Field(default_factory=list)
    user_area: UserArea | None = None

    @property
    def details(self) -> JobDetails | None:
        return self.user_area.details if self.user_area else None


class SearchResultItem(CamelModel):
    matched_object_id: Text = None
    matched_object_descriptor: MatchedObjectDescriptor | None = None
    relevance_rank: float | None = None


class SearchResult(CamelModel):
    search_result_count: int | None = None
    search_result_count_all: int | None = None
    search_result_items: Annotated[
        list[SearchResultItem], BeforeValidator(one_or_many)
    ] = Field(default_factory=list)


class USAJobsResponse(CamelModel):
    """Top-level search response."""

    language_code: Text = None
    search_parameters: dict[str, Any] | None = None
    search_result: SearchResult | None = None

    @property
    def descriptors(self) -> list[MatchedObjectDescriptor]:
        """Non-null descriptors in response order."""
        if self.search_result is None:
            return []
        return [
            item.matched_object_descriptor
            for item in self.search_result.search_result_items
            if item.matched_object_descriptor is not None
        ]
