"""Canonical aggregated job listing and search result models."""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import Field

from talentpool.models.base import CamelModel
from talentpool.models.enums import JobSource, JobType, WarningType


class SalaryInfo(CamelModel):
    min_salary: float | None = None
    max_salary: float | None = None
    currency: str | None = "USD"
    pay_frequency: str | None = None
    pay_grade: str | None = None


class MatchingCandidate(CamelModel):
    """An internal employee scored against a listing."""

    employee_id: UUID
    full_name: str = ""
    email: str = ""
    match_score: float = 0.0
    matching_skills: list[str] = Field(default_factory=list)
    current_position: str = ""


class AggregatedJobListing(CamelModel):
    """Normalized job listing common to every source."""

    id: str = ""
    title: str = ""
    description: str = ""
    organization: str = ""
    department: str = ""
    location: str = ""
    salary: SalaryInfo | None = None
    posted_date: datetime | None = None
    closing_date: datetime | None = None
    source: JobSource = JobSource.OTHER
    external_url: str | None = None
    keywords: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    job_type: JobType = JobType.FULL_TIME
    work_schedule: str | None = None
    is_remote: bool = False
    security_clearance: str | None = None

    # Internal matching data
    matching_candidates: list[MatchingCandidate] = Field(default_factory=list)
    internal_applications: int = 0
    related_positions: list[str] = Field(default_factory=list)


class SalaryFilter(CamelModel):
    min_salary: float | None = None
    max_salary: float | None = None


class JobSearchRequest(CamelModel):
    """Aggregated search criteria."""

    keywords: str | None = None
    location: str | None = None
    sources: list[JobSource] = Field(
        default_factory=lambda: [JobSource.INTERNAL, JobSource.EXTERNAL_API]
    )
    salary_range: SalaryFilter | None = None
    job_types: list[JobType] = Field(default_factory=list)
    is_remote: bool | None = None
    organization: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1)
    sort_by: str | None = "relevance"
    sort_direction: str | None = "desc"
    posted_after: datetime | None = None
    required_skills: list[str] = Field(default_factory=list)
    security_clearance: str | None = None


class SearchWarning(CamelModel):
    source: str = ""
    message: str = ""
    type: WarningType = WarningType.PARTIAL_RESULTS


class JobSearchMetadata(CamelModel):
    search_timestamp: datetime | None = None
    search_duration: timedelta = timedelta(0)
    external_jobs_count: int = 0
    internal_jobs_count: int = 0
    search_sources: list[str] = Field(default_factory=list)
    has_more_results: bool = False
    warnings: list[SearchWarning] = Field(default_factory=list)


class JobSearchResult(CamelModel):
    total_count: int = 0
    page: int = 1
    page_size: int = 0
    jobs: list[AggregatedJobListing] = Field(default_factory=list)
    metadata: JobSearchMetadata = Field(default_factory=JobSearchMetadata)
