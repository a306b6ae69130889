"""TalentPool data models."""

from talentpool.models.enums import (
    CacheProvider,
    ClientErrorType,
    JobSource,
    JobType,
    WarningType,
)
from talentpool.models.codelists import (
    CodeList,
    CodeListItem,
    CodeListResponse,
    OccupationalSeriesItem,
)
from talentpool.models.internal import Employee, InternalPosition
from talentpool.models.listing import (
    AggregatedJobListing,
    JobSearchMetadata,
    JobSearchRequest,
    JobSearchResult,
    MatchingCandidate,
    SalaryFilter,
    SalaryInfo,
    SearchWarning,
)
from talentpool.models.usajobs import (
    ExternalSearchRequest,
    MatchedObjectDescriptor,
    USAJobsResponse,
)

__all__ = [
    "CacheProvider",
    "ClientErrorType",
    "JobSource",
    "JobType",
    "WarningType",
    "CodeList",
    "CodeListItem",
    "CodeListResponse",
    "OccupationalSeriesItem",
    "Employee",
    "InternalPosition",
    "AggregatedJobListing",
    "JobSearchMetadata",
    "JobSearchRequest",
    "JobSearchResult",
    "MatchingCandidate",
    "SalaryFilter",
    "SalaryInfo",
    "SearchWarning",
    "ExternalSearchRequest",
    "MatchedObjectDescriptor",
    "USAJobsResponse",
]
