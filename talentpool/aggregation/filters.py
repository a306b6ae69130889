"""Filtering, ordering and paging of aggregated listings."""

from datetime import datetime, timezone

from talentpool.aggregation.mapping import ensure_utc
from talentpool.models.listing import AggregatedJobListing, JobSearchRequest, SalaryFilter

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _salary_matches(job: AggregatedJobListing, bounds: SalaryFilter) -> bool:
    salary = job.salary
    if salary is None:
        return False
    low = salary.min_salary if salary.min_salary is not None else salary.max_salary
    high = salary.max_salary if salary.max_salary is not None else salary.min_salary
    if low is None:
        return False
    if bounds.min_salary is not None and low < bounds.min_salary:
        return False
    if bounds.max_salary is not None and high > bounds.max_salary:
        return False
    return True


def _has_skill(job: AggregatedJobListing, wanted: list[str]) -> bool:
    skills = [s.lower() for s in job.required_skills]
    return any(w.lower() in skill for w in wanted for skill in skills)


def matches(job: AggregatedJobListing, request: JobSearchRequest) -> bool:
    """Whether ``job`` satisfies every criterion set on ``request``."""
    if request.salary_range is not None and not _salary_matches(job, request.salary_range):
        return False
    if request.job_types and job.job_type not in request.job_types:
        return False
    if request.is_remote is not None and job.is_remote != request.is_remote:
        return False
    if request.posted_after is not None:
        if job.posted_date is None or job.posted_date < ensure_utc(request.posted_after):
            return False
    if request.required_skills and not _has_skill(job, request.required_skills):
        return False
    return True


def apply_filters(
    jobs: list[AggregatedJobListing], request: JobSearchRequest
) -> list[AggregatedJobListing]:
    return [job for job in jobs if matches(job, request)]


def _posted_key(job: AggregatedJobListing):
    # Listings without a date sort as the oldest.
    return job.posted_date or _EPOCH


SORT_KEYS = {
    "title": lambda job: job.title.casefold(),
    "posted": _posted_key,
    "date": _posted_key,
    "posteddate": _posted_key,
    "posted_date": _posted_key,
    "salary": lambda job: (job.salary.max_salary if job.salary else None) or 0,
    "organization": lambda job: job.organization.casefold(),
}


def sort_listings(
    jobs: list[AggregatedJobListing],
    sort_by: str | None,
    sort_direction: str | None,
) -> list[AggregatedJobListing]:
    """
    Stable sort by ``sort_by``.

    Unknown or missing fields fall back to newest first. Direction is
    ascending only when ``sort_direction`` is "asc".
    """
    key = SORT_KEYS.get((sort_by or "").strip().lower())
    if key is None:
        return sorted(jobs, key=_posted_key, reverse=True)
    descending = (sort_direction or "desc").strip().lower() != "asc"
    return sorted(jobs, key=key, reverse=descending)


def paginate(jobs: list, page: int, page_size: int) -> list:
    start = (page - 1) * page_size
    return jobs[start:start + page_size]
