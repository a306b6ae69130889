"""Projection of internal and upstream records onto the canonical listing."""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from talentpool.models.enums import JobSource, JobType
from talentpool.models.internal import InternalPosition
from talentpool.models.listing import AggregatedJobListing, SalaryInfo
from talentpool.models.usajobs import MatchedObjectDescriptor, PositionRemuneration

INTERNAL_ORGANIZATION = "Internal"
INTERNAL_LOCATION = "Internal"

# Schedule code -> job type. Anything else is treated as full time.
JOB_TYPE_BY_SCHEDULE_CODE = {
    "1": JobType.FULL_TIME,
    "F": JobType.FULL_TIME,
    "2": JobType.PART_TIME,
    "P": JobType.PART_TIME,
    "3": JobType.TEMPORARY,
    "T": JobType.TEMPORARY,
    "4": JobType.INTERNSHIP,
    "I": JobType.INTERNSHIP,
}

COMMON_SKILLS = (
    "Project Management",
    "Leadership",
    "Communication",
    "Analysis",
    "Problem Solving",
)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def map_internal_position(position: InternalPosition) -> AggregatedJobListing:
    return AggregatedJobListing(
        id=str(position.id),
        title=position.position_title or "",
        description=position.position_description or "",
        organization=INTERNAL_ORGANIZATION,
        department=position.department_name or "",
        location=INTERNAL_LOCATION,
        posted_date=ensure_utc(position.created),
        source=JobSource.INTERNAL,
        job_type=JobType.FULL_TIME,
        is_remote=False,
    )


def parse_salary_value(text: str | None) -> float | None:
    """Parse ``"$85,000.00"`` style amounts; unparseable text is None."""
    if not text:
        return None
    cleaned = text.replace("$", "").replace(",", "").replace(" ", "")
    try:
        return float(Decimal(cleaned))
    except InvalidOperation:
        return None


def map_salary(job: MatchedObjectDescriptor) -> SalaryInfo | None:
    if not job.position_remuneration:
        return None
    remuneration: PositionRemuneration = job.position_remuneration[0]
    grade = next((g.code for g in job.job_grade if g.code), None)
    return SalaryInfo(
        min_salary=parse_salary_value(remuneration.minimum_range),
        max_salary=parse_salary_value(remuneration.maximum_range),
        currency="USD",
        pay_frequency=remuneration.rate_interval_code or remuneration.description,
        pay_grade=grade,
    )


def map_job_type(schedule_code: str | None) -> JobType:
    if not schedule_code:
        return JobType.FULL_TIME
    return JOB_TYPE_BY_SCHEDULE_CODE.get(schedule_code.strip().upper(), JobType.FULL_TIME)


def _flag_present(value: bool | str | None) -> bool:
    if isinstance(value, bool):
        return value
    return bool(value)


def is_remote_position(job: MatchedObjectDescriptor) -> bool:
    """Remote if a remote indicator is present or telework eligibility says yes."""
    details = job.details
    if details is None:
        return False
    if _flag_present(details.remote_indicator):
        return True
    telework = details.telework_eligible
    if isinstance(telework, bool):
        return telework
    return bool(telework) and "yes" in telework.lower()


def _description(job: MatchedObjectDescriptor) -> str:
    sections = [
        section.label_description
        for section in job.position_formatted_description
        if section.label_description
    ]
    if sections:
        return "\n\n".join(sections)
    details = job.details
    if details and details.job_summary:
        return details.job_summary
    return ""


def _location(job: MatchedObjectDescriptor) -> str:
    if job.position_location_display:
        return job.position_location_display
    names = [loc.location_name for loc in job.position_location if loc.location_name]
    return "; ".join(names)


def extract_keywords(job: MatchedObjectDescriptor) -> list[str]:
    keywords = [category.name for category in job.job_category if category.name]
    for grade in job.job_grade:
        label = grade.name or grade.code
        if label:
            keywords.append(label)
    return keywords


def extract_required_skills(job: MatchedObjectDescriptor) -> list[str]:
    """Common skills mentioned in the description or requirements text."""
    details = job.details
    text = " ".join(
        part
        for part in (
            _description(job),
            details.requirements if details else None,
            " ".join(details.key_requirements) if details else None,
        )
        if part
    ).lower()
    return [skill for skill in COMMON_SKILLS if skill.lower() in text]


def map_external_listing(job: MatchedObjectDescriptor) -> AggregatedJobListing:
    schedule = job.position_schedule[0] if job.position_schedule else None
    details = job.details
    return AggregatedJobListing(
        id=job.position_id or "",
        title=job.position_title or "",
        description=_description(job),
        organization=job.organization_name or "",
        department=job.department_name or "",
        location=_location(job),
        salary=map_salary(job),
        posted_date=ensure_utc(job.publication_start_date),
        closing_date=ensure_utc(job.application_close_date),
        source=JobSource.EXTERNAL_API,
        external_url=job.position_uri,
        keywords=extract_keywords(job),
        required_skills=extract_required_skills(job),
        job_type=map_job_type(schedule.code if schedule else None),
        work_schedule=schedule.name if schedule else None,
        is_remote=is_remote_position(job),
        security_clearance=details.security_clearance if details else None,
    )
