"""Tests for projection onto the canonical listing."""

from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

import pytest

from talentpool.aggregation.mapping import (
    ensure_utc,
    is_remote_position,
    map_external_listing,
    map_internal_position,
    map_job_type,
    parse_salary_value,
)
from talentpool.models.enums import JobSource, JobType
from talentpool.models.internal import InternalPosition
from talentpool.models.usajobs import MatchedObjectDescriptor, USAJobsResponse


FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def descriptors():
    """Descriptors from the USAJobs search fixture."""
    with open(FIXTURES_DIR / "usajobs_search.json") as f:
        return USAJobsResponse.model_validate_json(f.read()).descriptors


class TestInternalMapping:
    """Tests for map_internal_position."""

    def test_fields(self):
        position = InternalPosition(
            id=UUID(int=7),
            position_title="HR Specialist",
            position_description="Supports hiring.",
            department_name="Human Resources",
            created=datetime(2024, 1, 2, 3, 4, 5),
        )

        job = map_internal_position(position)

        assert job.id == str(UUID(int=7))
        assert job.title == "HR Specialist"
        assert job.organization == "Internal"
        assert job.location == "Internal"
        assert job.department == "Human Resources"
        assert job.source == JobSource.INTERNAL
        assert job.job_type == JobType.FULL_TIME
        assert job.is_remote is False
        assert job.posted_date == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_missing_department(self):
        job = map_internal_position(InternalPosition(id=UUID(int=1)))

        assert job.department == ""
        assert job.posted_date is None


class TestExternalMapping:
    """Tests for map_external_listing."""

    def test_full_descriptor(self, descriptors):
        job = map_external_listing(descriptors[0])

        assert job.id == "ENG-24-0001"
        assert job.title == "Civil Engineer"
        assert job.organization == "Bureau of Reclamation"
        assert job.department == "Department of the Interior"
        assert job.location == "Denver, Colorado"
        assert job.source == JobSource.EXTERNAL_API
        assert job.external_url == "https://www.usajobs.gov:443/GetJob/ViewDetails/800001"
        assert job.salary.min_salary == 85000
        assert job.salary.max_salary == 110500
        assert job.salary.currency == "USD"
        assert job.salary.pay_frequency == "PA"
        assert job.salary.pay_grade == "GS"
        assert job.job_type == JobType.FULL_TIME
        assert job.work_schedule == "Full-time"
        assert job.is_remote is True
        assert job.security_clearance == "Not Required"
        assert job.keywords == ["Civil Engineering", "GS"]
        assert job.required_skills == ["Leadership", "Communication", "Analysis"]
        assert job.description.startswith("Design and analysis")
        assert job.posted_date == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_sparse_descriptor(self, descriptors):
        job = map_external_listing(descriptors[1])

        assert job.location == "Washington, District of Columbia"
        assert job.salary.min_salary == 45000
        assert job.salary.max_salary == 58000
        assert job.job_type == JobType.INTERNSHIP
        assert job.is_remote is True
        assert job.description == "Student trainee position with project management exposure."
        assert job.required_skills == ["Project Management"]
        assert job.keywords == ["Electronics Engineering", "General Schedule"]

    def test_no_remuneration(self, descriptors):
        job = map_external_listing(descriptors[2])

        assert job.salary is None
        assert job.job_type == JobType.PART_TIME
        assert job.is_remote is True

    def test_empty_descriptor(self):
        job = map_external_listing(MatchedObjectDescriptor())

        assert job.id == ""
        assert job.description == ""
        assert job.salary is None
        assert job.is_remote is False
        assert job.job_type == JobType.FULL_TIME
        assert job.keywords == []
        assert job.required_skills == []


class TestHelpers:
    """Tests for mapping helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("$85,000.00", 85000.0),
        ("85000", 85000.0),
        (" 1 234 ", 1234.0),
        ("", None),
        (None, None),
        ("n/a", None),
    ])
    def test_parse_salary_value(self, text, expected):
        assert parse_salary_value(text) == expected

    @pytest.mark.parametrize("code,expected", [
        ("1", JobType.FULL_TIME),
        ("f", JobType.FULL_TIME),
        ("2", JobType.PART_TIME),
        ("P", JobType.PART_TIME),
        ("3", JobType.TEMPORARY),
        ("T", JobType.TEMPORARY),
        ("4", JobType.INTERNSHIP),
        ("i", JobType.INTERNSHIP),
        ("6", JobType.FULL_TIME),
        (None, JobType.FULL_TIME),
    ])
    def test_map_job_type(self, code, expected):
        assert map_job_type(code) == expected

    @pytest.mark.parametrize("details,expected", [
        ({"RemoteIndicator": "Y"}, True),
        ({"RemoteIndicator": ""}, False),
        ({"RemoteIndicator": False, "TeleworkEligible": False}, False),
        ({"TeleworkEligible": "YES"}, True),
        ({"TeleworkEligible": "No"}, False),
        ({"TeleworkEligible": True}, True),
        ({}, False),
    ])
    def test_is_remote_position(self, details, expected):
        descriptor = MatchedObjectDescriptor.model_validate({"UserArea": {"Details": details}})

        assert is_remote_position(descriptor) is expected

    def test_ensure_utc(self):
        naive = datetime(2024, 1, 1, 12)
        eastern = datetime.fromisoformat("2024-01-01T07:00:00-05:00")

        assert ensure_utc(naive) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
        assert ensure_utc(eastern).tzinfo == timezone.utc
        assert ensure_utc(eastern) == ensure_utc(naive)
        assert ensure_utc(None) is None
