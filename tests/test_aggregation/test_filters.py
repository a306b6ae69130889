"""Tests for listing filters, ordering and paging."""

from datetime import datetime, timedelta, timezone

import pytest

from talentpool.aggregation.filters import apply_filters, paginate, sort_listings
from talentpool.models.enums import JobType
from talentpool.models.listing import (
    AggregatedJobListing,
    JobSearchRequest,
    SalaryFilter,
    SalaryInfo,
)


NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def listing(id: str, **fields) -> AggregatedJobListing:
    fields.setdefault("title", f"Job {id}")
    return AggregatedJobListing(id=id, **fields)


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_salary_range(self):
        jobs = [
            listing("a", salary=SalaryInfo(max_salary=50000)),
            listing("b", salary=SalaryInfo(max_salary=90000)),
            listing("c", salary=SalaryInfo(max_salary=120000)),
        ]
        request = JobSearchRequest(
            salary_range=SalaryFilter(min_salary=60000, max_salary=100000)
        )

        assert [j.id for j in apply_filters(jobs, request)] == ["b"]

    def test_salary_range_uses_both_bounds(self):
        jobs = [
            listing("a", salary=SalaryInfo(min_salary=55000, max_salary=90000)),
            listing("b", salary=SalaryInfo(min_salary=65000, max_salary=90000)),
            listing("c", salary=None),
        ]
        request = JobSearchRequest(salary_range=SalaryFilter(min_salary=60000))

        assert [j.id for j in apply_filters(jobs, request)] == ["b"]

    def test_job_types(self):
        jobs = [
            listing("a", job_type=JobType.FULL_TIME),
            listing("b", job_type=JobType.INTERNSHIP),
            listing("c", job_type=JobType.PART_TIME),
        ]
        request = JobSearchRequest(job_types=[JobType.INTERNSHIP, JobType.PART_TIME])

        assert [j.id for j in apply_filters(jobs, request)] == ["b", "c"]

    @pytest.mark.parametrize("remote,expected", [(True, ["a"]), (False, ["b"]), (None, ["a", "b"])])
    def test_remote(self, remote, expected):
        jobs = [listing("a", is_remote=True), listing("b", is_remote=False)]

        assert [j.id for j in apply_filters(jobs, JobSearchRequest(is_remote=remote))] == expected

    def test_posted_after(self):
        jobs = [
            listing("old", posted_date=NOW - timedelta(days=10)),
            listing("new", posted_date=NOW),
            listing("undated"),
        ]
        request = JobSearchRequest(posted_after=datetime(2024, 2, 25))

        assert [j.id for j in apply_filters(jobs, request)] == ["new"]

    def test_required_skills_any_substring(self):
        jobs = [
            listing("a", required_skills=["Project Management"]),
            listing("b", required_skills=["Communication"]),
            listing("c"),
        ]
        request = JobSearchRequest(required_skills=["management", "Statistics"])

        assert [j.id for j in apply_filters(jobs, request)] == ["a"]

    def test_no_criteria_keeps_everything(self):
        jobs = [listing(str(n)) for n in range(3)]

        assert apply_filters(jobs, JobSearchRequest()) == jobs


class TestSortListings:
    """Tests for sort_listings."""

    def test_salary_ascending_is_stable(self):
        jobs = [
            listing("a", salary=SalaryInfo(max_salary=70000)),
            listing("b", salary=SalaryInfo(max_salary=50000)),
            listing("c", salary=SalaryInfo(max_salary=70000)),
            listing("d", salary=SalaryInfo(max_salary=50000)),
        ]

        ordered = sort_listings(jobs, "salary", "asc")

        assert [j.id for j in ordered] == ["b", "d", "a", "c"]

    def test_salary_descending_is_stable(self):
        jobs = [
            listing("a", salary=SalaryInfo(max_salary=70000)),
            listing("b"),
            listing("c", salary=SalaryInfo(max_salary=70000)),
        ]

        assert [j.id for j in sort_listings(jobs, "Salary", "desc")] == ["a", "c", "b"]

    def test_title_and_organization(self):
        jobs = [
            listing("1", title="Budget Analyst", organization="VA"),
            listing("2", title="Archivist", organization="NARA"),
        ]

        assert [j.id for j in sort_listings(jobs, "title", "asc")] == ["2", "1"]
        assert [j.id for j in sort_listings(jobs, "organization", "desc")] == ["1", "2"]

    def test_text_keys_ignore_case(self):
        jobs = [
            listing("1", title="Zebra Keeper", organization="Zoo Agency"),
            listing("2", title="apple inspector", organization="agriculture"),
            listing("3", title="Apple Inspector", organization="Agriculture"),
        ]

        assert [j.id for j in sort_listings(jobs, "title", "asc")] == ["2", "3", "1"]
        assert [j.id for j in sort_listings(jobs, "organization", "asc")] == ["2", "3", "1"]

    @pytest.mark.parametrize("sort_by", ["posted", "date", "postedDate", "posted_date"])
    def test_posted_aliases(self, sort_by):
        jobs = [
            listing("old", posted_date=NOW - timedelta(days=1)),
            listing("new", posted_date=NOW),
        ]

        assert [j.id for j in sort_listings(jobs, sort_by, "asc")] == ["old", "new"]

    @pytest.mark.parametrize("sort_by", [None, "", "relevance", "bogus"])
    def test_unknown_field_is_newest_first(self, sort_by):
        jobs = [
            listing("undated"),
            listing("old", posted_date=NOW - timedelta(days=1)),
            listing("new", posted_date=NOW),
        ]

        assert [j.id for j in sort_listings(jobs, sort_by, "asc")] == ["new", "old", "undated"]

    def test_missing_direction_is_descending(self):
        jobs = [listing("b", title="B"), listing("a", title="A")]

        assert [j.id for j in sort_listings(jobs, "title", None)] == ["b", "a"]


class TestPaginate:
    """Tests for paginate."""

    def test_pages(self):
        items = list(range(1, 26))

        assert paginate(items, 2, 10) == list(range(11, 21))
        assert paginate(items, 3, 10) == list(range(21, 26))
        assert paginate(items, 4, 10) == []
