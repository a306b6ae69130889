"""Shared fixtures for aggregation tests."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest

from talentpool.aggregation.service import JobAggregationService
from talentpool.cache.memory import MemoryCacheService
from talentpool.matching.scorer import (
    CandidateMatcher,
    HeuristicScoringStrategy,
    no_perturbation,
)
from talentpool.models.internal import Employee, InternalPosition
from talentpool.models.usajobs import USAJobsResponse
from talentpool.sources import StaticEmployeeSource, StaticPositionSource


BASE_DATE = datetime(2024, 3, 1, 12, 0, 0)


def usajobs_response(descriptors: list[dict]) -> USAJobsResponse:
    return USAJobsResponse.model_validate({
        "SearchResult": {
            "SearchResultItems": [{"MatchedObjectDescriptor": d} for d in descriptors]
        }
    })


def external_descriptor(n: int, title: str = "Engineer", **extra) -> dict:
    descriptor = {
        "PositionID": f"EXT-{n}",
        "PositionTitle": f"{title} {n}",
        "OrganizationName": "Bureau of Reclamation",
        "DepartmentName": "Department of the Interior",
        "PositionLocationDisplay": "Denver, Colorado",
        "PublicationStartDate": (BASE_DATE - timedelta(days=n)).isoformat(),
        "PositionSchedule": [{"Name": "Full-time", "Code": "1"}],
        "PositionRemuneration": [
            {"MinimumRange": "60000", "MaximumRange": "90000", "RateIntervalCode": "PA"}
        ],
    }
    descriptor.update(extra)
    return descriptor


def internal_position(n: int, title: str = "Engineer", department: str = "Engineering") -> InternalPosition:
    return InternalPosition(
        id=UUID(int=n),
        position_title=f"{title} {n}",
        position_description="Internal role",
        department_name=department,
        created=BASE_DATE - timedelta(hours=n),
    )


@pytest.fixture
def positions():
    return StaticPositionSource([internal_position(n) for n in range(1, 4)])


@pytest.fixture
def employees():
    return StaticEmployeeSource([
        Employee(
            id=UUID(int=100),
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            position_title="Engineer",
            department_name="Engineering",
            skills=["Leadership", "Python"],
        ),
        Employee(
            id=UUID(int=101),
            first_name="Grace",
            last_name="Hopper",
            email="grace@example.com",
            position_title="Accountant",
            department_name="Finance",
        ),
    ])


@pytest.fixture
def external_client():
    client = MagicMock()
    client.search_jobs = AsyncMock(
        return_value=usajobs_response([external_descriptor(n) for n in range(1, 8)])
    )
    client.get_job_details = AsyncMock(
        return_value=usajobs_response([external_descriptor(1)]).descriptors[0]
    )
    return client


@pytest.fixture
def service(positions, employees, external_client):
    return JobAggregationService(
        positions,
        employees,
        MemoryCacheService(),
        external_client=external_client,
        matcher=CandidateMatcher(
            employees, strategy=HeuristicScoringStrategy(no_perturbation)
        ),
    )
