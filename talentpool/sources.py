"""Internal HR data sources.

The aggregation engine reads positions and employees through these
contracts. ``StaticPositionSource`` and ``StaticEmployeeSource`` serve
records held in memory, typically loaded from a YAML data file.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from uuid import UUID

from talentpool.config import load_yaml
from talentpool.models.internal import Employee, InternalPosition


class PositionSource(ABC):
    """Read access to internal positions."""

    @abstractmethod
    async def get_page(self, page_number: int, page_size: int) -> list[InternalPosition]:
        ...

    @abstractmethod
    async def get_by_id(self, position_id: UUID) -> InternalPosition | None:
        ...


class EmployeeSource(ABC):
    """Read access to employees."""

    @abstractmethod
    async def get_page(self, page_number: int, page_size: int) -> list[Employee]:
        ...

    @abstractmethod
    async def get_by_id(self, employee_id: UUID) -> Employee | None:
        ...


def _page(records: list, page_number: int, page_size: int) -> list:
    start = (max(page_number, 1) - 1) * page_size
    return records[start:start + page_size]


class StaticPositionSource(PositionSource):
    def __init__(self, positions: list[InternalPosition] | None = None):
        self.positions = list(positions or [])

    async def get_page(self, page_number: int, page_size: int) -> list[InternalPosition]:
        return _page(self.positions, page_number, page_size)

    async def get_by_id(self, position_id: UUID) -> InternalPosition | None:
        return next((p for p in self.positions if p.id == position_id), None)


class StaticEmployeeSource(EmployeeSource):
    def __init__(self, employees: list[Employee] | None = None):
        self.employees = list(employees or [])

    async def get_page(self, page_number: int, page_size: int) -> list[Employee]:
        return _page(self.employees, page_number, page_size)

    async def get_by_id(self, employee_id: UUID) -> Employee | None:
        return next((e for e in self.employees if e.id == employee_id), None)


def load_internal_data(path: Path) -> tuple[StaticPositionSource, StaticEmployeeSource]:
    """
    Load positions and employees from a YAML file.

    Expected layout::

        positions:
          - id: 6f1c...
            position_title: Software Engineer
            department_name: Engineering
        employees:
          - id: 0a2b...
            first_name: Ada
            last_name: Lovelace
    """
    data = load_yaml(path)
    positions = [InternalPosition(**raw) for raw in data.get("positions") or []]
    employees = [Employee(**raw) for raw in data.get("employees") or []]
    return StaticPositionSource(positions), StaticEmployeeSource(employees)
