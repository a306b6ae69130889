"""Internal HR records consumed by the aggregation engine."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from talentpool.models.base import CamelModel


class InternalPosition(CamelModel):
    """A position held in the internal HR system."""

    id: UUID
    position_title: str = ""
    position_description: str = ""
    department_name: str | None = None
    created: datetime | None = None


class Employee(CamelModel):
    """An employee eligible for candidate matching."""

    id: UUID
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    position_title: str | None = None
    department_name: str | None = None
    skills: list[str] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
