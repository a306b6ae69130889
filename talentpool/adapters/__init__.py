"""TalentPool job source adapters."""

from talentpool.adapters.base import ClientError, JobSourceClient

__all__ = [
    "ClientError",
    "JobSourceClient",
]
