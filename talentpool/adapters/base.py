"""Job source client interface and common types."""

from abc import ABC, abstractmethod

from talentpool.models.enums import ClientErrorType
from talentpool.models.usajobs import (
    ExternalSearchRequest,
    MatchedObjectDescriptor,
    USAJobsResponse,
)


class ClientError(Exception):
    """Base exception for upstream client errors."""

    def __init__(
        self,
        message: str,
        error_type: ClientErrorType = ClientErrorType.UNKNOWN,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


class JobSourceClient(ABC):
    """Capability shared by the raw USAJobs client and its cached wrapper."""

    @abstractmethod
    async def search_jobs(self, request: ExternalSearchRequest) -> USAJobsResponse | None:
        """
        Search the external job board.

        Args:
            request: Search parameters.

        Returns:
            Parsed response, or None when the provider had nothing usable
            (non-success status or empty body).

        Raises:
            ClientError: On malformed payloads, timeouts or transport failures.
        """
        ...

    @abstractmethod
    async def get_job_details(self, position_id: str) -> MatchedObjectDescriptor | None:
        """
        Look up a single posting by its position id.

        Returns:
            The first matching descriptor, or None if not found.
        """
        ...

    @abstractmethod
    async def validate_connection(self) -> bool:
        """
        Check that the provider is reachable.

        Returns:
            True on success; every failure is reported as False.
        """
        ...
