"""Enumeration types for TalentPool."""

from enum import Enum


class JobSource(str, Enum):
    """Where an aggregated listing came from."""
    INTERNAL = "Internal"
    EXTERNAL_API = "ExternalAPI"
    OTHER = "Other"


class JobType(str, Enum):
    """Employment type of a listing."""
    FULL_TIME = "FullTime"
    PART_TIME = "PartTime"
    CONTRACT = "Contract"
    TEMPORARY = "Temporary"
    INTERNSHIP = "Internship"


class WarningType(str, Enum):
    """Kinds of degradation reported in search metadata."""
    RATE_LIMIT_APPROACHING = "RateLimitApproaching"
    PARTIAL_RESULTS = "PartialResults"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    DATA_INCOMPLETE = "DataIncomplete"


class CacheProvider(str, Enum):
    """Cache backend selection."""
    MEMORY = "memory"
    REDIS = "redis"


class ClientErrorType(str, Enum):
    """Error types for upstream client operations."""
    PARSE_ERROR = "parse_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"
