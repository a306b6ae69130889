"""Configuration loading utilities."""

from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from talentpool.models.enums import CacheProvider


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # USAJobs API
    usajobs_base_url: str = "https://data.usajobs.gov/api"
    usajobs_api_key: str = ""
    usajobs_user_agent: str = "TalentPool/1.0"
    request_timeout: float = 30.0
    max_retries: int = 3
    default_rps: float = 1.0

    # Cache backend
    cache_provider: CacheProvider = CacheProvider.MEMORY
    redis_url: str | None = None
    redis_key_prefix: str = ""
    cache_default_expiration_minutes: int = 30
    cache_sliding_expiration_minutes: int = 5

    # Per-use TTLs
    job_search_expiration_minutes: int = 15
    job_details_expiration_minutes: int = 60
    code_list_expiration_hours: int = 4
    internal_jobs_expiration_minutes: int = 15

    # Aggregation
    internal_positions_page_size: int = 100
    employee_pool_size: int = 50

    class Config:
        env_prefix = "TALENTPOOL_"
        env_file = ".env"

    @property
    def job_search_ttl(self) -> timedelta:
        return timedelta(minutes=self.job_search_expiration_minutes)

    @property
    def job_details_ttl(self) -> timedelta:
        return timedelta(minutes=self.job_details_expiration_minutes)

    @property
    def code_list_ttl(self) -> timedelta:
        return timedelta(hours=self.code_list_expiration_hours)

    @property
    def internal_jobs_ttl(self) -> timedelta:
        return timedelta(minutes=self.internal_jobs_expiration_minutes)

    @property
    def sliding_expiration(self) -> timedelta | None:
        if self.cache_sliding_expiration_minutes <= 0:
            return None
        return timedelta(minutes=self.cache_sliding_expiration_minutes)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from the environment, overlaid by an optional YAML file."""
    if path is None:
        return Settings()
    return Settings(**load_yaml(path))


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
