"""Rate-limited HTTP client with retry logic."""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timedelta
from urllib.parse import urlparse

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from talentpool.adapters.base import ClientError
from talentpool.models.enums import ClientErrorType

logger = logging.getLogger(__name__)


class RateLimiter:
    """Per-domain rate limiter."""

    def __init__(self, default_rps: float = 1.0):
        self.default_rps = default_rps
        self._domain_limits: dict[str, float] = {}
        self._last_request: dict[str, datetime] = defaultdict(lambda: datetime.min)
        self._lock = asyncio.Lock()

    def set_limit(self, domain: str, rps: float):
        """Set rate limit for a specific domain."""
        self._domain_limits[domain] = rps

    async def acquire(self, url: str):
        """Wait until rate limit allows the request."""
        domain = urlparse(url).netloc
        rps = self._domain_limits.get(domain, self.default_rps)
        if rps <= 0:
            return
        min_interval = timedelta(seconds=1.0 / rps)

        async with self._lock:
            elapsed = datetime.now() - self._last_request[domain]
            if elapsed < min_interval:
                wait_time = (min_interval - elapsed).total_seconds()
                await asyncio.sleep(wait_time)
            self._last_request[domain] = datetime.now()


class HTTPClient:
    """
    HTTP client bound to one API base URL.

    Non-success statuses are returned to the caller. Connection failures
    are retried; timeouts and transport failures surface as
    :class:`ClientError`.
    """

    DEFAULT_HEADERS = {
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = {**self.DEFAULT_HEADERS, **(headers or {})}
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.rate_limiter = rate_limiter or RateLimiter()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _send(self, url: str) -> httpx.Response:
        retrying = retry(
            retry=retry_if_exception_type(httpx.ConnectError),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        return await retrying(self._client.get)(url)

    async def get(self, endpoint: str) -> httpx.Response:
        """
        Make a GET request with rate limiting and retries.

        Args:
            endpoint: Path (and query string) relative to the base URL.

        Returns:
            HTTP response, whatever its status.

        Raises:
            ClientError: On timeout or transport failure.
        """
        await self.__aenter__()
        url = self.url_for(endpoint)
        await self.rate_limiter.acquire(url)

        try:
            return await self._send(url)
        except httpx.TimeoutException as e:
            raise ClientError(
                f"Timeout fetching {url}",
                error_type=ClientErrorType.TIMEOUT,
                details={"error": str(e)},
            ) from e
        except httpx.TransportError as e:
            raise ClientError(
                f"Network error fetching {url}",
                error_type=ClientErrorType.NETWORK_ERROR,
                details={"error": str(e)},
            ) from e
