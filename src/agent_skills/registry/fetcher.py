"""
HTTP fetcher for the registry manifest and skill files.
"""

import asyncio
import logging
from collections.abc import Sequence

import httpx

from agent_skills import __version__
from agent_skills.config.schema import RegistryConfig
from agent_skills.exceptions import FailureType, NetworkError, classify_status, should_retry
from agent_skills.registry.retry import (
    FetchResult,
    Outcome,
    RetryPolicy,
    Sleep,
    with_fallback,
    with_retry,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class Fetcher:
    """Fetches URLs with per-host retries and mirror fallback.

    Owns an httpx.AsyncClient unless one is injected. Use as an async context
    manager, or call aclose() when done.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the fetcher.

        Args:
            client: Shared HTTP client. Created lazily when omitted.
            timeout: Per-attempt timeout in seconds.
            policy: Retry policy applied to each host.
            sleep: Awaitable used for backoff delays.
        """
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    @classmethod
    def from_config(
        cls, config: RegistryConfig, client: httpx.AsyncClient | None = None
    ) -> "Fetcher":
        """Create a Fetcher from the registry config section."""
        return cls(
            client=client,
            timeout=config.timeout_seconds,
            policy=RetryPolicy.from_config(config),
        )

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                headers={"User-Agent": f"agent-skills/{__version__}"},
            )
        return self._client

    async def attempt(self, url: str) -> FetchResult:
        """Perform exactly one GET and classify the outcome."""
        client = self._get_client()

        try:
            response = await client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            error = NetworkError(
                f"Timed out after {self.timeout}s fetching {url}: {e}",
                url=url,
                failure_type=FailureType.TIMEOUT,
            )
            return FetchResult(url=url, outcome=Outcome.TRANSIENT, error=error)
        except httpx.RequestError as e:
            error = NetworkError(f"Request to {url} failed: {e}", url=url)
            return FetchResult(url=url, outcome=Outcome.TRANSIENT, error=error)

        status = response.status_code
        if response.is_success:
            logger.debug(f"GET {url} -> {status}")
            return FetchResult(
                url=url, outcome=Outcome.SUCCESS, content=response.content, status_code=status
            )

        failure_type = classify_status(status)
        error = NetworkError(
            f"HTTP {status} fetching {url}",
            url=url,
            status_code=status,
            failure_type=failure_type,
        )
        outcome = Outcome.TRANSIENT if should_retry(failure_type) else Outcome.REJECTED
        return FetchResult(url=url, outcome=outcome, status_code=status, error=error)

    async def fetch(self, url: str) -> FetchResult:
        """Fetch one URL, retrying transient failures."""
        return await with_retry(lambda: self.attempt(url), self.policy, self._sleep)

    async def fetch_first(self, urls: Sequence[str]) -> FetchResult:
        """Fetch the first URL that succeeds, each with its own retry budget.

        Returns:
            The successful result, or the primary URL's failed result.
        """
        return await with_fallback(urls, self.fetch)
