"""
Retry and host-fallback strategy for registry fetches.

A fetch runs in two phases. `with_retry` spends one host's attempt budget,
backing off exponentially between transient failures. `with_fallback` runs
that phase over each candidate host in order. Both return a tagged
FetchResult instead of raising, so callers decide what a failure means.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from agent_skills.config.schema import RegistryConfig
from agent_skills.exceptions import NetworkError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Outcome(Enum):
    """How a fetch ended."""

    SUCCESS = "success"
    # Non-retryable HTTP status (4xx)
    REJECTED = "rejected"
    # Single attempt hit a retryable failure
    TRANSIENT = "transient"
    # Attempt budget spent on retryable failures
    EXHAUSTED = "exhausted"


@dataclass
class FetchResult:
    """Result of fetching one URL."""

    url: str
    outcome: Outcome
    content: bytes | None = None
    status_code: int | None = None
    error: NetworkError | None = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def text(self) -> str:
        """Content decoded as UTF-8 (empty when there is none)."""
        return (self.content or b"").decode("utf-8")

    def raise_for_failure(self) -> "FetchResult":
        """Raise the carried NetworkError unless the fetch succeeded.

        Raises:
            NetworkError: If the outcome is not SUCCESS.
        """
        if self.ok:
            return self
        if self.error is not None:
            raise self.error
        raise NetworkError(f"Fetch failed: {self.url}", url=self.url, status_code=self.status_code)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and exponential backoff for one host."""

    max_retries: int = 3
    base_delay_ms: int = 500
    jitter_ms: int = 100

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RetryPolicy":
        return cls(
            max_retries=config.max_retries,
            base_delay_ms=config.retry_base_delay_ms,
            jitter_ms=config.retry_jitter_ms,
        )

    def backoff_ms(self, attempt: int) -> int:
        """Delay before the retry that follows attempt `attempt` (0-based), without jitter."""
        return self.base_delay_ms * 2**attempt

    def delay_ms(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        """Backoff plus jitter in [0, jitter_ms)."""
        return self.backoff_ms(attempt) + rng() * self.jitter_ms


async def with_retry(
    operation: Callable[[], Awaitable[FetchResult]],
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
) -> FetchResult:
    """Run a single-attempt operation until it stops failing transiently.

    Args:
        operation: Performs one attempt and classifies it.
        policy: Attempt budget and backoff.
        sleep: Awaitable sleep, in seconds.

    Returns:
        The first SUCCESS or REJECTED result, or the last failure marked
        EXHAUSTED once max_retries additional attempts are spent.
    """
    result: FetchResult | None = None

    for attempt in range(policy.max_retries + 1):
        result = replace(await operation(), attempts=attempt + 1)
        if result.outcome is not Outcome.TRANSIENT:
            return result

        if attempt < policy.max_retries:
            delay = policy.delay_ms(attempt)
            logger.warning(
                f"Attempt {attempt + 1} for {result.url} failed ({result.error}), "
                f"retrying in {delay:.0f}ms"
            )
            await sleep(delay / 1000)

    assert result is not None
    logger.warning(f"Giving up on {result.url} after {result.attempts} attempt(s)")
    return replace(result, outcome=Outcome.EXHAUSTED)


async def with_fallback(
    candidates: Sequence[str],
    run: Callable[[str], Awaitable[FetchResult]],
) -> FetchResult:
    """Try each candidate URL in order, each with its own full retry budget.

    Args:
        candidates: URLs, primary first.
        run: Fetches one URL including retries.

    Returns:
        The first successful result, or the primary's failed result when
        every candidate fails.

    Raises:
        ValueError: If there are no candidates.
    """
    if not candidates:
        raise ValueError("No candidate URLs to fetch")

    first_failure: FetchResult | None = None

    for index, url in enumerate(candidates):
        result = await run(url)
        if result.ok:
            if index > 0:
                logger.info(f"Fetched {url} from fallback host")
            return result

        if first_failure is None:
            first_failure = result
        if index + 1 < len(candidates):
            logger.info(f"Falling back after {result.outcome.value} fetch of {url}")

    assert first_failure is not None
    return first_failure
