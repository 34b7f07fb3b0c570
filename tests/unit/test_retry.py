"""
Unit tests for the retry and host-fallback strategy.
"""

import pytest

from agent_skills.config import RegistryConfig
from agent_skills.exceptions import (
    FailureType,
    NetworkError,
    classify_error,
    classify_status,
    should_retry,
)
from agent_skills.registry import FetchResult, Outcome, RetryPolicy, with_fallback, with_retry


def _result(url: str, outcome: Outcome, status: int | None = None) -> FetchResult:
    error = None
    if outcome is not Outcome.SUCCESS:
        error = NetworkError(f"{outcome.value} {url}", url=url, status_code=status)
    content = b"ok" if outcome is Outcome.SUCCESS else None
    return FetchResult(url=url, outcome=outcome, content=content, status_code=status, error=error)


class Script:
    """Replays a fixed sequence of outcomes per URL and records calls."""

    def __init__(self, outcomes: dict[str, list[Outcome]]):
        self.outcomes = {url: list(seq) for url, seq in outcomes.items()}
        self.calls: list[str] = []

    async def attempt(self, url: str) -> FetchResult:
        self.calls.append(url)
        outcome = self.outcomes[url].pop(0)
        status = {Outcome.REJECTED: 404, Outcome.TRANSIENT: 503}.get(outcome, 200)
        return _result(url, outcome, status)


@pytest.fixture
def recorded_sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: list[float]):
    async def sleep(seconds: float) -> None:
        recorded_sleeps.append(seconds)

    return sleep


# =============================================================================
# Classification
# =============================================================================


class TestClassification:
    """Tests for failure classification."""

    @pytest.mark.parametrize("status", [500, 502, 503, 599])
    def test_5xx_is_server_error(self, status: int):
        assert classify_status(status) is FailureType.SERVER_ERROR

    @pytest.mark.parametrize("status", [400, 403, 404, 429])
    def test_4xx_is_client_error(self, status: int):
        assert classify_status(status) is FailureType.CLIENT_ERROR

    def test_retryable_types(self):
        assert should_retry(FailureType.SERVER_ERROR)
        assert should_retry(FailureType.TIMEOUT)
        assert should_retry(FailureType.NETWORK_ERROR)
        assert not should_retry(FailureType.CLIENT_ERROR)
        assert not should_retry(FailureType.UNKNOWN)

    def test_classify_network_error(self):
        error = NetworkError("boom", failure_type=FailureType.TIMEOUT)
        assert classify_error(error) is FailureType.TIMEOUT
        assert error.retryable

    def test_classify_unknown(self):
        assert classify_error(RuntimeError("?")) is FailureType.UNKNOWN


# =============================================================================
# Backoff
# =============================================================================


class TestRetryPolicy:
    """Tests for backoff timing."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert (policy.max_retries, policy.base_delay_ms, policy.jitter_ms) == (3, 500, 100)

    def test_exponential_backoff(self):
        policy = RetryPolicy()
        assert [policy.backoff_ms(n) for n in range(4)] == [500, 1000, 2000, 4000]

    def test_jitter_range(self):
        policy = RetryPolicy()
        assert policy.delay_ms(0, rng=lambda: 0.0) == 500
        low = policy.delay_ms(2, rng=lambda: 0.0)
        high = policy.delay_ms(2, rng=lambda: 0.999999)
        assert low == 2000
        assert 2000 <= high < 2100

    def test_from_config(self):
        config = RegistryConfig(max_retries=5, retry_base_delay_ms=10, retry_jitter_ms=0)
        assert RetryPolicy.from_config(config) == RetryPolicy(5, 10, 0)


# =============================================================================
# with_retry
# =============================================================================


class TestWithRetry:
    """Tests for the per-host retry loop."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, fake_sleep, recorded_sleeps):
        script = Script({"u": [Outcome.SUCCESS]})

        result = await with_retry(lambda: script.attempt("u"), RetryPolicy(), fake_sleep)

        assert result.ok
        assert result.attempts == 1
        assert recorded_sleeps == []

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, fake_sleep, recorded_sleeps):
        script = Script({"u": [Outcome.TRANSIENT, Outcome.TRANSIENT, Outcome.SUCCESS]})

        result = await with_retry(lambda: script.attempt("u"), RetryPolicy(), fake_sleep)

        assert result.ok
        assert result.attempts == 3
        assert len(recorded_sleeps) == 2
        assert 0.5 <= recorded_sleeps[0] < 0.6
        assert 1.0 <= recorded_sleeps[1] < 1.1

    @pytest.mark.asyncio
    async def test_exhausts_budget(self, fake_sleep, recorded_sleeps):
        script = Script({"u": [Outcome.TRANSIENT] * 4})

        result = await with_retry(lambda: script.attempt("u"), RetryPolicy(), fake_sleep)

        assert result.outcome is Outcome.EXHAUSTED
        assert result.attempts == 4
        assert len(script.calls) == 4
        # Sleeps between attempts only: 500, 1000, 2000 (+ jitter)
        assert [int(s * 1000) // 100 * 100 for s in recorded_sleeps] == [500, 1000, 2000]

    @pytest.mark.asyncio
    async def test_rejected_is_not_retried(self, fake_sleep, recorded_sleeps):
        script = Script({"u": [Outcome.REJECTED]})

        result = await with_retry(lambda: script.attempt("u"), RetryPolicy(), fake_sleep)

        assert result.outcome is Outcome.REJECTED
        assert result.status_code == 404
        assert script.calls == ["u"]
        assert recorded_sleeps == []

    @pytest.mark.asyncio
    async def test_zero_retries(self, fake_sleep):
        script = Script({"u": [Outcome.TRANSIENT]})

        result = await with_retry(lambda: script.attempt("u"), RetryPolicy(max_retries=0), fake_sleep)

        assert result.outcome is Outcome.EXHAUSTED
        assert result.attempts == 1


# =============================================================================
# with_fallback
# =============================================================================


class TestWithFallback:
    """Tests for mirror fallback sequencing."""

    @pytest.mark.asyncio
    async def test_primary_success_skips_fallback(self, fake_sleep):
        script = Script({"primary": [Outcome.SUCCESS], "mirror": [Outcome.SUCCESS]})

        async def run(url: str) -> FetchResult:
            return await with_retry(lambda: script.attempt(url), RetryPolicy(), fake_sleep)

        result = await with_fallback(["primary", "mirror"], run)

        assert result.url == "primary"
        assert script.calls == ["primary"]

    @pytest.mark.asyncio
    async def test_fallback_gets_own_budget(self, fake_sleep):
        script = Script(
            {
                "primary": [Outcome.TRANSIENT] * 4,
                "mirror": [Outcome.TRANSIENT] * 3 + [Outcome.SUCCESS],
            }
        )

        async def run(url: str) -> FetchResult:
            return await with_retry(lambda: script.attempt(url), RetryPolicy(), fake_sleep)

        result = await with_fallback(["primary", "mirror"], run)

        assert result.ok
        assert result.url == "mirror"
        assert script.calls == ["primary"] * 4 + ["mirror"] * 4

    @pytest.mark.asyncio
    async def test_primary_error_surfaced_when_all_fail(self, fake_sleep):
        script = Script({"primary": [Outcome.TRANSIENT] * 4, "mirror": [Outcome.REJECTED]})

        async def run(url: str) -> FetchResult:
            return await with_retry(lambda: script.attempt(url), RetryPolicy(), fake_sleep)

        result = await with_fallback(["primary", "mirror"], run)

        assert result.url == "primary"
        assert result.outcome is Outcome.EXHAUSTED
        with pytest.raises(NetworkError, match="primary"):
            result.raise_for_failure()

    @pytest.mark.asyncio
    async def test_rejected_primary_still_tries_fallback(self, fake_sleep):
        script = Script({"primary": [Outcome.REJECTED], "mirror": [Outcome.SUCCESS]})

        async def run(url: str) -> FetchResult:
            return await with_retry(lambda: script.attempt(url), RetryPolicy(), fake_sleep)

        result = await with_fallback(["primary", "mirror"], run)

        assert result.url == "mirror"

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        async def run(url: str) -> FetchResult:
            raise AssertionError("not called")

        with pytest.raises(ValueError):
            await with_fallback([], run)


def test_fetch_result_text():
    result = FetchResult(url="u", outcome=Outcome.SUCCESS, content="héllo".encode())
    assert result.text == "héllo"
    assert result.raise_for_failure() is result
