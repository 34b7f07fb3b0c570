"""
Unit tests for the HTTP fetcher.
"""

import httpx
import pytest

from agent_skills.exceptions import FailureType, NetworkError
from agent_skills.registry import Fetcher, Outcome, RetryPolicy


class TestAttempt:
    """Tests for single-attempt classification."""

    @pytest.mark.asyncio
    async def test_success(self, make_fetcher):
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"hello"))

        result = await fetcher.attempt("https://cdn.example.com/a")

        assert result.outcome is Outcome.SUCCESS
        assert result.content == b"hello"
        assert result.status_code == 200

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self, make_fetcher):
        fetcher = make_fetcher(lambda request: httpx.Response(503))

        result = await fetcher.attempt("https://cdn.example.com/a")

        assert result.outcome is Outcome.TRANSIENT
        assert result.error.failure_type is FailureType.SERVER_ERROR

    @pytest.mark.asyncio
    async def test_client_error_is_rejected(self, make_fetcher):
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        result = await fetcher.attempt("https://cdn.example.com/a")

        assert result.outcome is Outcome.REJECTED
        assert result.status_code == 404
        assert not result.error.retryable

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self, make_fetcher):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = make_fetcher(handler)

        result = await fetcher.attempt("https://cdn.example.com/a")

        assert result.outcome is Outcome.TRANSIENT
        assert result.error.failure_type is FailureType.NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, make_fetcher):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = make_fetcher(handler)

        result = await fetcher.attempt("https://cdn.example.com/a")

        assert result.outcome is Outcome.TRANSIENT
        assert result.error.failure_type is FailureType.TIMEOUT


class TestFetch:
    """Tests for retries and fallback through the fetcher."""

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, make_fetcher, sleeps):
        responses = iter([503, 500, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(responses), content=b"ok")

        fetcher = make_fetcher(handler)

        result = await fetcher.fetch("https://cdn.example.com/a")

        assert result.ok
        assert result.attempts == 3
        assert len(sleeps) == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_404(self, make_fetcher, sleeps):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            return httpx.Response(404)

        fetcher = make_fetcher(handler)

        result = await fetcher.fetch("https://cdn.example.com/missing")

        assert result.outcome is Outcome.REJECTED
        assert len(calls) == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_fetch_first_falls_back(self, make_fetcher):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.host)
            if request.url.host == "cdn.example.com":
                return httpx.Response(502)
            return httpx.Response(200, content=b"from mirror")

        fetcher = make_fetcher(handler, policy=RetryPolicy(max_retries=1))

        result = await fetcher.fetch_first(
            ["https://cdn.example.com/a", "https://mirror.example.com/a"]
        )

        assert result.content == b"from mirror"
        assert calls == ["cdn.example.com", "cdn.example.com", "mirror.example.com"]

    @pytest.mark.asyncio
    async def test_fetch_first_surfaces_primary_error(self, make_fetcher):
        def handler(request: httpx.Request) -> httpx.Response:
            status = 503 if request.url.host == "cdn.example.com" else 404
            return httpx.Response(status)

        fetcher = make_fetcher(handler, policy=RetryPolicy(max_retries=0))

        result = await fetcher.fetch_first(
            ["https://cdn.example.com/a", "https://mirror.example.com/a"]
        )

        assert not result.ok
        with pytest.raises(NetworkError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == "https://cdn.example.com/a"


class TestLifecycle:
    """Tests for client ownership."""

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        async with Fetcher(client=client):
            pass

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        fetcher = Fetcher()
        client = fetcher._get_client()

        await fetcher.aclose()

        assert client.is_closed
