"""
Pytest configuration and fixtures for agent-skills tests.
"""

import json
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from agent_skills.config import clear_config_cache
from agent_skills.registry import CacheStore, Fetcher, RegistryUrls, RetryPolicy

TEST_VERSION = "1.2.0"
NOW_MS = 1_700_000_000_000


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_env(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep every test away from the real home, cache and global skill directories."""
    monkeypatch.setenv("AGENT_SKILLS_HOME", str(temp_dir / "home" / ".agent-skills"))
    monkeypatch.setenv("AGENT_SKILLS_CACHE_DIR", str(temp_dir / "cache"))
    monkeypatch.setenv("AGENT_SKILLS_GLOBAL_DIR", str(temp_dir / "no-global-skills"))
    monkeypatch.delenv("SKILLS_CDN_REF", raising=False)
    for key in list(os.environ):
        if key.startswith("AGENT_SKILLS_") and key not in (
            "AGENT_SKILLS_HOME",
            "AGENT_SKILLS_CACHE_DIR",
            "AGENT_SKILLS_GLOBAL_DIR",
        ):
            monkeypatch.delenv(key)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clock() -> list[int]:
    """Mutable clock: tests advance clock[0]."""
    return [NOW_MS]


@pytest.fixture
def cache_store(temp_dir: Path, clock: list[int]) -> CacheStore:
    """Provide a CacheStore rooted in the temp directory with a controllable clock."""
    return CacheStore(root=temp_dir / "cache", clock=lambda: clock[0])


@pytest.fixture
def registry_urls() -> RegistryUrls:
    return RegistryUrls(TEST_VERSION, environ={})


@pytest.fixture
def sample_manifest() -> dict:
    """Provide a small registry manifest."""
    return {
        "version": TEST_VERSION,
        "generatedAt": "2026-01-01T00:00:00Z",
        "baseUrl": "packages/skills-catalog/skills",
        "categories": {
            "development": {"name": "Development", "priority": 1},
            "quality": {"name": "Quality"},
        },
        "skills": [
            {
                "name": "cloudflare-deploy",
                "description": "Deploy Workers and Pages to Cloudflare",
                "category": "development",
                "path": "development/cloudflare-deploy",
                "files": ["SKILL.md", "references/wrangler.md"],
            },
            {
                "name": "code-review",
                "description": "Structured code review checklist",
                "category": "quality",
                "path": "quality/code-review",
                "files": ["SKILL.md"],
            },
        ],
    }


@pytest.fixture
def manifest_bytes(sample_manifest: dict) -> bytes:
    return json.dumps(sample_manifest).encode("utf-8")


@pytest.fixture
def sleeps() -> list[float]:
    """Records backoff delays requested by fetchers built with make_fetcher."""
    return []


@pytest.fixture
def make_fetcher(sleeps: list[float]) -> Callable[..., Fetcher]:
    """Factory for Fetchers backed by an httpx.MockTransport handler.

    Backoff sleeps are recorded instead of awaited.
    """

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        policy: RetryPolicy | None = None,
    ) -> Fetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Fetcher(client=client, policy=policy or RetryPolicy(), sleep=fake_sleep)

    return factory


@pytest.fixture
def skill_source_dir(temp_dir: Path) -> Path:
    """A cached skill directory ready to install."""
    skill_dir = temp_dir / "cache" / "skills" / "cloudflare-deploy"
    (skill_dir / "references").mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text("# Cloudflare Deploy\n")
    (skill_dir / "references" / "wrangler.md").write_text("wrangler deploy\n")
    return skill_dir
