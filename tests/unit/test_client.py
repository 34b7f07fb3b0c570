"""
Unit tests for SkillsClient.
"""

from pathlib import Path

import httpx
import pytest

from agent_skills.client import SkillsClient
from agent_skills.config import Config
from agent_skills.install import (
    AgentRegistry,
    InstallMethod,
    InstallOptions,
    InstallScope,
    ResultCode,
)
from agent_skills.registry import CacheStore, RetryPolicy

TEST_VERSION = "1.2.0"


@pytest.fixture
def requests() -> list[str]:
    return []


@pytest.fixture
def handler(manifest_bytes: bytes, requests: list[str]):
    def serve(request: httpx.Request) -> httpx.Response:
        requests.append(request.url.path)
        if request.url.path.endswith("skills-registry.json"):
            return httpx.Response(200, content=manifest_bytes)
        return httpx.Response(200, content=b"# file")

    return serve


@pytest.fixture
def project_root(temp_dir: Path) -> Path:
    root = temp_dir / "project"
    root.mkdir()
    return root


@pytest.fixture
def client(make_fetcher, handler, cache_store: CacheStore, project_root: Path) -> SkillsClient:
    config = Config()
    return SkillsClient(
        config=config,
        cache=cache_store,
        fetcher=make_fetcher(handler, policy=RetryPolicy(max_retries=0)),
        targets=AgentRegistry.from_config(config, project_root=project_root),
        global_locator=lambda name: None,
        version=TEST_VERSION,
    )


class TestInstallSkills:
    """Tests for SkillsClient.install_skills."""

    @pytest.mark.asyncio
    async def test_install_downloads_then_links(self, client: SkillsClient, project_root: Path):
        options = InstallOptions(agents=["cursor", "claude-code"])

        results = await client.install_skills(["cloudflare-deploy"], options)

        assert [r.agent for r in results] == ["cursor", "claude-code"]
        assert all(r.success for r in results)
        link = project_root / ".cursor" / "skills" / "cloudflare-deploy"
        assert link.is_symlink()
        assert (link / "references" / "wrangler.md").read_bytes() == b"# file"

    @pytest.mark.asyncio
    async def test_unknown_skill_yields_failed_results(self, client: SkillsClient):
        options = InstallOptions(agents=["cursor", "codex"])

        results = await client.install_skills(["nope", "code-review"], options)

        assert [(r.skill, r.agent, r.success) for r in results] == [
            ("nope", "cursor", False),
            ("nope", "codex", False),
            ("code-review", "cursor", True),
            ("code-review", "codex", True),
        ]
        assert results[0].error_code is ResultCode.DOWNLOAD_FAILED
        assert "nope" in results[0].error

    @pytest.mark.asyncio
    async def test_second_install_uses_cache(self, client: SkillsClient, requests: list[str]):
        options = InstallOptions(agents=["cursor"])
        await client.install_skills(["code-review"], options)
        count = len(requests)

        [result] = await client.install_skills(["code-review"], options)

        assert result.already_exists
        assert len(requests) == count

    @pytest.mark.asyncio
    async def test_refresh_refetches(self, client: SkillsClient, requests: list[str]):
        options = InstallOptions(agents=["cursor"])
        await client.install_skills(["code-review"], options)
        count = len(requests)

        await client.install_skills(["code-review"], options, refresh=True)

        # Manifest plus the single bundle file
        assert len(requests) == count + 2


class TestClientOperations:
    """Tests for the remaining client operations."""

    @pytest.mark.asyncio
    async def test_available_skills(self, client: SkillsClient):
        skills = await client.available_skills()
        assert [s.name for s in skills] == ["cloudflare-deploy", "code-review"]

    @pytest.mark.asyncio
    async def test_refresh_registry(self, client: SkillsClient, requests: list[str]):
        await client.available_skills()
        await client.refresh_registry()

        assert sum(path.endswith("skills-registry.json") for path in requests) == 2

    @pytest.mark.asyncio
    async def test_remove_and_list(self, client: SkillsClient):
        await client.install_skills(["code-review"], InstallOptions(agents=["cursor"]))
        assert client.list_installed("cursor") == ["code-review"]

        [result] = client.remove_skills(["code-review"], ["cursor"])

        assert result.success
        assert client.list_installed("cursor") == []

    def test_default_options_from_config(self, cache_store: CacheStore):
        config = Config.model_validate(
            {"install": {"method": "copy", "scope": "global", "agents": ["codex"]}}
        )
        client = SkillsClient(config=config, cache=cache_store)

        options = client.default_options()
        assert options.method is InstallMethod.COPY
        assert options.scope is InstallScope.GLOBAL
        assert options.agents == ["codex"]

        overridden = client.default_options(method=InstallMethod.SYMLINK, agents=["cursor"])
        assert overridden.method is InstallMethod.SYMLINK
        assert overridden.agents == ["cursor"]

    @pytest.mark.asyncio
    async def test_cache_info_and_clear(self, client: SkillsClient, clock):
        info = client.cache_info()
        assert not info["registry_cached"]

        await client.install_skills(["code-review"], InstallOptions(agents=["cursor"]))
        info = client.cache_info()
        assert info["registry_cached"]
        assert info["registry_valid"]
        assert info["registry_version"] == TEST_VERSION
        assert info["registry_fetched_at"] == clock[0]
        assert info["cached_skills"] == ["code-review"]

        client.clear_cache(name="code-review")
        assert client.cache_info()["cached_skills"] == []
        assert client.cache_info()["registry_cached"]

        client.clear_cache(registry=True)
        assert not client.cache_info()["registry_cached"]

    @pytest.mark.asyncio
    async def test_clear_everything_by_default(self, client: SkillsClient):
        await client.install_skills(["code-review"], InstallOptions(agents=["cursor"]))

        client.clear_cache()

        info = client.cache_info()
        assert not info["registry_cached"]
        assert info["cached_skills"] == []

    @pytest.mark.asyncio
    async def test_context_manager_keeps_injected_fetcher(self, client: SkillsClient):
        async with client as entered:
            assert entered is client
        # Injected fetchers are owned by the caller
        assert await client.available_skills()
