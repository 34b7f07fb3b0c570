"""
Skills client for agent-skills.

Ties the registry resolver, the bundle cache and the installer together behind
one interface used by the CLI.
"""

import logging
from collections.abc import Iterable
from typing import Any

from agent_skills import __version__
from agent_skills.config import Config, get_config
from agent_skills.exceptions import SkillsError
from agent_skills.install import (
    AgentRegistry,
    Installer,
    InstallMethod,
    InstallOptions,
    InstallResult,
    InstallScope,
    RemoveResult,
    ResultCode,
    SkillSource,
    TargetResolver,
    get_global_skill_path,
)
from agent_skills.install.installer import GlobalLocator
from agent_skills.registry import (
    CacheStore,
    Fetcher,
    RegistryResolver,
    RegistrySnapshot,
    RegistryUrls,
    SkillMetadata,
)

logger = logging.getLogger(__name__)


class SkillsClient:
    """High-level operations on the skills registry and agent directories.

    Usage:
        async with SkillsClient() as client:
            results = await client.install_skills(["cloudflare-deploy"], options)
    """

    def __init__(
        self,
        config: Config | None = None,
        cache: CacheStore | None = None,
        fetcher: Fetcher | None = None,
        targets: TargetResolver | None = None,
        global_locator: GlobalLocator = get_global_skill_path,
        version: str = __version__,
    ):
        """Initialize the client.

        Args:
            config: Configuration. Loaded from disk when omitted.
            cache: Cache store. Defaults to the user cache directory.
            fetcher: HTTP fetcher. Built from the registry config when omitted.
            targets: Agent directory resolver. Built from the agent table when omitted.
            global_locator: Finds a globally installed copy of a skill.
            version: Tool version, used for the default registry ref.
        """
        self.config = config or get_config()
        registry_config = self.config.registry

        self.cache = cache or CacheStore(ttl_ms=registry_config.cache_ttl_ms)
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher.from_config(registry_config)
        self.targets = targets or AgentRegistry.from_config(self.config)
        self.urls = RegistryUrls.from_config(registry_config, version)
        self.resolver = RegistryResolver(
            self.cache, self.fetcher, self.urls, batch_size=registry_config.batch_size
        )
        self.installer = Installer(self.targets, global_locator)

    async def __aenter__(self) -> "SkillsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_fetcher:
            await self.fetcher.aclose()

    def default_options(
        self,
        scope: InstallScope | None = None,
        method: InstallMethod | None = None,
        agents: list[str] | None = None,
    ) -> InstallOptions:
        """Install options with unset fields taken from the install config."""
        install = self.config.install
        return InstallOptions(
            scope=scope or InstallScope(install.scope),
            method=method or InstallMethod(install.method),
            agents=agents or list(install.agents),
        )

    # =========================================================================
    # Registry
    # =========================================================================

    async def refresh_registry(self) -> RegistrySnapshot:
        """Refetch the registry manifest regardless of cache age."""
        return await self.resolver.get_registry(force_refresh=True)

    async def available_skills(self, refresh: bool = False) -> list[SkillMetadata]:
        """Skills listed in the registry."""
        registry = await self.resolver.get_registry(force_refresh=refresh)
        return list(registry.skills)

    async def get_skill(self, name: str) -> SkillMetadata:
        return await self.resolver.get_skill(name)

    # =========================================================================
    # Install / remove
    # =========================================================================

    async def install_skills(
        self,
        names: Iterable[str],
        options: InstallOptions,
        refresh: bool = False,
    ) -> list[InstallResult]:
        """Download (if needed) and install skills for the selected agents.

        A skill that cannot be resolved or downloaded yields a failed result
        for each selected agent; the remaining skills are still installed.

        Args:
            names: Skill names from the registry.
            options: Scope, method and agents.
            refresh: Refetch the registry and re-download the bundles.

        Returns:
            One result per (skill, agent), in input order.
        """
        if refresh:
            await self.resolver.get_registry(force_refresh=True)

        results: list[InstallResult] = []
        for name in names:
            try:
                path = await self.resolver.ensure_skill_cached(name, force=refresh)
            except SkillsError as e:
                logger.error(f"Could not fetch skill {name}: {e}")
                results.extend(
                    InstallResult(
                        skill=name,
                        agent=agent,
                        success=False,
                        error=str(e),
                        error_code=ResultCode.DOWNLOAD_FAILED,
                    )
                    for agent in options.agents
                )
                continue

            source = SkillSource(name=path.name, path=path)
            results.extend(self.installer.install([source], options))
        return results

    def remove_skills(
        self,
        names: Iterable[str],
        agents: Iterable[str],
        global_: bool = False,
    ) -> list[RemoveResult]:
        """Remove skills from the selected agents."""
        agents = list(agents)
        results: list[RemoveResult] = []
        for name in names:
            results.extend(self.installer.remove_skill(name, agents, global_=global_))
        return results

    def list_installed(self, agent: str, global_: bool = False) -> list[str]:
        return self.installer.list_installed(agent, global_=global_)

    # =========================================================================
    # Cache
    # =========================================================================

    def cache_info(self) -> dict[str, Any]:
        """Summary of the local cache."""
        cached = self.cache.read_registry_cache()
        return {
            "cache_dir": self.cache.cache_dir,
            "registry_cached": cached is not None,
            "registry_version": cached.registry.version if cached else None,
            "registry_fetched_at": cached.fetched_at if cached else None,
            "registry_valid": cached is not None and self.cache.is_valid(cached),
            "cached_skills": self.cache.list_cached_skills(),
        }

    def clear_cache(
        self,
        name: str | None = None,
        registry: bool = False,
        all_: bool = False,
    ) -> None:
        """Clear cached data.

        Args:
            name: Clear only this skill's bundle.
            registry: Clear only the registry manifest.
            all_: Clear everything. Also the default when nothing else is given.
        """
        if all_ or (name is None and not registry):
            self.cache.clear_all()
            return
        if name is not None:
            self.cache.clear_skill_cache(name)
        if registry:
            self.cache.clear_registry_cache()
