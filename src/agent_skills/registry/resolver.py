"""
Registry resolver for agent-skills.

Serves the registry manifest from the cache while it is fresh, refetches it
from the primary host and then the fallback host when it is not, and falls
back to a stale cached copy if both hosts fail.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from agent_skills.exceptions import NetworkError, RegistryFormatError, SkillNotFoundError
from agent_skills.registry.cache import CacheStore
from agent_skills.registry.downloader import BatchDownloader
from agent_skills.registry.fetcher import Fetcher
from agent_skills.registry.models import DownloadReport, RegistrySnapshot, SkillMetadata
from agent_skills.registry.urls import RegistryUrls

logger = logging.getLogger(__name__)


class RegistryResolver:
    """Resolves skills against the registry and keeps bundles cached."""

    def __init__(
        self,
        cache: CacheStore,
        fetcher: Fetcher,
        urls: RegistryUrls,
        batch_size: int = 10,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.urls = urls
        self.downloader = BatchDownloader(fetcher, cache, urls, batch_size=batch_size)
        self._snapshot: RegistrySnapshot | None = None

    async def get_registry(self, force_refresh: bool = False) -> RegistrySnapshot:
        """Get the registry manifest.

        Args:
            force_refresh: Skip the cache freshness check.

        Returns:
            The registry snapshot.

        Raises:
            NetworkError: If both hosts fail and nothing is cached.
            RegistryFormatError: If the fetched manifest is invalid and
                nothing is cached.
        """
        cached = self.cache.read_registry_cache()

        if not force_refresh and cached is not None and self.cache.is_valid(cached):
            logger.debug("Using cached registry")
            self._snapshot = cached.registry
            return cached.registry

        try:
            snapshot = await self._fetch_registry()
        except (NetworkError, RegistryFormatError) as e:
            if cached is None:
                raise
            logger.warning(f"Registry fetch failed, using stale cache: {e}")
            self._snapshot = cached.registry
            return cached.registry

        try:
            self.cache.write_registry_cache(snapshot)
        except OSError as e:
            logger.warning(f"Could not cache registry: {e}")
        self._snapshot = snapshot
        logger.info(f"Fetched registry {snapshot.version} ({len(snapshot.skills)} skills)")
        return snapshot

    async def _fetch_registry(self) -> RegistrySnapshot:
        result = await self.fetcher.fetch_first(self.urls.manifest_urls())
        result.raise_for_failure()

        try:
            return RegistrySnapshot.model_validate_json(result.content or b"")
        except ValidationError as e:
            raise RegistryFormatError(f"Invalid registry manifest from {result.url}: {e}") from e

    async def list_skills(self) -> list[SkillMetadata]:
        """All skills in manifest order."""
        registry = await self.get_registry()
        return list(registry.skills)

    async def get_skill(self, name: str) -> SkillMetadata:
        """Look up a skill by name.

        Raises:
            SkillNotFoundError: If the registry has no such skill.
        """
        registry = await self.get_registry()
        skill = registry.find_skill(name)
        if skill is None:
            raise SkillNotFoundError(name)
        return skill

    async def ensure_skill_cached(self, name: str, force: bool = False) -> Path:
        """Make sure a complete copy of the skill is in the cache.

        A partial directory left by an earlier failed or cancelled download is
        discarded and fetched again from scratch.

        Args:
            name: Skill name.
            force: Download even if a complete copy is cached.

        Returns:
            The skill's cache directory.

        Raises:
            SkillNotFoundError: If the registry has no such skill.
            IncompleteDownloadError: If some files could not be downloaded.
        """
        skill = await self.get_skill(name)

        if not force and self.cache.is_skill_complete(skill.name, skill.files):
            logger.debug(f"Using cached skill {skill.name}")
            return self.cache.skill_cache_path(skill.name)

        report = await self.download(skill)
        return report.path

    async def download(self, skill: SkillMetadata) -> DownloadReport:
        """Download a skill from scratch, replacing any cached copy."""
        registry = self._snapshot or await self.get_registry()
        self.cache.clear_skill_cache(skill.name)
        return await self.downloader.download_skill(skill, registry.base_url)
