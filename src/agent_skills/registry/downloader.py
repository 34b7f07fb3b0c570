"""
Batched download of skill bundles into the cache.

Files are fetched in fixed-size batches. Batches run one after another and the
files inside a batch run concurrently, which caps the number of requests in
flight at the batch size.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import TypeVar

from agent_skills.exceptions import IncompleteDownloadError
from agent_skills.registry.cache import CacheStore
from agent_skills.registry.fetcher import Fetcher
from agent_skills.registry.models import DownloadReport, SkillMetadata
from agent_skills.registry.urls import RegistryUrls
from agent_skills.storage.safety import is_path_safe

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive batches of at most `size`.

    Examples:
        >>> partition([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchDownloader:
    """Downloads every file of a skill into its cache directory."""

    def __init__(
        self,
        fetcher: Fetcher,
        cache: CacheStore,
        urls: RegistryUrls,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.urls = urls
        self.batch_size = batch_size

    async def download_skill(self, skill: SkillMetadata, base_url: str) -> DownloadReport:
        """Download all files of a skill and verify they landed.

        Args:
            skill: Skill metadata from the registry.
            base_url: The registry's baseUrl.

        Returns:
            A complete DownloadReport.

        Raises:
            InvalidNameError: If the skill name sanitizes to nothing.
            IncompleteDownloadError: If any file could not be downloaded. The
                partial directory is left in place.
        """
        skill_dir = self.cache.skill_cache_path(skill.name)
        total = len(skill.files)
        failed: list[str] = []

        logger.info(f"Downloading {skill.name} ({total} files)")

        for index, batch in enumerate(partition(skill.files, self.batch_size)):
            results = await asyncio.gather(
                *(self._download_file(skill, base_url, relative) for relative in batch)
            )
            failed.extend(relative for relative, ok in zip(batch, results, strict=True) if not ok)
            logger.debug(f"{skill.name}: batch {index + 1} done ({len(batch)} files)")

        downloaded = total - len(failed)
        report = DownloadReport(
            skill=skill.name,
            path=skill_dir,
            total_files=total,
            downloaded=downloaded,
            failed=failed,
        )

        if not report.complete:
            logger.warning(f"{skill.name}: failed files: {', '.join(failed)}")
            raise IncompleteDownloadError(downloaded, total, skill=skill.name)

        logger.info(f"Downloaded {skill.name} to {skill_dir}")
        return report

    async def _download_file(self, skill: SkillMetadata, base_url: str, relative: str) -> bool:
        """Fetch and store one file. Returns whether it landed."""
        skill_dir = self.cache.skill_cache_path(skill.name)
        if not is_path_safe(skill_dir, skill_dir / relative):
            logger.warning(f"{skill.name}: skipping unsafe path {relative!r}")
            return False

        candidates = self.urls.skill_file_urls(base_url, skill.path, relative)
        result = await self.fetcher.fetch_first(candidates)
        if not result.ok:
            logger.warning(f"{skill.name}: could not fetch {relative}: {result.error}")
            return False

        try:
            self.cache.write_skill_file(skill.name, relative, result.content or b"")
        except (OSError, ValueError) as e:
            logger.warning(f"{skill.name}: could not write {relative}: {e}")
            return False

        return True
