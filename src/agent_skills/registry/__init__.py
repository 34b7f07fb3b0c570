"""
Remote skills registry and local bundle cache.

Usage:
    from agent_skills.registry import CacheStore, Fetcher, RegistryResolver, RegistryUrls

    async with Fetcher() as fetcher:
        resolver = RegistryResolver(CacheStore(), fetcher, RegistryUrls("0.9.1"))
        path = await resolver.ensure_skill_cached("cloudflare-deploy")
"""

from agent_skills.registry.cache import (
    CACHE_TTL_MS,
    CacheStore,
    is_cache_valid,
)
from agent_skills.registry.downloader import BatchDownloader, partition
from agent_skills.registry.fetcher import Fetcher
from agent_skills.registry.models import (
    CachedRegistry,
    CategoryInfo,
    DownloadReport,
    RegistrySnapshot,
    SkillMetadata,
)
from agent_skills.registry.resolver import RegistryResolver
from agent_skills.registry.retry import (
    FetchResult,
    Outcome,
    RetryPolicy,
    with_fallback,
    with_retry,
)
from agent_skills.registry.urls import RegistryUrls

__all__ = [
    "CACHE_TTL_MS",
    "BatchDownloader",
    "CacheStore",
    "CachedRegistry",
    "CategoryInfo",
    "DownloadReport",
    "FetchResult",
    "Fetcher",
    "Outcome",
    "RegistryResolver",
    "RegistrySnapshot",
    "RegistryUrls",
    "RetryPolicy",
    "SkillMetadata",
    "is_cache_valid",
    "partition",
    "with_fallback",
    "with_retry",
]
