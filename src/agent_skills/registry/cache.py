"""
On-disk cache for the registry manifest and downloaded skill bundles.

Layout under the cache root:

    registry.json          {"fetchedAt": <epoch ms>, "registry": {...}}
    skills/<name>/...      one directory per skill, mirroring its file tree

Every write goes through a temporary file and an atomic rename, so readers see
either the previous complete file or the new complete file.
"""

import logging
import shutil
import time
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path

from agent_skills.registry.models import CachedRegistry, RegistrySnapshot
from agent_skills.storage.paths import get_cache_dir
from agent_skills.exceptions import InvalidNameError
from agent_skills.storage.safety import is_path_safe, require_safe_name

logger = logging.getLogger(__name__)

CACHE_TTL_MS = 24 * 60 * 60 * 1000
REGISTRY_CACHE_FILE = "registry.json"
SKILLS_CACHE_DIR = "skills"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_cache_valid(fetched_at: int, now: int, ttl_ms: int = CACHE_TTL_MS) -> bool:
    """An entry is valid strictly before it reaches ttl_ms of age."""
    return now - fetched_at < ttl_ms


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Write content to path via a sibling temp file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        tmp_path.write_bytes(content)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class CacheStore:
    """File-backed cache for the registry and skill bundles.

    Constructed explicitly and passed to the resolver and downloader so tests
    can point it at an isolated root.
    """

    def __init__(
        self,
        root: Path | None = None,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize the cache store.

        Args:
            root: Cache root. Defaults to the user cache directory.
            ttl_ms: Registry time-to-live in milliseconds.
            clock: Returns the current time in epoch milliseconds.
        """
        self._root = Path(root) if root is not None else get_cache_dir()
        self.ttl_ms = ttl_ms
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        """The cache root."""
        return self._root

    @property
    def registry_path(self) -> Path:
        return self._root / REGISTRY_CACHE_FILE

    @property
    def skills_dir(self) -> Path:
        return self._root / SKILLS_CACHE_DIR

    # ------------------------------------------------------------------
    # Skill bundles
    # ------------------------------------------------------------------

    def skill_cache_path(self, name: str) -> Path:
        """Directory holding the cached files of a skill.

        Raises:
            InvalidNameError: If the name sanitizes to nothing or `.`.
        """
        return self.skills_dir / require_safe_name(name)

    def is_skill_cached(self, name: str) -> bool:
        """Whether a cache directory exists for the skill. Never raises."""
        try:
            path = self.skill_cache_path(name)
        except InvalidNameError:
            return False
        return path.is_dir()

    def is_skill_complete(self, name: str, files: Iterable[str]) -> bool:
        """Whether every listed file is present in the skill's cache directory."""
        if not self.is_skill_cached(name):
            return False

        skill_dir = self.skill_cache_path(name)
        for relative in files:
            target = skill_dir / relative
            if not is_path_safe(skill_dir, target) or not target.is_file():
                return False
        return True

    def write_skill_file(self, name: str, relative: str, content: bytes) -> Path:
        """Atomically write one file of a skill bundle.

        Raises:
            InvalidNameError: If the skill name sanitizes to nothing.
            ValueError: If the relative path escapes the skill directory.
        """
        skill_dir = self.skill_cache_path(name)
        target = skill_dir / relative
        if not is_path_safe(skill_dir, target) or target == skill_dir:
            raise ValueError(f"Refusing to write outside {skill_dir}: {relative}")

        atomic_write_bytes(target, content)
        return target

    def list_cached_skills(self) -> list[str]:
        """Names of all skills with a cache directory."""
        if not self.skills_dir.is_dir():
            return []
        return sorted(p.name for p in self.skills_dir.iterdir() if p.is_dir())

    def clear_skill_cache(self, name: str) -> None:
        """Delete a skill's cache directory. Never raises."""
        try:
            path = self.skill_cache_path(name)
        except InvalidNameError:
            logger.debug(f"Ignoring cache clear for invalid skill name {name!r}")
            return

        try:
            if path.is_symlink() or path.is_file():
                path.unlink(missing_ok=True)
            elif path.exists():
                shutil.rmtree(path)
        except OSError as e:
            logger.warning(f"Could not clear cache for {path.name}: {e}")

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def read_registry_cache(self) -> CachedRegistry | None:
        """Load the cached registry entry.

        Returns:
            The entry, or None if absent, unreadable or corrupted.
        """
        if not self.registry_path.exists():
            return None

        try:
            return CachedRegistry.model_validate_json(self.registry_path.read_bytes())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable registry cache {self.registry_path}: {e}")
            return None

    def is_valid(self, entry: CachedRegistry) -> bool:
        """Whether the entry is younger than the TTL."""
        return is_cache_valid(entry.fetched_at, self._clock(), self.ttl_ms)

    def write_registry_cache(self, snapshot: RegistrySnapshot) -> CachedRegistry:
        """Persist a snapshot stamped with the current time."""
        entry = CachedRegistry(fetched_at=self._clock(), registry=snapshot)
        payload = entry.model_dump_json(by_alias=True, indent=2)
        atomic_write_bytes(self.registry_path, payload.encode("utf-8"))
        logger.debug(f"Wrote registry cache to {self.registry_path}")
        return entry

    def clear_registry_cache(self) -> None:
        """Delete the cached registry. Never raises."""
        try:
            self.registry_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not clear registry cache: {e}")

    def clear_all(self) -> None:
        """Delete the registry and every cached skill. Never raises."""
        self.clear_registry_cache()
        for name in self.list_cached_skills():
            self.clear_skill_cache(name)
