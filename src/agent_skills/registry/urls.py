"""
URL construction for the registry manifest and skill files.

Every resource is reachable from two hosts sharing the same path suffix:

    primary:  https://<cdn_host>/<org>/<repo>@<ref>/<path>
    fallback: https://<raw_host>/<org>/<repo>/<ref>/<path>

Candidates are always returned primary first.
"""

import os
from collections.abc import Mapping

from agent_skills.config.schema import RegistryConfig

REF_ENV_VAR = "SKILLS_CDN_REF"


def _join(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))


class RegistryUrls:
    """Builds primary/fallback URL candidates for one release ref."""

    def __init__(
        self,
        version: str,
        cdn_host: str = "cdn.jsdelivr.net/gh",
        raw_host: str = "raw.githubusercontent.com",
        org: str = "tech-leads-club",
        repo: str = "agent-skills",
        manifest_path: str = "packages/skills-catalog/skills-registry.json",
        ref: str | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize the URL builder.

        Args:
            version: Release version; the default ref is v<version>.
            cdn_host: Primary host plus any path prefix.
            raw_host: Fallback host plus any path prefix.
            org: Repository owner.
            repo: Repository name.
            manifest_path: Manifest location inside the repository.
            ref: Explicit ref (branch or tag) replacing v<version>.
            environ: Environment for the SKILLS_CDN_REF override.
        """
        environ = os.environ if environ is None else environ
        self.version = version
        self.ref = environ.get(REF_ENV_VAR) or ref or f"v{version}"
        self.manifest_path = manifest_path
        self.primary_root = f"https://{_join(cdn_host, org, repo)}@{self.ref}"
        self.fallback_root = f"https://{_join(raw_host, org, repo, self.ref)}"

    @classmethod
    def from_config(
        cls,
        config: RegistryConfig,
        version: str,
        environ: Mapping[str, str] | None = None,
    ) -> "RegistryUrls":
        """Create a URL builder from the registry config section."""
        return cls(
            version=version,
            cdn_host=config.cdn_host,
            raw_host=config.raw_host,
            org=config.org,
            repo=config.repo,
            manifest_path=config.manifest_path,
            ref=config.ref,
            environ=environ,
        )

    @property
    def roots(self) -> list[str]:
        """Host roots in the order they are tried."""
        return [self.primary_root, self.fallback_root]

    def manifest_urls(self) -> list[str]:
        """Manifest URL candidates."""
        return [_join(root, self.manifest_path) for root in self.roots]

    def skill_file_urls(self, base_url: str, skill_path: str, file: str) -> list[str]:
        """URL candidates for one file of a skill.

        A relative base_url is joined to each host root. An absolute base_url
        under either known root is re-rooted onto both hosts. Any other
        absolute base_url is used as the only candidate.
        """
        suffix = _join(skill_path, file)
        base = base_url.rstrip("/")

        if not base.startswith(("http://", "https://")):
            return [_join(root, base, suffix) for root in self.roots]

        for root in self.roots:
            if base == root or base.startswith(root + "/"):
                relative = base[len(root) :]
                return [_join(candidate, relative, suffix) for candidate in self.roots]

        return [_join(base, suffix)]
