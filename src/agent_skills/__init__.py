"""
agent-skills - Skill bundle distribution for AI coding agents

Fetches the remote skills registry, keeps a local cache of skill bundles,
and installs them into agent skill directories by symlink or copy.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("agent-skills")
except PackageNotFoundError:
    __version__ = "0.9.1"

__all__ = [
    "__version__",
]
