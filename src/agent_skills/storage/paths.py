"""
Path utilities for agent-skills.

Provides consistent path resolution for configuration and cache files.
"""

import os
from pathlib import Path

PROJECT_MARKERS = (".git", "pyproject.toml", "package.json")


def get_agent_skills_home() -> Path:
    """
    Get the agent-skills home directory.

    Resolution order:
    1. AGENT_SKILLS_HOME environment variable
    2. Default: ~/.agent-skills

    Returns:
        Path to the agent-skills home directory.
    """
    env_home = os.environ.get("AGENT_SKILLS_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".agent-skills"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.agent-skills/config.yaml
    """
    return get_agent_skills_home() / "config.yaml"


def get_cache_dir() -> Path:
    """
    Get the cache root directory.

    Resolution order:
    1. AGENT_SKILLS_CACHE_DIR environment variable
    2. XDG_CACHE_HOME/agent-skills
    3. Default: ~/.cache/agent-skills

    Returns:
        Path to the user-scoped cache root.
    """
    env_cache = os.environ.get("AGENT_SKILLS_CACHE_DIR")
    if env_cache:
        return Path(env_cache).expanduser().resolve()

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser().resolve() / "agent-skills"

    return Path.home() / ".cache" / "agent-skills"


def find_project_root(start_path: Path | None = None) -> Path:
    """
    Find the project root by traversing up the directory tree.

    A directory is a project root when it contains one of PROJECT_MARKERS.
    Falls back to the starting directory when no marker is found.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to the project root.
    """
    if start_path is None:
        start_path = Path.cwd()
    else:
        start_path = Path(start_path).resolve()

    current = start_path
    while current != current.parent:
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
        current = current.parent

    return start_path


def find_project_config(start_path: Path | None = None) -> Path | None:
    """
    Find the project configuration file.

    Looks for .agent-skills/config.yaml in the project root.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to the project config if found, None otherwise.
    """
    project_config = find_project_root(start_path) / ".agent-skills" / "config.yaml"
    if project_config.exists():
        return project_config
    return None


def expand_path(path: str | Path) -> Path:
    """
    Expand a path string, handling ~ and environment variables.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded absolute Path.
    """
    if isinstance(path, str):
        path = os.path.expandvars(path)
        path = os.path.expanduser(path)
    return Path(path).absolute()

