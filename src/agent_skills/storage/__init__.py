"""Storage utilities for agent-skills."""

from agent_skills.storage.paths import (
    expand_path,
    find_project_config,
    find_project_root,
    get_agent_skills_home,
    get_cache_dir,
    get_global_config_path,
)
from agent_skills.storage.safety import (
    is_path_safe,
    require_safe_name,
    sanitize_name,
)

__all__ = [
    "expand_path",
    "find_project_config",
    "find_project_root",
    "get_agent_skills_home",
    "get_cache_dir",
    "get_global_config_path",
    "is_path_safe",
    "require_safe_name",
    "sanitize_name",
]
