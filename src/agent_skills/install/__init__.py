"""
Installation of cached skills into agent skill directories.
"""

from agent_skills.install.agents import AgentRegistry, TargetResolver
from agent_skills.install.global_path import (
    get_global_skill_path,
    get_global_skills_path,
    is_globally_installed,
)
from agent_skills.install.installer import Installer, inspect_entry, scan_installed
from agent_skills.install.models import (
    ALREADY_EXISTS,
    NOT_INSTALLED,
    EntryKind,
    InstalledEntry,
    InstallMethod,
    InstallOptions,
    InstallResult,
    InstallScope,
    RemoveResult,
    ResultCode,
    SkillSource,
)

__all__ = [
    "ALREADY_EXISTS",
    "NOT_INSTALLED",
    "AgentRegistry",
    "EntryKind",
    "InstallMethod",
    "InstallOptions",
    "InstallResult",
    "InstallScope",
    "InstalledEntry",
    "Installer",
    "RemoveResult",
    "ResultCode",
    "SkillSource",
    "TargetResolver",
    "get_global_skill_path",
    "get_global_skills_path",
    "inspect_entry",
    "is_globally_installed",
    "scan_installed",
]
