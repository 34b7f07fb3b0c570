"""
Install models for agent-skills.

Options handed to the installer and the per-target results it reports.
Results are plain values for reporting; they are never persisted.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

ALREADY_EXISTS = "Already exists"
NOT_INSTALLED = "Not installed"


class InstallScope(str, Enum):
    """Per-project or per-user installation."""

    LOCAL = "local"
    GLOBAL = "global"


class InstallMethod(str, Enum):
    """How a skill is materialized in the target directory."""

    SYMLINK = "symlink"
    COPY = "copy"


class ResultCode(str, Enum):
    """Machine-readable reason attached to a non-plain outcome."""

    ALREADY_EXISTS = "already_exists"
    CONFLICT = "conflict"
    DOWNLOAD_FAILED = "download_failed"
    FILESYSTEM_ERROR = "filesystem_error"
    UNKNOWN_AGENT = "unknown_agent"
    NOT_INSTALLED = "not_installed"


class InstallOptions(BaseModel):
    """What to install where."""

    scope: InstallScope = InstallScope.LOCAL
    method: InstallMethod = InstallMethod.SYMLINK
    agents: list[str] = Field(default_factory=list)

    @property
    def is_global(self) -> bool:
        return self.scope is InstallScope.GLOBAL


class SkillSource(BaseModel):
    """A skill ready to install: its name and the cached directory."""

    name: str
    path: Path


class InstallResult(BaseModel):
    """Outcome of installing one skill for one agent."""

    skill: str
    agent: str
    success: bool
    path: Path | None = None
    method: InstallMethod | None = None
    used_global_symlink: bool = False
    error: str | None = None
    error_code: ResultCode | None = None

    @property
    def already_exists(self) -> bool:
        return self.success and self.error_code is ResultCode.ALREADY_EXISTS


class RemoveResult(BaseModel):
    """Outcome of removing one skill from one agent."""

    skill: str
    agent: str
    success: bool
    path: Path | None = None
    error: str | None = None
    error_code: ResultCode | None = None


class EntryKind(str, Enum):
    """What sits at a skill's location in a target directory."""

    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FILE = "file"


class InstalledEntry(BaseModel):
    """A directory entry inside an agent's skills directory."""

    name: str
    path: Path
    kind: EntryKind

    @property
    def counts_as_installed(self) -> bool:
        """Directories and symlinks (even dangling ones) are installed skills."""
        return self.kind in (EntryKind.DIRECTORY, EntryKind.SYMLINK)
