"""
Skill installer for agent-skills.

Places cached skill directories into each agent's skills directory, either as
a symlink to the cache or as a copy. Local installs prefer linking to a
globally installed shared copy when one exists.
"""

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

from agent_skills.exceptions import UnknownAgentError
from agent_skills.install.agents import TargetResolver
from agent_skills.install.global_path import get_global_skill_path
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
from agent_skills.storage.safety import require_safe_name

logger = logging.getLogger(__name__)

GlobalLocator = Callable[[str], Path | None]


def inspect_entry(path: Path) -> InstalledEntry | None:
    """Describe what sits at path, or None if nothing does."""
    if path.is_symlink():
        kind = EntryKind.SYMLINK
    elif path.is_dir():
        kind = EntryKind.DIRECTORY
    elif path.exists():
        kind = EntryKind.FILE
    else:
        return None
    return InstalledEntry(name=path.name, path=path, kind=kind)


def scan_installed(directory: Path) -> list[InstalledEntry]:
    """Entries in an agent skills directory, sorted by name."""
    if not directory.is_dir():
        return []

    entries = []
    for child in sorted(directory.iterdir()):
        entry = inspect_entry(child)
        if entry is not None:
            entries.append(entry)
    return entries


def _discard_partial(target: Path) -> None:
    """Remove what a failed install left at target."""
    entry = inspect_entry(target)
    if entry is None:
        return
    try:
        if entry.kind is EntryKind.DIRECTORY:
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError as e:
        logger.warning(f"Could not remove partial install at {target}: {e}")


class Installer:
    """Installs, removes and lists skills in agent skill directories."""

    def __init__(
        self,
        targets: TargetResolver,
        global_locator: GlobalLocator = get_global_skill_path,
    ):
        """Initialize the installer.

        Args:
            targets: Maps (agent, scope) to a skills directory.
            global_locator: Finds a globally installed copy of a skill.
        """
        self.targets = targets
        self.global_locator = global_locator

    def install(
        self,
        skills: Iterable[SkillSource],
        options: InstallOptions,
    ) -> list[InstallResult]:
        """Install every skill for every selected agent.

        A failure for one (skill, agent) pair is reported in its result and
        does not stop the others.

        Args:
            skills: Cached skills to install.
            options: Scope, method and agents.

        Returns:
            One result per (skill, agent), in input order.
        """
        results = []
        for skill in skills:
            for agent in options.agents:
                result = self._install_one(skill, agent, options)
                results.append(result)
        return results

    def _install_one(
        self,
        skill: SkillSource,
        agent: str,
        options: InstallOptions,
    ) -> InstallResult:
        name = require_safe_name(skill.name)

        try:
            target_dir = self.targets.resolve(agent, options.scope)
        except UnknownAgentError as e:
            return InstallResult(
                skill=name,
                agent=agent,
                success=False,
                error=str(e),
                error_code=ResultCode.UNKNOWN_AGENT,
            )

        target = target_dir / name
        existing = inspect_entry(target)

        if existing is not None:
            if existing.counts_as_installed:
                logger.debug(f"{name} already installed for {agent} at {target}")
                return InstallResult(
                    skill=name,
                    agent=agent,
                    success=True,
                    path=target,
                    error=ALREADY_EXISTS,
                    error_code=ResultCode.ALREADY_EXISTS,
                )
            return InstallResult(
                skill=name,
                agent=agent,
                success=False,
                path=target,
                error=f"A file already exists at {target}",
                error_code=ResultCode.CONFLICT,
            )

        global_copy = None
        if options.scope is InstallScope.LOCAL:
            global_copy = self._find_global_copy(name)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            if global_copy is not None:
                os.symlink(global_copy, target, target_is_directory=True)
                method = InstallMethod.SYMLINK
            elif options.method is InstallMethod.COPY:
                shutil.copytree(skill.path, target)
                method = InstallMethod.COPY
            else:
                os.symlink(skill.path.resolve(), target, target_is_directory=True)
                method = InstallMethod.SYMLINK
        except OSError as e:
            logger.error(f"Failed to install {name} for {agent}: {e}")
            # Nothing was at target before this call
            _discard_partial(target)
            return InstallResult(
                skill=name,
                agent=agent,
                success=False,
                path=target,
                error=str(e),
                error_code=ResultCode.FILESYSTEM_ERROR,
            )

        logger.info(f"Installed {name} for {agent} ({method.value}) at {target}")
        return InstallResult(
            skill=name,
            agent=agent,
            success=True,
            path=target,
            method=method,
            used_global_symlink=global_copy is not None,
        )

    def _find_global_copy(self, name: str) -> Path | None:
        try:
            return self.global_locator(name)
        except Exception as e:
            logger.debug(f"Global skill lookup failed for {name}: {e}")
            return None

    def remove_skill(
        self,
        name: str,
        agents: Iterable[str],
        global_: bool = False,
    ) -> list[RemoveResult]:
        """Remove a skill from each agent's skills directory.

        Symlinks are unlinked without touching their target. Copies are
        deleted recursively.

        Args:
            name: Skill name.
            agents: Agents to remove it from.
            global_: Use the per-user directories instead of the project's.

        Returns:
            One result per agent.
        """
        safe = require_safe_name(name)
        scope = InstallScope.GLOBAL if global_ else InstallScope.LOCAL

        results = []
        for agent in agents:
            try:
                target_dir = self.targets.resolve(agent, scope)
            except UnknownAgentError as e:
                results.append(
                    RemoveResult(
                        skill=safe,
                        agent=agent,
                        success=False,
                        error=str(e),
                        error_code=ResultCode.UNKNOWN_AGENT,
                    )
                )
                continue

            target = target_dir / safe
            entry = inspect_entry(target)
            if entry is None or not entry.counts_as_installed:
                results.append(
                    RemoveResult(
                        skill=safe,
                        agent=agent,
                        success=False,
                        path=target,
                        error=NOT_INSTALLED,
                        error_code=ResultCode.NOT_INSTALLED,
                    )
                )
                continue

            try:
                if entry.kind is EntryKind.SYMLINK:
                    target.unlink()
                else:
                    shutil.rmtree(target)
            except OSError as e:
                logger.error(f"Failed to remove {safe} for {agent}: {e}")
                results.append(
                    RemoveResult(
                        skill=safe,
                        agent=agent,
                        success=False,
                        path=target,
                        error=str(e),
                        error_code=ResultCode.FILESYSTEM_ERROR,
                    )
                )
                continue

            logger.info(f"Removed {safe} for {agent}")
            results.append(RemoveResult(skill=safe, agent=agent, success=True, path=target))
        return results

    def list_installed(self, agent: str, global_: bool = False) -> list[str]:
        """Names of installed skills for an agent.

        Raises:
            UnknownAgentError: If the agent is not configured.
        """
        scope = InstallScope.GLOBAL if global_ else InstallScope.LOCAL
        directory = self.targets.resolve(agent, scope)
        return [entry.name for entry in scan_installed(directory) if entry.counts_as_installed]
