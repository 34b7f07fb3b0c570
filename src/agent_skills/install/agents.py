"""
Agent skill directories.

Maps an (agent, scope) pair to the directory that holds that agent's skills.
The installer only ever sees the TargetResolver protocol, so callers can plug
in their own mapping.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from agent_skills.config.schema import DEFAULT_AGENTS, AgentConfig, Config
from agent_skills.exceptions import UnknownAgentError
from agent_skills.install.models import InstallScope
from agent_skills.storage.paths import expand_path, find_project_root

logger = logging.getLogger(__name__)


class TargetResolver(Protocol):
    """Supplies install target directories."""

    def resolve(self, agent: str, scope: InstallScope) -> Path:
        """Absolute directory holding the agent's skills for the scope."""
        ...

    def display_name(self, agent: str) -> str:
        """Human-readable agent name for results."""
        ...


class AgentRegistry:
    """TargetResolver backed by the configured agent table."""

    def __init__(
        self,
        agents: Mapping[str, AgentConfig] | None = None,
        project_root: Path | None = None,
    ):
        """Initialize the agent registry.

        Args:
            agents: Agent table. Defaults to the built-in agents.
            project_root: Root for local installs. Found from cwd when omitted.
        """
        self._agents = dict(agents if agents is not None else DEFAULT_AGENTS)
        self._project_root = project_root

    @classmethod
    def from_config(cls, config: Config, project_root: Path | None = None) -> "AgentRegistry":
        return cls(config.agents, project_root)

    @property
    def project_root(self) -> Path:
        if self._project_root is None:
            self._project_root = find_project_root()
        return self._project_root

    def get(self, agent: str) -> AgentConfig:
        """Look up an agent.

        Raises:
            UnknownAgentError: If the agent is not configured.
        """
        try:
            return self._agents[agent]
        except KeyError:
            raise UnknownAgentError(agent) from None

    def resolve(self, agent: str, scope: InstallScope) -> Path:
        config = self.get(agent)
        if scope is InstallScope.GLOBAL:
            return expand_path(config.global_skills_dir)
        return self.project_root / config.skills_dir

    def display_name(self, agent: str) -> str:
        return self.get(agent).display_name

    def all_agent_names(self) -> list[str]:
        return list(self._agents)

    def detect_installed(self) -> list[str]:
        """Agents whose per-user configuration directory exists."""
        detected = []
        for name, config in self._agents.items():
            # ~/.cursor/skills -> ~/.cursor
            if expand_path(config.global_skills_dir).parent.is_dir():
                detected.append(name)
        logger.debug(f"Detected agents: {detected}")
        return detected
