"""
Pydantic configuration schema for agent-skills.

This module defines all configuration models with validation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Registry Configuration
# =============================================================================


class RegistryConfig(BaseModel):
    """Remote registry location and fetch policy."""

    model_config = ConfigDict(extra="allow")

    cdn_host: str = "cdn.jsdelivr.net/gh"
    raw_host: str = "raw.githubusercontent.com"
    org: str = "tech-leads-club"
    repo: str = "agent-skills"
    # Replaces v<version> in both URL templates (branch or tag name)
    ref: str | None = None
    manifest_path: str = "packages/skills-catalog/skills-registry.json"

    timeout_seconds: float = Field(default=15.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)
    retry_base_delay_ms: int = Field(default=500, ge=0)
    retry_jitter_ms: int = Field(default=100, ge=0)
    batch_size: int = Field(default=10, ge=1, le=100)
    cache_ttl_hours: float = Field(default=24.0, gt=0)

    @property
    def cache_ttl_ms(self) -> int:
        """Cache TTL in milliseconds."""
        return int(self.cache_ttl_hours * 60 * 60 * 1000)


# =============================================================================
# Install Configuration
# =============================================================================


class InstallConfig(BaseModel):
    """Defaults for install commands."""

    model_config = ConfigDict(extra="allow")

    method: Literal["symlink", "copy"] = "symlink"
    scope: Literal["local", "global"] = "local"
    agents: list[str] = Field(default_factory=lambda: ["cursor", "claude-code"])

    @field_validator("agents", mode="before")
    @classmethod
    def _split_agents(cls, value: object) -> object:
        # A single agent from the environment arrives as a plain string
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentConfig(BaseModel):
    """Where an agent keeps its skills."""

    name: str
    display_name: str
    description: str = ""
    # Relative to the project root
    skills_dir: str
    # Absolute, ~ is expanded
    global_skills_dir: str


DEFAULT_AGENTS: dict[str, AgentConfig] = {
    "cursor": AgentConfig(
        name="cursor",
        display_name="Cursor",
        description="Cursor IDE",
        skills_dir=".cursor/skills",
        global_skills_dir="~/.cursor/skills",
    ),
    "claude-code": AgentConfig(
        name="claude-code",
        display_name="Claude Code",
        description="Anthropic's agentic coding CLI",
        skills_dir=".claude/skills",
        global_skills_dir="~/.claude/skills",
    ),
    "codex": AgentConfig(
        name="codex",
        display_name="Codex",
        description="OpenAI Codex CLI",
        skills_dir=".codex/skills",
        global_skills_dir="~/.codex/skills",
    ),
    "windsurf": AgentConfig(
        name="windsurf",
        display_name="Windsurf",
        description="Windsurf editor",
        skills_dir=".windsurf/skills",
        global_skills_dir="~/.codeium/windsurf/skills",
    ),
    "copilot": AgentConfig(
        name="copilot",
        display_name="GitHub Copilot",
        description="GitHub Copilot agent mode",
        skills_dir=".github/skills",
        global_skills_dir="~/.copilot/skills",
    ),
}


# =============================================================================
# General Configuration
# =============================================================================


class GeneralConfig(BaseModel):
    """General settings."""

    model_config = ConfigDict(extra="allow")

    # Look for a newer release after installs
    check_updates: bool = True
    # Same as passing --verbose
    verbose: bool = False


# =============================================================================
# Root Configuration
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for agent-skills.

    Configuration can be loaded from YAML files and environment variables,
    merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    agents: dict[str, AgentConfig] = Field(default_factory=lambda: dict(DEFAULT_AGENTS))
    general: GeneralConfig = Field(default_factory=GeneralConfig)

    def get_agent(self, name: str) -> AgentConfig | None:
        """Look up an agent by id."""
        return self.agents.get(name)
