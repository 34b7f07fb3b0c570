"""
Registry models for agent-skills.

Defines the remote manifest structure, the cached registry entry and the
per-skill download report. Wire and on-disk JSON use camelCase keys; Python
attributes are snake_case.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agent_skills.storage.safety import require_safe_name


class SkillMetadata(BaseModel):
    """A skill bundle as listed in the registry manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Unique skill identifier")
    description: str = Field(default="", description="Short description")
    category: str = Field(default="", description="Opaque grouping key")
    path: str = Field(..., description="Location under the remote skills root")
    files: list[str] = Field(..., min_length=1, description="Files in the bundle")
    author: str | None = Field(default=None, description="Skill author")
    version: str | None = Field(default=None, description="Skill version")

    @field_validator("name")
    @classmethod
    def _name_is_sanitized(cls, value: str) -> str:
        # InvalidNameError is a ValueError, so pydantic reports it as a validation error
        if require_safe_name(value) != value:
            raise ValueError(f"skill name {value!r} is not a safe identifier")
        return value


class CategoryInfo(BaseModel):
    """Display metadata for a category id."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str | None = None
    description: str | None = None
    priority: int | None = None


class RegistrySnapshot(BaseModel):
    """The remote registry manifest.

    Immutable once fetched; the next successful fetch replaces it wholesale.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = Field(..., description="Registry format/release version")
    generated_at: str = Field(..., alias="generatedAt", description="Generation timestamp")
    base_url: str = Field(..., alias="baseUrl", description="Root of the skill files")
    categories: dict[str, CategoryInfo] = Field(default_factory=dict)
    skills: list[SkillMetadata] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> "RegistrySnapshot":
        seen: set[str] = set()
        for skill in self.skills:
            if skill.name in seen:
                raise ValueError(f"duplicate skill name in registry: {skill.name}")
            seen.add(skill.name)
        return self

    def find_skill(self, name: str) -> SkillMetadata | None:
        """Look up a skill by exact name."""
        for skill in self.skills:
            if skill.name == name:
                return skill
        return None

    @property
    def skill_names(self) -> list[str]:
        """Skill names in manifest order."""
        return [skill.name for skill in self.skills]


class CachedRegistry(BaseModel):
    """The registry cache entry persisted as registry.json."""

    model_config = ConfigDict(populate_by_name=True)

    fetched_at: int = Field(..., alias="fetchedAt", description="Epoch milliseconds")
    registry: RegistrySnapshot


class DownloadReport(BaseModel):
    """Outcome of downloading one skill bundle."""

    skill: str
    path: Path
    total_files: int
    downloaded: int
    failed: list[str] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        """Whether every file landed."""
        return self.downloaded >= self.total_files
