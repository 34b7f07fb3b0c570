"""
Configuration loader for agent-skills.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.agent-skills/config.yaml)
3. Project config (<project>/.agent-skills/config.yaml)
4. Environment variables (AGENT_SKILLS_<SECTION>_<KEY>)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agent_skills.config.merger import deep_merge, set_nested_value
from agent_skills.config.schema import Config
from agent_skills.exceptions import SkillsError
from agent_skills.storage.paths import find_project_config, get_global_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "AGENT_SKILLS_"

# Consumed by storage.paths, not part of the config tree
RESERVED_ENV_VARS = {"AGENT_SKILLS_HOME", "AGENT_SKILLS_CACHE_DIR", "AGENT_SKILLS_GLOBAL_DIR"}

# Sections whose keys may be set from the environment
ENV_SECTIONS = ("registry", "install", "general")


class ConfigurationError(SkillsError):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file is missing).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return content


def apply_env_overrides(
    config: dict[str, Any], environ: dict[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    AGENT_SKILLS_REGISTRY_MAX_RETRIES=5 sets registry.max_retries. The first
    segment after the prefix names the section; the rest is the key.

    Args:
        config: Configuration dictionary to modify.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Configuration with environment overrides applied.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key in RESERVED_ENV_VARS:
            continue

        remainder = key[len(ENV_PREFIX) :].lower()
        section, _, field = remainder.partition("_")
        if section not in ENV_SECTIONS or not field:
            logger.debug(f"Ignoring unknown config variable {key}")
            continue

        config = set_nested_value(config, f"{section}.{field}", _parse_env_value(value))

    return config


def _parse_env_value(value: str) -> Any:
    """Parse an environment value into bool, int, float, list or str."""
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if re.fullmatch(r"-?\d+", value):
        return int(value)
    if re.fullmatch(r"-?\d+\.\d+", value):
        return float(value)
    if "," in value:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def load_config(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        project_path: Starting path to search for project config. Defaults to cwd.
        skip_project: Skip loading project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    global_path = get_global_config_path()
    if global_path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    if not skip_project:
        project_config_path = find_project_config(project_path)
        if project_config_path:
            config_dict = deep_merge(config_dict, load_yaml_file(project_config_path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Cached config for the CLI process
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the process-wide configuration instance.

    Args:
        reload: Force reload configuration from disk.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
