"""Configuration for agent-skills."""

from agent_skills.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_yaml_file,
)
from agent_skills.config.merger import deep_merge, get_nested_value, set_nested_value
from agent_skills.config.schema import (
    DEFAULT_AGENTS,
    AgentConfig,
    Config,
    GeneralConfig,
    InstallConfig,
    RegistryConfig,
)

__all__ = [
    "DEFAULT_AGENTS",
    "AgentConfig",
    "Config",
    "ConfigurationError",
    "GeneralConfig",
    "InstallConfig",
    "RegistryConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "get_nested_value",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
