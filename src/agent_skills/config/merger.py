"""
Configuration merging for agent-skills.

Layered config files are combined with a deep merge. List values can be
extended or reduced instead of replaced by prefixing the key with + or -.
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge override into a copy of base.

    Merge rules:
    - Nested dicts merge recursively
    - "+key" appends list items not already present
    - "-key" removes list items
    - A None value deletes the key
    - Anything else replaces

    Examples:
        >>> deep_merge({"agents": ["cursor"]}, {"+agents": ["codex"]})
        {'agents': ['cursor', 'codex']}

        >>> deep_merge({"agents": ["cursor", "codex"]}, {"-agents": ["codex"]})
        {'agents': ['cursor']}
    """
    merged = dict(base)

    for key, value in override.items():
        if key[:1] in ("+", "-") and isinstance(value, list):
            target = key[1:]
            current = merged.get(target)
            if key[0] == "+":
                existing = current if isinstance(current, list) else []
                merged[target] = existing + [item for item in value if item not in existing]
            elif isinstance(current, list):
                merged[target] = [item for item in current if item not in value]
        elif value is None:
            merged.pop(key, None)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def get_nested_value(config: dict[str, Any], key_path: str) -> Any:
    """
    Read a dotted key path such as "registry.ref".

    Returns:
        The value, or None when any segment is missing.
    """
    current: Any = config
    for key in key_path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def set_nested_value(config: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Write a dotted key path, creating intermediate dicts.

    Returns:
        The same (mutated) config dict.
    """
    *parents, leaf = key_path.split(".")
    current = config
    for key in parents:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[leaf] = value
    return config
