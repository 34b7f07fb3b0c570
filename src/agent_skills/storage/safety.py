"""
Name sanitization and path containment checks.

Skill names come from a remote manifest and end up as directory names in the
cache and in agent skill directories, so they are stripped of anything that
could address a location outside those roots.
"""

import os
import re
from pathlib import Path

from agent_skills.exceptions import InvalidNameError

# Applied in order: separators, parent-directory sequences, reserved characters
UNSAFE_PATH_PATTERNS = (
    re.compile(r"[/\\]"),
    re.compile(r"\.\."),
    re.compile(r'[<>:"|?*]'),
)


def sanitize_name(name: str) -> str:
    """Strip separators, `..` and reserved characters from a name, then trim it.

    Args:
        name: Raw skill name.

    Returns:
        The sanitized name. May be empty.

    Examples:
        >>> sanitize_name("../evil")
        'evil'
        >>> sanitize_name("path/to/skill")
        'pathtoskill'
    """
    result = name
    for pattern in UNSAFE_PATH_PATTERNS:
        result = pattern.sub("", result)
    return result.strip()


def require_safe_name(name: str) -> str:
    """Sanitize a name, rejecting names that cannot be a directory entry.

    A name that sanitizes to nothing or to `.` would address the parent
    directory itself rather than an entry inside it.

    Raises:
        InvalidNameError: If the sanitized name is empty or `.`.
    """
    safe = sanitize_name(name)
    if not safe or safe == ".":
        raise InvalidNameError(name)
    return safe


def is_path_safe(base_path: str | Path, target_path: str | Path) -> bool:
    """Check that target_path is base_path or lies beneath it.

    Both paths are normalized lexically first, so `..` segments are collapsed
    before comparison. Containment is decided per path component.

    Args:
        base_path: Directory that must contain the target.
        target_path: Path to check.

    Returns:
        True if the normalized target is inside the normalized base.
    """
    base = os.path.normpath(os.path.abspath(base_path))
    target = os.path.normpath(os.path.abspath(target_path))
    try:
        return os.path.commonpath([base, target]) == base
    except ValueError:
        # Different drives on Windows
        return False
