"""
Lookup of a globally installed, shared skills directory.

When the tool is installed system-wide with its skills bundled, local installs
link to that shared copy instead of duplicating it. The lookup is best-effort:
any failure means "no global copy".
"""

import logging
import os
import sys
from pathlib import Path

from agent_skills.storage.safety import sanitize_name

logger = logging.getLogger(__name__)

GLOBAL_DIR_ENV = "AGENT_SKILLS_GLOBAL_DIR"


def _candidate_dirs() -> list[Path]:
    candidates = []
    env_dir = os.environ.get(GLOBAL_DIR_ENV)
    if env_dir:
        candidates.append(Path(env_dir).expanduser())
    candidates.append(Path(sys.prefix) / "share" / "agent-skills" / "skills")
    return candidates


def get_global_skills_path() -> Path | None:
    """The shared skills directory, or None if there is none."""
    for candidate in _candidate_dirs():
        try:
            if candidate.is_dir():
                return candidate.resolve()
        except OSError as e:
            logger.debug(f"Cannot inspect {candidate}: {e}")
    return None


def is_globally_installed() -> bool:
    return get_global_skills_path() is not None


def get_global_skill_path(skill_name: str) -> Path | None:
    """The shared copy of one skill, or None if it is not there."""
    safe = sanitize_name(skill_name)
    skills_path = get_global_skills_path()
    if not safe or safe == "." or skills_path is None:
        return None

    skill_path = skills_path / safe
    try:
        return skill_path if skill_path.is_dir() else None
    except OSError as e:
        logger.debug(f"Cannot inspect {skill_path}: {e}")
        return None
