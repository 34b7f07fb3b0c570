"""CLI command modules."""

from agent_skills.cli.commands import cache, skill

__all__ = ["cache", "skill"]
