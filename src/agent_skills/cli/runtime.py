"""
Shared plumbing for CLI commands: client construction, async execution and
error reporting.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich.logging import RichHandler

from agent_skills.cli.output import console, print_error
from agent_skills.client import SkillsClient
from agent_skills.exceptions import SkillsError

T = TypeVar("T")


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=verbose)],
        force=True,
    )


def make_client() -> SkillsClient:
    client = SkillsClient()
    if client.config.general.verbose:
        configure_logging(True)
    return client


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning SkillsError into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except SkillsError as e:
        print_error(str(e))
        raise typer.Exit(1)


def call(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Synchronous counterpart of run()."""
    try:
        return func(*args, **kwargs)
    except SkillsError as e:
        print_error(str(e))
        raise typer.Exit(1)
