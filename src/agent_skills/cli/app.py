"""
Main Typer application for the agent-skills CLI.

This module defines the root CLI application and registers all commands.
"""

from typing import Annotated

import typer

from agent_skills import __version__
from agent_skills.cli import runtime
from agent_skills.cli.commands import cache, skill
from agent_skills.cli.output import print_info, print_success
from agent_skills.update_check import check_for_updates

# Create the main Typer app
app = typer.Typer(
    name="agent-skills",
    help="Install skill bundles from the agent-skills registry into AI coding agents.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"agent-skills version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]agent-skills[/bold blue] - Skill bundles for AI coding agents

    Fetches skills from the remote registry, caches them locally and
    installs them into Cursor, Claude Code, Codex and other agents.
    """
    runtime.configure_logging(verbose)


app.command("install")(skill.install)
app.command("remove")(skill.remove)
app.command("list")(skill.list_installed)
app.command("available")(skill.available)
app.command("show")(skill.show)
app.add_typer(cache.app, name="cache")


@app.command("update-check")
def update_check() -> None:
    """Check PyPI for a newer release."""
    latest = runtime.run(check_for_updates(__version__))

    if latest:
        print_info(f"agent-skills [green]{latest}[/green] is available (installed: {__version__})")
        print_info("Upgrade with: [cyan]pip install -U agent-skills[/cyan]")
    else:
        print_success(f"agent-skills {__version__} is up to date")


if __name__ == "__main__":
    app()
