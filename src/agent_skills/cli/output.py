"""
Output formatting utilities for the CLI.

Provides consistent output formatting across all CLI commands.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from agent_skills.install import InstallResult, RemoveResult

# Global console instance
console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗ {message}[/red]")


def print_info(message: str) -> None:
    console.print(f"[blue]i[/blue] {message}")


def print_panel(content: str, title: str | None = None) -> None:
    console.print(Panel(content, title=title))


def truncate(text: str, width: int = 60) -> str:
    return text[:width] + "..." if len(text) > width else text


def _status(success: bool, error: str | None) -> str:
    if success and error:
        return f"[dim]{error}[/dim]"
    if success:
        return "[green]ok[/green]"
    return f"[red]{error or 'failed'}[/red]"


def print_install_results(results: Sequence[InstallResult]) -> None:
    """Print one row per (skill, agent) install outcome."""
    table = Table(title="Install Results")
    table.add_column("Skill", style="cyan")
    table.add_column("Agent")
    table.add_column("Status")
    table.add_column("Path", style="dim")

    for result in results:
        status = _status(result.success, result.error)
        if result.used_global_symlink:
            status += " [dim](global)[/dim]"
        table.add_row(result.skill, result.agent, status, str(result.path or ""))

    console.print(table)


def print_remove_results(results: Sequence[RemoveResult]) -> None:
    table = Table(title="Remove Results")
    table.add_column("Skill", style="cyan")
    table.add_column("Agent")
    table.add_column("Status")

    for result in results:
        table.add_row(result.skill, result.agent, _status(result.success, result.error))

    console.print(table)
