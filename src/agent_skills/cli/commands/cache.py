"""
agent-skills cache - Local cache commands.

Usage:
    agent-skills cache info
    agent-skills cache clear
    agent-skills cache clear cloudflare-deploy
    agent-skills cache clear --registry
"""

from datetime import datetime
from typing import Annotated

import typer

from agent_skills.cli import runtime
from agent_skills.cli.output import console, print_panel, print_success

app = typer.Typer(
    name="cache",
    help="Local registry and bundle cache.",
)


@app.command()
def info() -> None:
    """Show cache location and contents."""
    client = runtime.call(runtime.make_client)
    details = client.cache_info()

    lines = [f"[bold]Location:[/bold] {details['cache_dir']}"]
    if details["registry_cached"]:
        fetched = datetime.fromtimestamp(details["registry_fetched_at"] / 1000)
        state = "[green]fresh[/green]" if details["registry_valid"] else "[yellow]stale[/yellow]"
        lines.append(
            f"[bold]Registry:[/bold] {details['registry_version']} "
            f"(fetched {fetched:%Y-%m-%d %H:%M}, {state})"
        )
    else:
        lines.append("[bold]Registry:[/bold] [dim]not cached[/dim]")

    skills = details["cached_skills"]
    lines.append(f"[bold]Cached skills:[/bold] {len(skills)}")
    lines.extend(f"  {name}" for name in skills)

    print_panel("\n".join(lines), title="Cache")


@app.command()
def clear(
    name: Annotated[
        str | None,
        typer.Argument(help="Clear only this skill's bundle."),
    ] = None,
    registry: Annotated[
        bool,
        typer.Option(
            "--registry",
            help="Clear only the cached registry manifest.",
        ),
    ] = False,
    all_: Annotated[
        bool,
        typer.Option(
            "--all",
            help="Clear everything.",
        ),
    ] = False,
) -> None:
    """Clear cached data (everything by default)."""
    client = runtime.call(runtime.make_client)
    runtime.call(client.clear_cache, name, registry=registry, all_=all_)

    if name and not all_:
        print_success(f"Cleared cached skill '{name}'")
    elif registry and not all_:
        print_success("Cleared cached registry")
    else:
        print_success("Cleared cache")
    console.print(f"[dim]{client.cache.cache_dir}[/dim]")
