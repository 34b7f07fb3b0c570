"""
agent-skills skill commands.

Usage:
    agent-skills install cloudflare-deploy -a cursor -a claude-code
    agent-skills remove cloudflare-deploy
    agent-skills list --global
    agent-skills available
    agent-skills show cloudflare-deploy
"""

from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from agent_skills.cli import runtime
from agent_skills.cli.output import (
    console,
    print_info,
    print_install_results,
    print_remove_results,
    truncate,
)
from agent_skills.install import InstallMethod, InstallResult, InstallScope
from agent_skills.registry import SkillMetadata
from agent_skills.update_check import check_for_updates

AgentsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--agent",
        "-a",
        help="Target agent (repeatable). Defaults to the configured agents.",
    ),
]
GlobalOption = Annotated[
    bool,
    typer.Option(
        "--global",
        "-g",
        help="Use per-user skill directories instead of the project's.",
    ),
]


def install(
    names: Annotated[
        list[str],
        typer.Argument(help="Skill names from the registry."),
    ],
    agents: AgentsOption = None,
    global_: GlobalOption = False,
    copy: Annotated[
        bool,
        typer.Option(
            "--copy",
            help="Copy files instead of symlinking to the cache.",
        ),
    ] = False,
    refresh: Annotated[
        bool,
        typer.Option(
            "--refresh",
            help="Refetch the registry and re-download bundles.",
        ),
    ] = False,
) -> None:
    """Install skills for one or more agents."""

    async def _install() -> tuple[list[InstallResult], str | None]:
        async with runtime.make_client() as client:
            options = client.default_options(
                scope=InstallScope.GLOBAL if global_ else None,
                method=InstallMethod.COPY if copy else None,
                agents=agents,
            )
            results = await client.install_skills(names, options, refresh=refresh)
            latest = None
            if client.config.general.check_updates:
                latest = await check_for_updates()
            return results, latest

    results, latest = runtime.run(_install())
    print_install_results(results)

    if latest:
        print_info(f"agent-skills [green]{latest}[/green] is available: pip install -U agent-skills")

    if any(not result.success for result in results):
        raise typer.Exit(1)


def remove(
    names: Annotated[
        list[str],
        typer.Argument(help="Skill names to remove."),
    ],
    agents: AgentsOption = None,
    global_: GlobalOption = False,
) -> None:
    """Remove installed skills."""
    client = runtime.call(runtime.make_client)
    targets = agents or client.config.install.agents
    results = runtime.call(client.remove_skills, names, targets, global_=global_)
    print_remove_results(results)

    if any(not result.success for result in results):
        raise typer.Exit(1)


def list_installed(
    agents: AgentsOption = None,
    global_: GlobalOption = False,
) -> None:
    """List installed skills per agent."""
    client = runtime.call(runtime.make_client)
    targets = agents or client.config.install.agents

    table = Table(title="Installed Skills")
    table.add_column("Agent", style="cyan")
    table.add_column("Skill")

    total = 0
    for agent in targets:
        for name in runtime.call(client.list_installed, agent, global_=global_):
            table.add_row(agent, name)
            total += 1

    if total == 0:
        console.print("[yellow]No skills installed.[/yellow]")
        console.print("[dim]Browse skills: agent-skills available[/dim]")
        return

    console.print(table)
    console.print(f"\n[dim]Total: {total} skill(s)[/dim]")


def available(
    refresh: Annotated[
        bool,
        typer.Option(
            "--refresh",
            help="Refetch the registry before listing.",
        ),
    ] = False,
) -> None:
    """List skills available in the registry."""

    async def _available() -> list[SkillMetadata]:
        async with runtime.make_client() as client:
            return await client.available_skills(refresh=refresh)

    skills = runtime.run(_available())

    if not skills:
        console.print("[yellow]The registry lists no skills.[/yellow]")
        return

    table = Table(title="Available Skills")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="dim")
    table.add_column("Description")

    for skill in skills:
        table.add_row(skill.name, skill.category, truncate(skill.description))

    console.print(table)
    console.print(f"\n[dim]Total: {len(skills)} skill(s)[/dim]")


def show(
    name: Annotated[
        str,
        typer.Argument(help="Skill name."),
    ],
) -> None:
    """Show registry details for a skill."""

    async def _show() -> SkillMetadata:
        async with runtime.make_client() as client:
            return await client.get_skill(name)

    skill = runtime.run(_show())

    lines = [
        f"[bold]Name:[/bold] {skill.name}",
        f"[bold]Description:[/bold] {skill.description or '(none)'}",
        f"[bold]Category:[/bold] {skill.category or '(none)'}",
    ]
    if skill.author:
        lines.append(f"[bold]Author:[/bold] {skill.author}")
    if skill.version:
        lines.append(f"[bold]Version:[/bold] {skill.version}")
    lines.append(f"[bold]Path:[/bold] {skill.path}")
    lines.append("")
    lines.append(f"[bold]Files ({len(skill.files)}):[/bold]")
    lines.extend(f"  {file}" for file in skill.files)

    console.print(Panel("\n".join(lines), title=f"Skill: {skill.name}"))
