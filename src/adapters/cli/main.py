"""
adapters.cli.main - CLI adapter for the settings menu agent.

Uses the same ServiceFactory and AgentExecutor as the REST API so all
behaviour (role resolution, tool dispatch, menus) is identical.

Commands
--------
  ask     One-shot request through the agent
  chat    Interactive chat session (history kept for the session only)
  menu    Build a settings menu directly, without the LLM
  roles   Show the permission table for every role

Usage
-----
  python run_cli.py ask "connect my headphones" --role child
  python run_cli.py menu "bluetooth settings" --role parent --json
  python run_cli.py chat
"""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.json import JSON
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.tree import Tree

from agent.state import AgentResult, PlainTextResult, ToolOutcome, Turn
from agent.tools.base import ToolName
from application.observers import LoggingObserver
from application.services.role_resolver import (
    ROLE_PERMISSIONS,
    create_user_profile,
    resolve_profile,
)
from domain.exceptions import DomainError
from domain.models import MenuItemType, MenuNode, MenuTree, UserProfile, UserRole
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.logging_setup import configure_logging

__version__ = "0.1.0"

console = Console()
app = typer.Typer(
    help="Settings Menu Agent CLI",
    add_completion=False,
    no_args_is_help=True,
)

_ROLE_OPTION = typer.Option(
    None, "--role", "-r",
    case_sensitive=False,
    help="Caller role (child, parent, guest). Keywords in the request win.",
)

_TYPE_STYLE = {
    MenuItemType.MENU: "bold",
    MenuItemType.SUBMENU: "bold cyan",
    MenuItemType.TOGGLE: "green",
    MenuItemType.ACTION: "yellow",
    MenuItemType.INFO: "dim",
    MenuItemType.SEPARATOR: "dim",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _make_factory() -> ServiceFactory:
    config = Settings.from_env()
    configure_logging(config.log_level)
    return ServiceFactory(config)


def _profile(role: Optional[UserRole]) -> Optional[UserProfile]:
    return create_user_profile(role) if role is not None else None


def _add_node(parent: Tree, node: MenuNode) -> None:
    label = f"[{_TYPE_STYLE.get(node.type, '')}]{node.label}[/] [dim]({node.type.value})[/dim]"
    if node.badge:
        label += f" [reverse] {node.badge} [/reverse]"
    if node.description:
        label += f"\n[dim]{node.description}[/dim]"
    branch = parent.add(label)
    for child in node.children:
        _add_node(branch, child)


def render_menu(tree: MenuTree) -> Panel:
    """Render a MenuTree as a rich tree with its role context underneath."""
    root = Tree(f"[bold]{tree.root_label}[/bold]")
    for child in tree.children:
        _add_node(root, child)

    ctx = tree.role_context
    lines = [f"[bold]Path:[/bold] {' › '.join(tree.breadcrumb)}"]
    lines.append("[bold]Design intent:[/bold] " + ", ".join(ctx.design_intent))
    if ctx.restrictions:
        lines.append("[bold red]Restrictions:[/bold red] " + "; ".join(ctx.restrictions))

    table = Table.grid(padding=(1, 0))
    table.add_row(root)
    table.add_row("\n".join(lines))
    return Panel(table, title=f"Settings ({ctx.role.value})", border_style="blue")


def _print_result(result: AgentResult) -> None:
    if isinstance(result, PlainTextResult):
        console.print(Panel(Markdown(result.text), title="Assistant", border_style="green"))
    elif isinstance(result, ToolOutcome):
        if result.tool_name == ToolName.GENERATE_SETTINGS_MENU.value:
            console.print(render_menu(MenuTree.from_dict(result.payload)))
        else:
            console.print(Panel(
                JSON(json.dumps(result.payload)),
                title=result.tool_name,
                border_style="green",
            ))


def _describe(result: AgentResult) -> str:
    """One-line summary of a result, kept as the assistant turn in chat history."""
    if isinstance(result, PlainTextResult):
        return result.text
    return f"[{result.tool_name}] {json.dumps(result.payload)[:500]}"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"settings-menu-agent v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Settings Menu Agent."""


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def ask(
    utterance: str = typer.Argument(..., help="Your request."),
    role: Optional[UserRole] = _ROLE_OPTION,
) -> None:
    """Send one request through the agent."""
    factory = _make_factory()

    async def _run() -> AgentResult:
        agent = factory.create_agent()
        with console.status("[bold cyan]Thinking…", spinner="dots"):
            return await agent.run(
                utterance, caller_profile=_profile(role), observer=LoggingObserver(),
            )

    try:
        result = asyncio.run(_run())
    except DomainError as e:
        console.print(f"[bold red]Request failed:[/bold red] {e}")
        raise typer.Exit(code=1)
    _print_result(result)


@app.command()
def chat(role: Optional[UserRole] = _ROLE_OPTION) -> None:
    """Start an interactive chat session."""
    factory = _make_factory()
    profile = _profile(role)

    async def _run() -> None:
        agent = factory.create_agent()
        history: tuple[Turn, ...] = ()

        console.print(Panel(
            "[bold]Settings Menu Agent[/bold]\n"
            f"Role: [bold]{profile.role.value if profile else 'auto'}[/bold]\n"
            "Type your request, or [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        ))

        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if user_input.strip().lower() in ("exit", "quit", "q", "bye"):
                console.print("[dim]Goodbye![/dim]")
                break
            if not user_input.strip():
                continue

            try:
                with console.status("[bold cyan]Thinking…", spinner="dots"):
                    result = await agent.run(user_input, history, profile)
            except DomainError as e:
                console.print(f"[bold red]Request failed:[/bold red] {e}")
                continue

            console.print()
            _print_result(result)
            history = history + (Turn.user(user_input), Turn.assistant(_describe(result)))

    asyncio.run(_run())


@app.command()
def menu(
    utterance: str = typer.Argument(..., help="What the menu is for."),
    role: Optional[UserRole] = _ROLE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON tree."),
) -> None:
    """Build a settings menu directly, without calling the LLM."""
    factory = _make_factory()
    profile = resolve_profile(utterance, _profile(role))
    tree = factory.create_menu_engine().synthesize(utterance, profile)
    if as_json:
        typer.echo(json.dumps(tree.to_dict(), indent=2))
    else:
        console.print(render_menu(tree))


@app.command()
def roles() -> None:
    """Show the permission table for every role."""
    table = Table(box=box.SIMPLE, title="Role permissions")
    table.add_column("Permission", style="bold")
    for role in ROLE_PERMISSIONS:
        table.add_column(role.value)

    flags = list(next(iter(ROLE_PERMISSIONS.values())).to_dict(include_unset=True))
    rows = {role: perms.to_dict(include_unset=True) for role, perms in ROLE_PERMISSIONS.items()}
    for flag in flags:
        table.add_row(flag, *(_cell(rows[role][flag]) for role in ROLE_PERMISSIONS))
    console.print(table)


def _cell(value: object) -> str:
    if value is True:
        return "[green]yes[/green]"
    if value is False:
        return "[red]no[/red]"
    if value is None:
        return "[dim]-[/dim]"
    return str(value)
