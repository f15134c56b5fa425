"""CLI commands for intent-relay."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from intent_relay.adapters.studio_console import StudioConsole
from intent_relay.bootstrap import build_default_service_container, build_pipeline
from intent_relay.core.config import settings
from intent_relay.services import ServiceContainer
from intent_relay.services.pipeline import IntentPipeline

main_app = typer.Typer(
    name="intent-relay",
    help="Classify requests and relay them to the right handlers",
    no_args_is_help=True,
)
console = Console()

EXIT_WORDS = frozenset({"exit", "quit"})
STATE_COMMAND = ":state"


def _build() -> tuple[IntentPipeline, ServiceContainer]:
    """Build the pipeline and its container from process settings."""
    container = build_default_service_container(app_settings=settings)
    return build_pipeline(container, settings), container


def _render_console(studio: Optional[StudioConsole]) -> None:
    if studio is None:
        console.print("[dim]No studio console is active for this command domain.[/dim]")
        return
    table = Table(title="Studio Console")
    table.add_column("Channel", style="cyan")
    table.add_column("Name")
    table.add_column("Color")
    table.add_column("Route")
    for number, state in sorted(studio.channels().items()):
        table.add_row(str(number), state.name, f"[{state.color}]{state.color}[/]", state.route)
    console.print(table)


@main_app.command("ask")
def ask(
    text: str = typer.Argument(..., help="Request to classify and handle"),
) -> None:
    """Handle a single request and print the reply."""
    pipeline, _ = _build()
    console.print(pipeline.handle(text), markup=False, highlight=False)


@main_app.command("shell")
def shell() -> None:
    """Read requests interactively until 'exit' or 'quit'."""
    pipeline, container = _build()
    console.print(
        f"[bold]intent-relay[/bold] ({settings.RELAY_COMMAND_DOMAIN} domain). "
        f"Type '{STATE_COMMAND}' to show the console, 'exit' to leave."
    )
    while True:
        try:
            text = console.input("[cyan]> [/cyan]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        stripped = text.strip()
        if not stripped:
            continue
        if stripped.lower() in EXIT_WORDS:
            break
        if stripped == STATE_COMMAND:
            _render_console(container.console)
            continue
        console.print(pipeline.handle(stripped), markup=False, highlight=False)
    console.print("[dim]Goodbye.[/dim]")


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
