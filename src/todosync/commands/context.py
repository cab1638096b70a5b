"""Context commands: choose local or hosted storage."""

from typing import Literal

import typer
from rich.table import Table

from todosync.models import Context
from todosync.services.config_service import get_config_service
from todosync.utils import exit_codes
from todosync.utils.typer_helpers import SuggestingGroup
from todosync.utils.ui.console import get_console
from todosync.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Storage context management")
console = get_console()


@app.command("list")
@command_wrapper(auth_required=False)
def list_contexts() -> None:
    """List configured contexts."""
    config_service = get_config_service()
    current = config_service.config.current_context_name

    table = Table(box=None)
    table.add_column("")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Source", style="dim")
    for context in config_service.list_contexts():
        table.add_row(
            "*" if context.name == current else "",
            context.name,
            context.type,
            context.source,
        )
    console.print(table)


@app.command("use")
@command_wrapper(auth_required=False)
def use_context(name: str = typer.Argument(..., help="Context name")) -> None:
    """Switch the active context."""
    try:
        context = get_config_service().use_context(name)
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Switched to context '{context.name}' ({context.type})")


@app.command("create")
@command_wrapper(auth_required=False)
def create_context(
    name: str = typer.Argument(..., help="Context name"),
    ctx_type: str = typer.Option(..., "--type", help="Context type: local or remote"),
    source: str | None = typer.Option(
        None, "--source", help="Database path or API URL (optional for local)"
    ),
    description: str = typer.Option("", "--description", help="Context description"),
) -> None:
    """Add a storage context."""
    config_service = get_config_service()

    if ctx_type not in ("local", "remote"):
        raise AppError("type must be 'local' or 'remote'", exit_codes.ERROR_INVALID_ARGS)
    kind: Literal["local", "remote"] = ctx_type  # type: ignore[assignment]

    if not source:
        if kind == "remote":
            raise AppError(
                "--source is required for remote contexts", exit_codes.ERROR_INVALID_ARGS
            )
        source = str(config_service.data_dir / f"{name}.db")
        console.print(f"[dim]Using default database path: {source}[/dim]")

    try:
        config_service.add_context(
            Context(name=name, type=kind, source=source, description=description)
        )
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Created context '{name}' ({kind}: {source})")


@app.command("delete")
@command_wrapper(auth_required=False)
def delete_context(
    name: str = typer.Argument(..., help="Context name"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Remove a storage context and its stored credentials."""
    config_service = get_config_service()

    if not force and not typer.confirm(f"Remove context '{name}'?"):
        format_info("Cancelled")
        raise typer.Exit(exit_codes.SUCCESS)

    try:
        config_service.remove_context(name)
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Removed context '{name}'")
