"""Task commands: list, add, toggle, edit, delete, clear."""

import typer

from todosync.models import FilterMode
from todosync.services.config_service import get_config_service
from todosync.services.context_manager import get_task_list_controller
from todosync.services.optimistic import IntentState
from todosync.services.task_list_controller import TaskListController
from todosync.utils import exit_codes
from todosync.utils.typer_helpers import SuggestingGroup
from todosync.utils.ui.console import get_console
from todosync.utils.ui.formatters import FILTER_TITLES, format_info, format_output

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()


async def _load(controller: TaskListController, quiet: bool = True) -> None:
    """Load the owner's tasks into ``controller``."""
    state = await controller.refresh(quiet=quiet)
    if state is not IntentState.COMMITTED:
        raise typer.Exit(exit_codes.ERROR_NETWORK)


def _resolve(controller: TaskListController, task_id: str) -> str:
    try:
        resolved = controller.resolve_id(task_id)
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    if resolved is None:
        raise AppError(f"Task '{task_id}' not found", exit_codes.ERROR_NOT_FOUND)
    return resolved


def _exit_for(state: IntentState) -> None:
    if state is IntentState.ROLLED_BACK:
        raise typer.Exit(exit_codes.ERROR_NETWORK)
    if state is IntentState.REJECTED:
        raise typer.Exit(exit_codes.ERROR_INVALID_ARGS)


@app.command("list")
@command_wrapper
async def list_tasks(
    filter_mode: FilterMode = typer.Option(
        FilterMode.ALL, "--filter", "-f", help="Which tasks to show"
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (pretty/json/yaml/quiet); defaults to output.format",
    ),
    json_opt: bool = typer.Option(
        False, "--json", help="Output as JSON (alias for --output json)"
    ),
    compact: bool = typer.Option(
        False, "--compact", help="Compact output (also on when output.compact is set)"
    ),
) -> None:
    """List tasks, newest first."""
    output_config = get_config_service().config.output
    if json_opt:
        output = "json"
    if output is None:
        output = output_config.format
    compact = compact or output_config.compact

    controller = get_task_list_controller()
    try:
        await _load(controller)
        tasks = controller.view(filter_mode)
    finally:
        await controller.close()
    format_output(
        [task.model_dump(mode="json") for task in tasks],
        output,
        compact=compact,
        title=FILTER_TITLES[filter_mode.value],
    )


@app.command("add")
@command_wrapper
async def add(
    title: list[str] = typer.Argument(..., help="Task title"),
) -> None:
    """Add a task."""
    controller = get_task_list_controller()
    try:
        await _load(controller)
        controller.draft = " ".join(title)
        state = await controller.add()
    finally:
        await controller.close()
    _exit_for(state)


@app.command("toggle")
@command_wrapper
async def toggle(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
) -> None:
    """Mark a task done, or not done again."""
    controller = get_task_list_controller()
    try:
        await _load(controller)
        resolved = _resolve(controller, task_id)
        state = await controller.toggle(resolved)
    finally:
        await controller.close()
    _exit_for(state)
    task = controller.find(resolved)
    if task is not None:
        status = "done" if task.completed else "not done"
        console.print(f"'{task.title}' marked {status}.")


@app.command("edit")
@command_wrapper
async def edit(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
    title: list[str] = typer.Argument(..., help="New title"),
) -> None:
    """Rename a task."""
    controller = get_task_list_controller()
    try:
        await _load(controller)
        resolved = _resolve(controller, task_id)
        state = await controller.edit(resolved, " ".join(title))
    finally:
        await controller.close()
    _exit_for(state)
    console.print("Done.")


@app.command("delete")
@command_wrapper
async def delete(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    controller = get_task_list_controller()
    try:
        await _load(controller)
        resolved = _resolve(controller, task_id)
        task = controller.find(resolved)

        if not force and not typer.confirm(f"Delete task '{task.title}'?"):
            format_info("Cancelled")
            raise typer.Exit(exit_codes.SUCCESS)

        state = await controller.delete(resolved)
    finally:
        await controller.close()
    _exit_for(state)
    console.print("Done.")


@app.command("clear")
@command_wrapper
async def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every task."""
    controller = get_task_list_controller()
    try:
        await _load(controller)
        if not controller.tasks:
            format_info("Nothing to delete")
            return

        count = len(controller.tasks)
        state = await controller.clear_all(
            lambda: yes or typer.confirm(f"Delete all {count} tasks?")
        )
    finally:
        await controller.close()
    if state is IntentState.REJECTED:
        format_info("Cancelled")
        return
    _exit_for(state)
