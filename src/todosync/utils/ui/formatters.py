"""Output formatters for different formats."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

console = Console()

FILTER_TITLES = {
    "all": "All",
    "active": "Active",
    "completed": "Completed",
}


def calculate_unique_prefixes(task_ids: list[str], minimum: int = 4) -> dict[str, int]:
    """Calculate the shortest unique prefix length for each task id.

    Args:
        task_ids: Full task ids
        minimum: Shortest prefix ever shown

    Returns:
        Dict mapping task_id -> prefix length
    """
    result = {}
    for task_id in task_ids:
        for length in range(minimum, len(task_id) + 1):
            prefix = task_id[:length]
            if not any(
                other != task_id and other.startswith(prefix) for other in task_ids
            ):
                result[task_id] = length
                break
        else:
            result[task_id] = len(task_id)
    return result


def format_output(
    data: Any,
    output_format: str = "pretty",
    compact: bool = False,
    title: str | None = None,
) -> None:
    """Format and display a list of task dicts based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    elif output_format == "quiet":
        for item in data:
            print(item["id"])
    else:
        format_tasks_pretty(data, compact=compact, title=title)


def format_tasks_pretty(
    tasks: list[dict], compact: bool = False, title: str | None = None
) -> None:
    """Format tasks as a rich table with a short header."""
    active = [t for t in tasks if not t.get("completed")]

    header = Text()
    header.append(f"📋 {title or 'Tasks'} ", style="bold cyan")
    header.append(f"({len(active)} active, {len(tasks) - len(active)} done)", style="dim")
    console.print(header)

    if not tasks:
        console.print("[dim]No tasks yet. Add one with 'todosync add'.[/dim]")
        return

    prefixes = calculate_unique_prefixes([t["id"] for t in tasks])

    table = Table(show_header=not compact, box=None, pad_edge=False)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("", no_wrap=True)
    table.add_column("Title")
    if not compact:
        table.add_column("Created", style="dim", no_wrap=True)

    for task in tasks:
        done = bool(task.get("completed"))
        row = [
            task["id"][: prefixes[task["id"]]],
            "[green]✓[/green]" if done else "○",
            f"[strike dim]{task['title']}[/strike dim]" if done else task["title"],
        ]
        if not compact:
            row.append(format_relative_time(task.get("created_at")))
        table.add_row(*row)

    console.print(table)


def format_relative_time(value: str | datetime | None) -> str:
    """Format timestamp as relative time."""
    if not value:
        return ""

    try:
        if isinstance(value, datetime):
            date = value
        else:
            date = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return ""

    now = datetime.now(UTC) if date.tzinfo is not None else datetime.now()
    seconds = (now - date).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds / 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds / 3600)}h ago"
    return f"{int(seconds / 86400)}d ago"


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
