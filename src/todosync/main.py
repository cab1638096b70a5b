"""Main entry point for todosync."""

import typer

from todosync import __version__
from todosync.commands import auth, context, tasks
from todosync.utils.typer_helpers import SuggestingGroup
from todosync.utils.ui.console import get_console

app = typer.Typer(
    name="todosync",
    cls=SuggestingGroup,
    help="Task list with local or hosted storage and optimistic updates",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(context.app, name="context", help="Storage context management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]todosync[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
