"""Authentication commands."""

import typer
from rich.prompt import Prompt

from todosync.services.auth_service import AuthService
from todosync.services.session_service import get_session_provider
from todosync.utils.typer_helpers import SuggestingGroup
from todosync.utils.ui.console import get_console
from todosync.utils.ui.formatters import format_info, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
async def login(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Sign in to the hosted backend."""
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    service = AuthService()
    try:
        session = await service.sign_in(email, password)
    finally:
        await service.close()
    format_success(f"Logged in as {session.email or email}")


@app.command()
@command_wrapper(auth_required=False)
async def signup(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Create an account on the hosted backend."""
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    service = AuthService()
    try:
        session = await service.sign_up(email, password)
    finally:
        await service.close()
    if session is None:
        format_info("Check your inbox to confirm the address, then log in.")
    else:
        format_success(f"Signed up and logged in as {session.email or email}")


@app.command()
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Sign out and forget stored credentials."""
    service = AuthService()
    try:
        await service.sign_out()
    finally:
        await service.close()
    format_success("Logged out")


@app.command("reset-password")
@command_wrapper(auth_required=False)
async def reset_password(
    email: str = typer.Option(..., "--email", prompt=True, help="Email address"),
    redirect_to: str | None = typer.Option(
        None, "--redirect-to", help="URL the reset link should open"
    ),
) -> None:
    """Send a password reset email."""
    service = AuthService()
    try:
        await service.reset_password(email, redirect_to)
    finally:
        await service.close()
    format_success(f"Password reset email sent to {email}")


@app.command("update-password")
@command_wrapper
async def update_password(
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Set a new password for the signed-in user."""
    service = AuthService()
    try:
        await service.update_password(password)
    finally:
        await service.close()
    format_success("Password updated")


@app.command()
@command_wrapper(auth_required=False)
def whoami() -> None:
    """Show the current session."""
    session = get_session_provider().current()
    if not session.is_authenticated:
        format_info("Not logged in")
        return
    console.print(f"Owner: [cyan]{session.owner_id}[/cyan]")
    if session.email:
        console.print(f"Email: {session.email}")
