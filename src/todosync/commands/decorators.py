"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from todosync.models import AuthError
from todosync.services.session_service import get_session_provider
from todosync.utils import exit_codes
from todosync.utils.logger import get_logger
from todosync.utils.ui.formatters import format_error


def _require_session() -> None:
    """Require an owner for the active context.

    Local contexts always have one; remote contexts need a login.
    """
    if not get_session_provider().is_authenticated():
        format_error("Not logged in. Use 'todosync auth login' to authenticate.")
        raise typer.Exit(exit_codes.ERROR_AUTH_FAILURE)


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = exit_codes.ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("commands")
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_session()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                logger.info(
                    "command completed: %s (%.3fs)", cmd, time.monotonic() - start
                )
                return result

            except (AppError, AuthError) as e:
                exit_code = getattr(e, "exit_code", exit_codes.ERROR_AUTH_FAILURE)
                logger.error(
                    "command failed: %s (%.3fs) %s - %s",
                    cmd,
                    time.monotonic() - start,
                    exit_codes.get_exit_code_name(exit_code),
                    str(e),
                )
                format_error(str(e))
                raise typer.Exit(code=exit_code) from e

            except typer.Exit as e:
                if e.exit_code:
                    logger.info(
                        "command exited: %s (%.3fs) %s",
                        cmd,
                        time.monotonic() - start,
                        exit_codes.get_exit_code_name(e.exit_code),
                    )
                raise

            except Exception as e:
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    time.monotonic() - start,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
