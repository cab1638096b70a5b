"""Custom exceptions for todosync."""

from __future__ import annotations


class TodoSyncError(Exception):
    """Base exception for all todosync errors."""


class ValidationError(TodoSyncError):
    """Raised when user input is rejected before reaching a gateway."""


class SessionError(TodoSyncError):
    """Raised when an operation needs an authenticated owner and there is none."""


class AuthError(TodoSyncError):
    """Raised when the hosted auth API rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GatewayError(TodoSyncError):
    """Failure reported by a persistence gateway.

    Gateways never raise this; they return it inside a ``GatewayResult``.

    Attributes:
        status_code: HTTP status for remote failures, None otherwise
        operation: Gateway operation that failed (e.g. "delete_task")
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.operation = operation

    def __repr__(self) -> str:
        return (
            f"GatewayError({self.message!r}, status_code={self.status_code!r}, "
            f"operation={self.operation!r})"
        )
