"""todosync domain models.

Pydantic models for tasks, sessions and configuration, plus the error
taxonomy shared by gateways and the list controller.
"""

from .config_models import (
    APIConfig,
    AppConfig,
    Context,
    NotificationConfig,
    OutputConfig,
)
from .exceptions import (
    AuthError,
    GatewayError,
    SessionError,
    TodoSyncError,
    ValidationError,
)
from .session import Session
from .task import FilterMode, Task, TaskCounts, TaskPatch

__all__ = [
    # Task models
    "Task",
    "TaskPatch",
    "TaskCounts",
    "FilterMode",
    # Session
    "Session",
    # Config models
    "AppConfig",
    "APIConfig",
    "Context",
    "NotificationConfig",
    "OutputConfig",
    # Errors
    "TodoSyncError",
    "ValidationError",
    "SessionError",
    "AuthError",
    "GatewayError",
]
