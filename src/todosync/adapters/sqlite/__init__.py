"""SQLite adapter - device-local task storage."""

from .connection import close_connections, get_connection
from .task_gateway import SqliteTaskGateway

__all__ = [
    "SqliteTaskGateway",
    "get_connection",
    "close_connections",
]
