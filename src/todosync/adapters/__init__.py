"""Adapters - TaskGateway implementations for different storage backends.

- sqlite: local SQLite file
- rest_api: hosted REST backend
"""

from .rest_api import RestApiTaskGateway
from .sqlite import SqliteTaskGateway

__all__ = [
    "RestApiTaskGateway",
    "SqliteTaskGateway",
]
