"""
Strategy Pattern: storage backend selection.

The active context decides once, at startup, which gateway the list
controller talks to. Nothing downstream branches on the backend type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from todosync.models.config_models import Context
from todosync.repositories import TaskGateway


class StorageStrategy(ABC):
    """Provides the gateway implementation for one storage backend."""

    @abstractmethod
    def get_task_gateway(self) -> TaskGateway:
        """Get task gateway implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class LocalStorageStrategy(StorageStrategy):
    """Local SQLite storage strategy."""

    def __init__(self, db_path: str):
        from todosync.adapters.sqlite import SqliteTaskGateway

        self.db_path = db_path
        self._gateway = SqliteTaskGateway(db_path=db_path)

    def get_task_gateway(self) -> TaskGateway:
        return self._gateway

    @property
    def storage_type(self) -> str:
        return "local"


class RemoteStorageStrategy(StorageStrategy):
    """Hosted REST API storage strategy."""

    def __init__(self):
        from todosync.adapters.rest_api import RestApiTaskGateway

        self._gateway = RestApiTaskGateway()

    def get_task_gateway(self) -> TaskGateway:
        return self._gateway

    @property
    def storage_type(self) -> str:
        return "remote"


class StorageStrategyContext:
    """Holds the strategy chosen for the active context."""

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @classmethod
    def for_context(cls, context: Context) -> StorageStrategyContext:
        if context.type == "remote":
            return cls(RemoteStorageStrategy())
        return cls(LocalStorageStrategy(db_path=context.source))

    @property
    def task_gateway(self) -> TaskGateway:
        return self._strategy.get_task_gateway()

    @property
    def storage_type(self) -> str:
        return self._strategy.storage_type
