"""Persistence gateway abstraction for todosync.

This module defines the port the list controller talks to. Adapters
(local SQLite, hosted REST API) implement it; the controller never knows
which one it is using.

Gateways report failure by returning a ``GatewayResult`` holding a
``GatewayError``. They do not raise for storage or transport failures.
Every operation is scoped by the owner id; there is no unscoped write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from todosync.models import GatewayError, Task, TaskPatch

T = TypeVar("T")


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Outcome of a gateway call: either data or an error, never both."""

    data: T | None = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T | None = None) -> GatewayResult[T]:
        return cls(data=data)

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        status_code: int | None = None,
        operation: str | None = None,
    ) -> GatewayResult[T]:
        return cls(
            error=GatewayError(message, status_code=status_code, operation=operation)
        )


class TaskGateway(ABC):
    """Abstract base class for task persistence.

    The contract mirrors a hosted table API: read-all, create, update,
    delete and bulk delete over the tasks of a single owner.
    """

    @abstractmethod
    async def list_tasks(self, owner_id: str) -> GatewayResult[list[Task]]:
        """List every task of an owner, newest first (created_at descending).

        Args:
            owner_id: Owner whose tasks are returned

        Returns:
            GatewayResult with the task list, or an error
        """
        raise NotImplementedError("TaskGateway.list_tasks() must be implemented by adapter")

    @abstractmethod
    async def create_task(self, task: Task, owner_id: str) -> GatewayResult[None]:
        """Persist a task built by the client.

        The supplied ``task.id`` must be stored as-is.

        Args:
            task: Fully populated task
            owner_id: Owner the task is written under
        """
        raise NotImplementedError(
            "TaskGateway.create_task() must be implemented by adapter"
        )

    @abstractmethod
    async def update_task(
        self, task_id: str, patch: TaskPatch, owner_id: str
    ) -> GatewayResult[None]:
        """Apply a partial update to one task.

        Args:
            task_id: Task to update
            patch: Fields to change
            owner_id: Owner the update is scoped to
        """
        raise NotImplementedError(
            "TaskGateway.update_task() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_task(self, task_id: str, owner_id: str) -> GatewayResult[None]:
        """Delete one task of an owner."""
        raise NotImplementedError(
            "TaskGateway.delete_task() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_many(
        self, task_ids: list[str], owner_id: str
    ) -> GatewayResult[None]:
        """Delete a set of tasks of an owner in one call."""
        raise NotImplementedError(
            "TaskGateway.delete_many() must be implemented by adapter"
        )

    async def close(self) -> None:
        """Release transport resources held by the gateway.

        Safe to call more than once; the gateway reopens on next use.
        """
