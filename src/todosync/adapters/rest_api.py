"""REST API adapter - TaskGateway over a hosted PostgREST ``todos`` table.

Rows are stored with ``user_id`` as the owner column; every request is
filtered by it so no write ever leaves the owner's scope.
"""

from __future__ import annotations

from typing import Any

import httpx

from todosync.models import Task, TaskPatch
from todosync.repositories import GatewayResult, TaskGateway
from todosync.services.api.client import APIClient
from todosync.utils.logger import get_logger

TODOS_PATH = "/rest/v1/todos"
_RETURN_MINIMAL = {"Prefer": "return=minimal"}


def row_to_task(row: dict[str, Any]) -> Task:
    """Convert a ``todos`` row to a Task."""
    return Task(
        id=row["id"],
        title=row["title"],
        completed=row.get("completed"),
        owner_id=row["user_id"],
        priority=row.get("priority"),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def task_to_row(task: Task, owner_id: str) -> dict[str, Any]:
    row = {
        "id": task.id,
        "title": task.title,
        "completed": task.completed,
        "user_id": owner_id,
        "created_at": task.created_at.isoformat(),
        "updated_at": task.updated_at.isoformat() if task.updated_at else None,
    }
    if task.priority is not None:
        row["priority"] = task.priority
    return row


def _in_filter(values: list[str]) -> str:
    quoted = ",".join(f'"{v}"' for v in values)
    return f"in.({quoted})"


class RestApiTaskGateway(TaskGateway):
    """Task gateway backed by the hosted REST API."""

    def __init__(self, client: APIClient | None = None):
        self._client = client

    @property
    def client(self) -> APIClient:
        """Get or create the API client (lazy so config loads on first use)."""
        if self._client is None:
            self._client = APIClient()
        return self._client

    def _failure(self, operation: str, error: Exception) -> GatewayResult:
        status_code = None
        message = str(error)
        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            try:
                body = error.response.json()
                message = body.get("message") or body.get("error") or message
            except ValueError:
                pass
        get_logger("gateway.rest").error(
            "rest %s failed (status=%s): %s", operation, status_code, message
        )
        return GatewayResult.failure(message, status_code=status_code, operation=operation)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def list_tasks(self, owner_id: str) -> GatewayResult[list[Task]]:
        params = {
            "select": "*",
            "user_id": f"eq.{owner_id}",
            "order": "created_at.desc",
        }
        try:
            response = await self.client.get(TODOS_PATH, params=params)
            tasks = [row_to_task(row) for row in response.json() or []]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            return self._failure("list_tasks", e)
        return GatewayResult.success(tasks)

    async def create_task(self, task: Task, owner_id: str) -> GatewayResult[None]:
        try:
            await self.client.post(
                TODOS_PATH, json=[task_to_row(task, owner_id)], headers=_RETURN_MINIMAL
            )
        except httpx.HTTPError as e:
            return self._failure("create_task", e)
        return GatewayResult.success()

    async def update_task(
        self, task_id: str, patch: TaskPatch, owner_id: str
    ) -> GatewayResult[None]:
        params = {"id": f"eq.{task_id}", "user_id": f"eq.{owner_id}"}
        try:
            await self.client.patch(
                TODOS_PATH, json=patch.changes(), params=params, headers=_RETURN_MINIMAL
            )
        except httpx.HTTPError as e:
            return self._failure("update_task", e)
        return GatewayResult.success()

    async def delete_task(self, task_id: str, owner_id: str) -> GatewayResult[None]:
        params = {"id": f"eq.{task_id}", "user_id": f"eq.{owner_id}"}
        try:
            await self.client.delete(TODOS_PATH, params=params, headers=_RETURN_MINIMAL)
        except httpx.HTTPError as e:
            return self._failure("delete_task", e)
        return GatewayResult.success()

    async def delete_many(
        self, task_ids: list[str], owner_id: str
    ) -> GatewayResult[None]:
        if not task_ids:
            return GatewayResult.success()
        params = {"id": _in_filter(task_ids), "user_id": f"eq.{owner_id}"}
        try:
            await self.client.delete(TODOS_PATH, params=params, headers=_RETURN_MINIMAL)
        except httpx.HTTPError as e:
            return self._failure("delete_many", e)
        return GatewayResult.success()
