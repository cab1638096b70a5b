"""SQLite implementation of TaskGateway (device-local storage)."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from todosync.adapters.sqlite.connection import get_connection
from todosync.models import Task, TaskPatch
from todosync.repositories import GatewayResult, TaskGateway
from todosync.utils.logger import get_logger

_PATCH_COLUMNS = {"title", "completed", "updated_at"}


def row_to_task(row: sqlite3.Row | dict[str, Any]) -> Task:
    """Convert a ``todos`` row to a Task."""
    data = dict(row)
    return Task(
        id=data["id"],
        title=data["title"],
        completed=bool(data["completed"]),
        owner_id=data["user_id"],
        priority=data.get("priority"),
        created_at=data["created_at"],
        updated_at=data.get("updated_at"),
    )


class SqliteTaskGateway(TaskGateway):
    """Task gateway backed by a local SQLite file."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize SQLite task gateway.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def _failure(self, operation: str, error: Exception) -> GatewayResult:
        get_logger("gateway.sqlite").error("sqlite %s failed: %s", operation, error)
        if self._connection is not None:
            self._connection.rollback()
        return GatewayResult.failure(str(error), operation=operation)

    async def list_tasks(self, owner_id: str) -> GatewayResult[list[Task]]:
        try:
            cursor = self.connection.execute(
                "SELECT * FROM todos WHERE user_id = ? ORDER BY created_at DESC",
                (owner_id,),
            )
            return GatewayResult.success([row_to_task(row) for row in cursor.fetchall()])
        except (sqlite3.Error, OSError) as e:
            return self._failure("list_tasks", e)

    async def create_task(self, task: Task, owner_id: str) -> GatewayResult[None]:
        try:
            self.connection.execute(
                """
                INSERT INTO todos (id, title, completed, user_id, priority, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.title,
                    int(task.completed),
                    owner_id,
                    task.priority,
                    task.created_at.isoformat(),
                    task.updated_at.isoformat() if task.updated_at else None,
                ),
            )
            self.connection.commit()
            return GatewayResult.success()
        except (sqlite3.Error, OSError) as e:
            return self._failure("create_task", e)

    async def update_task(
        self, task_id: str, patch: TaskPatch, owner_id: str
    ) -> GatewayResult[None]:
        changes = {k: v for k, v in patch.changes().items() if k in _PATCH_COLUMNS}
        if not changes:
            return GatewayResult.success()
        if "completed" in changes:
            changes["completed"] = int(changes["completed"])

        assignments = ", ".join(f"{column} = ?" for column in changes)
        try:
            cursor = self.connection.execute(
                f"UPDATE todos SET {assignments} WHERE id = ? AND user_id = ?",
                (*changes.values(), task_id, owner_id),
            )
            self.connection.commit()
        except (sqlite3.Error, OSError) as e:
            return self._failure("update_task", e)

        if cursor.rowcount == 0:
            return GatewayResult.failure(
                f"Task {task_id} not found", operation="update_task"
            )
        return GatewayResult.success()

    async def delete_task(self, task_id: str, owner_id: str) -> GatewayResult[None]:
        try:
            self.connection.execute(
                "DELETE FROM todos WHERE id = ? AND user_id = ?", (task_id, owner_id)
            )
            self.connection.commit()
            return GatewayResult.success()
        except (sqlite3.Error, OSError) as e:
            return self._failure("delete_task", e)

    async def delete_many(
        self, task_ids: list[str], owner_id: str
    ) -> GatewayResult[None]:
        if not task_ids:
            return GatewayResult.success()
        placeholders = ", ".join("?" for _ in task_ids)
        try:
            self.connection.execute(
                f"DELETE FROM todos WHERE user_id = ? AND id IN ({placeholders})",
                (owner_id, *task_ids),
            )
            self.connection.commit()
            return GatewayResult.success()
        except (sqlite3.Error, OSError) as e:
            return self._failure("delete_many", e)
