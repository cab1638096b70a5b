"""Optimistic task list controller.

The controller owns the in-memory task list of one session. Every user
intent changes that list immediately and then asks the gateway to make the
change durable; a failed gateway call rolls the change back and emits an
error notification. Public intents never raise.

Concurrency model: intents run on one event loop and may interleave at
their await points. Calls on the same task are neither queued nor merged,
and a late response is not reordered against an earlier one; whichever
resolves last decides the final local state.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from todosync.models import (
    FilterMode,
    Session,
    SessionError,
    Task,
    TaskCounts,
    TaskPatch,
    ValidationError,
)
from todosync.repositories import TaskGateway
from todosync.services.notifications import NotificationSink
from todosync.services.optimistic import IntentState, OptimisticIntent, Snapshot
from todosync.services.view_filter import derive_view
from todosync.utils.logger import get_logger
from todosync.utils.uuid_utils import generate_uuid, resolve_prefix

Confirm = Callable[[], bool | Awaitable[bool]]


def utcnow() -> datetime:
    return datetime.now(UTC)


class TaskListController:
    """Single holder of the task list for the current owner.

    Args:
        gateway: Persistence gateway every intent is confirmed against
        notifier: Receives success and error notifications
        owner_id: Authenticated owner, or None until a session is bound
        id_factory: Generates ids for new tasks
        clock: Returns the current time for timestamps
    """

    def __init__(
        self,
        gateway: TaskGateway,
        notifier: NotificationSink,
        owner_id: str | None = None,
        *,
        id_factory: Callable[[], str] = generate_uuid,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.gateway = gateway
        self.notifier = notifier
        self._owner_id = owner_id
        self._id_factory = id_factory
        self._clock = clock
        self._tasks: list[Task] = []
        self.draft = ""
        self.loading = True
        self.logger = get_logger("controller")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner_id(self) -> str | None:
        return self._owner_id

    @property
    def tasks(self) -> list[Task]:
        """Copy of the current optimistic list."""
        return list(self._tasks)

    def view(self, mode: FilterMode | str = FilterMode.ALL) -> list[Task]:
        """Tasks visible under ``mode``.

        Raises:
            ValueError: If ``mode`` is not a known filter mode
        """
        return derive_view(self._tasks, mode)

    def counts(self) -> TaskCounts:
        active = sum(1 for task in self._tasks if not task.completed)
        return TaskCounts(
            all=len(self._tasks), active=active, completed=len(self._tasks) - active
        )

    def find(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    async def close(self) -> None:
        """Release the gateway's transport; the controller stays usable."""
        await self.gateway.close()

    def resolve_id(self, prefix: str) -> str | None:
        """Resolve a full task id from a unique prefix.

        Raises:
            ValueError: If the prefix is ambiguous
        """
        return resolve_prefix(prefix, (task.id for task in self._tasks))

    # ------------------------------------------------------------------
    # List plumbing shared by every intent
    # ------------------------------------------------------------------

    def _snapshot(self) -> Snapshot:
        return tuple(self._tasks)

    def _replace(self, tasks: list[Task]) -> None:
        self._tasks = tasks

    @staticmethod
    def _with_changes(tasks, task_id: str, **changes) -> list[Task]:
        """Copy of ``tasks`` with one task updated in place."""
        return [
            task.model_copy(update=changes) if task.id == task_id else task
            for task in tasks
        ]

    def _replace_task(self, task_id: str, **changes) -> None:
        self._tasks = self._with_changes(self._tasks, task_id, **changes)

    def _intent(self, name: str, **kwargs) -> OptimisticIntent:
        return OptimisticIntent(
            name,
            read=self._snapshot,
            write=self._replace,
            notifier=self.notifier,
            **kwargs,
        )

    def _require_owner(self, action: str) -> str | None:
        if self._owner_id is None:
            error = SessionError(f"Sign in to {action}")
            self.logger.info("%s rejected: no session", action)
            self.notifier.error(str(error))
            return None
        return self._owner_id

    def _validate_title(self, title: str | None) -> str | None:
        cleaned = (title or "").strip()
        if not cleaned:
            error = ValidationError("Task title cannot be empty")
            self.logger.debug("title rejected: %r", title)
            self.notifier.error(str(error))
            return None
        return cleaned

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def bind_session(self, session: Session) -> IntentState:
        """Follow a session change.

        A different owner drops the current list. While the session is still
        loading nothing is fetched.
        """
        if session.loading:
            return IntentState.IDLE
        if session.owner_id != self._owner_id:
            self.logger.info("owner changed, clearing %d tasks", len(self._tasks))
            self._owner_id = session.owner_id
            self._tasks = []
            self.loading = True
        if self._owner_id is None:
            return IntentState.IDLE
        return await self.refresh()

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    async def refresh(self, quiet: bool = False) -> IntentState:
        """Replace the whole list with the gateway's current state.

        Args:
            quiet: Skip the "Loaded N tasks" notification (errors still show)
        """
        owner_id = self._require_owner("load tasks")
        if owner_id is None:
            return IntentState.REJECTED

        try:
            result = await self.gateway.list_tasks(owner_id)
        except Exception as e:  # gateway broke its no-raise contract
            self.logger.exception("refresh: gateway raised unexpectedly")
            self.notifier.error(f"Failed to load tasks: {e}")
            return IntentState.FAILED

        if not result.ok:
            self.logger.warning("refresh failed: %r", result.error)
            self.notifier.error("Failed to load tasks")
            return IntentState.FAILED

        seen: set[str] = set()
        tasks = []
        for task in result.data or []:
            if task.owner_id != owner_id or task.id in seen:
                self.logger.warning("refresh dropped task %s", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        self._tasks = tasks
        self.loading = False
        self.logger.info("refresh loaded %d tasks", len(tasks))
        if tasks and not quiet:
            self.notifier.success(f"Loaded {len(tasks)} tasks")
        return IntentState.COMMITTED

    async def add(self, title: str | None = None) -> IntentState:
        """Create a task from ``title`` (or the current draft) and prepend it."""
        cleaned = self._validate_title(self.draft if title is None else title)
        if cleaned is None:
            return IntentState.REJECTED
        owner_id = self._require_owner("add tasks")
        if owner_id is None:
            return IntentState.REJECTED

        now = self._clock()
        task = Task(
            id=self._id_factory(),
            title=cleaned,
            completed=False,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )

        def discard(_: Snapshot) -> None:
            self._tasks = [t for t in self._tasks if t.id != task.id]

        intent = self._intent(
            "add",
            mutate=lambda snapshot: [task, *snapshot],
            effect=lambda: self.gateway.create_task(task, owner_id),
            rollback=discard,
            failure_message="Failed to add task",
            success_message=f"Added '{cleaned}'",
        )
        self.draft = ""
        return await intent.apply()

    async def toggle(self, task: Task | str) -> IntentState:
        """Flip a task's completion flag."""
        task_id = task.id if isinstance(task, Task) else task
        current = self.find(task_id)
        if current is None:
            self.logger.debug("toggle skipped: %s not in list", task_id)
            return IntentState.REJECTED
        owner_id = self._require_owner("update tasks")
        if owner_id is None:
            return IntentState.REJECTED

        previous = current.completed
        now = self._clock()

        intent = self._intent(
            "toggle",
            mutate=lambda snapshot: self._with_changes(
                snapshot, task_id, completed=not previous, updated_at=now
            ),
            effect=lambda: self.gateway.update_task(
                task_id, TaskPatch(completed=not previous, updated_at=now), owner_id
            ),
            rollback=lambda snapshot: self._restore_fields(
                snapshot, task_id, "completed", "updated_at"
            ),
            failure_message="Failed to update task",
        )
        return await intent.apply()

    async def edit(self, task_id: str, title: str) -> IntentState:
        """Rename a task in place."""
        current = self.find(task_id)
        if current is None:
            self.logger.debug("edit skipped: %s not in list", task_id)
            return IntentState.REJECTED
        cleaned = self._validate_title(title)
        if cleaned is None:
            return IntentState.REJECTED
        owner_id = self._require_owner("update tasks")
        if owner_id is None:
            return IntentState.REJECTED

        now = self._clock()

        intent = self._intent(
            "edit",
            mutate=lambda snapshot: self._with_changes(
                snapshot, task_id, title=cleaned, updated_at=now
            ),
            effect=lambda: self.gateway.update_task(
                task_id, TaskPatch(title=cleaned, updated_at=now), owner_id
            ),
            rollback=lambda snapshot: self._restore_fields(
                snapshot, task_id, "title", "updated_at"
            ),
            failure_message="Failed to update task",
        )
        return await intent.apply()

    async def delete(self, task_id: str) -> IntentState:
        """Remove a task; a failed call restores the whole prior list."""
        if self.find(task_id) is None:
            self.logger.debug("delete skipped: %s not in list", task_id)
            return IntentState.REJECTED
        owner_id = self._require_owner("delete tasks")
        if owner_id is None:
            return IntentState.REJECTED

        intent = self._intent(
            "delete",
            mutate=lambda snapshot: [t for t in snapshot if t.id != task_id],
            effect=lambda: self.gateway.delete_task(task_id, owner_id),
            failure_message="Failed to delete task",
        )
        return await intent.apply()

    async def clear_all(self, confirm: Confirm) -> IntentState:
        """Delete every task after the user confirms.

        Args:
            confirm: Yes/no gate, sync or async; declining or raising changes nothing
        """
        if not self._tasks:
            return IntentState.REJECTED

        try:
            answer = confirm()
            if inspect.isawaitable(answer):
                answer = await answer
        except Exception:
            self.logger.exception("clear_all confirmation failed, treating as declined")
            answer = False
        if not answer:
            self.logger.info("clear_all declined")
            return IntentState.REJECTED

        owner_id = self._require_owner("delete tasks")
        if owner_id is None:
            return IntentState.REJECTED

        task_ids = [task.id for task in self._tasks]
        intent = self._intent(
            "clear_all",
            mutate=lambda _: [],
            effect=lambda: self.gateway.delete_many(task_ids, owner_id),
            failure_message="Failed to delete tasks",
            success_message="Deleted all tasks",
        )
        return await intent.apply()

    def _restore_fields(self, snapshot: Snapshot, task_id: str, *fields: str) -> None:
        """Put back selected fields of one task as they were in ``snapshot``.

        Other tasks keep whatever state concurrent intents gave them. A task
        removed in the meantime stays removed.
        """
        for original in snapshot:
            if original.id == task_id:
                self._replace_task(
                    task_id, **{field: getattr(original, field) for field in fields}
                )
                return
