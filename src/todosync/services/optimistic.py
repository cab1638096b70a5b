"""Optimistic intents: apply locally first, then confirm or roll back.

An intent pairs a local mutation of the task list with the gateway call
that makes it durable. The mutation is visible immediately; if the
gateway reports failure the list is put back using the snapshot taken
before the mutation.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from todosync.models import GatewayError, Task
from todosync.repositories import GatewayResult
from todosync.services.notifications import NotificationSink
from todosync.utils.logger import get_logger

Snapshot = tuple[Task, ...]


class IntentState(str, Enum):
    """Lifecycle of a single intent."""

    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    REJECTED = "rejected"
    FAILED = "failed"  # refresh only: nothing was applied, nothing to undo


class OptimisticIntent:
    """One user intent with its rollback path.

    Args:
        name: Short label used in logs (e.g. "toggle")
        read: Returns the current list
        write: Replaces the current list
        mutate: Builds the optimistic list from the snapshot
        effect: Gateway call confirming the mutation
        notifier: Sink for the user-facing outcome
        failure_message: Shown when the gateway call fails
        success_message: Shown on commit, if given
        rollback: Custom undo taking the snapshot; defaults to restoring it whole
    """

    def __init__(
        self,
        name: str,
        *,
        read: Callable[[], Snapshot],
        write: Callable[[list[Task]], None],
        mutate: Callable[[Snapshot], list[Task]],
        effect: Callable[[], Awaitable[GatewayResult]],
        notifier: NotificationSink,
        failure_message: str,
        success_message: str | None = None,
        rollback: Callable[[Snapshot], None] | None = None,
    ):
        self.name = name
        self._read = read
        self._write = write
        self._mutate = mutate
        self._effect = effect
        self._notifier = notifier
        self._failure_message = failure_message
        self._success_message = success_message
        self._rollback = rollback
        self.state = IntentState.IDLE
        self.error: GatewayError | None = None

    async def apply(self) -> IntentState:
        """Run the intent to completion. Never raises for gateway failures."""
        if self.state is not IntentState.IDLE:
            raise RuntimeError(f"Intent '{self.name}' already applied")

        logger = get_logger("optimistic")
        snapshot = self._read()
        self._write(self._mutate(snapshot))
        self.state = IntentState.PENDING

        try:
            result = await self._effect()
        except Exception as e:  # gateway broke its no-raise contract
            logger.exception("%s: gateway raised unexpectedly", self.name)
            result = GatewayResult.failure(str(e), operation=self.name)

        if result.ok:
            self.state = IntentState.COMMITTED
            logger.debug("%s committed", self.name)
            if self._success_message:
                self._notifier.success(self._success_message)
            return self.state

        self.error = result.error
        if self._rollback is not None:
            self._rollback(snapshot)
        else:
            self._write(list(snapshot))
        self.state = IntentState.ROLLED_BACK
        logger.warning("%s rolled back: %r", self.name, result.error)
        self._notifier.error(self._failure_message)
        return self.state
