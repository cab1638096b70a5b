"""Bootstrap for the list controller.

Reads the active context, picks the storage strategy and wires a
``TaskListController`` with the session's owner injected.
"""

from __future__ import annotations

from functools import lru_cache

from todosync.models.storage_strategy import StorageStrategyContext
from todosync.services.config_service import get_config_service
from todosync.services.notifications import ConsoleNotificationSink, NotificationSink
from todosync.services.session_service import SessionProvider
from todosync.services.task_list_controller import TaskListController


@lru_cache(maxsize=1)
def get_strategy_context() -> StorageStrategyContext:
    """Get a cached StorageStrategyContext for the active context."""
    config_service = get_config_service()
    return StorageStrategyContext.for_context(config_service.get_current_context())


def get_task_list_controller(notifier: NotificationSink | None = None) -> TaskListController:
    """Build a controller for the current session.

    The owner is resolved here and passed in; the controller itself never
    looks up global session state.
    """
    config_service = get_config_service()
    if notifier is None:
        notifier = ConsoleNotificationSink(
            show_success=config_service.config.notifications.show_success
        )
    session = SessionProvider(config_service).current()
    return TaskListController(
        get_strategy_context().task_gateway,
        notifier,
        owner_id=session.owner_id,
    )
