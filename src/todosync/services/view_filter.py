"""Filtered views over the task list."""

from __future__ import annotations

from collections.abc import Sequence

from todosync.models import FilterMode, Task


def derive_view(tasks: Sequence[Task], mode: FilterMode | str = FilterMode.ALL) -> list[Task]:
    """Return the tasks visible under a filter mode.

    ``active`` keeps unfinished tasks, ``completed`` keeps finished ones,
    ``all`` keeps everything. Order is preserved and the input is never
    modified; the result is always a new list.

    Raises:
        ValueError: If ``mode`` is not a known filter mode
    """
    mode = FilterMode(mode)
    if mode is FilterMode.ACTIVE:
        return [task for task in tasks if not task.completed]
    if mode is FilterMode.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)
