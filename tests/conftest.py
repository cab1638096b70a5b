"""Shared test fixtures and configuration.

Keeps tests away from the real config, data and log directories.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from todosync.models import Task
from todosync.repositories import GatewayResult, TaskGateway

OWNER = "owner-1"
NOW = datetime(2024, 6, 15, 9, 0, 0, tzinfo=UTC)


def make_task(id_: str, title: str = "Task", completed: bool = False, **kwargs) -> Task:
    """Build a Task with sensible defaults."""
    data = {
        "id": id_,
        "title": title,
        "completed": completed,
        "owner_id": OWNER,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(kwargs)
    return Task(**data)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path, monkeypatch):
    """Point the application logger at tmp_path and reset it between tests."""
    import todosync.utils.logger as logger_mod

    monkeypatch.delenv("TODOSYNC_LOG_LEVEL", raising=False)
    logger_mod._logger = None
    app_logger = logging.getLogger("todosync")
    app_logger.handlers.clear()

    with patch("todosync.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield

    for handler in list(app_logger.handlers):
        handler.close()
    app_logger.handlers.clear()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from todosync.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path / "config")
    get_config_service.cache_clear()
    with patch("todosync.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("todosync.services.config_service.user_data_dir", return_value=tmpdir):
            svc = ConfigService()
            svc.load_config()
            yield svc
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Gateway doubles
# ---------------------------------------------------------------------------


@pytest.fixture()
def gateway():
    """A TaskGateway whose calls all succeed until told otherwise."""
    gw = MagicMock(spec=TaskGateway)
    gw.list_tasks = AsyncMock(return_value=GatewayResult.success([]))
    gw.create_task = AsyncMock(return_value=GatewayResult.success())
    gw.update_task = AsyncMock(return_value=GatewayResult.success())
    gw.delete_task = AsyncMock(return_value=GatewayResult.success())
    gw.delete_many = AsyncMock(return_value=GatewayResult.success())
    gw.close = AsyncMock()
    return gw


@pytest.fixture()
def failure():
    """Factory for failed gateway results."""

    def _make(message: str = "boom", status_code: int | None = 500):
        return GatewayResult.failure(message, status_code=status_code)

    return _make
