"""Tests for task, session and config models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import NOW, make_task
from todosync.models import (
    AppConfig,
    Context,
    FilterMode,
    GatewayError,
    Session,
    Task,
    TaskCounts,
    TaskPatch,
)


class TestTask:
    def test_null_completed_is_false(self):
        task = Task(id="1", title="x", completed=None, owner_id="o", created_at=NOW)
        assert task.completed is False

    def test_timestamps_parse_from_iso_strings(self):
        task = Task(id="1", title="x", owner_id="o", created_at="2024-06-15T09:00:00+00:00")
        assert task.created_at == datetime(2024, 6, 15, 9, 0, tzinfo=UTC)
        assert task.updated_at is None

    def test_model_copy_leaves_original(self):
        task = make_task("1", completed=False)
        done = task.model_copy(update={"completed": True})
        assert task.completed is False
        assert done.completed is True
        assert done.created_at == task.created_at

    def test_missing_owner_rejected(self):
        with pytest.raises(PydanticValidationError):
            Task(id="1", title="x", created_at=NOW)


class TestTaskPatch:
    def test_changes_only_include_set_fields(self):
        assert TaskPatch(completed=False).changes() == {"completed": False}

    def test_changes_serialize_timestamps(self):
        patch = TaskPatch(title="t", updated_at=NOW)
        assert patch.changes() == {"title": "t", "updated_at": "2024-06-15T09:00:00Z"}

    def test_empty_patch(self):
        assert TaskPatch().changes() == {}


def test_filter_mode_values():
    assert [m.value for m in FilterMode] == ["all", "active", "completed"]
    assert FilterMode("active") is FilterMode.ACTIVE


def test_counts_cannot_be_negative():
    with pytest.raises(PydanticValidationError):
        TaskCounts(all=-1)


def test_session_authentication():
    assert Session().is_authenticated is False
    assert Session(owner_id="o").is_authenticated is True


def test_gateway_error_repr():
    error = GatewayError("boom", status_code=500, operation="delete_task")
    assert str(error) == "boom"
    assert "delete_task" in repr(error)


class TestConfigModels:
    def test_context_source_is_trimmed(self):
        ctx = Context(name="c", type="remote", source="  https://x.example.com ")
        assert ctx.source == "https://x.example.com"

    def test_blank_source_rejected(self):
        with pytest.raises(PydanticValidationError):
            Context(name="c", type="local", source="   ")

    def test_unknown_type_rejected(self):
        with pytest.raises(PydanticValidationError):
            Context(name="c", type="cloud", source="x")

    def test_get_current_context(self):
        config = AppConfig(
            current_context_name="b",
            contexts=[
                Context(name="a", type="local", source="/a.db"),
                Context(name="b", type="local", source="/b.db"),
            ],
        )
        assert config.get_current_context().source == "/b.db"

    def test_remove_missing_context(self):
        with pytest.raises(ValueError, match="not found"):
            AppConfig().remove_context("nope")
