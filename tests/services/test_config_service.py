"""Unit tests for ConfigService."""

from __future__ import annotations

import json
import stat

import pytest

from todosync.models import Context
from todosync.services.config_service import DEFAULT_REMOTE_SOURCE, ConfigService


class TestDefaults:
    def test_first_load_writes_default_config(self, tmp_config):
        assert tmp_config.config_path.exists()
        names = [ctx.name for ctx in tmp_config.list_contexts()]
        assert names == ["local", "cloud"]
        assert tmp_config.get_current_context().name == "local"

    def test_local_context_points_at_data_dir(self, tmp_config):
        local = tmp_config.config.get_context("local")
        assert local.type == "local"
        assert local.source.endswith("todosync.db")

    def test_cloud_context_uses_default_source(self, tmp_config):
        cloud = tmp_config.config.get_context("cloud")
        assert cloud.type == "remote"
        assert cloud.source == DEFAULT_REMOTE_SOURCE

    def test_config_file_is_private(self, tmp_config):
        mode = stat.S_IMODE(tmp_config.config_path.stat().st_mode)
        assert mode == 0o600

    def test_reload_from_disk(self, tmp_config):
        tmp_config.use_context("cloud")
        fresh = ConfigService()
        assert fresh.get_current_context().name == "cloud"

    def test_corrupt_file_raises_runtime_error(self, tmp_config):
        tmp_config.config_path.write_text("{not json")
        with pytest.raises(RuntimeError, match="Failed to load config"):
            ConfigService().load_config()


class TestContexts:
    def test_use_unknown_context_raises(self, tmp_config):
        with pytest.raises(ValueError, match="not found"):
            tmp_config.use_context("nowhere")

    def test_add_and_remove_context(self, tmp_config):
        tmp_config.add_context(
            Context(name="work", type="remote", source="https://work.example.com")
        )
        assert "work" in [c.name for c in tmp_config.list_contexts()]

        tmp_config.remove_context("work")
        assert "work" not in [c.name for c in tmp_config.list_contexts()]

    def test_add_duplicate_context_raises(self, tmp_config):
        with pytest.raises(ValueError, match="already exists"):
            tmp_config.add_context(Context(name="local", type="local", source="/tmp/x.db"))

    def test_set_context_user_id_persists(self, tmp_config):
        tmp_config.set_context_user_id("owner-42")
        raw = json.loads(tmp_config.config_path.read_text())
        local = next(c for c in raw["contexts"] if c["name"] == "local")
        assert local["user_id"] == "owner-42"

    def test_removing_active_context_raises(self, tmp_config):
        tmp_config.use_context("cloud")
        with pytest.raises(ValueError, match="is active"):
            tmp_config.remove_context("cloud")
        assert "cloud" in [c.name for c in tmp_config.list_contexts()]


class TestCredentials:
    def test_save_and_load_for_current_context(self, tmp_config):
        tmp_config.save_credentials("tok", "ref", user_id="u1", email="a@b.c")
        assert tmp_config.load_credentials() == {
            "token": "tok",
            "refresh_token": "ref",
            "user_id": "u1",
            "email": "a@b.c",
        }

    def test_credentials_file_is_private(self, tmp_config):
        tmp_config.save_credentials("tok", context_name="cloud")
        path = tmp_config.credentials_dir / "cloud.json"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_credentials(self, tmp_config):
        assert tmp_config.load_context_credentials("cloud") is None

    def test_unreadable_credentials_are_ignored(self, tmp_config):
        (tmp_config.credentials_dir / "cloud.json").write_text("garbage")
        assert tmp_config.load_context_credentials("cloud") is None

    def test_clear_credentials(self, tmp_config):
        tmp_config.save_credentials("tok")
        tmp_config.clear_credentials()
        assert tmp_config.load_credentials() is None

    def test_removing_context_drops_its_credentials(self, tmp_config):
        tmp_config.save_credentials("tok", context_name="cloud")
        tmp_config.remove_context("cloud")
        assert not (tmp_config.credentials_dir / "cloud.json").exists()
