"""Configuration service for todosync.

Single source of truth for configuration: loading and saving config.json,
context management and per-context credentials.
"""

from __future__ import annotations

import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from todosync.models.config_models import AppConfig, Context

DEFAULT_REMOTE_SOURCE = "https://todosync.supabase.co"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir("todosync"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = Path(user_data_dir("todosync"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            self._config = self.create_default_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to disk."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def create_default_config(self) -> AppConfig:
        """Create the default configuration: a local context plus a cloud one.

        Local is active by default so a first run needs no login.
        """
        local_context = Context(
            name="local",
            type="local",
            source=str(self.data_dir / "todosync.db"),
            description="Local SQLite storage",
        )
        cloud_context = Context(
            name="cloud",
            type="remote",
            source=DEFAULT_REMOTE_SOURCE,
            description="Hosted backend (requires login)",
        )
        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, cloud_context],
        )
        self.save_config()
        return self._config

    def list_contexts(self) -> list[Context]:
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the currently active context.

        Raises:
            ValueError: If the current context is not configured
        """
        return self.config.get_current_context()

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self.save_config()
        return context

    def add_context(self, context: Context):
        self.config.add_context(context)
        self.save_config()

    def remove_context(self, name: str):
        """Remove a context and its credentials.

        Raises:
            ValueError: If the context is unknown or currently active
        """
        if name == self.config.current_context_name:
            raise ValueError(
                f"Context '{name}' is active. Switch to another context first."
            )
        self.config.remove_context(name)
        self.save_config()
        self.remove_context_credentials(name)

    def set_context_user_id(self, user_id: str, context_name: str | None = None) -> None:
        """Persist the owner id for a local context."""
        context = (
            self.config.get_context(context_name)
            if context_name
            else self.get_current_context()
        )
        context.user_id = user_id
        self.save_config()

    def remove_context_credentials(self, context_name: str):
        cred_path = self.credentials_dir / f"{context_name}.json"
        if cred_path.exists():
            cred_path.unlink()

    def load_credentials(self) -> dict | None:
        """Load credentials for the current context.

        Returns:
            dict with 'token', 'user_id' and optionally 'refresh_token'/'email',
            or None if not found
        """
        try:
            current_context = self.config.get_current_context()
        except ValueError:
            return None
        return self.load_context_credentials(current_context.name)

    def load_context_credentials(self, context_name: str) -> dict | None:
        cred_path = self.credentials_dir / f"{context_name}.json"
        if not cred_path.exists():
            return None

        try:
            with open(cred_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            return None

    def save_credentials(
        self,
        access_token: str,
        refresh_token: str | None = None,
        *,
        user_id: str | None = None,
        email: str | None = None,
        context_name: str | None = None,
    ):
        """Save credentials for a context (defaults to the current one)."""
        if context_name is None:
            context_name = self.config.get_current_context().name

        cred_data = {"token": access_token}
        if refresh_token:
            cred_data["refresh_token"] = refresh_token
        if user_id:
            cred_data["user_id"] = user_id
        if email:
            cred_data["email"] = email

        cred_path = self.credentials_dir / f"{context_name}.json"
        cred_path.parent.mkdir(parents=True, exist_ok=True)
        with open(cred_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)

        cred_path.chmod(0o600)

    def clear_credentials(self, context_name: str | None = None) -> None:
        if context_name is None:
            try:
                context_name = self.config.get_current_context().name
            except ValueError:
                return
        self.remove_context_credentials(context_name)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
