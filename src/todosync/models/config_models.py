"""Configuration models for the context system.

A context names one storage backend: a local SQLite file or a hosted
REST API. Exactly one context is active at a time.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class APIConfig(BaseModel):
    """Hosted API configuration."""

    key: str = Field(default="", description="Public (anon) API key sent as 'apikey'")
    timeout: int = Field(default=30)
    retry: int = Field(default=3)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="pretty", description="Default for tasks list --output")
    compact: bool = Field(default=False, description="Default for tasks list --compact")


class NotificationConfig(BaseModel):
    """Notification configuration."""

    show_success: bool = Field(default=True)


class Context(BaseModel):
    """Context configuration for a storage backend.

    Represents either a local SQLite file or a remote API endpoint.
    """

    name: str = Field(..., description="Unique context name")
    type: Literal["local", "remote"] = Field(..., description="Context type")
    source: str = Field(..., description="Database path or API URL")
    user: str | None = Field(default=None, description="User email (remote only)")
    user_id: str | None = Field(default=None, description="Owner id (local contexts)")
    description: str = Field(default="", description="Human-readable description")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("source cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main todosync configuration"""

    current_context_name: str = Field(
        default="local", description="Active context name"
    )
    contexts: list[Context] = Field(
        default_factory=list, description="Available contexts"
    )

    api: APIConfig = Field(default_factory=APIConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    def get_context(self, name: str) -> Context:
        """Get context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        raise ValueError(f"Context '{name}' not found")

    def get_current_context(self) -> Context:
        """Get the currently active context."""
        return self.get_context(self.current_context_name)

    def add_context(self, context: Context):
        """Add a new context.

        Raises:
            ValueError: If context with the same name already exists
        """
        if any(ctx.name == context.name for ctx in self.contexts):
            raise ValueError(
                f"Context '{context.name}' already exists."
                " Use a different name or remove the existing context first."
            )
        self.contexts.append(context)

    def remove_context(self, name: str):
        """Remove a context by name."""
        original_len = len(self.contexts)
        self.contexts = [ctx for ctx in self.contexts if ctx.name != name]
        if len(self.contexts) == original_len:
            raise ValueError(f"Context '{name}' not found")
        return True
