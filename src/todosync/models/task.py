"""Task data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class FilterMode(str, Enum):
    """Which subset of the list a view shows."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class Task(BaseModel):
    """A single to-do entry owned by one user.

    Attributes:
        id: Client-generated unique identifier, stable for the task's lifetime
        title: Trimmed, non-empty text
        completed: Completion flag
        owner_id: Id of the user the task belongs to
        created_at: Creation timestamp, never changed afterwards
        updated_at: Timestamp of the last mutation, if the backend tracks it
        priority: Optional priority carried through from backend rows
    """

    id: str
    title: str
    completed: bool = False
    owner_id: str
    created_at: datetime
    updated_at: datetime | None = None
    priority: int | None = None

    @field_validator("completed", mode="before")
    @classmethod
    def null_completed_is_false(cls, v):
        """Backends may store a null flag; treat it as not completed."""
        return False if v is None else v


class TaskPatch(BaseModel):
    """Partial update sent to a gateway.

    Only fields that were explicitly set are written.
    """

    title: str | None = None
    completed: bool | None = None
    updated_at: datetime | None = None

    def changes(self) -> dict:
        """Return the explicitly set fields, ready for serialization."""
        return self.model_dump(exclude_unset=True, mode="json")


class TaskCounts(BaseModel):
    """Per-filter totals shown next to the view tabs."""

    all: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
