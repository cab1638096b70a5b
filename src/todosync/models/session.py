"""Session model shared by the session provider and the list controller."""

from __future__ import annotations

from pydantic import BaseModel


class Session(BaseModel):
    """Authenticated identity for the current run.

    Attributes:
        owner_id: Id of the signed-in user, None when unauthenticated
        email: User email for remote sessions
        loading: True while the provider is still resolving the session
    """

    owner_id: str | None = None
    email: str | None = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.owner_id is not None
