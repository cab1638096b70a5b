"""Session provider: who the current owner is.

Local contexts have no login; they get a generated owner id that is kept
in the context config so it survives restarts. Remote contexts take the
owner from the credentials stored by ``auth login``.
"""

from __future__ import annotations

from todosync.models import Session
from todosync.services.config_service import ConfigService, get_config_service
from todosync.utils.uuid_utils import generate_uuid


class SessionProvider:
    """Resolves the session for the active context."""

    def __init__(self, config_service: ConfigService | None = None):
        self.config_service = config_service or get_config_service()

    def current(self) -> Session:
        try:
            context = self.config_service.get_current_context()
        except ValueError:
            return Session()

        if context.type == "local":
            if context.user_id is None:
                self.config_service.set_context_user_id(generate_uuid(), context.name)
            return Session(owner_id=context.user_id, email=context.user)

        credentials = self.config_service.load_context_credentials(context.name)
        if not credentials or not credentials.get("user_id"):
            return Session()
        return Session(
            owner_id=credentials["user_id"],
            email=credentials.get("email") or context.user,
        )

    def is_authenticated(self) -> bool:
        return self.current().is_authenticated


def get_session_provider() -> SessionProvider:
    return SessionProvider()
