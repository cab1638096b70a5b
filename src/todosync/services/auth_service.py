"""Authentication against the hosted auth API.

Successful sign-in stores the access token and user id as credentials of
the active context; the session provider reads them back.
"""

from __future__ import annotations

from typing import Any

import httpx

from todosync.models import AuthError, Session
from todosync.services.api.client import APIClient
from todosync.services.config_service import ConfigService, get_config_service
from todosync.utils.logger import get_logger


def _auth_error(action: str, error: httpx.HTTPError) -> AuthError:
    status_code = None
    message = str(error)
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        try:
            body = error.response.json()
            message = (
                body.get("error_description")
                or body.get("msg")
                or body.get("message")
                or message
            )
        except ValueError:
            pass
    get_logger("auth").warning("%s failed (status=%s): %s", action, status_code, message)
    return AuthError(f"{action} failed: {message}", status_code=status_code)


class AuthService:
    """Service for sign-in, sign-up, sign-out and password management."""

    def __init__(
        self,
        config_service: ConfigService | None = None,
        client: APIClient | None = None,
    ):
        self.config_service = config_service or get_config_service()
        self._client = client

    @property
    def client(self) -> APIClient:
        if self._client is None:
            self._client = APIClient(self.config_service)
        return self._client

    def _require_remote(self) -> None:
        context = self.config_service.get_current_context()
        if context.type != "remote":
            raise AuthError(
                f"Context '{context.name}' is local and needs no login. "
                "Switch with 'todosync context use <remote>'."
            )

    def _store_session(self, data: dict[str, Any]) -> Session:
        user = data.get("user") or {}
        user_id = user.get("id")
        token = data.get("access_token")
        if not token or not user_id:
            raise AuthError("Auth response did not contain a session")
        email = user.get("email")
        self.config_service.save_credentials(
            token,
            data.get("refresh_token"),
            user_id=user_id,
            email=email,
        )
        return Session(owner_id=user_id, email=email)

    async def sign_in(self, email: str, password: str) -> Session:
        self._require_remote()
        try:
            response = await self.client.post(
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                skip_auth=True,
            )
        except httpx.HTTPError as e:
            raise _auth_error("Sign in", e) from e
        session = self._store_session(response.json())
        get_logger("auth").info("signed in as %s", email)
        return session

    async def sign_up(self, email: str, password: str) -> Session | None:
        """Register a user.

        Returns the new session, or None when the backend requires email
        confirmation before the first sign-in.
        """
        self._require_remote()
        try:
            response = await self.client.post(
                "/auth/v1/signup",
                json={"email": email, "password": password},
                skip_auth=True,
            )
        except httpx.HTTPError as e:
            raise _auth_error("Sign up", e) from e
        data = response.json()
        if data.get("access_token"):
            return self._store_session(data)
        return None

    async def sign_out(self) -> None:
        """Revoke the session remotely (best effort) and forget credentials."""
        credentials = self.config_service.load_credentials()
        if credentials:
            try:
                await self.client.post("/auth/v1/logout")
            except httpx.HTTPError as e:
                get_logger("auth").warning("remote logout failed: %s", e)
        self.config_service.clear_credentials()

    async def reset_password(self, email: str, redirect_to: str | None = None) -> None:
        self._require_remote()
        payload: dict[str, Any] = {"email": email}
        if redirect_to:
            payload["redirect_to"] = redirect_to
        try:
            await self.client.post("/auth/v1/recover", json=payload, skip_auth=True)
        except httpx.HTTPError as e:
            raise _auth_error("Password reset", e) from e

    async def update_password(self, new_password: str) -> None:
        self._require_remote()
        if not self.config_service.load_credentials():
            raise AuthError("Not logged in. Use 'todosync auth login' first.")
        try:
            await self.client.put("/auth/v1/user", json={"password": new_password})
        except httpx.HTTPError as e:
            raise _auth_error("Password update", e) from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
