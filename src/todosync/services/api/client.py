"""HTTP client for the hosted todosync backend."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from todosync.services.config_service import ConfigService, get_config_service
from todosync.utils.logger import get_logger


class APIClient:
    """HTTP client for the hosted REST and auth APIs.

    Sends the project API key on every request and the user's access token
    when one is stored for the active context.
    """

    def __init__(
        self,
        config_service: ConfigService | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config_service = config_service or get_config_service()
        config = self.config_service.config
        self.base_url = config.get_current_context().source.rstrip("/")
        self.api_key = config.api.key
        self.timeout = config.api.timeout
        self.retry = config.api.retry
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["apikey"] = self.api_key

        token = None
        if not skip_auth:
            credentials = self.config_service.load_credentials()
            if credentials and "token" in credentials:
                token = credentials["token"]

        bearer = token or self.api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _try_refresh_token(self) -> bool:
        """Exchange the stored refresh token for a new access token.

        Returns True when new credentials were saved.
        """
        credentials = self.config_service.load_credentials()
        if not credentials or not credentials.get("refresh_token"):
            return False

        try:
            response = await self.request(
                "POST",
                "/auth/v1/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": credentials["refresh_token"]},
                retry=0,
                skip_auth=True,
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            get_logger("api").warning("token refresh failed: %s", e)
            return False

        if not data.get("access_token"):
            return False

        user = data.get("user") or {}
        self.config_service.save_credentials(
            data["access_token"],
            data.get("refresh_token") or credentials["refresh_token"],
            user_id=user.get("id") or credentials.get("user_id"),
            email=user.get("email") or credentials.get("email"),
        )
        get_logger("api").info("access token refreshed")
        return True

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        retry: int | None = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        """Make an HTTP request, retrying 5xx and transport errors.

        A 401 on an authenticated request triggers one token refresh and a
        single replay of the request.

        Raises:
            httpx.HTTPStatusError: On 4xx, or 5xx once retries are exhausted
            httpx.RequestError: On transport failure once retries are exhausted
        """
        if retry is None:
            retry = self.retry

        client = await self._get_client()
        url = path if path.startswith("/") else f"/{path}"

        def build_headers() -> dict[str, str]:
            # Built per request so a new login or a refresh is picked up
            return {**self._get_headers(skip_auth=skip_auth), **(headers or {})}

        refreshed = False
        last_exception: Exception | None = None
        attempt = 0
        while attempt <= retry:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    headers=build_headers(),
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code == 401 and not skip_auth and not refreshed:
                    refreshed = True
                    if await self._try_refresh_token():
                        continue
                # Client errors are not retried
                if 400 <= status_code < 500:
                    raise
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            if attempt < retry:
                await asyncio.sleep(2**attempt)
            attempt += 1

        if last_exception:
            raise last_exception
        raise RuntimeError("Request failed after all retries")

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        return await self.request(
            "POST", path, json=json, params=params, headers=headers, skip_auth=skip_auth
        )

    async def put(self, path: str, *, json: Any = None) -> httpx.Response:
        return await self.request("PUT", path, json=json)

    async def patch(
        self,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("PATCH", path, json=json, params=params, headers=headers)

    async def delete(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("DELETE", path, params=params, headers=headers)


def get_client() -> APIClient:
    """Get an API client for the active context."""
    return APIClient()
