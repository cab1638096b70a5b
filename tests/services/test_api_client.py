"""Unit tests for APIClient.

Requests go through httpx.MockTransport so no real network is used.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from todosync.services.api.client import APIClient


@pytest.fixture()
def remote_config(tmp_config):
    tmp_config.use_context("cloud")
    tmp_config.config.api.key = "anon-key"
    tmp_config.config.api.retry = 2
    return tmp_config


def _client(config, handler) -> APIClient:
    return APIClient(config, transport=httpx.MockTransport(handler))


class TestHeaders:
    @pytest.mark.asyncio
    async def test_api_key_is_bearer_without_login(self, remote_config):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        client = _client(remote_config, handler)
        await client.get("/rest/v1/todos")
        await client.close()

        request = seen[0]
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert str(request.url).startswith("https://todosync.supabase.co/rest/v1/todos")

    @pytest.mark.asyncio
    async def test_stored_token_is_used(self, remote_config):
        remote_config.save_credentials("user-token", user_id="u1")
        seen = []

        def handler(request):
            seen.append(request.headers["Authorization"])
            return httpx.Response(200, json={})

        client = _client(remote_config, handler)
        await client.get("/rest/v1/todos")
        await client.post("/auth/v1/token", json={}, skip_auth=True)
        await client.close()

        assert seen == ["Bearer user-token", "Bearer anon-key"]

    @pytest.mark.asyncio
    async def test_params_and_extra_headers_are_sent(self, remote_config):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        client = _client(remote_config, handler)
        await client.delete(
            "rest/v1/todos", params={"id": "eq.1"}, headers={"Prefer": "return=minimal"}
        )
        await client.close()

        assert seen[0].method == "DELETE"
        assert seen[0].url.params["id"] == "eq.1"
        assert seen[0].headers["Prefer"] == "return=minimal"

    @pytest.mark.asyncio
    async def test_skip_auth_after_authenticated_call_sends_no_token(self, remote_config):
        remote_config.config.api.key = ""
        remote_config.save_credentials("user-token")
        seen = []

        def handler(request):
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={})

        client = _client(remote_config, handler)
        await client.get("/rest/v1/todos")
        await client.post("/auth/v1/recover", json={"email": "a@b.c"}, skip_auth=True)
        await client.close()

        assert seen == ["Bearer user-token", None]


class TestRetries:
    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, remote_config):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"message": "nope"})

        client = _client(remote_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await client.get("/rest/v1/todos")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_retried_then_succeeds(self, remote_config):
        responses = iter([httpx.Response(503), httpx.Response(200, json=[])])

        with patch("todosync.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
            client = _client(remote_config, lambda request: next(responses))
            response = await client.get("/rest/v1/todos")

        assert response.status_code == 200
        sleep.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_transport_error_raised_after_retries(self, remote_config):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("down", request=request)

        with patch("todosync.services.api.client.asyncio.sleep", new=AsyncMock()):
            client = _client(remote_config, handler)
            with pytest.raises(httpx.ConnectError):
                await client.get("/rest/v1/todos")

        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_explicit_retry_zero(self, remote_config):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        client = _client(remote_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await client.request("GET", "/rest/v1/todos", retry=0)
        assert len(calls) == 1


class TestTokenRefresh:
    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_request_replayed(self, remote_config):
        remote_config.save_credentials("old-token", "refresh-1", user_id="u1", email="a@b.c")
        seen = []

        def handler(request):
            seen.append((request.url.path, request.headers["Authorization"]))
            if request.url.path == "/auth/v1/token":
                assert request.url.params["grant_type"] == "refresh_token"
                return httpx.Response(
                    200, json={"access_token": "new-token", "refresh_token": "refresh-2"}
                )
            if request.headers["Authorization"] == "Bearer old-token":
                return httpx.Response(401, json={"message": "JWT expired"})
            return httpx.Response(200, json=[])

        client = _client(remote_config, handler)
        response = await client.get("/rest/v1/todos")
        await client.close()

        assert response.status_code == 200
        assert seen == [
            ("/rest/v1/todos", "Bearer old-token"),
            ("/auth/v1/token", "Bearer anon-key"),
            ("/rest/v1/todos", "Bearer new-token"),
        ]
        assert remote_config.load_credentials() == {
            "token": "new-token",
            "refresh_token": "refresh-2",
            "user_id": "u1",
            "email": "a@b.c",
        }

    @pytest.mark.asyncio
    async def test_failed_refresh_raises_original_401(self, remote_config):
        remote_config.save_credentials("old-token", "refresh-1")
        paths = []

        def handler(request):
            paths.append(request.url.path)
            if request.url.path == "/auth/v1/token":
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(401)

        client = _client(remote_config, handler)
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.get("/rest/v1/todos")

        assert exc_info.value.response.status_code == 401
        assert paths == ["/rest/v1/todos", "/auth/v1/token"]
        assert remote_config.load_credentials()["token"] == "old-token"

    @pytest.mark.asyncio
    async def test_no_refresh_token_means_no_refresh_attempt(self, remote_config):
        remote_config.save_credentials("old-token")
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(401)

        client = _client(remote_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await client.get("/rest/v1/todos")
        assert paths == ["/rest/v1/todos"]

    @pytest.mark.asyncio
    async def test_replayed_401_is_not_refreshed_twice(self, remote_config):
        remote_config.save_credentials("old-token", "refresh-1")
        paths = []

        def handler(request):
            paths.append(request.url.path)
            if request.url.path == "/auth/v1/token":
                return httpx.Response(200, json={"access_token": "new-token"})
            return httpx.Response(401)

        client = _client(remote_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await client.get("/rest/v1/todos")
        assert paths == ["/rest/v1/todos", "/auth/v1/token", "/rest/v1/todos"]
