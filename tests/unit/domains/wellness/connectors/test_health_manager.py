"""Tests for HealthManager, the auth token client and the mock SDK."""

from __future__ import annotations

import asyncio
from datetime import datetime

import httpx
import pytest

from flowstate.domains.wellness.connectors import HealthDataSDK, SourceType
from flowstate.domains.wellness.connectors.health_manager import (
    HealthAuthClient,
    HealthAuthError,
    HealthConnectionError,
    HealthManager,
    HealthNotConnectedError,
    StaticTokenProvider,
)
from flowstate.domains.wellness.connectors.providers import MockHealthSDK

START = datetime(2026, 3, 1)
END = datetime(2026, 3, 8)


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _auth_client(handler) -> HealthAuthClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HealthAuthClient(
        "https://auth.test/v2/auth/generateAuthToken", "key-123", "dev-abc", http_client=http
    )


class TestHealthManager:
    def test_mock_sdk_satisfies_protocol(self):
        assert isinstance(MockHealthSDK(), HealthDataSDK)

    def test_connect_passes_token_and_permissions(self):
        sdk = MockHealthSDK()
        manager = HealthManager(sdk, StaticTokenProvider("tok"), source_type=SourceType.SAMSUNG)
        _run(manager.connect())
        assert manager.is_connected is True
        assert sdk.connections == [(SourceType.SAMSUNG, "tok", ["ACTIVITY", "DAILY", "SLEEP"])]

    def test_refused_connection_raises(self):
        manager = HealthManager(MockHealthSDK(accept_connection=False), StaticTokenProvider())
        with pytest.raises(HealthConnectionError):
            _run(manager.connect())
        assert manager.is_connected is False
        assert manager.error == "Connection failed"

    def test_fetch_before_connect_raises(self):
        manager = HealthManager(MockHealthSDK(), StaticTokenProvider())
        with pytest.raises(HealthNotConnectedError):
            _run(manager.fetch_sleep(START, END))

    def test_fetch_all_stores_payloads(self):
        manager = HealthManager(MockHealthSDK(), StaticTokenProvider())

        async def _scenario():
            await manager.connect()
            return await manager.fetch_all(START, END)

        data = _run(_scenario())
        assert data["activity"]["type"] == "activity"
        assert data["daily"]["type"] == "daily"
        assert data["sleep"]["type"] == "sleep"
        assert manager.sleep_payload is data["sleep"]
        assert manager.is_loading is False


class TestHealthAuthClient:
    def test_fetches_token_with_credentials(self):
        seen: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "success", "token": "abc"})

        assert _run(_auth_client(_handler).fetch_token()) == "abc"
        assert seen[0].method == "POST"
        assert seen[0].headers["x-api-key"] == "key-123"
        assert seen[0].headers["dev-id"] == "dev-abc"

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(401, json={"status": "error"}),
            httpx.Response(200, json={"status": "success"}),
            httpx.Response(200, content=b"not json"),
            httpx.Response(200, json=["abc"]),
        ],
    )
    def test_bad_responses_raise_auth_error(self, response):
        with pytest.raises(HealthAuthError):
            _run(_auth_client(lambda request: response).fetch_token())

    def test_aclose_releases_owned_http_client(self):
        auth = HealthAuthClient("https://auth.test/token", "key", "dev")
        manager = HealthManager(MockHealthSDK(), auth)
        _run(manager.aclose())
        assert auth._client.is_closed

    def test_aclose_drops_connection(self):
        manager = HealthManager(MockHealthSDK(), StaticTokenProvider())

        async def _scenario():
            await manager.connect()
            await manager.aclose()

        _run(_scenario())
        assert manager.is_connected is False

    def test_aclose_leaves_injected_http_client_open(self):
        http = httpx.AsyncClient()
        auth = HealthAuthClient("https://auth.test/token", "key", "dev", http_client=http)
        _run(auth.aclose())
        assert not http.is_closed
        _run(http.aclose())

    def test_auth_failure_leaves_manager_disconnected(self):
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        manager = HealthManager(MockHealthSDK(), _auth_client(_refuse))
        with pytest.raises(HealthAuthError):
            _run(manager.connect())
        assert manager.is_connected is False
        assert "no route" in manager.error
