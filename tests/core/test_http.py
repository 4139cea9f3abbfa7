"""Tests for fireauth/core/http.py - HTTP client factory."""

import httpx
import pytest

from fireauth.core import http as http_module
from fireauth.core.settings import FireauthSettings


def _echo_user_agent(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ua": request.headers["User-Agent"]})


class TestCreateHttpClient:
    @pytest.mark.asyncio
    async def test_default_timeouts(self):
        client = http_module.create_http_client()
        try:
            assert client.timeout == http_module.DEFAULT_TIMEOUT
            assert client.timeout.connect == 5.0
            assert client.timeout.read == 10.0
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_custom_timeout(self):
        timeout = httpx.Timeout(1.0, connect=0.5)
        client = http_module.create_http_client(timeout=timeout)
        try:
            assert client.timeout.connect == 0.5
            assert client.timeout.pool == 1.0
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_no_base_url(self):
        """Endpoint functions send absolute URLs."""
        client = http_module.create_http_client()
        try:
            assert client.base_url == httpx.URL("")
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_sends_user_agent(self):
        client = http_module.create_http_client(
            transport=httpx.MockTransport(_echo_user_agent)
        )
        try:
            response = await client.post("https://identitytoolkit.googleapis.com/")

            assert response.json() == {"ua": http_module.USER_AGENT}
        finally:
            await client.aclose()


class TestCreateHttpClientFromSettings:
    @pytest.mark.asyncio
    async def test_uses_settings_timeouts(self):
        settings = FireauthSettings(
            FIREAUTH_CONNECT_TIMEOUT=1.5,
            FIREAUTH_READ_TIMEOUT=2.5,
            FIREAUTH_WRITE_TIMEOUT=3.5,
            FIREAUTH_POOL_TIMEOUT=4.5,
        )
        client = http_module.create_http_client_from_settings(settings)
        try:
            assert client.timeout == httpx.Timeout(
                connect=1.5, read=2.5, write=3.5, pool=4.5
            )
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_override(self):
        settings = FireauthSettings(FIREAUTH_MAX_CONNECTIONS=3)
        client = http_module.create_http_client_from_settings(
            settings, transport=httpx.MockTransport(_echo_user_agent)
        )
        try:
            response = await client.get("https://securetoken.googleapis.com/")

            assert response.status_code == 200
        finally:
            await client.aclose()
