import inspect
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import anyio
import httpx
import pytest

from fireauth.auth.config import Config


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


class FakeClock:
    """Deterministic UTC clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class MockFirebase:
    """Scripted stand-in for the Firebase Auth REST services.

    Responses are served in the order they were queued; every request is
    recorded so tests can assert on paths, query strings and bodies.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []

    def add(
        self,
        status_code: int = 200,
        json: Any = None,
        *,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if content is not None:
            response = httpx.Response(status_code, content=content, headers=headers)
        else:
            response = httpx.Response(status_code, json=json, headers=headers)
        self._responses.append(response)

    def add_error(self, message: str, status_code: int = 400) -> None:
        self.add(status_code, {"error": {"code": status_code, "message": message}})

    def add_exception(self, exc: Exception) -> None:
        self._responses.append(exc)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def json_body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


def make_token_response(
    id_token: str = "id-token-1",
    refresh_token: str = "refresh-token-1",
    expires_in: str = "3600",
    local_id: str = "uid-1",
    **extra: Any,
) -> dict[str, Any]:
    return {
        "idToken": id_token,
        "refreshToken": refresh_token,
        "expiresIn": expires_in,
        "localId": local_id,
        **extra,
    }


def make_refresh_response(
    id_token: str = "id-token-2",
    refresh_token: str = "refresh-token-2",
    expires_in: str = "3600",
    user_id: str = "uid-1",
) -> dict[str, Any]:
    return {
        "expires_in": expires_in,
        "token_type": "Bearer",
        "refresh_token": refresh_token,
        "id_token": id_token,
        "user_id": user_id,
        "project_id": "1234567890",
    }


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock()


@pytest.fixture(name="firebase")
def firebase_fixture() -> MockFirebase:
    return MockFirebase()


@pytest.fixture(name="http_client")
def http_client_fixture(firebase: MockFirebase) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by the scripted mock."""
    return httpx.AsyncClient(transport=httpx.MockTransport(firebase))


@pytest.fixture(name="config")
def config_fixture(http_client: httpx.AsyncClient, clock: FakeClock) -> Config:
    return Config("test-api-key", http_client, clock=clock)


@pytest.fixture(name="token_response")
def token_response_fixture():
    """Factory for sign-in style success bodies."""
    return make_token_response


@pytest.fixture(name="refresh_response")
def refresh_response_fixture():
    """Factory for Secure Token exchange success bodies."""
    return make_refresh_response
