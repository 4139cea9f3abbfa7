"""Device authorization grant for browserless or input-constrained devices.

Show the user ``verification_uri`` and ``user_code`` from
``request_authorization``, then await ``DeviceCodeSession.exchange_token``
while they approve on another device. The resulting ``OAuthToken`` feeds
``Config.sign_in_with_oauth_credential`` like the authorization code flow.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from fireauth.core.exceptions import InvalidArgumentError
from fireauth.core.http import create_http_client
from fireauth.core.types import ProviderId
from fireauth.oauth.client import OAuthToken
from fireauth.oauth.exceptions import (
    AuthorizationDeniedError,
    DeviceAuthorizationError,
    DeviceCodeExpiredError,
    TokenExchangeError,
)
from fireauth.oauth.providers import DeviceCodeProvider

logger = logging.getLogger(__name__)

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"

# RFC 8628 section 3.5: add 5 seconds to the interval on slow_down.
SLOW_DOWN_STEP = 5

FACEBOOK_DEVICE_LOGIN_URL = "https://graph.facebook.com/v2.6/device/login"
FACEBOOK_DEVICE_STATUS_URL = "https://graph.facebook.com/v2.6/device/login_status"

# login_status error subcodes
_FACEBOOK_PENDING = 1349174
_FACEBOOK_SLOW_DOWN = 1349172
_FACEBOOK_EXPIRED = 1349152


class _PollAgain(Exception):
    def __init__(self, *, slow_down: bool = False):
        super().__init__("authorization pending")
        self.slow_down = slow_down


class _DeviceTokenPoller(Protocol):
    async def poll_token(self, device_code: str) -> OAuthToken: ...


class _DeviceAuthorizationResponse(BaseModel):
    # Facebook says ``code``; Google says ``verification_url``.
    device_code: str = Field(validation_alias=AliasChoices("device_code", "code"))
    user_code: str
    verification_uri: str = Field(
        validation_alias=AliasChoices("verification_uri", "verification_url")
    )
    verification_uri_complete: str | None = None
    expires_in: int = Field(gt=0)
    interval: int = Field(default=5, ge=0)


class _FacebookError(BaseModel):
    message: str = ""
    error_subcode: int | None = None


class _FacebookErrorResponse(BaseModel):
    error: _FacebookError


@dataclass(frozen=True)
class DeviceCodeSession:
    """A pending device authorization the user still has to approve."""

    client: _DeviceTokenPoller = field(repr=False)
    device_code: str = field(repr=False)
    user_code: str
    verification_uri: str
    expires_in: int
    interval: int = 5
    verification_uri_complete: str | None = None

    async def exchange_token(
        self,
        *,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> OAuthToken:
        """Poll the token endpoint until the user approves.

        Waits ``interval`` seconds between attempts, growing it on
        ``slow_down``. Gives up with ``DeviceCodeExpiredError`` once the next
        attempt would fall after ``expires_in`` (or ``timeout``, if shorter).
        """
        budget = self.expires_in if timeout is None else min(timeout, self.expires_in)
        deadline = clock() + budget
        interval = self.interval
        while True:
            try:
                return await self.client.poll_token(self.device_code)
            except _PollAgain as pending:
                if pending.slow_down:
                    interval += SLOW_DOWN_STEP
            if clock() + interval >= deadline:
                raise DeviceCodeExpiredError()
            await sleep(interval)


def _parse_authorization(
    client: _DeviceTokenPoller, response: httpx.Response
) -> DeviceCodeSession:
    if response.is_error:
        logger.info(
            "Device authorization rejected: status_code=%s", response.status_code
        )
        raise DeviceAuthorizationError(
            f"Device authorization failed with status {response.status_code}"
        )
    try:
        payload = _DeviceAuthorizationResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise DeviceAuthorizationError(
            "Malformed device authorization response"
        ) from e
    return DeviceCodeSession(
        client=client,
        device_code=payload.device_code,
        user_code=payload.user_code,
        verification_uri=payload.verification_uri,
        verification_uri_complete=payload.verification_uri_complete,
        expires_in=payload.expires_in,
        interval=payload.interval,
    )


def _device_error(error: str | None, description: str | None) -> Exception:
    match error:
        case "authorization_pending":
            return _PollAgain()
        case "slow_down":
            return _PollAgain(slow_down=True)
        case "expired_token":
            return DeviceCodeExpiredError()
        case "access_denied":
            return AuthorizationDeniedError(error, description)
    return TokenExchangeError(f"OAuth token exchange failed: {error}")


class DeviceCodeClient:
    """Authlib-backed RFC 8628 client for one provider."""

    def __init__(
        self,
        provider: DeviceCodeProvider,
        client_id: str,
        client_secret: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not client_id:
            raise InvalidArgumentError("client_id must not be empty")
        self._provider = provider
        self._client_id = client_id
        self._client_secret = client_secret
        self._transport = transport

    @property
    def provider(self) -> DeviceCodeProvider:
        return self._provider

    async def request_authorization(
        self, scopes: Iterable[str] | None = None
    ) -> DeviceCodeSession:
        """Request a device code and the user code to display."""
        if scopes is None:
            scopes = self._provider.default_scopes
        client = self._build_client()
        try:
            response = await client.request(
                "POST",
                self._provider.device_authorization_url,
                data={"client_id": self._client_id, "scope": " ".join(scopes)},
                withhold_token=True,
            )
        except httpx.HTTPError as e:
            raise DeviceAuthorizationError() from e
        finally:
            await client.aclose()

        session = _parse_authorization(self, response)
        logger.debug(
            "Device authorization started: provider=%s", self._provider.provider_id
        )
        return session

    async def poll_token(self, device_code: str) -> OAuthToken:
        """Make one token request for ``device_code``."""
        client = self._build_client()
        try:
            token = await client.fetch_token(
                self._provider.token_url,
                grant_type=DEVICE_CODE_GRANT_TYPE,
                device_code=device_code,
            )
        except AuthlibBaseError as e:
            raise _device_error(e.error, e.description) from e
        except (httpx.HTTPError, ValueError) as e:
            raise TokenExchangeError() from e
        finally:
            await client.aclose()

        return OAuthToken.from_response(self._provider.provider_id, dict(token))

    def _build_client(self) -> AsyncOAuth2Client:
        kwargs = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return AsyncOAuth2Client(
            client_id=self._client_id,
            client_secret=self._client_secret,
            token_endpoint_auth_method=(
                "client_secret_post" if self._client_secret else "none"
            ),
            timeout=10.0,
            **kwargs,
        )


class FacebookDeviceCodeClient:
    """Facebook device login.

    Facebook's flow predates RFC 8628: it authenticates with an
    ``app_id|client_token`` access token, answers with ``code`` rather than
    ``device_code`` and reports pending states as Graph API error subcodes.
    """

    def __init__(
        self,
        app_id: str,
        client_token: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not app_id or not client_token:
            raise InvalidArgumentError("app_id and client_token must not be empty")
        self._access_token = f"{app_id}|{client_token}"
        self._transport = transport

    async def request_authorization(
        self, scopes: Iterable[str] | None = None
    ) -> DeviceCodeSession:
        if scopes is None:
            scopes = ("public_profile", "email")
        async with create_http_client(transport=self._transport) as client:
            try:
                response = await client.post(
                    FACEBOOK_DEVICE_LOGIN_URL,
                    data={
                        "access_token": self._access_token,
                        "scope": ",".join(scopes),
                    },
                )
            except httpx.HTTPError as e:
                raise DeviceAuthorizationError() from e
        return _parse_authorization(self, response)

    async def poll_token(self, device_code: str) -> OAuthToken:
        async with create_http_client(transport=self._transport) as client:
            try:
                response = await client.post(
                    FACEBOOK_DEVICE_STATUS_URL,
                    data={"access_token": self._access_token, "code": device_code},
                )
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise TokenExchangeError() from e

        if response.is_success and isinstance(body, dict) and "access_token" in body:
            return OAuthToken.from_response(ProviderId.FACEBOOK, body)

        try:
            error = _FacebookErrorResponse.model_validate(body).error
        except ValidationError as e:
            raise TokenExchangeError() from e
        if error.error_subcode == _FACEBOOK_PENDING:
            raise _PollAgain()
        if error.error_subcode == _FACEBOOK_SLOW_DOWN:
            raise _PollAgain(slow_down=True)
        if error.error_subcode == _FACEBOOK_EXPIRED:
            raise DeviceCodeExpiredError()
        raise TokenExchangeError(f"Facebook device login failed: {error.message}")
