"""Authorization code flow (with PKCE) for obtaining IdP credentials.

The resulting ``OAuthToken`` converts into an ``IdpPostBody`` for
``Config.sign_in_with_oauth_credential`` or
``Session.link_with_oauth_credential``.
"""

from __future__ import annotations

import hmac
import logging
import secrets
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from fireauth.core.exceptions import InvalidArgumentError
from fireauth.core.types import IdpPostBody, ProviderId
from fireauth.oauth.exceptions import StateMismatchError, TokenExchangeError
from fireauth.oauth.providers import OAuthProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class OAuthToken:
    provider_id: ProviderId
    access_token: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    scope: str | None = None

    def __repr__(self) -> str:
        return (
            f"OAuthToken(provider_id={str(self.provider_id)!r}, "
            f"token_type={self.token_type!r}, scope={self.scope!r})"
        )

    @classmethod
    def from_response(
        cls, provider_id: ProviderId, token: dict[str, Any]
    ) -> OAuthToken:
        expires_in = token.get("expires_in")
        return cls(
            provider_id=provider_id,
            access_token=token.get("access_token"),
            id_token=token.get("id_token"),
            refresh_token=token.get("refresh_token"),
            token_type=token.get("token_type"),
            expires_in=int(expires_in) if expires_in is not None else None,
            scope=token.get("scope"),
        )

    def to_idp_post_body(self) -> IdpPostBody:
        """Build the ``postBody`` credential for signInWithIdp."""
        if self.provider_id == ProviderId.GOOGLE:
            return IdpPostBody.google(
                id_token=self.id_token, access_token=self.access_token
            )
        if not self.access_token:
            raise InvalidArgumentError("Token response carried no access_token")
        return IdpPostBody(self.provider_id, {"access_token": self.access_token})


@dataclass(frozen=True)
class AuthorizationCodeSession:
    """One started authorization: the URL to open and what to check on return."""

    client: AuthorizationCodeClient
    authorize_url: str
    state: str
    code_verifier: str | None = None

    async def exchange_code(self, code: str, state: str) -> OAuthToken:
        if not hmac.compare_digest(state, self.state):
            raise StateMismatchError()
        return await self.client.exchange_code(code, code_verifier=self.code_verifier)


class AuthorizationCodeClient:
    """Authlib-backed authorization code client for one provider."""

    def __init__(
        self,
        provider: OAuthProvider,
        client_id: str,
        client_secret: str | None,
        redirect_uri: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not client_id:
            raise InvalidArgumentError("client_id must not be empty")
        self._provider = provider
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._transport = transport

    @property
    def provider(self) -> OAuthProvider:
        return self._provider

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    async def start(
        self, scopes: Iterable[str] | None = None
    ) -> AuthorizationCodeSession:
        """Create the authorization URL with a fresh state (and PKCE verifier)."""
        if scopes is None:
            scopes = self._provider.default_scopes
        scope = " ".join(scopes)
        state = secrets.token_urlsafe(32)
        code_verifier = secrets.token_urlsafe(64) if self._provider.use_pkce else None

        client = self._build_client(scope)
        extra: dict[str, str] = dict(self._provider.authorize_params)
        if code_verifier is not None:
            extra["code_verifier"] = code_verifier
        try:
            authorize_url, _ = client.create_authorization_url(
                self._provider.authorize_url, state=state, **extra
            )
        finally:
            await client.aclose()
        return AuthorizationCodeSession(
            client=self,
            authorize_url=authorize_url,
            state=state,
            code_verifier=code_verifier,
        )

    async def exchange_code(
        self, code: str, *, code_verifier: str | None = None
    ) -> OAuthToken:
        """Exchange an authorization code at the provider's token endpoint."""
        if not code:
            raise InvalidArgumentError("code must not be empty")
        params: dict[str, str] = {}
        if code_verifier is not None:
            params["code_verifier"] = code_verifier

        client = self._build_client()
        try:
            token = await client.fetch_token(
                self._provider.token_url,
                grant_type="authorization_code",
                code=code,
                redirect_uri=self._redirect_uri,
                **params,
            )
        except (AuthlibBaseError, httpx.HTTPError, ValueError) as e:
            logger.info(
                "OAuth token exchange failed: provider=%s, error=%s",
                self._provider.provider_id,
                type(e).__name__,
            )
            raise TokenExchangeError() from e
        finally:
            await client.aclose()

        return OAuthToken.from_response(self._provider.provider_id, dict(token))

    def _build_client(self, scope: str | None = None) -> AsyncOAuth2Client:
        kwargs: dict[str, Any] = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return AsyncOAuth2Client(
            client_id=self._client_id,
            client_secret=self._client_secret,
            scope=scope,
            redirect_uri=self._redirect_uri,
            code_challenge_method="S256" if self._provider.use_pkce else None,
            token_endpoint_auth_method=(
                "client_secret_post" if self._client_secret else "none"
            ),
            timeout=10.0,
            **kwargs,
        )
