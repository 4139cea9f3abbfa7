"""Client configuration and the unauthenticated Firebase Auth operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from types import TracebackType

import httpx

from fireauth.api import endpoints
from fireauth.api.identity_toolkit import ConfirmEmailVerificationResponse
from fireauth.auth.session import Session, parse_expires_in, token_pair
from fireauth.core.exceptions import InvalidArgumentError
from fireauth.core.http import create_http_client, create_http_client_from_settings
from fireauth.core.settings import (
    IDENTITY_TOOLKIT_URL,
    SECURE_TOKEN_URL,
    FireauthSettings,
    get_settings,
)
from fireauth.core.types import (
    ApiKey,
    CustomToken,
    Email,
    IdpPostBody,
    OAuthRequestUri,
    OobCode,
    Password,
    ProviderId,
    RefreshToken,
)

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MARGIN = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Config:
    """API key, HTTP client and endpoints shared by every session.

    When no ``http_client`` is passed, one is created and owned by the config;
    ``aclose()`` (or leaving ``async with``) only closes an owned client.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        identity_toolkit_url: str = IDENTITY_TOOLKIT_URL,
        secure_token_url: str = SECURE_TOKEN_URL,
        refresh_margin: timedelta = DEFAULT_REFRESH_MARGIN,
        clock: Callable[[], datetime] | None = None,
        locale: str | None = None,
    ):
        if refresh_margin < timedelta(0):
            raise InvalidArgumentError("refresh_margin must not be negative")

        self._api_key = ApiKey(api_key)
        self._owns_client = http_client is None
        self._http_client = http_client or create_http_client()
        self._identity_toolkit_url = identity_toolkit_url
        self._secure_token_url = secure_token_url
        self._refresh_margin = refresh_margin
        self._clock = clock or _utcnow
        self._locale = locale

    @classmethod
    def from_settings(
        cls,
        settings: FireauthSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Config:
        """Build a config from environment-driven settings."""
        settings = settings or get_settings()
        if not settings.firebase_api_key:
            raise InvalidArgumentError("FIREBASE_API_KEY is not set")

        config = cls(
            settings.firebase_api_key,
            http_client or create_http_client_from_settings(settings),
            identity_toolkit_url=settings.identity_toolkit_url,
            secure_token_url=settings.secure_token_url,
            refresh_margin=settings.refresh_margin,
            locale=settings.locale,
        )
        config._owns_client = http_client is None
        return config

    @property
    def api_key(self) -> ApiKey:
        return self._api_key

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    @property
    def identity_toolkit_url(self) -> str:
        return self._identity_toolkit_url

    @property
    def secure_token_url(self) -> str:
        return self._secure_token_url

    @property
    def refresh_margin(self) -> timedelta:
        return self._refresh_margin

    @property
    def locale(self) -> str | None:
        """Default ``X-Firebase-Locale`` for e-mail sending operations."""
        return self._locale

    def now(self) -> datetime:
        return self._clock()

    def __repr__(self) -> str:
        return (
            f"Config(identity_toolkit_url={self._identity_toolkit_url!r}, "
            f"secure_token_url={self._secure_token_url!r}, "
            f"refresh_margin={self._refresh_margin!r})"
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> Config:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def _session(
        self,
        *,
        id_token: str,
        refresh_token: str,
        expires_in: str,
        issued_at: datetime,
        local_id: str | None,
        email: str | None = None,
        provider_id: str | None = None,
    ) -> Session:
        id_token_value, refresh_token_value = token_pair(id_token, refresh_token)
        session = Session(
            config=self,
            id_token=id_token_value,
            refresh_token=refresh_token_value,
            expires_in=parse_expires_in(expires_in),
            issued_at=issued_at,
            local_id=local_id,
            email=email,
            provider_id=provider_id,
        )
        logger.debug(
            "Signed in: local_id=%s", local_id, extra={"local_id": local_id}
        )
        return session

    async def sign_up_with_email_password(
        self, email: str, password: str
    ) -> Session:
        payload = {
            "email": Email(email),
            "password": Password(password),
            "returnSecureToken": True,
        }
        issued_at = self.now()
        response = await endpoints.sign_up_with_email_password(
            self._http_client,
            self._api_key,
            payload,
            base_url=self._identity_toolkit_url,
        )
        return self._session(
            id_token=response["idToken"],
            refresh_token=response["refreshToken"],
            expires_in=response["expiresIn"],
            issued_at=issued_at,
            local_id=response["localId"],
            email=response.get("email", payload["email"]),
            provider_id=ProviderId.PASSWORD,
        )

    async def sign_in_with_email_password(
        self, email: str, password: str
    ) -> Session:
        payload = {
            "email": Email(email),
            "password": Password(password),
            "returnSecureToken": True,
        }
        issued_at = self.now()
        response = await endpoints.sign_in_with_email_password(
            self._http_client,
            self._api_key,
            payload,
            base_url=self._identity_toolkit_url,
        )
        return self._session(
            id_token=response["idToken"],
            refresh_token=response["refreshToken"],
            expires_in=response["expiresIn"],
            issued_at=issued_at,
            local_id=response["localId"],
            email=response["email"],
            provider_id=ProviderId.PASSWORD,
        )

    async def sign_in_anonymously(self) -> Session:
        issued_at = self.now()
        response = await endpoints.sign_in_anonymously(
            self._http_client,
            self._api_key,
            {"returnSecureToken": True},
            base_url=self._identity_toolkit_url,
        )
        return self._session(
            id_token=response["idToken"],
            refresh_token=response["refreshToken"],
            expires_in=response["expiresIn"],
            issued_at=issued_at,
            local_id=response["localId"],
        )

    async def sign_in_with_oauth_credential(
        self, request_uri: str, post_body: IdpPostBody
    ) -> Session:
        """Sign in with a credential obtained from an identity provider."""
        uri = OAuthRequestUri(request_uri)
        issued_at = self.now()
        response = await endpoints.sign_in_with_oauth_credential(
            self._http_client,
            self._api_key,
            {
                "requestUri": uri,
                "postBody": post_body.encode(),
                "returnSecureToken": True,
                "returnIdpCredential": True,
            },
            base_url=self._identity_toolkit_url,
        )
        return self._session(
            id_token=response["idToken"],
            refresh_token=response["refreshToken"],
            expires_in=response["expiresIn"],
            issued_at=issued_at,
            local_id=response["localId"],
            email=response.get("email"),
            provider_id=response["providerId"],
        )

    async def sign_in_with_custom_token(self, token: str) -> Session:
        custom_token = CustomToken(token)
        issued_at = self.now()
        response = await endpoints.exchange_custom_token(
            self._http_client,
            self._api_key,
            {"token": custom_token, "returnSecureToken": True},
            base_url=self._identity_toolkit_url,
        )
        # The response carries no uid; it is filled in by the next refresh
        # or get_user_data call.
        return self._session(
            id_token=response["idToken"],
            refresh_token=response["refreshToken"],
            expires_in=response["expiresIn"],
            issued_at=issued_at,
            local_id=None,
        )

    async def sign_in_with_refresh_token(self, refresh_token: str) -> Session:
        """Restore a session from a stored refresh token."""
        token = RefreshToken(refresh_token)
        issued_at = self.now()
        response = await endpoints.exchange_refresh_token(
            self._http_client,
            self._api_key,
            {"grant_type": "refresh_token", "refresh_token": token},
            base_url=self._secure_token_url,
        )
        return self._session(
            id_token=response["id_token"],
            refresh_token=response["refresh_token"],
            expires_in=response["expires_in"],
            issued_at=issued_at,
            local_id=response["user_id"],
        )

    async def fetch_providers_for_email(
        self, email: str, continue_uri: str = "http://localhost"
    ) -> list[str]:
        """Return the provider ids registered for ``email``."""
        response = await endpoints.fetch_providers_for_email(
            self._http_client,
            self._api_key,
            {"identifier": Email(email), "continueUri": continue_uri},
            base_url=self._identity_toolkit_url,
        )
        return response.get("allProviders", [])

    async def send_reset_password_email(
        self, email: str, locale: str | None = None
    ) -> None:
        await endpoints.send_password_reset_email(
            self._http_client,
            self._api_key,
            {"requestType": "PASSWORD_RESET", "email": Email(email)},
            locale=locale or self._locale,
            base_url=self._identity_toolkit_url,
        )

    async def verify_password_reset_code(self, oob_code: str) -> str:
        """Check a reset code and return the e-mail it was issued for."""
        response = await endpoints.verify_password_reset_code(
            self._http_client,
            self._api_key,
            {"oobCode": OobCode(oob_code)},
            base_url=self._identity_toolkit_url,
        )
        return response["email"]

    async def confirm_password_reset(self, oob_code: str, new_password: str) -> None:
        await endpoints.confirm_password_reset(
            self._http_client,
            self._api_key,
            {"oobCode": OobCode(oob_code), "newPassword": Password(new_password)},
            base_url=self._identity_toolkit_url,
        )

    async def confirm_email_verification(
        self, oob_code: str
    ) -> ConfirmEmailVerificationResponse:
        return await endpoints.confirm_email_verification(
            self._http_client,
            self._api_key,
            {"oobCode": OobCode(oob_code)},
            base_url=self._identity_toolkit_url,
        )
