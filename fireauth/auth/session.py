"""Authenticated session with proactive ID token refresh.

A ``Session`` is an immutable value. Each authenticated operation checks
whether the ID token is still fresh, refreshes it once when it is not, runs
the request and hands back a new ``Session`` along with the response data.
The old value is never mutated, so callers keep whichever one they last got.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from fireauth.api import endpoints
from fireauth.api.identity_toolkit import (
    ChangeEmailResponse,
    ChangePasswordResponse,
    LinkWithEmailPasswordResponse,
    SendOobCodeResponse,
    SignInWithIdpResponse,
    UnlinkProviderResponse,
    UpdateAccountRequest,
    UpdateAccountResponse,
    UpdateProfileResponse,
)
from fireauth.auth.models import UserData
from fireauth.core.exceptions import DeserializeError, InvalidArgumentError
from fireauth.core.types import (
    DeleteAttribute,
    DisplayName,
    Email,
    IdpPostBody,
    IdToken,
    OAuthRequestUri,
    Password,
    PhotoUrl,
    ProviderId,
    RefreshToken,
)

if TYPE_CHECKING:
    from fireauth.auth.config import Config

logger = logging.getLogger(__name__)


def parse_expires_in(value: str) -> timedelta:
    """Parse the ``expiresIn`` seconds string returned with every ID token."""
    try:
        seconds = int(value)
    except (TypeError, ValueError) as e:
        raise DeserializeError(f"Invalid expiresIn value: {value!r}") from e
    if seconds < 0:
        raise DeserializeError(f"Invalid expiresIn value: {value!r}")
    return timedelta(seconds=seconds)


def token_pair(id_token: str, refresh_token: str) -> tuple[IdToken, RefreshToken]:
    """Wrap a server-issued token pair, rejecting empty values."""
    try:
        return IdToken(id_token), RefreshToken(refresh_token)
    except InvalidArgumentError as e:
        raise DeserializeError("Server returned an empty token") from e


@dataclass(frozen=True, repr=False)
class Session:
    """Signed-in user: a matched ID/refresh token pair plus its lifetime."""

    config: Config
    id_token: IdToken
    refresh_token: RefreshToken
    expires_in: timedelta
    issued_at: datetime
    local_id: str | None
    email: str | None = None
    provider_id: str | None = None

    def __repr__(self) -> str:
        return (
            f"Session(local_id={self.local_id!r}, email={self.email!r}, "
            f"provider_id={self.provider_id!r}, expires_at={self.expires_at!r}, "
            "id_token='***', refresh_token='***')"
        )

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + self.expires_in

    @property
    def is_expired(self) -> bool:
        """True once the token is within the refresh margin of expiring."""
        return self.config.now() >= self.expires_at - self.config.refresh_margin

    async def refresh(self) -> Session:
        """Exchange the refresh token for a new token pair, unconditionally."""
        issued_at = self.config.now()
        response = await endpoints.exchange_refresh_token(
            self.config.http_client,
            self.config.api_key,
            {"grant_type": "refresh_token", "refresh_token": self.refresh_token},
            base_url=self.config.secure_token_url,
        )
        id_token, refresh_token = token_pair(
            response["id_token"], response["refresh_token"]
        )
        logger.debug(
            "Refreshed ID token: local_id=%s",
            response["user_id"],
            extra={"local_id": response["user_id"]},
        )
        return replace(
            self,
            id_token=id_token,
            refresh_token=refresh_token,
            expires_in=parse_expires_in(response["expires_in"]),
            issued_at=issued_at,
            local_id=response["user_id"],
        )

    async def _fresh(self) -> Session:
        if self.is_expired:
            return await self.refresh()
        return self

    def _rotated(
        self,
        response: UpdateAccountResponse | SignInWithIdpResponse,
        issued_at: datetime,
        **changes: str | None,
    ) -> Session:
        """Adopt tokens rotated by an update, but only as a complete pair."""
        new_id_token = response.get("idToken")
        new_refresh_token = response.get("refreshToken")
        if new_id_token and new_refresh_token:
            id_token, refresh_token = token_pair(new_id_token, new_refresh_token)
            expires_in = response.get("expiresIn")
            return replace(
                self,
                id_token=id_token,
                refresh_token=refresh_token,
                expires_in=(
                    parse_expires_in(expires_in) if expires_in else self.expires_in
                ),
                issued_at=issued_at,
                **changes,
            )
        return replace(self, **changes)

    async def _update(
        self, payload: UpdateAccountRequest
    ) -> tuple[Session, UpdateAccountResponse, datetime]:
        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.update_profile(
            session.config.http_client,
            session.config.api_key,
            {**payload, "idToken": session.id_token, "returnSecureToken": True},
            base_url=session.config.identity_toolkit_url,
        )
        return session, response, issued_at

    async def change_email(
        self, new_email: str, locale: str | None = None
    ) -> tuple[Session, ChangeEmailResponse]:
        email = Email(new_email)
        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.change_email(
            session.config.http_client,
            session.config.api_key,
            {"idToken": session.id_token, "email": email, "returnSecureToken": True},
            locale=locale or session.config.locale,
            base_url=session.config.identity_toolkit_url,
        )
        new_email_value = response.get("email", str(email))
        return session._rotated(response, issued_at, email=new_email_value), response

    async def change_password(
        self, new_password: str
    ) -> tuple[Session, ChangePasswordResponse]:
        password = Password(new_password)
        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.change_password(
            session.config.http_client,
            session.config.api_key,
            {
                "idToken": session.id_token,
                "password": password,
                "returnSecureToken": True,
            },
            base_url=session.config.identity_toolkit_url,
        )
        return session._rotated(response, issued_at), response

    async def update_profile(
        self, display_name: str | None = None, photo_url: str | None = None
    ) -> tuple[Session, UpdateProfileResponse]:
        payload: UpdateAccountRequest = {}
        if display_name is not None:
            payload["displayName"] = DisplayName(display_name)
        if photo_url is not None:
            payload["photoUrl"] = PhotoUrl(photo_url)
        if not payload:
            raise InvalidArgumentError("Pass display_name and/or photo_url")

        session, response, issued_at = await self._update(payload)
        return session._rotated(response, issued_at), response

    async def delete_profile(
        self, attributes: Iterable[DeleteAttribute | str]
    ) -> tuple[Session, UpdateProfileResponse]:
        """Clear the display name and/or photo URL."""
        try:
            names = sorted({DeleteAttribute(a).value for a in attributes})
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown profile attribute: {e}") from e
        if not names:
            raise InvalidArgumentError("attributes must not be empty")

        session, response, issued_at = await self._update(
            {"deleteAttribute": names}  # type: ignore[typeddict-item]
        )
        return session._rotated(response, issued_at), response

    async def get_user_data(self) -> tuple[Session, UserData]:
        session = await self._fresh()
        response = await endpoints.get_user_data(
            session.config.http_client,
            session.config.api_key,
            {"idToken": session.id_token},
            base_url=session.config.identity_toolkit_url,
        )
        if not response["users"]:
            raise DeserializeError("accounts:lookup returned no users")
        user = UserData.from_payload(response["users"][0])
        return (
            replace(session, local_id=user.local_id, email=user.email or session.email),
            user,
        )

    async def link_with_email_password(
        self, email: str, password: str
    ) -> tuple[Session, LinkWithEmailPasswordResponse]:
        email_value, password_value = Email(email), Password(password)
        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.link_with_email_password(
            session.config.http_client,
            session.config.api_key,
            {
                "idToken": session.id_token,
                "email": email_value,
                "password": password_value,
                "returnSecureToken": True,
            },
            base_url=session.config.identity_toolkit_url,
        )
        linked_email = response.get("email", str(email_value))
        return session._rotated(response, issued_at, email=linked_email), response

    async def link_with_oauth_credential(
        self, request_uri: str, post_body: IdpPostBody
    ) -> tuple[Session, SignInWithIdpResponse]:
        uri = OAuthRequestUri(request_uri)
        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.link_with_oauth_credential(
            session.config.http_client,
            session.config.api_key,
            {
                "idToken": session.id_token,
                "requestUri": uri,
                "postBody": post_body.encode(),
                "returnSecureToken": True,
                "returnIdpCredential": True,
            },
            base_url=session.config.identity_toolkit_url,
        )
        email = response.get("email") or session.email
        return session._rotated(response, issued_at, email=email), response

    async def unlink_provider(
        self, providers: Iterable[ProviderId | str]
    ) -> tuple[Session, UnlinkProviderResponse]:
        provider_ids = sorted({str(p) for p in providers})
        if not provider_ids or not all(p.strip() for p in provider_ids):
            raise InvalidArgumentError("providers must be non-empty provider ids")

        session = await self._fresh()
        issued_at = session.config.now()
        response = await endpoints.unlink_provider(
            session.config.http_client,
            session.config.api_key,
            {"idToken": session.id_token, "deleteProvider": provider_ids},
            base_url=session.config.identity_toolkit_url,
        )
        return session._rotated(response, issued_at), response

    async def send_email_verification(
        self, locale: str | None = None
    ) -> tuple[Session, SendOobCodeResponse]:
        session = await self._fresh()
        response = await endpoints.send_email_verification(
            session.config.http_client,
            session.config.api_key,
            {"requestType": "VERIFY_EMAIL", "idToken": session.id_token},
            locale=locale or session.config.locale,
            base_url=session.config.identity_toolkit_url,
        )
        return session, response

    async def delete_account(self) -> None:
        """Delete the user. The session must not be used afterwards."""
        session = await self._fresh()
        await endpoints.delete_account(
            session.config.http_client,
            session.config.api_key,
            {"idToken": session.id_token},
            base_url=session.config.identity_toolkit_url,
        )
        logger.debug(
            "Deleted account: local_id=%s",
            session.local_id,
            extra={"local_id": session.local_id},
        )
