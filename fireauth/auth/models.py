"""Account data returned by accounts:lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from fireauth.api.identity_toolkit import ProviderUserInfo as ProviderUserInfoPayload
from fireauth.api.identity_toolkit import UserInfo
from fireauth.core.exceptions import DeserializeError


def _from_millis(value: str | float | None) -> datetime | None:
    """Convert an epoch-milliseconds value (string or number) to UTC datetime."""
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(int(float(value)) / 1000, tz=UTC)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise DeserializeError(f"Invalid timestamp in user data: {value!r}") from e


def _from_seconds(value: str | None) -> datetime | None:
    if not value:
        return None
    if not value.isdigit():
        raise DeserializeError(f"Invalid timestamp in user data: {value!r}")
    return _from_millis(int(value) * 1000)


def _from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise DeserializeError(f"Invalid timestamp in user data: {value!r}") from e


@dataclass(frozen=True)
class ProviderUserInfo:
    """A provider linked to the account."""

    provider_id: str
    federated_id: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    email: str | None = None
    raw_id: str | None = None
    screen_name: str | None = None

    @classmethod
    def from_payload(cls, payload: ProviderUserInfoPayload) -> ProviderUserInfo:
        return cls(
            provider_id=payload["providerId"],
            federated_id=payload.get("federatedId"),
            display_name=payload.get("displayName"),
            photo_url=payload.get("photoUrl"),
            email=payload.get("email"),
            raw_id=payload.get("rawId"),
            screen_name=payload.get("screenName"),
        )


@dataclass(frozen=True)
class UserData:
    """Profile and account state of the signed-in user."""

    local_id: str
    email: str | None = None
    email_verified: bool = False
    display_name: str | None = None
    photo_url: str | None = None
    provider_user_info: tuple[ProviderUserInfo, ...] = field(default_factory=tuple)
    password_hash: str | None = None
    password_updated_at: datetime | None = None
    valid_since: datetime | None = None
    disabled: bool = False
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    last_refresh_at: datetime | None = None
    custom_auth: bool = False

    @property
    def provider_ids(self) -> list[str]:
        return [info.provider_id for info in self.provider_user_info]

    @classmethod
    def from_payload(cls, payload: UserInfo) -> UserData:
        return cls(
            local_id=payload["localId"],
            email=payload.get("email"),
            email_verified=payload.get("emailVerified", False),
            display_name=payload.get("displayName"),
            photo_url=payload.get("photoUrl"),
            provider_user_info=tuple(
                ProviderUserInfo.from_payload(info)
                for info in payload.get("providerUserInfo", [])
            ),
            password_hash=payload.get("passwordHash"),
            password_updated_at=_from_millis(payload.get("passwordUpdatedAt")),
            valid_since=_from_seconds(payload.get("validSince")),
            disabled=payload.get("disabled", False),
            last_login_at=_from_millis(payload.get("lastLoginAt")),
            created_at=_from_millis(payload.get("createdAt")),
            last_refresh_at=_from_iso(payload.get("lastRefreshAt")),
            custom_auth=payload.get("customAuth", False),
        )
