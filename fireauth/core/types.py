"""Value types shared by the endpoint, session and OAuth layers.

Identifiers are plain ``str`` subclasses so they drop straight into request
payloads; construction rejects empty values before anything reaches the wire.
Everything else is validated by the service.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from urllib.parse import urlencode

from fireauth.core.exceptions import InvalidArgumentError


class _NonEmptyStr(str):
    __slots__ = ()

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise InvalidArgumentError(f"{cls.__name__} must be a string")
        if not value.strip():
            raise InvalidArgumentError(f"{cls.__name__} must not be empty")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class _SecretStr(_NonEmptyStr):
    __slots__ = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}('***')"


class ApiKey(_NonEmptyStr):
    __slots__ = ()


class ProjectId(_NonEmptyStr):
    __slots__ = ()


class Email(_NonEmptyStr):
    __slots__ = ()


class Password(_SecretStr):
    __slots__ = ()


class IdToken(_SecretStr):
    __slots__ = ()


class RefreshToken(_SecretStr):
    __slots__ = ()


class CustomToken(_SecretStr):
    __slots__ = ()


class OobCode(_SecretStr):
    """Out-of-band code from a password reset or verification e-mail."""

    __slots__ = ()


class DisplayName(_NonEmptyStr):
    __slots__ = ()


class PhotoUrl(_NonEmptyStr):
    __slots__ = ()


class OAuthRequestUri(_NonEmptyStr):
    """URI the IdP redirected back to; sent as ``requestUri``."""

    __slots__ = ()


class ProviderId(StrEnum):
    PASSWORD = "password"
    APPLE = "apple.com"
    APPLE_GAME_CENTER = "gc.apple.com"
    FACEBOOK = "facebook.com"
    GITHUB = "github.com"
    GOOGLE = "google.com"
    GOOGLE_PLAY_GAMES = "playgames.google.com"
    LINKEDIN = "linkedin.com"
    MICROSOFT = "microsoft.com"
    TWITTER = "twitter.com"
    YAHOO = "yahoo.com"

    @classmethod
    def try_parse(cls, value: str) -> ProviderId | None:
        try:
            return cls(value)
        except ValueError:
            return None


class DeleteAttribute(StrEnum):
    DISPLAY_NAME = "DISPLAY_NAME"
    PHOTO_URL = "PHOTO_URL"


class LanguageCode(StrEnum):
    """Locales accepted by the ``X-Firebase-Locale`` header."""

    AR_SA = "ar-SA"
    BN_BD = "bn-BD"
    BN_IN = "bn-IN"
    CS_CZ = "cs-CZ"
    DA_DK = "da-DK"
    DE_AT = "de-AT"
    DE_CH = "de-CH"
    DE_DE = "de-DE"
    EL_GR = "el-GR"
    EN_AU = "en-AU"
    EN_CA = "en-CA"
    EN_GB = "en-GB"
    EN_IE = "en-IE"
    EN_IN = "en-IN"
    EN_NZ = "en-NZ"
    EN_US = "en-US"
    EN_ZA = "en-ZA"
    ES_AR = "es-AR"
    ES_CL = "es-CL"
    ES_CO = "es-CO"
    ES_ES = "es-ES"
    ES_MX = "es-MX"
    ES_US = "es-US"
    FI_FI = "fi-FI"
    FR_BE = "fr-BE"
    FR_CA = "fr-CA"
    FR_CH = "fr-CH"
    FR_FR = "fr-FR"
    HE_IL = "he-IL"
    HI_IN = "hi-IN"
    HU_HU = "hu-HU"
    ID_ID = "id-ID"
    IT_CH = "it-CH"
    IT_IT = "it-IT"
    JA_JP = "ja-JP"
    KO_KR = "ko-KR"
    NL_BE = "nl-BE"
    NL_NL = "nl-NL"
    NO_NO = "no-NO"
    PL_PL = "pl-PL"
    PT_BR = "pt-BR"
    PT_PT = "pt-PT"
    RO_RO = "ro-RO"
    RU_RU = "ru-RU"
    SK_SK = "sk-SK"
    SV_SE = "sv-SE"
    TA_IN = "ta-IN"
    TA_LK = "ta-LK"
    TH_TH = "th-TH"
    TR_TR = "tr-TR"
    ZH_CN = "zh-CN"
    ZH_HK = "zh-HK"
    ZH_TW = "zh-TW"


def _require(name: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{name} must not be empty")
    return value


@dataclass(frozen=True)
class IdpPostBody:
    """Provider credential sent as ``postBody`` to ``accounts:signInWithIdp``.

    Use the per-provider constructors; each one enforces the keys the
    provider requires.
    """

    provider_id: ProviderId | str
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require("provider_id", self.provider_id)
        if not self.params:
            raise InvalidArgumentError("IdpPostBody requires at least one credential")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def encode(self) -> str:
        """Return the URL-encoded form the API expects."""
        return urlencode({**self.params, "providerId": str(self.provider_id)})

    def __repr__(self) -> str:
        keys = sorted(self.params)
        return f"IdpPostBody(provider_id={str(self.provider_id)!r}, keys={keys})"

    @classmethod
    def google(
        cls, *, id_token: str | None = None, access_token: str | None = None
    ) -> IdpPostBody:
        params: dict[str, str] = {}
        if id_token:
            params["id_token"] = id_token
        if access_token:
            params["access_token"] = access_token
        if not params:
            raise InvalidArgumentError("Google requires an id_token or access_token")
        return cls(ProviderId.GOOGLE, params)

    @classmethod
    def facebook(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.FACEBOOK, access_token)

    @classmethod
    def github(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.GITHUB, access_token)

    @classmethod
    def microsoft(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.MICROSOFT, access_token)

    @classmethod
    def yahoo(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.YAHOO, access_token)

    @classmethod
    def linkedin(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.LINKEDIN, access_token)

    @classmethod
    def apple(cls, access_token: str) -> IdpPostBody:
        return cls._access_token(ProviderId.APPLE, access_token)

    @classmethod
    def twitter(cls, access_token: str, oauth_token_secret: str) -> IdpPostBody:
        return cls(
            ProviderId.TWITTER,
            {
                "access_token": _require("access_token", access_token),
                "oauth_token_secret": _require(
                    "oauth_token_secret", oauth_token_secret
                ),
            },
        )

    @classmethod
    def _access_token(cls, provider_id: ProviderId, access_token: str):
        token = _require("access_token", access_token)
        return cls(provider_id, {"access_token": token})
