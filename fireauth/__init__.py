"""Async typed client for the Firebase Auth REST API.

Sign in through ``Config`` to get a ``Session``; every authenticated
operation on the session refreshes its ID token first when needed and
returns the next ``Session`` value.
"""

from fireauth.auth.config import Config
from fireauth.auth.models import ProviderUserInfo, UserData
from fireauth.auth.session import Session
from fireauth.core.error_codes import CommonErrorCode
from fireauth.core.exceptions import (
    ApiError,
    DeserializeError,
    FireauthError,
    HttpRequestError,
    InvalidArgumentError,
)
from fireauth.core.http import create_http_client
from fireauth.core.logging import configure_logging
from fireauth.core.settings import FireauthSettings, get_settings
from fireauth.core.types import (
    DeleteAttribute,
    IdpPostBody,
    LanguageCode,
    ProviderId,
)

__all__ = [
    "ApiError",
    "CommonErrorCode",
    "Config",
    "DeleteAttribute",
    "DeserializeError",
    "FireauthError",
    "FireauthSettings",
    "HttpRequestError",
    "IdpPostBody",
    "InvalidArgumentError",
    "LanguageCode",
    "ProviderId",
    "ProviderUserInfo",
    "Session",
    "UserData",
    "configure_logging",
    "create_http_client",
    "get_settings",
]
