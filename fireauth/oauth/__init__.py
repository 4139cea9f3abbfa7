"""OAuth helpers for obtaining IdP credentials (install with the ``oauth`` extra)."""

from fireauth.oauth.client import (
    AuthorizationCodeClient,
    AuthorizationCodeSession,
    OAuthToken,
)
from fireauth.oauth.device import (
    DeviceCodeClient,
    DeviceCodeSession,
    FacebookDeviceCodeClient,
)
from fireauth.oauth.exceptions import (
    AuthorizationDeniedError,
    DeviceAuthorizationError,
    DeviceCodeExpiredError,
    OAuthFlowError,
    RedirectServerError,
    RedirectTimeoutError,
    StateMismatchError,
    TokenExchangeError,
)
from fireauth.oauth.providers import (
    FACEBOOK,
    GITHUB,
    GOOGLE,
    GOOGLE_DEVICE,
    MICROSOFT,
    TWITTER,
    DeviceCodeProvider,
    OAuthProvider,
)
from fireauth.oauth.receiver import AuthorizationResponse, receive_redirect

__all__ = [
    "FACEBOOK",
    "GITHUB",
    "GOOGLE",
    "GOOGLE_DEVICE",
    "MICROSOFT",
    "TWITTER",
    "AuthorizationCodeClient",
    "AuthorizationCodeSession",
    "AuthorizationDeniedError",
    "AuthorizationResponse",
    "DeviceAuthorizationError",
    "DeviceCodeClient",
    "DeviceCodeExpiredError",
    "DeviceCodeProvider",
    "DeviceCodeSession",
    "FacebookDeviceCodeClient",
    "OAuthFlowError",
    "OAuthProvider",
    "OAuthToken",
    "RedirectServerError",
    "RedirectTimeoutError",
    "StateMismatchError",
    "TokenExchangeError",
    "receive_redirect",
]
