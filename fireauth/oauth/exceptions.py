from fireauth.core.exceptions import FireauthError


class OAuthFlowError(FireauthError):
    """Base class for authorization code flow failures."""

    error_type = "oauth_error"


class StateMismatchError(OAuthFlowError):
    """Redirect ``state`` does not match the one the flow started with."""

    error_type = "state_mismatch"

    def __init__(self, message: str = "OAuth state mismatch"):
        super().__init__(message)


class TokenExchangeError(OAuthFlowError):
    error_type = "token_exchange_failed"

    def __init__(self, message: str = "OAuth token exchange failed"):
        super().__init__(message)


class AuthorizationDeniedError(OAuthFlowError):
    """The provider redirected back with an ``error`` parameter."""

    error_type = "authorization_denied"

    def __init__(self, error: str, description: str | None = None):
        self.error = error
        self.description = description
        message = f"Authorization denied: {error}"
        if description:
            message = f"{message} ({description})"
        super().__init__(message)


class RedirectTimeoutError(OAuthFlowError):
    error_type = "redirect_timeout"

    def __init__(self, message: str = "Timed out waiting for the OAuth redirect"):
        super().__init__(message)


class RedirectServerError(OAuthFlowError):
    """The local redirect receiver could not start serving."""

    error_type = "redirect_server_failed"


class DeviceAuthorizationError(OAuthFlowError):
    """The device authorization request was rejected or malformed."""

    error_type = "device_authorization_failed"

    def __init__(self, message: str = "Device authorization request failed"):
        super().__init__(message)


class DeviceCodeExpiredError(OAuthFlowError):
    """The user did not approve the device code before it expired."""

    error_type = "device_code_expired"

    def __init__(self, message: str = "Device code expired before approval"):
        super().__init__(message)
