from dataclasses import dataclass

from fireauth.core.types import ProviderId


@dataclass(frozen=True)
class OAuthProvider:
    """Authorization code endpoints of an identity provider."""

    provider_id: ProviderId
    authorize_url: str
    token_url: str
    default_scopes: tuple[str, ...]
    use_pkce: bool = True
    # Extra query parameters for the authorization URL.
    authorize_params: tuple[tuple[str, str], ...] = ()


GOOGLE = OAuthProvider(
    provider_id=ProviderId.GOOGLE,
    authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
    token_url="https://www.googleapis.com/oauth2/v4/token",
    default_scopes=("openid", "email", "profile"),
    authorize_params=(("prompt", "select_account"),),
)

GITHUB = OAuthProvider(
    provider_id=ProviderId.GITHUB,
    authorize_url="https://github.com/login/oauth/authorize",
    token_url="https://github.com/login/oauth/access_token",
    default_scopes=("read:user", "user:email"),
    use_pkce=False,
)

FACEBOOK = OAuthProvider(
    provider_id=ProviderId.FACEBOOK,
    authorize_url="https://www.facebook.com/v19.0/dialog/oauth",
    token_url="https://graph.facebook.com/v19.0/oauth/access_token",
    default_scopes=("email", "public_profile"),
)

MICROSOFT = OAuthProvider(
    provider_id=ProviderId.MICROSOFT,
    authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
    token_url="https://login.microsoftonline.com/common/oauth2/v2.0/token",
    default_scopes=("openid", "email", "profile"),
)

# Public client: no secret, PKCE only.
TWITTER = OAuthProvider(
    provider_id=ProviderId.TWITTER,
    authorize_url="https://twitter.com/i/oauth2/authorize",
    token_url="https://api.twitter.com/2/oauth2/token",
    default_scopes=("tweet.read", "users.read"),
)


@dataclass(frozen=True)
class DeviceCodeProvider:
    """Device authorization grant (RFC 8628) endpoints of an identity provider."""

    provider_id: ProviderId
    device_authorization_url: str
    token_url: str
    default_scopes: tuple[str, ...]


GOOGLE_DEVICE = DeviceCodeProvider(
    provider_id=ProviderId.GOOGLE,
    device_authorization_url="https://oauth2.googleapis.com/device/code",
    token_url="https://www.googleapis.com/oauth2/v4/token",
    default_scopes=("openid", "email", "profile"),
)
