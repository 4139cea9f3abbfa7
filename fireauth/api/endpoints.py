"""Raw endpoint layer: one coroutine per Firebase Auth REST operation.

Every function takes the HTTP client, the API key and a typed request
payload, issues exactly one request, and returns the typed response payload.
Callers that want automatic token refresh should use ``Session`` instead.
"""

import httpx

from fireauth.api.identity_toolkit import (
    IDENTITY_TOOLKIT_ENDPOINT_PATHS,
    SECURE_TOKEN_ENDPOINT_PATHS,
    ChangeEmailResponse,
    ChangePasswordResponse,
    ConfirmEmailVerificationResponse,
    CreateAuthUriRequest,
    CreateAuthUriResponse,
    DeleteAccountRequest,
    DeleteAccountResponse,
    LinkWithEmailPasswordResponse,
    LookupRequest,
    LookupResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    SendOobCodeRequest,
    SendOobCodeResponse,
    SignInWithCustomTokenRequest,
    SignInWithCustomTokenResponse,
    SignInWithIdpRequest,
    SignInWithIdpResponse,
    SignInWithPasswordRequest,
    SignInWithPasswordResponse,
    SignUpRequest,
    SignUpResponse,
    UnlinkProviderResponse,
    UpdateAccountRequest,
    UpdateProfileResponse,
)
from fireauth.api.transport import locale_headers, post_form, post_json
from fireauth.core.settings import IDENTITY_TOOLKIT_URL, SECURE_TOKEN_URL


def _identity_toolkit(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/{IDENTITY_TOOLKIT_ENDPOINT_PATHS[name]}"


def _secure_token(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/{SECURE_TOKEN_ENDPOINT_PATHS[name]}"


async def exchange_custom_token(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignInWithCustomTokenRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignInWithCustomTokenResponse:
    """Exchange a server-minted custom token for an ID and refresh token."""
    return await post_json(
        client,
        _identity_toolkit(base_url, "signInWithCustomToken"),
        api_key,
        payload,
        SignInWithCustomTokenResponse,
    )


async def exchange_refresh_token(
    client: httpx.AsyncClient,
    api_key: str,
    payload: RefreshTokenRequest,
    *,
    base_url: str = SECURE_TOKEN_URL,
) -> RefreshTokenResponse:
    """Exchange a refresh token for a new ID token.

    Unlike every other endpoint this one takes a form-encoded body and
    answers with snake_case keys.
    """
    return await post_form(
        client,
        _secure_token(base_url, "token"),
        api_key,
        payload,
        RefreshTokenResponse,
    )


async def sign_up_with_email_password(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignUpRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignUpResponse:
    return await post_json(
        client, _identity_toolkit(base_url, "signUp"), api_key, payload, SignUpResponse
    )


async def sign_in_with_email_password(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignInWithPasswordRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignInWithPasswordResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "signInWithPassword"),
        api_key,
        payload,
        SignInWithPasswordResponse,
    )


async def sign_in_anonymously(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignUpRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignUpResponse:
    """Create an anonymous user; same endpoint as sign-up, no credentials."""
    return await post_json(
        client, _identity_toolkit(base_url, "signUp"), api_key, payload, SignUpResponse
    )


async def sign_in_with_oauth_credential(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignInWithIdpRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignInWithIdpResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "signInWithIdp"),
        api_key,
        payload,
        SignInWithIdpResponse,
    )


async def fetch_providers_for_email(
    client: httpx.AsyncClient,
    api_key: str,
    payload: CreateAuthUriRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> CreateAuthUriResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "createAuthUri"),
        api_key,
        payload,
        CreateAuthUriResponse,
    )


async def send_password_reset_email(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SendOobCodeRequest,
    *,
    locale: str | None = None,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SendOobCodeResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "sendOobCode"),
        api_key,
        payload,
        SendOobCodeResponse,
        headers=locale_headers(locale),
    )


async def verify_password_reset_code(
    client: httpx.AsyncClient,
    api_key: str,
    payload: ResetPasswordRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> ResetPasswordResponse:
    """Check a reset code without consuming it (payload carries no password)."""
    return await post_json(
        client,
        _identity_toolkit(base_url, "resetPassword"),
        api_key,
        payload,
        ResetPasswordResponse,
    )


async def confirm_password_reset(
    client: httpx.AsyncClient,
    api_key: str,
    payload: ResetPasswordRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> ResetPasswordResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "resetPassword"),
        api_key,
        payload,
        ResetPasswordResponse,
    )


async def change_email(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    locale: str | None = None,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> ChangeEmailResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        ChangeEmailResponse,
        headers=locale_headers(locale),
    )


async def change_password(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> ChangePasswordResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        ChangePasswordResponse,
    )


async def update_profile(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> UpdateProfileResponse:
    """Set or delete the display name and photo URL."""
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        UpdateProfileResponse,
    )


async def get_user_data(
    client: httpx.AsyncClient,
    api_key: str,
    payload: LookupRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> LookupResponse:
    return await post_json(
        client, _identity_toolkit(base_url, "lookup"), api_key, payload, LookupResponse
    )


async def link_with_email_password(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> LinkWithEmailPasswordResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        LinkWithEmailPasswordResponse,
    )


async def link_with_oauth_credential(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SignInWithIdpRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SignInWithIdpResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "signInWithIdp"),
        api_key,
        payload,
        SignInWithIdpResponse,
    )


async def unlink_provider(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> UnlinkProviderResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        UnlinkProviderResponse,
    )


async def send_email_verification(
    client: httpx.AsyncClient,
    api_key: str,
    payload: SendOobCodeRequest,
    *,
    locale: str | None = None,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> SendOobCodeResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "sendOobCode"),
        api_key,
        payload,
        SendOobCodeResponse,
        headers=locale_headers(locale),
    )


async def confirm_email_verification(
    client: httpx.AsyncClient,
    api_key: str,
    payload: UpdateAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> ConfirmEmailVerificationResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "update"),
        api_key,
        payload,
        ConfirmEmailVerificationResponse,
    )


async def delete_account(
    client: httpx.AsyncClient,
    api_key: str,
    payload: DeleteAccountRequest,
    *,
    base_url: str = IDENTITY_TOOLKIT_URL,
) -> DeleteAccountResponse:
    return await post_json(
        client,
        _identity_toolkit(base_url, "delete"),
        api_key,
        payload,
        DeleteAccountResponse,
    )
