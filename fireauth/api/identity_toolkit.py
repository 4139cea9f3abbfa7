from typing import Literal

from typing_extensions import NotRequired, TypedDict

# Constants
IDENTITY_TOOLKIT_ENDPOINT_PATHS: dict[str, str] = {
    "signInWithCustomToken": "v1/accounts:signInWithCustomToken",
    "signUp": "v1/accounts:signUp",
    "signInWithPassword": "v1/accounts:signInWithPassword",
    "signInWithIdp": "v1/accounts:signInWithIdp",
    "createAuthUri": "v1/accounts:createAuthUri",
    "sendOobCode": "v1/accounts:sendOobCode",
    "resetPassword": "v1/accounts:resetPassword",
    "update": "v1/accounts:update",
    "lookup": "v1/accounts:lookup",
    "delete": "v1/accounts:delete",
}
SECURE_TOKEN_ENDPOINT_PATHS: dict[str, str] = {
    "token": "v1/token",
}


# Error envelope
class ErrorElement(TypedDict, total=False):
    domain: str
    reason: str
    message: str


class ErrorBody(TypedDict):
    code: int
    message: str
    errors: NotRequired[list[ErrorElement]]
    status: NotRequired[str]


class ErrorEnvelope(TypedDict):
    """Body of every non-2xx response from both services."""

    error: ErrorBody


# Shared fragments
class ProviderUserInfo(TypedDict):
    providerId: str
    federatedId: NotRequired[str]
    displayName: NotRequired[str]
    photoUrl: NotRequired[str]
    email: NotRequired[str]
    rawId: NotRequired[str]
    screenName: NotRequired[str]
    phoneNumber: NotRequired[str]


class UserInfo(TypedDict):
    """One entry of the accounts:lookup ``users`` list."""

    localId: str
    email: NotRequired[str]
    emailVerified: NotRequired[bool]
    displayName: NotRequired[str]
    photoUrl: NotRequired[str]
    providerUserInfo: NotRequired[list[ProviderUserInfo]]
    passwordHash: NotRequired[str]
    passwordUpdatedAt: NotRequired[float]
    validSince: NotRequired[str]
    disabled: NotRequired[bool]
    lastLoginAt: NotRequired[str]
    createdAt: NotRequired[str]
    lastRefreshAt: NotRequired[str]
    customAuth: NotRequired[bool]


# accounts:signInWithCustomToken
class SignInWithCustomTokenRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-verify-custom-token"""

    token: str
    returnSecureToken: bool
    tenantId: NotRequired[str]


class SignInWithCustomTokenResponse(TypedDict):
    idToken: str
    refreshToken: str
    expiresIn: str  # Token expiration time in seconds
    kind: NotRequired[str]
    isNewUser: NotRequired[bool]


# token (Secure Token API, form encoded)
class RefreshTokenRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-refresh-token"""

    grant_type: Literal["refresh_token"]
    refresh_token: str


class RefreshTokenResponse(TypedDict):
    expires_in: str
    token_type: str
    refresh_token: str
    id_token: str
    user_id: str
    project_id: str
    access_token: NotRequired[str]


# accounts:signUp
class SignUpRequest(TypedDict):
    """Sign-up with e-mail/password, or anonymous sign-in when both are omitted.

    https://firebase.google.com/docs/reference/rest/auth#section-create-email-password
    """

    returnSecureToken: bool
    email: NotRequired[str]
    password: NotRequired[str]
    displayName: NotRequired[str]
    tenantId: NotRequired[str]


class SignUpResponse(TypedDict):
    idToken: str
    refreshToken: str
    expiresIn: str
    localId: str
    email: NotRequired[str]  # Absent for anonymous users
    kind: NotRequired[str]


# accounts:signInWithPassword
class SignInWithPasswordRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-sign-in-email-password"""

    email: str
    password: str
    returnSecureToken: bool
    tenantId: NotRequired[str]
    clientType: NotRequired[
        Literal[
            "CLIENT_TYPE_UNSPECIFIED",
            "CLIENT_TYPE_WEB",
            "CLIENT_TYPE_ANDROID",
            "CLIENT_TYPE_IOS",
        ]
    ]


class SignInWithPasswordResponse(TypedDict):
    localId: str  # The UID of the authenticated user
    email: str
    idToken: str
    refreshToken: str
    expiresIn: str
    registered: NotRequired[bool]
    displayName: NotRequired[str]
    kind: NotRequired[str]


# accounts:signInWithIdp
class SignInWithIdpRequest(TypedDict):
    """Sign in or link with an OAuth credential.

    https://firebase.google.com/docs/reference/rest/auth#section-sign-in-with-oauth-credential
    """

    requestUri: str
    postBody: str  # URL-encoded provider credential + providerId
    returnSecureToken: bool
    returnIdpCredential: bool
    idToken: NotRequired[str]  # Present when linking to an existing account


class SignInWithIdpResponse(TypedDict):
    providerId: str
    localId: str
    idToken: str
    refreshToken: str
    expiresIn: str
    federatedId: NotRequired[str]
    emailVerified: NotRequired[bool]
    email: NotRequired[str]
    oauthIdToken: NotRequired[str]
    oauthAccessToken: NotRequired[str]
    oauthTokenSecret: NotRequired[str]
    rawUserInfo: NotRequired[str]
    firstName: NotRequired[str]
    lastName: NotRequired[str]
    fullName: NotRequired[str]
    displayName: NotRequired[str]
    photoUrl: NotRequired[str]
    needConfirmation: NotRequired[bool]
    isNewUser: NotRequired[bool]
    kind: NotRequired[str]


# accounts:createAuthUri
class CreateAuthUriRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-fetch-providers-for-email"""

    identifier: str
    continueUri: str


class CreateAuthUriResponse(TypedDict, total=False):
    kind: str
    allProviders: list[str]
    registered: bool
    sessionId: str
    signinMethods: list[str]


# accounts:sendOobCode
class SendOobCodeRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-send-password-reset-email"""

    requestType: Literal["PASSWORD_RESET", "VERIFY_EMAIL", "VERIFY_AND_CHANGE_EMAIL"]
    email: NotRequired[str]  # Required for PASSWORD_RESET
    idToken: NotRequired[str]  # Required for VERIFY_EMAIL
    newEmail: NotRequired[str]  # Required for VERIFY_AND_CHANGE_EMAIL
    continueUrl: NotRequired[str]


class SendOobCodeResponse(TypedDict, total=False):
    kind: str
    email: str


# accounts:resetPassword
class ResetPasswordRequest(TypedDict):
    """Verify a reset code (oobCode only) or confirm the reset (with newPassword).

    https://firebase.google.com/docs/reference/rest/auth#section-confirm-reset-password
    """

    oobCode: str  # Out-of-band code from password reset email
    newPassword: NotRequired[str]
    tenantId: NotRequired[str]


class ResetPasswordResponse(TypedDict):
    email: str
    requestType: NotRequired[str]
    kind: NotRequired[str]


# accounts:update
class UpdateAccountRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-update-profile"""

    idToken: NotRequired[str]  # Required for authenticated updates
    oobCode: NotRequired[str]  # For email verification confirmation
    password: NotRequired[str]  # New password
    email: NotRequired[str]  # New email
    displayName: NotRequired[str]
    photoUrl: NotRequired[str]
    deleteAttribute: NotRequired[list[Literal["DISPLAY_NAME", "PHOTO_URL"]]]
    deleteProvider: NotRequired[list[str]]
    returnSecureToken: NotRequired[bool]


class UpdateAccountResponse(TypedDict):
    localId: NotRequired[str]
    email: NotRequired[str]
    displayName: NotRequired[str]
    photoUrl: NotRequired[str]
    passwordHash: NotRequired[str]
    providerUserInfo: NotRequired[list[ProviderUserInfo]]
    emailVerified: NotRequired[bool]
    idToken: NotRequired[str]  # New ID token (if returnSecureToken=true)
    refreshToken: NotRequired[str]
    expiresIn: NotRequired[str]
    kind: NotRequired[str]


# accounts:update is one endpoint behind several operations.
ChangeEmailResponse = UpdateAccountResponse
ChangePasswordResponse = UpdateAccountResponse
UpdateProfileResponse = UpdateAccountResponse
LinkWithEmailPasswordResponse = UpdateAccountResponse
UnlinkProviderResponse = UpdateAccountResponse
ConfirmEmailVerificationResponse = UpdateAccountResponse


# accounts:lookup
class LookupRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-get-account-info"""

    idToken: str


class LookupResponse(TypedDict):
    users: list[UserInfo]
    kind: NotRequired[str]


# accounts:delete
class DeleteAccountRequest(TypedDict):
    """https://firebase.google.com/docs/reference/rest/auth#section-delete-account"""

    idToken: str


class DeleteAccountResponse(TypedDict, total=False):
    kind: str
