from fireauth.core.exceptions import FireauthError


class VerificationError(FireauthError):
    """Base class for ID token verification failures."""

    error_type = "verification_error"
    kind: str = "invalid"

    def __init__(self, message: str = "Invalid ID token"):
        super().__init__(message)


class MalformedTokenError(VerificationError):
    """Token is not a decodable RS256 JWT with a key id."""

    kind = "malformed"


class TokenExpiredError(VerificationError):
    kind = "expired"

    def __init__(self, message: str = "ID token has expired"):
        super().__init__(message)


class InvalidSignatureError(VerificationError):
    """Signature does not verify, or no public key matches the key id."""

    kind = "signature_invalid"


class ClaimMismatchError(VerificationError):
    kind = "claim_mismatch"


class PublicKeyFetchError(VerificationError):
    """The public certificates could not be fetched or parsed."""

    kind = "key_fetch_failed"

    def __init__(self, message: str = "Failed to fetch public keys"):
        super().__init__(message)
