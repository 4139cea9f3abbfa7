from fireauth.verification.exceptions import (
    ClaimMismatchError,
    InvalidSignatureError,
    MalformedTokenError,
    PublicKeyFetchError,
    TokenExpiredError,
    VerificationError,
)
from fireauth.verification.keys import CERTIFICATES_URL, PublicKeyCache
from fireauth.verification.verifier import IdTokenClaims, VerificationConfig

__all__ = [
    "CERTIFICATES_URL",
    "ClaimMismatchError",
    "IdTokenClaims",
    "InvalidSignatureError",
    "MalformedTokenError",
    "PublicKeyCache",
    "PublicKeyFetchError",
    "TokenExpiredError",
    "VerificationConfig",
    "VerificationError",
]
