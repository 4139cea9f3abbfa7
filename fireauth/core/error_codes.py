"""Stable error identifiers reported by the Firebase Auth REST API.

The service puts the identifier at the front of the error envelope's
``message`` field, optionally followed by `` : <human readable detail>``.
"""

import re
from enum import StrEnum

_CODE_PATTERN = re.compile(r"[A-Z][A-Z0-9_]*")
_INVALID_JSON_PREFIX = "Invalid JSON payload received"


class CommonErrorCode(StrEnum):
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"
    TOO_MANY_ATTEMPTS_TRY_LATER = "TOO_MANY_ATTEMPTS_TRY_LATER"
    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_CUSTOM_TOKEN = "INVALID_CUSTOM_TOKEN"
    INVALID_ID_TOKEN = "INVALID_ID_TOKEN"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    INVALID_JSON_PAYLOAD_RECEIVED = "INVALID_JSON_PAYLOAD_RECEIVED"
    INVALID_GRANT_TYPE = "INVALID_GRANT_TYPE"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_IDP_RESPONSE = "INVALID_IDP_RESPONSE"
    INVALID_CREDENTIAL_OR_PROVIDER_ID = "INVALID_CREDENTIAL_OR_PROVIDER_ID"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_LOGIN_CREDENTIALS = "INVALID_LOGIN_CREDENTIALS"
    CREDENTIAL_MISMATCH = "CREDENTIAL_MISMATCH"
    CREDENTIAL_TOO_OLD_LOGIN_AGAIN = "CREDENTIAL_TOO_OLD_LOGIN_AGAIN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    USER_DISABLED = "USER_DISABLED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MISSING_REFRESH_TOKEN = "MISSING_REFRESH_TOKEN"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    PASSWORD_DOES_NOT_MEET_REQUIREMENTS = "PASSWORD_DOES_NOT_MEET_REQUIREMENTS"
    FEDERATED_USER_ID_ALREADY_LINKED = "FEDERATED_USER_ID_ALREADY_LINKED"
    EXPIRED_OOB_CODE = "EXPIRED_OOB_CODE"
    INVALID_OOB_CODE = "INVALID_OOB_CODE"
    ADMIN_ONLY_OPERATION = "ADMIN_ONLY_OPERATION"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, message: str | None) -> "CommonErrorCode":
        """Map an error envelope message to a code, falling back to UNKNOWN."""
        if not message:
            return cls.UNKNOWN
        if message.startswith(_INVALID_JSON_PREFIX):
            return cls.INVALID_JSON_PAYLOAD_RECEIVED

        match = _CODE_PATTERN.match(message)
        if match is None:
            return cls.UNKNOWN
        try:
            return cls(match.group(0))
        except ValueError:
            return cls.UNKNOWN


def sanitize_error_code(message: str | None) -> str:
    """Extract a safe, non-sensitive error code for logging."""
    match = _CODE_PATTERN.match(message or "")
    return match.group(0) if match else "UNKNOWN"
