"""Library-wide exception hierarchy.

Every fallible operation raises one of the classes below. The set is closed:
transport failures, schema failures, structured API failures, and local
argument validation failures.
"""

from __future__ import annotations

import contextlib
from typing import Any

from fireauth.core.error_codes import CommonErrorCode


class FireauthError(Exception):
    """Base exception for all library errors.

    Subclasses define their own error_type for consistent handling.
    """

    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


class HttpRequestError(FireauthError):
    """Raised when the request never produced a response.

    Connection, timeout and TLS failures land here. The underlying
    httpx exception is available as __cause__.
    """

    error_type = "http_request_error"

    def __init__(self, message: str = "Authentication service unavailable"):
        super().__init__(message)


class DeserializeError(FireauthError):
    """Raised when a response body does not match the expected schema."""

    error_type = "deserialize_error"

    def __init__(
        self,
        message: str = "Authentication service returned an invalid response",
        *,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ApiError(FireauthError):
    """Raised when the service answers with a structured error envelope."""

    error_type = "api_error"

    def __init__(
        self,
        status_code: int,
        error_code: CommonErrorCode,
        message: str,
        *,
        response: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.response = response or {}
        self.headers = headers or {}
        self.detail = _detail_of(message)
        super().__init__(message)

    def __str__(self) -> str:
        return f"({self.status_code}) {self.error_code}: {self.message}"

    @property
    def is_invalid_credentials(self) -> bool:
        return self.error_code in {
            CommonErrorCode.INVALID_LOGIN_CREDENTIALS,
            CommonErrorCode.INVALID_PASSWORD,
            CommonErrorCode.EMAIL_NOT_FOUND,
        }

    @property
    def is_rate_limited(self) -> bool:
        return (
            self.status_code == 429
            or self.error_code is CommonErrorCode.TOO_MANY_ATTEMPTS_TRY_LATER
        )

    @property
    def retry_after(self) -> int | None:
        """Parse the Retry-After header into seconds."""
        value = self.headers.get("retry-after")
        if not value:
            return None
        with contextlib.suppress(ValueError):
            parsed = int(value)
            if parsed >= 0:
                return parsed
        return None


class InvalidArgumentError(FireauthError, ValueError):
    """Raised for caller-supplied values rejected before any network call."""

    error_type = "invalid_argument"

    def __init__(self, message: str = "Invalid argument"):
        super().__init__(message)


def _detail_of(message: str) -> str | None:
    # "WEAK_PASSWORD : Password should be at least 6 characters"
    _, sep, detail = message.partition(" : ")
    if not sep:
        return None
    return detail.strip() or None
