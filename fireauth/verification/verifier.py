"""Local verification of Firebase ID tokens.

Signature checks use the public certificates Google publishes for the
``securetoken`` service account. Time-based claims are checked against the
injected clock so expiry behaves the same way it does for ``Session``.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

import httpx
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from fireauth.core.http import create_http_client
from fireauth.core.types import ProjectId
from fireauth.verification.exceptions import (
    ClaimMismatchError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from fireauth.verification.keys import CERTIFICATES_URL, PublicKeyCache

logger = logging.getLogger(__name__)

ISSUER_PREFIX = "https://securetoken.google.com/"

# Temporal claims are checked against the injected clock below.
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": True,
    "verify_iss": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
}


@dataclass(frozen=True)
class IdTokenClaims:
    """Verified claims of a Firebase ID token."""

    issuer: str
    audience: str
    subject: str
    expires_at: datetime
    issued_at: datetime
    auth_time: datetime | None
    email: str | None = None
    email_verified: bool = False
    sign_in_provider: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def user_id(self) -> str:
        return self.subject

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> IdTokenClaims:
        auth_time = claims.get("auth_time")
        firebase = claims.get("firebase") or {}
        return cls(
            issuer=str(claims.get("iss", "")),
            audience=str(claims.get("aud", "")),
            subject=claims.get("sub") or "",
            expires_at=_timestamp(claims.get("exp"), "exp"),
            issued_at=_timestamp(claims.get("iat"), "iat"),
            auth_time=_timestamp(auth_time, "auth_time") if auth_time else None,
            email=claims.get("email"),
            email_verified=bool(claims.get("email_verified", False)),
            sign_in_provider=firebase.get("sign_in_provider"),
            raw=dict(claims),
        )


def _timestamp(value: Any, name: str) -> datetime:
    try:
        return datetime.fromtimestamp(int(value), tz=UTC)
    except (TypeError, ValueError, OverflowError) as e:
        raise ClaimMismatchError(f"Invalid {name} claim") from e


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VerificationConfig:
    """Verifies ID tokens issued for one Firebase project."""

    def __init__(
        self,
        project_id: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        certificates_url: str = CERTIFICATES_URL,
        clock: Callable[[], datetime] | None = None,
    ):
        self._project_id = ProjectId(project_id)
        self._owns_client = http_client is None
        self._http_client = http_client or create_http_client()
        self._clock = clock or _utcnow
        self._keys = PublicKeyCache(
            self._http_client,
            certificates_url,
            now=lambda: self._clock().timestamp(),
        )

    @property
    def project_id(self) -> ProjectId:
        return self._project_id

    @property
    def issuer(self) -> str:
        return f"{ISSUER_PREFIX}{self._project_id}"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> VerificationConfig:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def verify_id_token(self, id_token: str) -> IdTokenClaims:
        """Verify signature and claims, returning the decoded claims."""
        kid = self._key_id(id_token)

        keys = await self._keys.get_keys()
        if kid not in keys:
            # Keys rotate; look once more before giving up.
            keys = await self._keys.get_keys(force_refresh=True)
        key = keys.get(kid)
        if key is None:
            raise InvalidSignatureError("No public key matches the token key id")

        try:
            claims = jwt.decode(
                id_token,
                key,
                algorithms=["RS256"],
                audience=self._project_id,
                issuer=self.issuer,
                options=_DECODE_OPTIONS,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except JWTClaimsError as e:
            raise ClaimMismatchError(str(e)) from e
        except JWTError as e:
            raise InvalidSignatureError() from e

        verified = IdTokenClaims.from_claims(claims)
        # A missing aud or iss passes jwt.decode, so compare explicitly.
        if verified.audience != self._project_id:
            raise ClaimMismatchError("aud claim does not match the project id")
        if verified.issuer != self.issuer:
            raise ClaimMismatchError("iss claim does not match the project")
        self._check_times(verified)
        if not isinstance(verified.subject, str) or not verified.subject:
            raise ClaimMismatchError("sub claim must be a non-empty string")
        if len(verified.subject) > 128:
            raise ClaimMismatchError("sub claim must be at most 128 characters")

        logger.debug(
            "Verified ID token: local_id=%s",
            verified.subject,
            extra={"local_id": verified.subject},
        )
        return verified

    def _check_times(self, claims: IdTokenClaims) -> None:
        now = self._clock()
        if claims.expires_at <= now:
            raise TokenExpiredError()
        if claims.issued_at > now:
            raise ClaimMismatchError("iat claim is in the future")
        if claims.auth_time is not None and claims.auth_time > now:
            raise ClaimMismatchError("auth_time claim is in the future")

    @staticmethod
    def _key_id(id_token: str) -> str:
        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError as e:
            raise MalformedTokenError("ID token is not a valid JWT") from e

        if not hmac.compare_digest(str(header.get("alg", "")), "RS256"):
            raise MalformedTokenError("ID token must be signed with RS256")
        kid = header.get("kid")
        if not kid:
            raise MalformedTokenError("ID token has no key id")
        return str(kid)
