"""Cache of the Google public keys that sign Firebase ID tokens."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable

import httpx
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from pydantic import TypeAdapter, ValidationError

from fireauth.verification.exceptions import PublicKeyFetchError

logger = logging.getLogger(__name__)

CERTIFICATES_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/"
    "securetoken@system.gserviceaccount.com"
)
DEFAULT_MAX_AGE_SECONDS = 3600

_MAX_AGE = re.compile(r"max-age=(\d+)")
_certificates_adapter = TypeAdapter(dict[str, str])


def cache_max_age(
    cache_control: str | None, default: int = DEFAULT_MAX_AGE_SECONDS
) -> int:
    """Read ``max-age`` from a Cache-Control header value."""
    if cache_control:
        match = _MAX_AGE.search(cache_control)
        if match:
            return int(match.group(1))
    return default


def certificate_to_public_key(certificate_pem: str) -> str:
    """Extract the public key of a PEM X.509 certificate as PEM."""
    try:
        certificate = x509.load_pem_x509_certificate(certificate_pem.encode())
    except ValueError as e:
        raise PublicKeyFetchError("Invalid public key certificate") from e
    return (
        certificate.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


class PublicKeyCache:
    """Fetch ``{kid: public key PEM}`` and reuse it until max-age elapses."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        certificates_url: str = CERTIFICATES_URL,
        now: Callable[[], float] | None = None,
    ) -> None:
        self._http_client = http_client
        self._certificates_url = certificates_url
        self._keys: dict[str, str] | None = None
        self._expires_at = 0.0
        self._now = now or time.monotonic
        self._lock = asyncio.Lock()

    def _is_valid(self) -> bool:
        return self._keys is not None and self._now() < self._expires_at

    async def get_keys(self, force_refresh: bool = False) -> dict[str, str]:
        """Return cached keys or fetch a fresh copy when the cache is stale."""
        if not force_refresh and self._is_valid():
            return self._keys  # type: ignore[return-value]

        async with self._lock:
            if not force_refresh and self._is_valid():
                return self._keys  # type: ignore[return-value]
            keys, max_age = await self._fetch()
            self._keys = keys
            self._expires_at = self._now() + max_age
            return keys

    async def _fetch(self) -> tuple[dict[str, str], int]:
        try:
            response = await self._http_client.get(self._certificates_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Public key fetch failed: error=%s", type(e).__name__)
            raise PublicKeyFetchError() from e

        try:
            certificates = _certificates_adapter.validate_json(response.content)
        except ValidationError as e:
            raise PublicKeyFetchError("Unexpected public key response") from e

        keys = {
            kid: certificate_to_public_key(pem) for kid, pem in certificates.items()
        }
        max_age = cache_max_age(response.headers.get("cache-control"))
        logger.debug("Fetched %d public keys, max_age=%s", len(keys), max_age)
        return keys, max_age
