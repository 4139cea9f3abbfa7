"""Single-attempt POST helpers shared by every endpoint function.

Each helper issues exactly one request, then either validates the success
body against the endpoint's response schema or decodes the error envelope
into an ``ApiError``. Nothing is retried here.
"""

import logging
from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from fireauth.api.identity_toolkit import ErrorEnvelope
from fireauth.core.error_codes import CommonErrorCode, sanitize_error_code
from fireauth.core.exceptions import ApiError, DeserializeError, HttpRequestError
from fireauth.core.types import ApiKey

logger = logging.getLogger(__name__)

LOCALE_HEADER = "X-Firebase-Locale"

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter[Any]:
    return TypeAdapter(schema)


def locale_headers(locale: str | None) -> dict[str, str] | None:
    """Build the optional locale header used by e-mail sending endpoints."""
    if locale is None:
        return None
    return {LOCALE_HEADER: str(locale)}


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    api_key: str,
    payload: Any,
    response_schema: type[T],
    *,
    headers: dict[str, str] | None = None,
) -> T:
    """POST a JSON body and decode the response as ``response_schema``."""
    return await _send(
        client, url, api_key, response_schema, headers=headers, json=payload
    )


async def post_form(
    client: httpx.AsyncClient,
    url: str,
    api_key: str,
    payload: Any,
    response_schema: type[T],
    *,
    headers: dict[str, str] | None = None,
) -> T:
    """POST an ``application/x-www-form-urlencoded`` body.

    Only the Secure Token endpoint takes this encoding.
    """
    return await _send(
        client, url, api_key, response_schema, headers=headers, data=dict(payload)
    )


async def _send(
    client: httpx.AsyncClient,
    url: str,
    api_key: str,
    response_schema: type[T],
    *,
    headers: dict[str, str] | None,
    **body: Any,
) -> T:
    key = ApiKey(api_key)
    endpoint = url.rsplit("/", 1)[-1]

    try:
        response = await client.post(
            url, params={"key": key}, headers=headers, **body
        )
    except httpx.RequestError as e:
        logger.warning(
            "Firebase Auth request failed: endpoint=%s, error=%s",
            endpoint,
            type(e).__name__,
            extra={"endpoint": endpoint},
        )
        raise HttpRequestError("Authentication service unavailable") from e

    if not response.is_success:
        _raise_api_error(response, endpoint)

    try:
        result = _adapter(response_schema).validate_json(response.content)
    except ValidationError as e:
        raise DeserializeError(
            f"Unexpected response payload from {endpoint}",
            status_code=response.status_code,
            body=response.text,
        ) from e

    logger.debug(
        "Firebase Auth request succeeded: endpoint=%s, status=%s",
        endpoint,
        response.status_code,
        extra={"endpoint": endpoint, "status_code": response.status_code},
    )
    return result


def _raise_api_error(response: httpx.Response, endpoint: str) -> None:
    """Decode an error envelope and raise it as ApiError."""
    try:
        envelope = _adapter(ErrorEnvelope).validate_json(response.content)
    except ValidationError as e:
        raise DeserializeError(
            f"Unrecognized error response from {endpoint}",
            status_code=response.status_code,
            body=response.text,
        ) from e

    message = envelope["error"]["message"]
    error_code = CommonErrorCode.parse(message)

    # Log sanitized error code for debugging (avoid sensitive data)
    logger.info(
        "Firebase Auth error: endpoint=%s, status=%s, code=%s",
        endpoint,
        response.status_code,
        sanitize_error_code(message),
        extra={
            "endpoint": endpoint,
            "status_code": response.status_code,
            "error_code": str(error_code),
        },
    )

    raise ApiError(
        response.status_code,
        error_code,
        message,
        response=dict(envelope),
        headers={k.lower(): v for k, v in response.headers.items()},
    )
