"""HTTP clients for the Identity Toolkit and Secure Token services.

The two services live on different hosts (or under one emulator host), so
endpoint functions always send absolute URLs and clients carry no base URL.
Timeouts and pooling are the client's concern; the library never retries.
"""

import httpx

from fireauth.core.settings import FireauthSettings

USER_AGENT = "fireauth-python"

DEFAULT_TIMEOUT = httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0)
DEFAULT_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=10)


def create_http_client(
    *,
    timeout: httpx.Timeout = DEFAULT_TIMEOUT,
    limits: httpx.Limits = DEFAULT_LIMITS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the pooled client shared by ``Config`` and ``VerificationConfig``.

    Args:
        timeout: Per-phase timeouts. Exceeding one surfaces as
            ``HttpRequestError`` from the endpoint layer.
        limits: Connection pool size.
        transport: Custom transport, e.g. a proxy mount or a mock in tests.

    Returns:
        Configured httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        transport=transport,
        headers={"User-Agent": USER_AGENT},
    )


def create_http_client_from_settings(
    settings: FireauthSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create a client with the ``FIREAUTH_*`` timeouts and pool size."""
    return create_http_client(
        timeout=httpx.Timeout(
            connect=settings.connect_timeout,
            read=settings.read_timeout,
            write=settings.write_timeout,
            pool=settings.pool_timeout,
        ),
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=min(
                DEFAULT_LIMITS.max_keepalive_connections, settings.max_connections
            ),
        ),
        transport=transport,
    )
