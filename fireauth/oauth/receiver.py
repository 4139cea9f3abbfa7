"""One-shot local HTTP receiver for the OAuth redirect.

Meant for CLIs and desktop scripts: open ``authorize_url`` in a browser,
then await ``receive_redirect`` to get the code the provider sends back to
``http://<host>:<port><path>``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from fireauth.oauth.exceptions import (
    AuthorizationDeniedError,
    RedirectServerError,
    RedirectTimeoutError,
)

logger = logging.getLogger(__name__)

_DONE_PAGE = (
    "<!doctype html><html><body>"
    "<p>Authentication finished. You can close this window.</p>"
    "</body></html>"
)


@dataclass(frozen=True)
class AuthorizationResponse:
    code: str
    state: str


def build_redirect_app(
    result: asyncio.Future[AuthorizationResponse], path: str = "/callback"
) -> FastAPI:
    """Build the app that resolves ``result`` from the first redirect."""
    app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)

    @app.get(path, response_class=HTMLResponse)
    async def callback(
        code: str | None = None,
        state: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> HTMLResponse:
        if not result.done():
            if error:
                result.set_exception(AuthorizationDeniedError(error, error_description))
            elif code and state:
                result.set_result(AuthorizationResponse(code=code, state=state))
            else:
                return HTMLResponse("Missing code or state", status_code=400)
        return HTMLResponse(_DONE_PAGE)

    return app


async def _serve(server: uvicorn.Server, host: str, port: int) -> None:
    # uvicorn exits the process when it cannot bind.
    try:
        await server.serve()
    except SystemExit as e:
        raise RedirectServerError(f"Could not listen on {host}:{port}") from e
    if not server.started:
        raise RedirectServerError(f"Could not listen on {host}:{port}")


async def receive_redirect(
    host: str = "127.0.0.1",
    port: int = 8765,
    path: str = "/callback",
    timeout: float = 300.0,
) -> AuthorizationResponse:
    """Serve ``path`` until the provider redirects back once, then stop.

    Raises ``RedirectServerError`` when the port cannot be bound and
    ``RedirectTimeoutError`` when no redirect arrives within ``timeout``.
    """
    loop = asyncio.get_running_loop()
    result: asyncio.Future[AuthorizationResponse] = loop.create_future()
    server = uvicorn.Server(
        uvicorn.Config(
            build_redirect_app(result, path),
            host=host,
            port=port,
            log_level="warning",
            lifespan="off",
        )
    )
    serve_task = asyncio.create_task(_serve(server, host, port))
    logger.debug("Waiting for OAuth redirect on http://%s:%s%s", host, port, path)
    try:
        done, _ = await asyncio.wait(
            {result, serve_task},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
        if result in done:
            return result.result()
        if serve_task in done:
            serve_task.result()
            raise RedirectServerError(f"Redirect receiver on {host}:{port} stopped")
        raise RedirectTimeoutError()
    finally:
        server.should_exit = True
        await asyncio.gather(serve_task, return_exceptions=True)
