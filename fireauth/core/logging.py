"""Logging setup for scripts and apps embedding the client.

The library only emits through module loggers under ``fireauth``. Call
``configure_logging`` from an entry point to get a stdout handler. Arguments
left as ``None`` fall back to environment variables, so it also works before
any typed settings are loaded.

httpx logs every request URL at INFO, and Identity Toolkit URLs carry the API
key as ``?key=``. The console handler always redacts it.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import re
import sys
from datetime import UTC, datetime
from typing import Any

_API_KEY_PARAM = re.compile(r"([?&]key=)[^&\s\"']+")

# Extras attached by the transport, session and verification layers.
_EXTRA_FIELDS = ("endpoint", "status_code", "error_code", "local_id")


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def redact_api_key(text: str) -> str:
    return _API_KEY_PARAM.sub(r"\1REDACTED", text)


class ApiKeyRedactionFilter(logging.Filter):
    """Mask ``key=`` query parameters in formatted messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_api_key(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            if key in record.__dict__:
                payload[key] = record.__dict__[key]

        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    level: str | None = None,
    *,
    json_output: bool | None = None,
    httpx_level: str | None = None,
) -> None:
    """Route ``fireauth`` and httpx logs to stdout.

    Env vars used when the matching argument is ``None``:
    - LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    - LOG_JSON: true/false (default: false)
    - HTTPX_LOG_LEVEL: level for httpx/httpcore (default: WARNING)
    """

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if json_output is None:
        json_output = _env_bool("LOG_JSON", default=False)
    httpx_level = (httpx_level or os.getenv("HTTPX_LOG_LEVEL", "WARNING")).upper()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_api_key": {"()": "fireauth.core.logging.ApiKeyRedactionFilter"},
        },
        "formatters": {
            "text": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "json": {
                "()": "fireauth.core.logging.JsonFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if json_output else "text",
                "filters": ["redact_api_key"],
                "stream": sys.stdout,
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "fireauth": {"level": level, "propagate": True},
            "httpx": {"level": httpx_level, "propagate": True},
            "httpcore": {"level": httpx_level, "propagate": True},
        },
    }

    logging.config.dictConfig(config)
