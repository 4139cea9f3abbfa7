"""Tests for fireauth/core/logging.py."""

import json
import logging

import pytest

from fireauth.core.logging import (
    ApiKeyRedactionFilter,
    JsonFormatter,
    configure_logging,
    redact_api_key,
)


def _record(
    msg="Firebase Auth error: endpoint=%s", args=("v1/accounts:signUp",), **extra
):
    record = logging.LogRecord(
        name="fireauth.api.transport",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(name="restore_logging")
def restore_logging_fixture():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    names = ("fireauth", "httpx", "httpcore")
    saved_levels = {name: logging.getLogger(name).level for name in names}
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


class TestJsonFormatter:
    def test_basic_fields(self):
        payload = json.loads(JsonFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "fireauth.api.transport"
        assert payload["msg"] == "Firebase Auth error: endpoint=v1/accounts:signUp"
        assert "ts" in payload

    def test_known_extras_are_included(self):
        record = _record(endpoint="accounts:signUp", status_code=400, error_code="X")

        payload = json.loads(JsonFormatter().format(record))

        assert payload["endpoint"] == "accounts:signUp"
        assert payload["status_code"] == 400
        assert payload["error_code"] == "X"

    def test_unknown_extras_are_dropped(self):
        record = _record(password="hunter2")

        assert "hunter2" not in JsonFormatter().format(record)


class TestApiKeyRedaction:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            (
                "POST https://example.test/v1/accounts:lookup?key=AIza1",
                "POST https://example.test/v1/accounts:lookup"
                "?key=REDACTED",
            ),
            (
                'POST http://h/v1/token?a=1&key=AIza "HTTP/1.1 200 OK"',
                'POST http://h/v1/token?a=1&key=REDACTED "HTTP/1.1 200 OK"',
            ),
            ("no url here", "no url here"),
            ("monkey=banana", "monkey=banana"),
        ],
    )
    def test_redact(self, text, expected):
        assert redact_api_key(text) == expected

    def test_filter_rewrites_formatted_message(self):
        record = _record(
            msg="HTTP Request: %s %s",
            args=("POST", "https://securetoken.googleapis.com/v1/token?key=secret-key"),
        )

        assert ApiKeyRedactionFilter().filter(record) is True
        assert "secret-key" not in record.getMessage()
        assert record.getMessage().endswith("?key=REDACTED")

    def test_filter_leaves_clean_records(self):
        record = _record()

        ApiKeyRedactionFilter().filter(record)

        assert record.args == ("v1/accounts:signUp",)


class TestConfigureLogging:
    def test_levels_from_environment(self, monkeypatch, restore_logging):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HTTPX_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("LOG_JSON", "true")

        configure_logging()

        assert logging.getLogger("fireauth").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.ERROR
        assert any(
            isinstance(h.formatter, JsonFormatter) for h in restore_logging.handlers
        )

    def test_arguments_override_environment(self, monkeypatch, restore_logging):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "true")

        configure_logging("warning", json_output=False, httpx_level="info")

        assert logging.getLogger("fireauth").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.INFO
        assert not any(
            isinstance(h.formatter, JsonFormatter) for h in restore_logging.handlers
        )

    def test_console_handler_redacts(self, restore_logging):
        configure_logging()

        assert any(
            isinstance(f, ApiKeyRedactionFilter)
            for h in restore_logging.handlers
            for f in h.filters
        )
