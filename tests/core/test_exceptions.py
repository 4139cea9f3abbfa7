"""Tests for fireauth/core/exceptions.py - exception hierarchy."""

import pytest
from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st

from fireauth.core.error_codes import CommonErrorCode
from fireauth.core.exceptions import (
    ApiError,
    DeserializeError,
    FireauthError,
    HttpRequestError,
    InvalidArgumentError,
)


@hypothesis_settings(max_examples=100)
@given(
    exception_class=st.sampled_from(
        [HttpRequestError, DeserializeError, InvalidArgumentError]
    ),
    message=st.text(min_size=1, max_size=100),
)
def test_exception_hierarchy_invariant(exception_class, message):
    """Every library exception is a FireauthError and keeps its message."""
    assert issubclass(exception_class, FireauthError)

    instance = exception_class(message)

    assert isinstance(instance, FireauthError)
    assert instance.message == message


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        raise InvalidArgumentError("empty")


class TestApiError:
    def test_detail_is_text_after_separator(self):
        error = ApiError(
            400,
            CommonErrorCode.WEAK_PASSWORD,
            "WEAK_PASSWORD : Password should be at least 6 characters",
        )

        assert error.detail == "Password should be at least 6 characters"
        assert error.message.startswith("WEAK_PASSWORD")

    def test_no_detail(self):
        error = ApiError(400, CommonErrorCode.EMAIL_EXISTS, "EMAIL_EXISTS")

        assert error.detail is None

    def test_str_includes_status_and_code(self):
        error = ApiError(400, CommonErrorCode.EMAIL_EXISTS, "EMAIL_EXISTS")

        assert str(error) == "(400) EMAIL_EXISTS: EMAIL_EXISTS"

    @pytest.mark.parametrize(
        "code",
        [
            CommonErrorCode.INVALID_LOGIN_CREDENTIALS,
            CommonErrorCode.INVALID_PASSWORD,
            CommonErrorCode.EMAIL_NOT_FOUND,
        ],
    )
    def test_is_invalid_credentials(self, code):
        assert ApiError(400, code, str(code)).is_invalid_credentials

    def test_is_rate_limited_by_code(self):
        error = ApiError(
            400,
            CommonErrorCode.TOO_MANY_ATTEMPTS_TRY_LATER,
            "TOO_MANY_ATTEMPTS_TRY_LATER",
        )

        assert error.is_rate_limited
        assert not error.is_invalid_credentials

    def test_is_rate_limited_by_status(self):
        error = ApiError(429, CommonErrorCode.UNKNOWN, "RESOURCE_EXHAUSTED")

        assert error.is_rate_limited

    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({"retry-after": "30"}, 30),
            ({"retry-after": "soon"}, None),
            ({"retry-after": "-5"}, None),
            ({}, None),
        ],
    )
    def test_retry_after(self, headers, expected):
        error = ApiError(
            429, CommonErrorCode.UNKNOWN, "RESOURCE_EXHAUSTED", headers=headers
        )

        assert error.retry_after == expected


def test_deserialize_error_keeps_status_and_body():
    error = DeserializeError("bad", status_code=200, body="<html>")

    assert error.status_code == 200
    assert error.body == "<html>"
