"""Tests for fireauth/core/error_codes.py - error envelope message parsing."""

from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st

from fireauth.core.error_codes import CommonErrorCode, sanitize_error_code


class TestParse:
    def test_bare_code(self):
        assert CommonErrorCode.parse("EMAIL_EXISTS") is CommonErrorCode.EMAIL_EXISTS

    def test_code_with_detail(self):
        message = "WEAK_PASSWORD : Password should be at least 6 characters"

        assert CommonErrorCode.parse(message) is CommonErrorCode.WEAK_PASSWORD

    def test_rate_limit_code_with_detail(self):
        message = (
            "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been "
            "temporarily disabled"
        )

        assert (
            CommonErrorCode.parse(message)
            is CommonErrorCode.TOO_MANY_ATTEMPTS_TRY_LATER
        )

    def test_invalid_json_payload(self):
        message = 'Invalid JSON payload received. Unknown name "foo": Cannot find field.'

        assert (
            CommonErrorCode.parse(message)
            is CommonErrorCode.INVALID_JSON_PAYLOAD_RECEIVED
        )

    def test_api_key_not_valid_message(self):
        """Free-form messages that are not codes map to UNKNOWN."""
        message = "API key not valid. Please pass a valid API key."

        assert CommonErrorCode.parse(message) is CommonErrorCode.UNKNOWN

    def test_unrecognized_code(self):
        assert CommonErrorCode.parse("SOMETHING_NEW") is CommonErrorCode.UNKNOWN

    def test_empty_message(self):
        assert CommonErrorCode.parse("") is CommonErrorCode.UNKNOWN
        assert CommonErrorCode.parse(None) is CommonErrorCode.UNKNOWN


@hypothesis_settings(max_examples=100)
@given(
    code=st.sampled_from(list(CommonErrorCode)),
    detail=st.text(max_size=80),
)
def test_parse_recovers_known_code(code, detail):
    """Any known code followed by a detail parses back to itself."""
    message = f"{code} : {detail}" if detail else str(code)

    assert CommonErrorCode.parse(message) is code


@hypothesis_settings(max_examples=200)
@given(message=st.text(max_size=120))
def test_parse_never_raises(message):
    assert isinstance(CommonErrorCode.parse(message), CommonErrorCode)


class TestSanitizeErrorCode:
    def test_strips_detail(self):
        message = "INVALID_EMAIL : user@example.com is malformed"

        assert sanitize_error_code(message) == "INVALID_EMAIL"

    def test_unknown_text(self):
        assert sanitize_error_code("some lowercase text") == "UNKNOWN"
