"""Tests for fireauth/core/types.py - value types and IdP post bodies."""

from urllib.parse import parse_qs

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fireauth.core.exceptions import InvalidArgumentError
from fireauth.core.types import (
    ApiKey,
    Email,
    IdpPostBody,
    IdToken,
    LanguageCode,
    Password,
    ProviderId,
    RefreshToken,
)


class TestNonEmptyStrings:
    @pytest.mark.parametrize("cls", [ApiKey, Email, Password, IdToken, RefreshToken])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_values_are_rejected(self, cls, value):
        with pytest.raises(InvalidArgumentError):
            cls(value)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidArgumentError):
            ApiKey(None)  # type: ignore[arg-type]

    def test_behaves_as_str(self):
        email = Email("user@example.com")

        assert email == "user@example.com"
        assert isinstance(email, str)

    @pytest.mark.parametrize("cls", [Password, IdToken, RefreshToken])
    def test_secrets_are_masked_in_repr(self, cls):
        value = cls("super-secret")

        assert "super-secret" not in repr(value)

    def test_plain_values_show_in_repr(self):
        assert "user@example.com" in repr(Email("user@example.com"))


class TestProviderId:
    def test_try_parse_known(self):
        assert ProviderId.try_parse("google.com") is ProviderId.GOOGLE

    def test_try_parse_unknown(self):
        assert ProviderId.try_parse("example.com") is None


def test_language_code_values():
    assert LanguageCode.EN_US == "en-US"
    assert LanguageCode.JA_JP == "ja-JP"


class TestIdpPostBody:
    def test_google_id_token(self):
        body = IdpPostBody.google(id_token="g-id-token")

        assert parse_qs(body.encode()) == {
            "id_token": ["g-id-token"],
            "providerId": ["google.com"],
        }

    def test_google_both_tokens(self):
        body = IdpPostBody.google(id_token="a", access_token="b")

        parsed = parse_qs(body.encode())
        assert parsed["id_token"] == ["a"]
        assert parsed["access_token"] == ["b"]

    def test_google_requires_a_token(self):
        with pytest.raises(InvalidArgumentError):
            IdpPostBody.google()

    @pytest.mark.parametrize(
        ("factory", "provider"),
        [
            (IdpPostBody.facebook, "facebook.com"),
            (IdpPostBody.github, "github.com"),
            (IdpPostBody.microsoft, "microsoft.com"),
            (IdpPostBody.yahoo, "yahoo.com"),
            (IdpPostBody.linkedin, "linkedin.com"),
            (IdpPostBody.apple, "apple.com"),
        ],
    )
    def test_access_token_providers(self, factory, provider):
        body = factory("token-123")

        assert parse_qs(body.encode()) == {
            "access_token": ["token-123"],
            "providerId": [provider],
        }

    def test_twitter_needs_token_secret(self):
        body = IdpPostBody.twitter("token", "secret")

        parsed = parse_qs(body.encode())
        assert parsed["oauth_token_secret"] == ["secret"]
        assert parsed["providerId"] == ["twitter.com"]

        with pytest.raises(InvalidArgumentError):
            IdpPostBody.twitter("token", "")

    def test_empty_access_token_rejected(self):
        with pytest.raises(InvalidArgumentError):
            IdpPostBody.github("")

    def test_repr_hides_credentials(self):
        body = IdpPostBody.github("token-123")

        assert "token-123" not in repr(body)
        assert "github.com" in repr(body)

    def test_params_are_read_only(self):
        body = IdpPostBody.github("token-123")

        with pytest.raises(TypeError):
            body.params["access_token"] = "other"  # type: ignore[index]

    @given(token=st.text(min_size=1).filter(lambda s: s.strip()))
    def test_encoding_escapes_any_token(self, token):
        body = IdpPostBody.facebook(token)

        assert parse_qs(body.encode(), keep_blank_values=True)["access_token"] == [
            token
        ]
