"""Tests for fireauth/core/settings.py."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from fireauth.core.settings import (
    IDENTITY_TOOLKIT_URL,
    SECURE_TOKEN_URL,
    FireauthSettings,
    get_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment and .env files out of these tests."""
    for name in (
        "FIREBASE_API_KEY",
        "FIREBASE_PROJECT_ID",
        "FIREBASE_AUTH_EMULATOR_HOST",
        "FIREAUTH_REFRESH_MARGIN_SECONDS",
        "FIREAUTH_LOCALE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir("/")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestFireauthSettings:
    def test_defaults(self):
        settings = FireauthSettings()

        assert settings.firebase_api_key is None
        assert settings.identity_toolkit_url == IDENTITY_TOOLKIT_URL
        assert settings.secure_token_url == SECURE_TOKEN_URL
        assert settings.refresh_margin == timedelta(seconds=60)
        assert settings.connect_timeout == 5.0
        assert settings.read_timeout == 10.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_API_KEY", "env-key")
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "demo-project")
        monkeypatch.setenv("FIREAUTH_REFRESH_MARGIN_SECONDS", "120")
        monkeypatch.setenv("FIREAUTH_LOCALE", "ja-JP")

        settings = FireauthSettings()

        assert settings.firebase_api_key == "env-key"
        assert settings.firebase_project_id == "demo-project"
        assert settings.refresh_margin == timedelta(seconds=120)
        assert settings.locale == "ja-JP"

    def test_emulator_host_rewrites_base_urls(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_AUTH_EMULATOR_HOST", "localhost:9099")

        settings = FireauthSettings()

        assert (
            settings.identity_toolkit_url
            == "http://localhost:9099/identitytoolkit.googleapis.com"
        )
        assert (
            settings.secure_token_url
            == "http://localhost:9099/securetoken.googleapis.com"
        )

    def test_rejects_negative_refresh_margin(self, monkeypatch):
        monkeypatch.setenv("FIREAUTH_REFRESH_MARGIN_SECONDS", "-1")

        with pytest.raises(ValidationError):
            FireauthSettings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
