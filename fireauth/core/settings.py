"""Library settings using Pydantic Settings for typed configuration.

Settings are loaded from environment variables (or a ``.env`` file) so that
applications can build a ``Config`` without wiring every knob by hand.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com"


class FireauthSettings(BaseSettings):
    """Environment-driven settings for the Firebase Auth client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Firebase project
    firebase_api_key: str | None = Field(default=None, alias="FIREBASE_API_KEY")
    firebase_project_id: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")
    # host:port of a running Auth emulator, e.g. "localhost:9099"
    auth_emulator_host: str | None = Field(
        default=None, alias="FIREBASE_AUTH_EMULATOR_HOST"
    )

    # HTTP client
    connect_timeout: float = Field(default=5.0, alias="FIREAUTH_CONNECT_TIMEOUT", gt=0)
    read_timeout: float = Field(default=10.0, alias="FIREAUTH_READ_TIMEOUT", gt=0)
    write_timeout: float = Field(default=10.0, alias="FIREAUTH_WRITE_TIMEOUT", gt=0)
    pool_timeout: float = Field(default=5.0, alias="FIREAUTH_POOL_TIMEOUT", gt=0)
    max_connections: int = Field(default=20, alias="FIREAUTH_MAX_CONNECTIONS", ge=1)

    # Session
    refresh_margin_seconds: int = Field(
        default=60, alias="FIREAUTH_REFRESH_MARGIN_SECONDS", ge=0, le=600
    )
    locale: str | None = Field(default=None, alias="FIREAUTH_LOCALE")

    @computed_field
    @property
    def identity_toolkit_url(self) -> str:
        """Google Identity Toolkit API base URL (or the emulator's)."""
        if self.auth_emulator_host:
            return f"http://{self.auth_emulator_host}/identitytoolkit.googleapis.com"
        return IDENTITY_TOOLKIT_URL

    @computed_field
    @property
    def secure_token_url(self) -> str:
        """Secure Token API base URL (or the emulator's)."""
        if self.auth_emulator_host:
            return f"http://{self.auth_emulator_host}/securetoken.googleapis.com"
        return SECURE_TOKEN_URL

    @computed_field
    @property
    def refresh_margin(self) -> timedelta:
        """Get the token refresh safety margin as timedelta."""
        return timedelta(seconds=self.refresh_margin_seconds)


@lru_cache
def get_settings() -> FireauthSettings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return FireauthSettings()
