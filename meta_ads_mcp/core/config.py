"""
Application configuration models and helpers.

Centralizes settings management so the HTTP routes, the OAuth flow and the
MCP tool layer share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_VERSION = "v23.0"


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class MetaSettings(BaseSettings):
    """Configuration required for talking to the Meta Graph API."""

    model_config = SettingsConfigDict(env_prefix="META_")

    app_id: str = Field(..., description="Meta app client identifier.")
    app_secret: str = Field(..., description="Meta app client secret.")
    api_version: str = Field(DEFAULT_API_VERSION)
    redirect_uri: AnyHttpUrl = Field(
        "http://localhost:8000/auth/callback",
        description="Callback URL registered with the Meta app.",
    )
    oauth_scope: str = Field(
        "business_management",
        description="Permission scope requested on the consent dialog.",
    )
    access_token: Optional[str] = Field(
        None,
        description=(
            "Operator-supplied token used for every user instead of stored "
            "credentials. Local testing only."
        ),
    )
    http_timeout: float = Field(30.0, description="Outbound request timeout in seconds.")


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    state_ttl_seconds: int = Field(600, validation_alias="OAUTH_STATE_TTL")


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    host: str = Field("0.0.0.0", validation_alias="APP_HOST")
    port: int = Field(8000, validation_alias="APP_PORT")
    database_path: str = Field(
        "data/meta_ads_mcp.db",
        validation_alias="DATABASE_PATH",
        description="SQLite file holding stored credentials and OAuth state.",
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    meta: MetaSettings = Field(default_factory=MetaSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DEFAULT_API_VERSION",
    "MetaSettings",
    "OAuthSettings",
    "SecuritySettings",
    "get_settings",
]
