"""Application configuration via Pydantic BaseSettings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_log = logging.getLogger(__name__)

_DEFAULT_SECRETS = {
    "secret_key": "change-me-in-production",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (session storage)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./itqan.db",
        description="Async SQLAlchemy connection URL",
    )

    # Application
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=3000)
    app_debug: bool = Field(default=False)
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL used to build callback / return URLs",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )

    # Security: Fernet key derivation and session cookie signing
    secret_key: str = Field(default="change-me-in-production")
    secret_key_fallbacks: list[str] = Field(
        default=[],
        description="Previous secret keys still accepted when decrypting stored tokens",
    )
    session_cookie_name: str = Field(default="itqan_session")
    session_lifetime_days: int = Field(default=30)
    session_cookie_secure: bool = Field(default=False)

    # Auth0 identity provider
    auth0_domain: str = Field(default="itqan.eu.auth0.com")
    auth0_client_id: str = Field(default="")
    auth0_client_secret: str = Field(default="")
    auth0_audience: str | None = Field(default=None)
    auth0_db_connection: str = Field(
        default="Username-Password-Authentication",
        description="Auth0 database connection used for email/password login and signup",
    )
    auth0_id_token_algorithm: Literal["RS256", "HS256"] = Field(default="RS256")
    auth0_scope: str = Field(default="openid profile email offline_access")

    # Itqan backend API
    backend_url: str = Field(default="http://localhost:8000")
    http_timeout: float = Field(default=10.0, description="Outbound HTTP timeout in seconds")

    # Localisation
    default_locale: Literal["ar", "en"] = Field(default="en")

    # Catalog
    catalog_per_page: int = Field(default=20, ge=1, le=100)

    # CORS
    cors_allowed_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (configure via CORS_ALLOWED_ORIGINS env var)",
    )

    @computed_field
    @property
    def auth0_base_url(self) -> str:
        """Base URL of the Auth0 tenant (no trailing slash)."""
        domain = self.auth0_domain.rstrip("/")
        if domain.startswith(("http://", "https://")):
            return domain
        return f"https://{domain}"

    @model_validator(mode="after")
    def _warn_default_secrets(self) -> "Settings":
        """Emit a warning when production-dangerous default secrets are detected."""
        if not self.app_debug:
            for field, default in _DEFAULT_SECRETS.items():
                if getattr(self, field) == default:
                    _log.warning(
                        "Default secret detected for '%s', change before deploying to production!",
                        field,
                    )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
