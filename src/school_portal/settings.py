"""
school_portal.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secrets, crypto key, SMTP password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `PORTAL_`).
    Defaults are safe for local dev; prod must override every secret.
    """

    model_config = SettingsConfigDict(env_prefix="PORTAL_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and error detail exposure.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "school-portal"
    api_name: str = "School Portal"
    api_version: str = "1.0.0"
    api_description: str = "Content and administration API for the school website."
    api_license: str | None = None
    # Published on the `/api` index.
    support_email: str | None = None
    support_mobile: str | None = None

    log_level: str = "INFO"
    # When set, logs are also written to hourly `combined_YYYY-MM-DD_HH.log` files here.
    log_dir: str | None = None

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_allowed_origins: list[str] = Field(default_factory=list)

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "school-portal"
    jwt_audience: str = "school-portal-api"
    jwt_access_secret: str = Field(default="dev-access-secret-change-me-0123456789", repr=False)
    jwt_access_ttl_minutes: int = 60
    jwt_refresh_secret: str = Field(default="dev-refresh-secret-change-me-0123456789", repr=False)
    jwt_refresh_ttl_minutes: int = 7 * 24 * 60
    reset_password_ttl_minutes: int = 30

    # Shared with the web client; encrypts tokens and passwords in transit.
    crypto_secret_key: str = Field(default="dev-crypto-key-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./school_portal.db"

    # Uploads
    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:8080"

    # Email
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = Field(default=None, repr=False)
    smtp_use_tls: bool = True
    email_from: str = "no-reply@school-portal.local"

    # System admin (created lazily at startup and by the hourly housekeeping job)
    system_admin_email: str | None = None
    system_admin_password: str | None = Field(default=None, repr=False)

    housekeeping_enabled: bool = True

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module reads configuration through `Settings`; nothing should call
# os.environ directly (alembic/env.py is the one deliberate exception).
