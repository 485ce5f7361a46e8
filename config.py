"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
Each concern gets its own BaseSettings sub-config; AppSettings composes them
so tests can build any single block in isolation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_GEO_PROVIDERS = frozenset({"ip-api", "maxmind", "none"})


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "shortenit"


class ShortenerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    base_url: str = "http://localhost:8000"
    short_code_length: int = 7
    # Generation attempts before giving up with CodeSpaceExhaustedError
    max_code_attempts: int = 10

    # Hosts that may not be shortened (the service's own domain, to avoid loops)
    blocked_self_domains: list[str] = []


class GeoSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    geo_provider: str = "ip-api"
    geo_api_url: str = "http://ip-api.com/json/"
    geo_timeout_seconds: float = 1.5

    # Circuit breaker: open after N consecutive failures, stay open for cooldown
    geo_failure_threshold: int = 5
    geo_cooldown_seconds: float = 30.0

    # Local MaxMind databases (used when geo_provider="maxmind")
    geoip_country_db: str = "misc/GeoLite2-Country.mmdb"
    geoip_city_db: str = "misc/GeoLite2-City.mmdb"

    @field_validator("geo_provider", mode="after")
    @classmethod
    def _validate_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ALLOWED_GEO_PROVIDERS:
            raise ValueError(
                f"geo_provider must be one of: {', '.join(sorted(ALLOWED_GEO_PROVIDERS))}"
            )
        return v


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production

    # Sampling rates (0.0–1.0)
    sample_rate_redirect: float = 0.05
    sample_rate_analytics: float = 0.20
    sample_rate_geo: float = 0.01


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "shortenit"

    cors_origins: list[str] = ["*"]

    # IANA timezone used for "clicks today" in dashboard summaries
    dashboard_timezone: str = "UTC"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    shortener: Optional[ShortenerSettings] = None
    geo: Optional[GeoSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.db is None:
            self.db = DatabaseSettings()
        if self.shortener is None:
            self.shortener = ShortenerSettings()
        if self.geo is None:
            self.geo = GeoSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
