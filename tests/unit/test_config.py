"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DatabaseSettings,
    GeoSettings,
    LoggingSettings,
    ShortenerSettings,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


# ---------------------------------------------------------------------------
# DatabaseSettings
# ---------------------------------------------------------------------------


class TestDatabaseSettings:
    def test_loads_mongodb_uri(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017/")
        assert DatabaseSettings().mongodb_uri == "mongodb://db:27017/"

    def test_default_db_name(self, with_mongo):
        assert DatabaseSettings().db_name == "shortenit"

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


# ---------------------------------------------------------------------------
# ShortenerSettings
# ---------------------------------------------------------------------------


class TestShortenerSettings:
    def test_defaults(self):
        s = ShortenerSettings()
        assert s.short_code_length == 7
        assert s.max_code_attempts == 10
        assert s.blocked_self_domains == []

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SHORT_CODE_LENGTH", "9")
        monkeypatch.setenv("BLOCKED_SELF_DOMAINS", '["sho.rt"]')
        s = ShortenerSettings()
        assert s.short_code_length == 9
        assert s.blocked_self_domains == ["sho.rt"]


# ---------------------------------------------------------------------------
# GeoSettings
# ---------------------------------------------------------------------------


class TestGeoSettings:
    def test_defaults(self):
        s = GeoSettings()
        assert s.geo_provider == "ip-api"
        assert s.geo_api_url == "http://ip-api.com/json/"
        assert s.geo_timeout_seconds == 1.5
        assert s.geo_failure_threshold == 5

    @pytest.mark.parametrize(
        "raw, expected",
        [("maxmind", "maxmind"), ("  IP-API ", "ip-api"), ("none", "none")],
        ids=["maxmind", "normalised", "none"],
    )
    def test_provider_accepted(self, monkeypatch, raw, expected):
        monkeypatch.setenv("GEO_PROVIDER", raw)
        assert GeoSettings().geo_provider == expected

    def test_unknown_provider_rejected(self, monkeypatch):
        monkeypatch.setenv("GEO_PROVIDER", "carrier-pigeon")
        with pytest.raises(PydanticValidationError):
            GeoSettings()


class TestLoggingSettings:
    def test_sample_rates_from_env(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_RATE_REDIRECT", "1.0")
        s = LoggingSettings()
        assert s.sample_rate_redirect == 1.0
        assert s.sample_rate_analytics == 0.20


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "env, expected",
    [("production", True), ("development", False)],
    ids=["production", "development"],
)
def test_is_production(with_mongo, env, expected):
    with_mongo.setenv("ENV", env)
    assert AppSettings().is_production is expected


class TestAppSettings:
    def test_sub_configs_populated(self, with_mongo):
        s = AppSettings()
        for attr in ("db", "shortener", "geo", "logging", "sentry"):
            assert getattr(s, attr) is not None, f"sub-config '{attr}' is None"

    def test_cors_origins_default(self, with_mongo):
        assert AppSettings().cors_origins == ["*"]

    def test_dashboard_timezone(self, with_mongo):
        with_mongo.setenv("DASHBOARD_TIMEZONE", "Europe/Berlin")
        assert AppSettings().dashboard_timezone == "Europe/Berlin"
