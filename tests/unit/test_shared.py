"""
Unit tests for the shared/ utility modules.

Covers:
- shared.validators      (validate_url, validate_alias)
- shared.generators      (generate_short_code)
- shared.datetime_utils  (parse_datetime, ensure_utc, start_of_day,
                          resolve_timezone, days_from_now)
- shared.ip_utils        (extract_client_ip)
- shared.user_agent      (device_type, browser, operating_system)
- shared.logging         (should_sample, hash_ip)
- shared.logging_config  (redact_sensitive_fields)
"""

from __future__ import annotations

import hashlib
import random
import string
from datetime import datetime, timedelta, timezone

import pytest

from shared import user_agent as ua
from shared.datetime_utils import (
    days_from_now,
    ensure_utc,
    parse_datetime,
    resolve_timezone,
    start_of_day,
)
from shared.generators import ALPHABET, generate_short_code
from shared.ip_utils import extract_client_ip
from shared.logging import SAMPLING_RATES, hash_ip, should_sample
from shared.logging_config import redact_sensitive_fields
from shared.validators import MAX_ALIAS_LENGTH, validate_alias, validate_url


CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.0.0"
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
IE11_WIN7 = "Mozilla/5.0 (Windows NT 6.1; Trident/7.0; rv:11.0) like Gecko"
OPERA_PRESTO = "Opera/9.80 (Windows NT 6.2) Presto/2.12.388 Version/12.16"


# ---------------------------------------------------------------------------
# shared.validators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com", True),
        ("http://example.com/foo/bar?q=1", True),
        ("ftp://example.com/file.txt", False),
        ("not-a-url", False),
        ("", False),
    ],
    ids=["https", "http_with_path", "ftp_scheme", "plain_text", "empty"],
)
def test_validate_url(url, expected):
    assert validate_url(url) is expected


def test_validate_url_blocked_self_domain():
    assert validate_url("https://sho.rt/abc", blocked_self_domains=("sho.rt",)) is False
    assert validate_url("https://SHO.RT/abc", blocked_self_domains=("sho.rt",)) is False


def test_validate_url_empty_blocked_list():
    assert validate_url("https://sho.rt/abc", blocked_self_domains=()) is True


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("my-link_01", True),
        ("A", True),
        ("a" * MAX_ALIAS_LENGTH, True),
        ("a" * (MAX_ALIAS_LENGTH + 1), False),
        ("", False),
        ("has space", False),
        ("slash/path", False),
        ("ünïcode", False),
        ("abc\n", False),
    ],
    ids=[
        "mixed",
        "single",
        "max_len",
        "too_long",
        "empty",
        "space",
        "slash",
        "unicode",
        "trailing_newline",
    ],
)
def test_validate_alias(alias, expected):
    assert validate_alias(alias) is expected


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerateShortCode:
    def test_default_length_and_alphabet(self):
        code = generate_short_code()
        assert len(code) == 7
        assert set(code) <= set(ALPHABET)

    def test_alphabet_is_62_alphanumerics(self):
        assert len(ALPHABET) == 62
        assert set(ALPHABET) == set(string.ascii_letters + string.digits)

    def test_custom_length(self):
        assert len(generate_short_code(12)) == 12

    def test_injected_rng_is_deterministic(self):
        a = generate_short_code(rng=random.Random(42))
        b = generate_short_code(rng=random.Random(42))
        assert a == b

    def test_codes_are_distinct(self):
        codes = {generate_short_code() for _ in range(500)}
        assert len(codes) == 500

    @pytest.mark.parametrize(
        "kwargs", [{"length": 0}, {"length": -1}, {"alphabet": ""}],
        ids=["zero", "negative", "empty_alphabet"],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            generate_short_code(**kwargs)


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("2024-01-02T03:04:05Z", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        ("2024-01-02T05:04:05+02:00", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        (0, datetime(1970, 1, 1, tzinfo=timezone.utc)),
        ("not a date", None),
    ],
    ids=["none", "zulu", "offset", "epoch", "garbage"],
)
def test_parse_datetime(value, expected):
    assert parse_datetime(value) == expected


def test_parse_datetime_naive_assumed_utc():
    result = parse_datetime("2024-06-01T12:00:00")
    assert result.tzinfo is not None
    assert result.utcoffset() == timedelta(0)


def test_ensure_utc_converts_offsets():
    tz = timezone(timedelta(hours=3))
    assert ensure_utc(datetime(2024, 1, 1, 3, tzinfo=tz)) == datetime(
        2024, 1, 1, tzinfo=timezone.utc
    )


def test_resolve_timezone_falls_back_to_utc():
    assert str(resolve_timezone("Not/AZone")) == "UTC"
    assert str(resolve_timezone(None)) == "UTC"
    assert str(resolve_timezone("Asia/Tokyo")) == "Asia/Tokyo"


def test_start_of_day_uses_local_calendar():
    # 20:00 UTC is already 05:00 the next morning in Tokyo (UTC+9)
    now = datetime(2024, 3, 10, 20, 0, tzinfo=timezone.utc)
    assert start_of_day(now, resolve_timezone("Asia/Tokyo")) == datetime(
        2024, 3, 10, 15, 0, tzinfo=timezone.utc
    )


def test_days_from_now():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert days_from_now(30, now) == datetime(2024, 1, 31, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# shared.ip_utils
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers, remote_addr, expected_ip",
    [
        ({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}, "10.0.0.1", "203.0.113.5"),
        (
            {"X-Forwarded-For": "unknown", "Proxy-Client-IP": "198.51.100.7"},
            "10.0.0.1",
            "198.51.100.7",
        ),
        (
            {"HTTP_CLIENT_IP": "198.51.100.1", "WL-Proxy-Client-IP": "198.51.100.2"},
            None,
            "198.51.100.2",
        ),
        ({"x-forwarded-for": " 203.0.113.9 "}, None, "203.0.113.9"),
        ({"X-Forwarded-For": ""}, "192.0.2.1", "192.0.2.1"),
        ({}, None, ""),
    ],
    ids=[
        "forwarded_for_first_hop",
        "unknown_skipped",
        "header_priority",
        "case_insensitive",
        "empty_falls_back",
        "nothing_available",
    ],
)
def test_extract_client_ip(headers, remote_addr, expected_ip):
    assert extract_client_ip(headers, remote_addr) == expected_ip


# ---------------------------------------------------------------------------
# shared.user_agent
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "agent, device, browser",
    [
        (CHROME_WINDOWS, "desktop", "Chrome"),
        (EDGE_WINDOWS, "desktop", "Edge"),
        (FIREFOX_LINUX, "desktop", "Firefox"),
        (SAFARI_MAC, "desktop", "Safari"),
        (SAFARI_IPHONE, "mobile", "Safari"),
        (SAFARI_IPAD, "tablet", "Safari"),
        (CHROME_ANDROID, "mobile", "Chrome"),
        (IE11_WIN7, "desktop", "Internet Explorer"),
        (OPERA_PRESTO, "desktop", "Opera"),
        ("curl/8.4.0", "desktop", "Other"),
    ],
    ids=[
        "chrome",
        "edge",
        "firefox",
        "safari_mac",
        "iphone",
        "ipad",
        "android",
        "ie11",
        "opera",
        "curl",
    ],
)
def test_device_and_browser(agent, device, browser):
    assert ua.device_type(agent) == device
    assert ua.browser(agent) == browser


@pytest.mark.parametrize(
    "agent, expected",
    [
        (CHROME_WINDOWS, "Windows 10"),
        (IE11_WIN7, "Windows 7"),
        (OPERA_PRESTO, "Windows 8"),
        ("Mozilla/5.0 (Windows NT 6.3; Win64)", "Windows 8.1"),
        ("Mozilla/5.0 (Windows NT 5.1)", "Windows"),
        (SAFARI_MAC, "macOS"),
        (FIREFOX_LINUX, "Linux"),
        ("curl/8.4.0", "Other"),
    ],
    ids=["win10", "win7", "win8", "win81", "winxp", "macos", "linux", "other"],
)
def test_operating_system(agent, expected):
    assert ua.operating_system(agent) == expected


@pytest.mark.parametrize("agent", [None, ""], ids=["none", "empty"])
def test_missing_user_agent_is_unknown(agent):
    assert ua.device_type(agent) == "unknown"
    assert ua.browser(agent) == "unknown"
    assert ua.operating_system(agent) == "unknown"


def test_classifiers_are_pure():
    assert [ua.browser(EDGE_WINDOWS) for _ in range(3)] == ["Edge"] * 3


def test_adversarial_input_never_raises():
    junk = "\x00" * 10 + "☃" * 1000 + "Mozilla/5.0 (" * 50
    assert ua.device_type(junk) in ua.DEVICE_TYPES
    assert isinstance(ua.browser(junk), str)
    assert isinstance(ua.operating_system(junk), str)


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestShouldSample:
    def test_zero_rate_never_samples(self, monkeypatch):
        monkeypatch.setitem(SAMPLING_RATES, "url_redirect", 0.0)
        assert not any(should_sample("url_redirect") for _ in range(50))

    def test_full_rate_always_samples(self, monkeypatch):
        monkeypatch.setitem(SAMPLING_RATES, "url_redirect", 1.0)
        assert all(should_sample("url_redirect") for _ in range(50))

    def test_unconfigured_event_always_logged(self):
        assert should_sample("something_rare") is True


class TestHashIp:
    def test_none_passthrough(self):
        assert hash_ip(None) is None

    def test_development_keeps_ip(self, monkeypatch):
        monkeypatch.setattr("shared.logging_config.IS_PRODUCTION", False)
        assert hash_ip("203.0.113.5") == "203.0.113.5"

    def test_production_hashes(self, monkeypatch):
        monkeypatch.setattr("shared.logging_config.IS_PRODUCTION", True)
        expected = hashlib.sha256(b"203.0.113.5").hexdigest()[:16]
        assert hash_ip("203.0.113.5") == expected


class TestRedactSensitiveFields:
    @pytest.mark.parametrize(
        "key", ["Authorization", "authorization", "Cookie", "api_key", "refresh_token"]
    )
    def test_redacts_regardless_of_case(self, key):
        out = redact_sensitive_fields(None, "info", {"event": "x", key: "value"})
        assert out[key] == "***REDACTED***"

    def test_leaves_other_fields(self):
        out = redact_sensitive_fields(
            None, "info", {"event": "link_created", "short_code": "abc1234"}
        )
        assert out == {"event": "link_created", "short_code": "abc1234"}
