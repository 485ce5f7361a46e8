"""
Shared fixtures for unit and integration tests.
"""

from __future__ import annotations

import os

import pytest

from fakes import FakeClickStore, FakeGeoResolver, FakeLinkStore
from infrastructure.geoip import GeoLocation

# AppSettings needs a MONGODB_URI even when nothing connects
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


@pytest.fixture
def link_store() -> FakeLinkStore:
    return FakeLinkStore()


@pytest.fixture
def click_store() -> FakeClickStore:
    return FakeClickStore()


@pytest.fixture
def geo_resolver() -> FakeGeoResolver:
    return FakeGeoResolver(
        {"8.8.8.8": GeoLocation(country="United States", city="Mountain View")}
    )
