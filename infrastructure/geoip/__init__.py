"""Geo-IP resolution: protocol, providers and the hot-path guard."""

from __future__ import annotations

from typing import Optional

from config import GeoSettings
from infrastructure.geoip.guarded import GuardedGeoResolver
from infrastructure.geoip.ip_api import IpApiGeoResolver
from infrastructure.geoip.maxmind import MaxMindGeoResolver
from infrastructure.geoip.protocol import (
    UNKNOWN,
    UNKNOWN_LOCATION,
    GeoLocation,
    GeoResolver,
    is_public_ip,
)
from infrastructure.http_client import HttpClient

__all__ = [
    "UNKNOWN",
    "UNKNOWN_LOCATION",
    "GeoLocation",
    "GeoResolver",
    "GuardedGeoResolver",
    "IpApiGeoResolver",
    "MaxMindGeoResolver",
    "NullGeoResolver",
    "build_geo_resolver",
    "is_public_ip",
]


class NullGeoResolver:
    """Resolver for deployments with geo lookups turned off."""

    async def resolve(self, ip_address: str) -> GeoLocation:
        return UNKNOWN_LOCATION

    def close(self) -> None:
        pass


def build_geo_resolver(
    settings: GeoSettings, http_client: Optional[HttpClient] = None
) -> GeoResolver:
    """Build the configured provider, wrapped in the timeout/breaker guard."""
    if settings.geo_provider == "none":
        return NullGeoResolver()

    inner: GeoResolver
    if settings.geo_provider == "maxmind":
        inner = MaxMindGeoResolver(settings.geoip_country_db, settings.geoip_city_db)
    else:
        inner = IpApiGeoResolver(
            http_client or HttpClient(timeout=settings.geo_timeout_seconds),
            base_url=settings.geo_api_url,
        )

    return GuardedGeoResolver(
        inner,
        timeout=settings.geo_timeout_seconds,
        failure_threshold=settings.geo_failure_threshold,
        cooldown=settings.geo_cooldown_seconds,
    )
