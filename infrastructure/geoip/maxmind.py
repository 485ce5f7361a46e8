"""Local GeoLite2 implementation of GeoResolver.

geoip2 reads from local .mmdb files and is sync; lookups run in
asyncio.to_thread() to avoid blocking the event loop.

- Returns "Unknown" when a database file is missing or a lookup fails.
- Lazy-loads readers on first use (double-checked locking with asyncio.Lock).
"""

from __future__ import annotations

import asyncio
from typing import Optional

import geoip2.database
import geoip2.errors
import maxminddb

from infrastructure.geoip.protocol import (
    UNKNOWN,
    UNKNOWN_LOCATION,
    GeoLocation,
    is_public_ip,
)
from shared.logging import get_logger

log = get_logger(__name__)

_LOOKUP_ERRORS = (
    geoip2.errors.AddressNotFoundError,
    ValueError,
    maxminddb.InvalidDatabaseError,
)


class MaxMindGeoResolver:
    def __init__(self, country_db_path: str, city_db_path: str) -> None:
        self._country_db_path = country_db_path
        self._city_db_path = city_db_path
        self._country_reader: Optional[geoip2.database.Reader] = None
        self._city_reader: Optional[geoip2.database.Reader] = None
        self._loaded = False
        self._lock = asyncio.Lock()

    async def _open(self, path: str, kind: str) -> Optional[geoip2.database.Reader]:
        try:
            return await asyncio.to_thread(geoip2.database.Reader, path)
        except (OSError, maxminddb.InvalidDatabaseError) as e:
            log.warning(
                "geoip_db_unavailable",
                kind=kind,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def _ensure_readers(self) -> None:
        if self._loaded:
            return
        async with self._lock:
            if not self._loaded:
                self._country_reader = await self._open(self._country_db_path, "country")
                self._city_reader = await self._open(self._city_db_path, "city")
                self._loaded = True

    async def _city(self, ip_address: str) -> Optional[GeoLocation]:
        if self._city_reader is None:
            return None
        try:
            result = await asyncio.to_thread(self._city_reader.city, ip_address)
        except _LOOKUP_ERRORS:
            return None
        return GeoLocation(
            country=result.country.name or UNKNOWN,
            city=result.city.name or UNKNOWN,
        )

    async def _country(self, ip_address: str) -> str:
        if self._country_reader is None:
            return UNKNOWN
        try:
            result = await asyncio.to_thread(self._country_reader.country, ip_address)
        except _LOOKUP_ERRORS:
            return UNKNOWN
        return result.country.name or UNKNOWN

    async def resolve(self, ip_address: str) -> GeoLocation:
        if not is_public_ip(ip_address):
            return UNKNOWN_LOCATION
        await self._ensure_readers()

        # The city database also carries the country; prefer one lookup.
        location = await self._city(ip_address)
        if location is not None and location.country != UNKNOWN:
            return location
        country = await self._country(ip_address)
        city = location.city if location is not None else UNKNOWN
        return GeoLocation(country=country, city=city)

    def close(self) -> None:
        for reader in (self._country_reader, self._city_reader):
            if reader is not None:
                reader.close()
