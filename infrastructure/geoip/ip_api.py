"""ip-api.com implementation of GeoResolver.

The provider answers ``{"status": "success", "country": ..., "city": ...}``.
Anything else (network error, non-200, malformed JSON, ``status: fail``)
degrades to ``UNKNOWN_LOCATION``; the failure is logged, never raised.
"""

from __future__ import annotations

from infrastructure.geoip.protocol import (
    UNKNOWN,
    UNKNOWN_LOCATION,
    GeoLocation,
    is_public_ip,
)
from infrastructure.http_client import HttpClient
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

DEFAULT_IP_API_URL = "http://ip-api.com/json/"


class IpApiGeoResolver:
    def __init__(
        self, http_client: HttpClient, base_url: str = DEFAULT_IP_API_URL
    ) -> None:
        self._http = http_client
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"

    async def resolve(self, ip_address: str) -> GeoLocation:
        if not is_public_ip(ip_address):
            return UNKNOWN_LOCATION
        try:
            response = await self._http.get(
                f"{self._base_url}{ip_address.strip()}",
                params={"fields": "status,message,country,city"},
            )
            if response.status_code != 200:
                log.warning(
                    "geo_resolution_degraded",
                    provider="ip-api",
                    reason="http_status",
                    status_code=response.status_code,
                    ip_hash=hash_ip(ip_address),
                )
                return UNKNOWN_LOCATION
            data = response.json()
            if not isinstance(data, dict) or data.get("status") != "success":
                log.warning(
                    "geo_resolution_degraded",
                    provider="ip-api",
                    reason="provider_status",
                    message=data.get("message") if isinstance(data, dict) else None,
                    ip_hash=hash_ip(ip_address),
                )
                return UNKNOWN_LOCATION
            return GeoLocation(
                country=data.get("country") or UNKNOWN,
                city=data.get("city") or UNKNOWN,
            )
        except Exception as e:
            log.warning(
                "geo_resolution_degraded",
                provider="ip-api",
                reason="request_failed",
                error=str(e),
                error_type=type(e).__name__,
                ip_hash=hash_ip(ip_address),
            )
            return UNKNOWN_LOCATION
