"""GeoResolver protocol. The click path depends on this, not on a provider."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Protocol

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class GeoLocation:
    country: str = UNKNOWN
    city: str = UNKNOWN

    @property
    def is_unknown(self) -> bool:
        return self.country == UNKNOWN and self.city == UNKNOWN


UNKNOWN_LOCATION = GeoLocation()


class GeoResolver(Protocol):
    async def resolve(self, ip_address: str) -> GeoLocation: ...


def is_public_ip(ip_address: str) -> bool:
    """False for empty, malformed, private, loopback, link-local or reserved IPs.

    Such addresses can never be located, so resolvers return
    ``UNKNOWN_LOCATION`` for them without touching the network.
    """
    if not ip_address:
        return False
    try:
        ip = ipaddress.ip_address(ip_address.strip())
    except ValueError:
        return False
    return not (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )
