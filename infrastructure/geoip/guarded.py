"""Timeout + circuit-breaker wrapper around any GeoResolver.

Geo lookups sit on the redirect hot path. This wrapper guarantees that a slow
or failing provider can only cost ``timeout`` seconds per redirect, and after
``failure_threshold`` consecutive failures it stops calling the provider for
``cooldown`` seconds, answering ``UNKNOWN_LOCATION`` immediately.

A failure is a timeout, an exception, or an unknown answer for a public IP.
No lock is held while the inner resolver runs; breaker state is only touched
between awaits, which is race-free on a single event loop.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from infrastructure.geoip.protocol import (
    UNKNOWN_LOCATION,
    GeoLocation,
    GeoResolver,
    is_public_ip,
)
from shared.logging import get_logger, hash_ip, should_sample

log = get_logger(__name__)


class GuardedGeoResolver:
    def __init__(
        self,
        inner: GeoResolver,
        *,
        timeout: float = 1.5,
        failure_threshold: int = 5,
        cooldown: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._timeout = timeout
        self._failure_threshold = max(1, failure_threshold)
        self._cooldown = cooldown
        self._clock = clock
        self._consecutive_failures = 0
        self._open_until = 0.0

    @property
    def is_open(self) -> bool:
        return self._clock() < self._open_until

    def _record_success(self) -> None:
        self._consecutive_failures = 0

    def _record_failure(self, reason: str, ip_address: str) -> None:
        self._consecutive_failures += 1
        log.warning(
            "geo_resolution_degraded",
            reason=reason,
            consecutive_failures=self._consecutive_failures,
            ip_hash=hash_ip(ip_address),
        )
        if self._consecutive_failures >= self._failure_threshold:
            self._open_until = self._clock() + self._cooldown
            self._consecutive_failures = 0
            log.error(
                "geo_circuit_opened",
                cooldown_seconds=self._cooldown,
                threshold=self._failure_threshold,
            )

    async def resolve(self, ip_address: str) -> GeoLocation:
        if not is_public_ip(ip_address):
            return UNKNOWN_LOCATION
        if self.is_open:
            if should_sample("geo_lookup"):
                log.info("geo_circuit_short_circuit", ip_hash=hash_ip(ip_address))
            return UNKNOWN_LOCATION

        try:
            location = await asyncio.wait_for(
                self._inner.resolve(ip_address), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            self._record_failure("timeout", ip_address)
            return UNKNOWN_LOCATION
        except Exception as e:
            log.error(
                "geo_resolver_error", error=str(e), error_type=type(e).__name__
            )
            self._record_failure("exception", ip_address)
            return UNKNOWN_LOCATION

        if location.is_unknown:
            self._record_failure("unknown_result", ip_address)
        else:
            self._record_success()
        return location

    def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if close is not None:
            close()
