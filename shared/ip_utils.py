"""
Client IP resolution.

``extract_client_ip`` is a pure function over a header mapping and the raw
connection address, so it is testable without a request object.
"""

from __future__ import annotations

from typing import Mapping, Optional

# Checked in order; the first usable value wins.
PROXY_HEADERS: tuple[str, ...] = (
    "X-Forwarded-For",
    "Proxy-Client-IP",
    "WL-Proxy-Client-IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_FORWARDED",
    "HTTP_X_CLUSTER_CLIENT_IP",
    "HTTP_CLIENT_IP",
    "HTTP_FORWARDED_FOR",
    "HTTP_FORWARDED",
    "HTTP_VIA",
    "REMOTE_ADDR",
)


def _lookup(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive; Starlette's Headers are not.
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def extract_client_ip(
    headers: Mapping[str, str], remote_addr: Optional[str] = None
) -> str:
    """Return the caller's IP from proxy headers, falling back to *remote_addr*.

    For each header in :data:`PROXY_HEADERS`, a value that is present,
    non-empty and not ``"unknown"`` (any case) is split on commas and its
    first entry returned, stripped of whitespace.

    Args:
        headers: Request headers (any mapping; lookup is case-insensitive).
        remote_addr: The direct connection address.

    Returns:
        The resolved client IP, or ``""`` if nothing usable is available.
    """
    for header in PROXY_HEADERS:
        raw = _lookup(headers, header)
        if not raw or raw.strip().lower() == "unknown":
            continue
        client_ip = raw.split(",")[0].strip()
        if client_ip:
            return client_ip

    return remote_addr or ""
