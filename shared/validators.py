"""
URL and alias validators. Framework-agnostic pure functions.
"""

from __future__ import annotations

import re
from typing import Sequence

import validators as _validators

_ALIAS_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")

MAX_ALIAS_LENGTH = 50


def validate_url(url: str, blocked_self_domains: Sequence[str] = ()) -> bool:
    """Return True if *url* is a valid HTTP/S URL not pointing at ourselves.

    Args:
        url: The URL string to validate.
        blocked_self_domains: Domains that must not appear in the URL, used to
            prevent redirect loops through the shortener itself.
    """
    if not url or not _validators.url(url):
        return False
    if not url.lower().startswith(("http://", "https://")):
        return False
    url_lower = url.lower()
    return not any(domain and domain in url_lower for domain in blocked_self_domains)


def validate_alias(alias: str) -> bool:
    """Return True if *alias* is 1–50 characters of ``[a-zA-Z0-9_-]``."""
    if not alias or len(alias) > MAX_ALIAS_LENGTH:
        return False
    return _ALIAS_PATTERN.fullmatch(alias) is not None
