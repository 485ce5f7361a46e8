"""
User-agent classification. Framework-agnostic pure functions.

Three independent classifiers over a raw ``User-Agent`` string. All matching
is done on the lower-cased input with plain substring tests, so any string
(including adversarial ones) degrades to a sentinel rather than raising.

Sentinels:
- ``"unknown"``: no user agent was supplied (None or empty), for every
  classifier.
- ``"Other"``: a user agent was supplied but no browser/OS signature matched.
  Device type has no "Other": an unmatched agent is ``"desktop"``.
"""

from __future__ import annotations

from typing import Optional

UNKNOWN = "unknown"
OTHER = "Other"

DEVICE_MOBILE = "mobile"
DEVICE_TABLET = "tablet"
DEVICE_DESKTOP = "desktop"
DEVICE_TYPES = (DEVICE_MOBILE, DEVICE_DESKTOP, DEVICE_TABLET, UNKNOWN)

_TABLET_MARKERS = ("ipad", "tablet")
_MOBILE_MARKERS = (
    "mobile",
    "android",
    "iphone",
    "ipod",
    "blackberry",
    "windows phone",
)

# (label, must contain any of, must not contain any of), first match wins.
# Order matters: Edge and Opera embed "chrome/", Chrome embeds "safari/".
_BROWSER_SIGNATURES: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("Edge", ("edg/",), ()),
    ("Chrome", ("chrome/",), ("edg",)),
    ("Firefox", ("firefox/",), ()),
    ("Safari", ("safari/",), ("chrome",)),
    ("Opera", ("opera", "opr/"), ()),
    ("Internet Explorer", ("msie", "trident/"), ()),
)

# Version-specific Windows markers come before the generic one.
_OS_SIGNATURES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Windows 10", ("windows nt 10",)),
    ("Windows 8.1", ("windows nt 6.3",)),
    ("Windows 8", ("windows nt 6.2",)),
    ("Windows 7", ("windows nt 6.1",)),
    ("Windows", ("windows",)),
    ("macOS", ("mac os x",)),
    ("Linux", ("linux",)),
    ("Android", ("android",)),
    ("iOS", ("iphone", "ipad")),
)


def _normalise(user_agent: Optional[str]) -> Optional[str]:
    if not user_agent:
        return None
    return user_agent.lower()


def device_type(user_agent: Optional[str]) -> str:
    """Classify the device as ``mobile``, ``tablet``, ``desktop`` or ``unknown``.

    Tablet markers are checked first so an Android tablet or an iPad whose
    agent also says "mobile" is still reported as a tablet.
    """
    ua = _normalise(user_agent)
    if ua is None:
        return UNKNOWN
    if any(marker in ua for marker in _TABLET_MARKERS):
        return DEVICE_TABLET
    if any(marker in ua for marker in _MOBILE_MARKERS):
        return DEVICE_MOBILE
    return DEVICE_DESKTOP


def browser(user_agent: Optional[str]) -> str:
    """Return the browser family label, ``"Other"`` or ``"unknown"``."""
    ua = _normalise(user_agent)
    if ua is None:
        return UNKNOWN
    for label, required, excluded in _BROWSER_SIGNATURES:
        if any(token in ua for token in required) and not any(
            token in ua for token in excluded
        ):
            return label
    return OTHER


def operating_system(user_agent: Optional[str]) -> str:
    """Return the operating-system label, ``"Other"`` or ``"unknown"``."""
    ua = _normalise(user_agent)
    if ua is None:
        return UNKNOWN
    for label, markers in _OS_SIGNATURES:
        if any(marker in ua for marker in markers):
            return label
    return OTHER
