"""
Click-event aggregation: pure functions over an immutable snapshot.

Every function here takes a sequence of ClickDoc and returns plain values or
response models; nothing performs I/O and nothing raises on empty input.

Ranking rules shared by every top-N dimension:
- null/empty keys are excluded;
- ``percentage = count * 100 / total_events`` where ``total_events`` is the
  size of the whole snapshot (so excluded keys lower the sum below 100);
- order is count descending, then key ascending, so equal counts always come
  out in the same order.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Hashable, Iterable, Optional, Sequence, TypeVar

from schemas.dto.responses.stats import (
    AggregationResult,
    BrowserStat,
    CityStat,
    CountryStat,
    DeviceStats,
    LinkSummary,
    ReferrerStat,
)
from schemas.models.click import ClickDoc
from shared.datetime_utils import ensure_utc, start_of_day
from shared.user_agent import DEVICE_DESKTOP, DEVICE_MOBILE, DEVICE_TABLET, UNKNOWN

TOP_N = 10
WEEK = timedelta(days=7)

K = TypeVar("K", bound=Hashable)


def percentage(count: int, total: int) -> float:
    return count * 100.0 / total if total > 0 else 0.0


def filter_by_range(
    clicks: Iterable[ClickDoc],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[ClickDoc]:
    """Keep events with ``start <= clicked_at <= end``; a missing bound is open."""
    start_utc = ensure_utc(start) if start is not None else None
    end_utc = ensure_utc(end) if end is not None else None
    kept = []
    for click in clicks:
        ts = ensure_utc(click.clicked_at)
        if start_utc is not None and ts < start_utc:
            continue
        if end_utc is not None and ts > end_utc:
            continue
        kept.append(click)
    return kept


def rank(counts: Counter, limit: Optional[int] = TOP_N) -> list[tuple]:
    """``(key, count)`` pairs by count descending then key ascending."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ordered if limit is None else ordered[:limit]


def count_by(
    clicks: Iterable[ClickDoc], key: Callable[[ClickDoc], Optional[K]]
) -> Counter:
    counts: Counter = Counter()
    for click in clicks:
        value = key(click)
        if value is None or value == "":
            continue
        counts[value] += 1
    return counts


def _local(click: ClickDoc, tz: tzinfo) -> datetime:
    return ensure_utc(click.clicked_at).astimezone(tz)


def clicks_by_date(
    clicks: Sequence[ClickDoc], tz: tzinfo = timezone.utc
) -> dict[str, int]:
    counts = Counter(_local(c, tz).date().isoformat() for c in clicks)
    return dict(sorted(counts.items()))


def clicks_by_hour(
    clicks: Sequence[ClickDoc], tz: tzinfo = timezone.utc
) -> dict[int, int]:
    counts = Counter(_local(c, tz).hour for c in clicks)
    return dict(sorted(counts.items()))


def top_countries(clicks: Sequence[ClickDoc]) -> list[CountryStat]:
    total = len(clicks)
    return [
        CountryStat(country=country, clicks=n, percentage=percentage(n, total))
        for country, n in rank(count_by(clicks, lambda c: c.country))
    ]


def _city_key(click: ClickDoc) -> Optional[tuple[str, str]]:
    if not click.city:
        return None
    # Same-named cities in different countries stay separate
    return (click.city, click.country or "Unknown")


def top_cities(clicks: Sequence[ClickDoc]) -> list[CityStat]:
    total = len(clicks)
    return [
        CityStat(city=city, country=country, clicks=n, percentage=percentage(n, total))
        for (city, country), n in rank(count_by(clicks, _city_key))
    ]


def top_browsers(clicks: Sequence[ClickDoc]) -> list[BrowserStat]:
    total = len(clicks)
    return [
        BrowserStat(browser=name, clicks=n, percentage=percentage(n, total))
        for name, n in rank(count_by(clicks, lambda c: c.browser))
    ]


def top_referrers(clicks: Sequence[ClickDoc]) -> list[ReferrerStat]:
    total = len(clicks)
    return [
        ReferrerStat(referrer=ref, clicks=n, percentage=percentage(n, total))
        for ref, n in rank(count_by(clicks, lambda c: c.referrer))
    ]


def device_stats(clicks: Sequence[ClickDoc]) -> DeviceStats:
    known = {DEVICE_MOBILE, DEVICE_DESKTOP, DEVICE_TABLET}
    counts = Counter(
        c.device_type if c.device_type in known else UNKNOWN for c in clicks
    )
    total = len(clicks)
    return DeviceStats(
        mobile=counts[DEVICE_MOBILE],
        desktop=counts[DEVICE_DESKTOP],
        tablet=counts[DEVICE_TABLET],
        unknown=counts[UNKNOWN],
        mobile_percentage=percentage(counts[DEVICE_MOBILE], total),
        desktop_percentage=percentage(counts[DEVICE_DESKTOP], total),
        tablet_percentage=percentage(counts[DEVICE_TABLET], total),
        unknown_percentage=percentage(counts[UNKNOWN], total),
    )


def aggregate(
    clicks: Iterable[ClickDoc],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> AggregationResult:
    """Compute every breakdown for the events inside ``[start, end]``."""
    snapshot = filter_by_range(clicks, start, end)
    return AggregationResult(
        total_clicks=len(snapshot),
        clicks_by_date=clicks_by_date(snapshot, tz),
        clicks_by_hour=clicks_by_hour(snapshot, tz),
        top_countries=top_countries(snapshot),
        top_cities=top_cities(snapshot),
        top_browsers=top_browsers(snapshot),
        top_referrers=top_referrers(snapshot),
        device_stats=device_stats(snapshot),
    )


def _top_one(counts: Counter) -> tuple[Optional[str], int]:
    ranked = rank(counts, limit=1)
    if not ranked:
        return None, 0
    return ranked[0]


def summarize(
    clicks: Sequence[ClickDoc], now: datetime, tz: tzinfo = timezone.utc
) -> LinkSummary:
    """Dashboard summary; "today" starts at local midnight in *tz*."""
    if not clicks:
        return LinkSummary()

    now_utc = ensure_utc(now)
    midnight = start_of_day(now_utc, tz)
    week_ago = now_utc - WEEK
    timestamps = [ensure_utc(c.clicked_at) for c in clicks]

    top_country, top_country_clicks = _top_one(count_by(clicks, lambda c: c.country))
    top_device, top_device_clicks = _top_one(count_by(clicks, lambda c: c.device_type))

    return LinkSummary(
        total_clicks=len(clicks),
        last_clicked_at=max(timestamps),
        top_country=top_country,
        top_country_clicks=top_country_clicks,
        top_device_type=top_device,
        top_device_clicks=top_device_clicks,
        clicks_today=sum(1 for ts in timestamps if ts >= midnight),
        clicks_this_week=sum(1 for ts in timestamps if ts > week_ago),
    )
