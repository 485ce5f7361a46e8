"""
Response DTOs for analytics and dashboard endpoints.

AggregationResult  — breakdowns computed from one snapshot of click events
AnalyticsResponse  — GET /api/v1/analytics/{code}  (link info + breakdowns)
LinkSummary        — compact per-link aggregate for dashboard list views
UrlWithAnalytics   — one element of GET /api/v1/dashboard/urls
DashboardStats     — GET /api/v1/dashboard/stats

These models are derived views: built on demand, never persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CountryStat(BaseModel):
    country: str
    clicks: int
    percentage: float


class CityStat(BaseModel):
    city: str
    country: str
    clicks: int
    percentage: float


class BrowserStat(BaseModel):
    browser: str
    clicks: int
    percentage: float


class ReferrerStat(BaseModel):
    referrer: str
    clicks: int
    percentage: float


class DeviceStats(BaseModel):
    """Fixed-shape device breakdown; ``unknown`` catches missing/unrecognised types."""

    mobile: int = 0
    desktop: int = 0
    tablet: int = 0
    unknown: int = 0
    mobile_percentage: float = 0.0
    desktop_percentage: float = 0.0
    tablet_percentage: float = 0.0
    unknown_percentage: float = 0.0


class AggregationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_clicks: int = 0
    # ISO date → count, ascending
    clicks_by_date: dict[str, int] = Field(default_factory=dict)
    # hour of day (0–23) → count, ascending; all dates merged
    clicks_by_hour: dict[int, int] = Field(default_factory=dict)
    top_countries: list[CountryStat] = Field(default_factory=list)
    top_cities: list[CityStat] = Field(default_factory=list)
    top_browsers: list[BrowserStat] = Field(default_factory=list)
    top_referrers: list[ReferrerStat] = Field(default_factory=list)
    device_stats: DeviceStats = Field(default_factory=DeviceStats)


class AnalyticsResponse(AggregationResult):
    """Full analytics report for one link.

    ``total_clicks`` counts the events inside the requested range;
    ``click_count`` is the link's lifetime counter.
    """

    code: str
    original_url: str
    title: Optional[str] = None
    created_at: datetime
    click_count: int
    owner_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class LinkSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_clicks: int = 0
    last_clicked_at: Optional[datetime] = None
    top_country: Optional[str] = None
    top_country_clicks: int = 0
    top_device_type: Optional[str] = None
    top_device_clicks: int = 0
    clicks_today: int = 0
    clicks_this_week: int = 0


class UrlWithAnalytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    original_url: str
    title: Optional[str] = None
    code_type: str
    click_count: int
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_expired: bool
    is_active: bool
    owner_id: str
    analytics_summary: LinkSummary


class DashboardStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_links: int
    active_links: int
    total_clicks: int
    avg_clicks_per_link: float
    top_region: Optional[str] = None
