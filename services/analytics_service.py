"""
Read-side analytics: per-link reports, dashboard list summaries and
owner-wide dashboard totals.

Every call fetches one snapshot of click events per link and hands it to the
pure aggregator. Callers that neither own a link nor are administrators get
the same NotFoundError as for a missing code.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable, Optional

from errors import NotFoundError
from repositories.protocol import ClickStore, LinkStore
from schemas.dto.responses.common import PageResponse
from schemas.dto.responses.stats import (
    AnalyticsResponse,
    DashboardStats,
    UrlWithAnalytics,
)
from schemas.models.url import ShortLinkDoc
from services.analytics import aggregator
from services.context import Caller
from shared.datetime_utils import resolve_timezone, utcnow
from shared.logging import get_logger, should_sample

log = get_logger(__name__)


class AnalyticsService:
    def __init__(
        self,
        links: LinkStore,
        clicks: ClickStore,
        *,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._links = links
        self._clicks = clicks
        self._tz = tz or resolve_timezone("UTC")
        self._clock = clock

    async def _owned_link(self, code: str, caller: Caller) -> ShortLinkDoc:
        link = await self._links.find_by_alias(code)
        if link is None or not caller.can_view(link.owner_id):
            raise NotFoundError(f"Short URL not found: {code}")
        return link

    async def _report(
        self,
        link: ShortLinkDoc,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AnalyticsResponse:
        events = await self._clicks.find_by_url(link.id, start, end)
        # The store may ignore or widen the range; the aggregator re-applies it
        result = aggregator.aggregate(events, start, end, self._tz)
        return AnalyticsResponse(
            **result.model_dump(),
            code=link.alias,
            original_url=link.long_url,
            title=link.title,
            created_at=link.created_at,
            click_count=link.total_clicks,
            owner_id=str(link.owner_id),
            start_date=start,
            end_date=end,
        )

    async def get_analytics(
        self,
        code: str,
        caller: Caller,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AnalyticsResponse:
        link = await self._owned_link(code, caller)
        report = await self._report(link, start, end)
        if should_sample("analytics_query"):
            log.info(
                "analytics_generated",
                short_code=code,
                total_clicks=report.total_clicks,
                ranged=start is not None or end is not None,
            )
        return report

    async def get_owner_analytics(
        self, caller: Caller, page: int = 1, size: int = 20
    ) -> PageResponse[AnalyticsResponse]:
        scope = caller.owner_scope
        total = await self._links.count(scope)
        links = await self._links.find_page(scope, (page - 1) * size, size)
        items = [await self._report(link) for link in links]
        return PageResponse[AnalyticsResponse].build(items, page, size, total)

    async def get_dashboard_summaries(
        self, caller: Caller, page: int = 1, size: int = 20
    ) -> PageResponse[UrlWithAnalytics]:
        scope = caller.owner_scope
        now = self._clock()
        total = await self._links.count(scope)
        links = await self._links.find_page(scope, (page - 1) * size, size)

        items = []
        for link in links:
            events = await self._clicks.find_by_url(link.id)
            items.append(
                UrlWithAnalytics(
                    code=link.alias,
                    original_url=link.long_url,
                    title=link.title,
                    code_type=link.code_type,
                    click_count=link.total_clicks,
                    created_at=link.created_at,
                    expires_at=link.expires_at,
                    is_expired=link.is_expired(now),
                    is_active=link.is_active,
                    owner_id=str(link.owner_id),
                    analytics_summary=aggregator.summarize(events, now, self._tz),
                )
            )
        return PageResponse[UrlWithAnalytics].build(items, page, size, total)

    async def get_dashboard_stats(self, caller: Caller) -> DashboardStats:
        scope = caller.owner_scope
        total_links = await self._links.count(scope)
        active_links = await self._links.count(scope, active_only=True)
        total_clicks = await self._links.sum_clicks(scope)

        url_ids = None if scope is None else await self._links.list_ids(scope)
        top = await self._clicks.aggregate_by_dimension("country", url_ids, limit=1)

        return DashboardStats(
            total_links=total_links,
            active_links=active_links,
            total_clicks=total_clicks,
            avg_clicks_per_link=total_clicks / total_links if total_links else 0.0,
            top_region=top[0][0] if top else None,
        )
