"""
Analytics and dashboard endpoints.

GET /api/v1/analytics/{code}   — full report for one link, optional date range
GET /api/v1/analytics          — full reports for every link of the caller
GET /api/v1/dashboard/urls     — per-link summaries for list views
GET /api/v1/dashboard/stats    — totals across the caller's links

Every endpoint requires the caller identity headers. Admins see every link.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError as PydanticValidationError

from dependencies import get_analytics_service, get_caller
from errors import ValidationError
from schemas.dto.requests.stats import AnalyticsQuery, PageQuery
from schemas.dto.responses.common import ErrorResponse, PageResponse
from schemas.dto.responses.stats import (
    AnalyticsResponse,
    DashboardStats,
    UrlWithAnalytics,
)
from services.analytics_service import AnalyticsService
from services.context import Caller

router = APIRouter(
    prefix="/api/v1",
    tags=["analytics"],
    responses={401: {"model": ErrorResponse}},
)


def _parse_range(start_date: Optional[str], end_date: Optional[str]) -> AnalyticsQuery:
    try:
        return AnalyticsQuery(start_date=start_date, end_date=end_date)
    except PydanticValidationError as e:
        first = e.errors()[0]
        # Strip pydantic's "Value error, " prefix from model validator messages
        message = str(first.get("msg", "Invalid date range")).removeprefix("Value error, ")
        raise ValidationError(message, field="start_date")


@router.get(
    "/analytics/{code}",
    response_model=AnalyticsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def link_analytics(
    code: str,
    start_date: Optional[str] = Query(default=None),
    end_date: Optional[str] = Query(default=None),
    caller: Caller = Depends(get_caller),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    query = _parse_range(start_date, end_date)
    return await service.get_analytics(
        code, caller, query.parsed_start, query.parsed_end
    )


@router.get("/analytics", response_model=PageResponse[AnalyticsResponse])
async def owner_analytics(
    query: Annotated[PageQuery, Query()],
    caller: Caller = Depends(get_caller),
    service: AnalyticsService = Depends(get_analytics_service),
) -> PageResponse[AnalyticsResponse]:
    return await service.get_owner_analytics(caller, query.page, query.size)


@router.get("/dashboard/urls", response_model=PageResponse[UrlWithAnalytics])
async def dashboard_urls(
    query: Annotated[PageQuery, Query()],
    caller: Caller = Depends(get_caller),
    service: AnalyticsService = Depends(get_analytics_service),
) -> PageResponse[UrlWithAnalytics]:
    return await service.get_dashboard_summaries(caller, query.page, query.size)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    caller: Caller = Depends(get_caller),
    service: AnalyticsService = Depends(get_analytics_service),
) -> DashboardStats:
    return await service.get_dashboard_stats(caller)
