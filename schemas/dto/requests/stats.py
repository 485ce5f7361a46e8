"""
Request DTOs for the analytics and dashboard endpoints.

AnalyticsQuery — GET /api/v1/analytics/{code}  (optional date range)
PageQuery      — GET /api/v1/analytics, GET /api/v1/dashboard/urls, GET /api/v1/urls

Both date bounds accept ISO 8601 strings or Unix epoch seconds and are parsed
into aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shared.datetime_utils import parse_datetime

MAX_PAGE_SIZE = 100


class AnalyticsQuery(BaseModel):
    """Query parameters for a single link's analytics report."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: Optional[str] = None
    end_date: Optional[str] = None

    # --- Parsed/validated results (excluded from serialization) ---
    parsed_start: Optional[datetime] = Field(default=None, exclude=True)
    parsed_end: Optional[datetime] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _parse_range(self) -> "AnalyticsQuery":
        if self.start_date:
            self.parsed_start = parse_datetime(self.start_date)
            if self.parsed_start is None:
                raise ValueError("start_date must be ISO 8601 or Unix seconds")
        if self.end_date:
            self.parsed_end = parse_datetime(self.end_date)
            if self.parsed_end is None:
                raise ValueError("end_date must be ISO 8601 or Unix seconds")
        if (
            self.parsed_start is not None
            and self.parsed_end is not None
            and self.parsed_start > self.parsed_end
        ):
            raise ValueError("start_date must be before end_date")
        return self


class PageQuery(BaseModel):
    """1-based pagination parameters."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)
