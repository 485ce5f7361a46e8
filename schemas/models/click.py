"""
Click document model.

Maps to the `clicks` MongoDB time-series collection.

Time-series schema:
  timeField  = "clicked_at"
  metaField  = "meta"
  granularity = "seconds"

The `meta` subdocument groups clicks by link for efficient range queries.
Click documents are append-only: the core inserts them and never updates them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.models.base import MongoBaseModel, PyObjectId


class ClickMeta(BaseModel):
    """The metaField subdocument for the time-series collection."""

    url_id: PyObjectId
    short_code: str
    owner_id: PyObjectId


class ClickDoc(MongoBaseModel):
    """Document model for the `clicks` time-series collection."""

    # Time-series timeField (event time of the redirect)
    clicked_at: datetime

    # Time-series metaField
    meta: ClickMeta

    # Client context
    ip_address: str = ""
    country: str = "Unknown"
    city: str = "Unknown"
    user_agent: Optional[str] = None

    # Derived classification
    device_type: str = "unknown"
    browser: str = "unknown"
    os: str = "unknown"

    referrer: Optional[str] = None  # raw Referer header, nullable
