"""
Response DTOs for URL shortening.

UrlResponse — POST /api/v1/shorten (201), GET /api/v1/urls, GET /api/v1/urls/{code}
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.url import ShortLinkDoc


class UrlResponse(BaseModel):
    """One short link as returned to its owner."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    short_url: str
    original_url: str
    title: Optional[str] = None
    code_type: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    click_count: int
    is_active: bool

    @classmethod
    def from_doc(cls, doc: ShortLinkDoc, base_url: str) -> "UrlResponse":
        return cls(
            code=doc.alias,
            short_url=f"{base_url.rstrip('/')}/{doc.alias}",
            original_url=doc.long_url,
            title=doc.title,
            code_type=doc.code_type,
            owner_id=str(doc.owner_id),
            created_at=doc.created_at,
            expires_at=doc.expires_at,
            click_count=doc.total_clicks,
            is_active=doc.is_active,
        )
