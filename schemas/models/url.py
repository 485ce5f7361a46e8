"""
Short link document model.

Maps to the `links` MongoDB collection. `alias` carries a unique index;
`total_clicks` is only ever changed through an atomic `$inc`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from schemas.models.base import MongoBaseModel, PyObjectId
from shared.datetime_utils import ensure_utc

CODE_TYPE_GENERATED = "generated"
CODE_TYPE_CUSTOM = "custom"

CodeType = Literal["generated", "custom"]


class ShortLinkDoc(MongoBaseModel):
    """Document model for the `links` collection."""

    alias: str
    long_url: str
    owner_id: PyObjectId
    title: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool = True
    total_clicks: int = 0
    last_click: Optional[datetime] = None
    code_type: CodeType = CODE_TYPE_GENERATED

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and ensure_utc(self.expires_at) < ensure_utc(
            now
        )
