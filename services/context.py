"""Explicit per-request context objects passed into services.

Nothing in the service layer looks up the current request or user through
globals; the HTTP layer builds these and hands them down.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional

from bson import ObjectId
from fastapi import Request

from shared.datetime_utils import utcnow


@dataclass(frozen=True)
class RequestContext:
    """What the click path needs to know about one redirect request."""

    headers: Mapping[str, str] = field(default_factory=dict)
    remote_addr: Optional[str] = None
    # Event time: captured when the request arrived, not when the click is written
    received_at: datetime = field(default_factory=utcnow)

    @property
    def user_agent(self) -> Optional[str]:
        return self._header("User-Agent")

    @property
    def referrer(self) -> Optional[str]:
        return self._header("Referer")

    def _header(self, name: str) -> Optional[str]:
        value = self.headers.get(name)
        if value is None:
            lowered = name.lower()
            value = next(
                (v for k, v in self.headers.items() if k.lower() == lowered), None
            )
        return value or None

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            headers=dict(request.headers),
            remote_addr=request.client.host if request.client else None,
        )


@dataclass(frozen=True)
class Caller:
    """The authenticated principal on whose behalf an analytics call runs."""

    user_id: ObjectId
    is_admin: bool = False

    def can_view(self, owner_id: ObjectId) -> bool:
        return self.is_admin or self.user_id == owner_id

    @property
    def owner_scope(self) -> Optional[ObjectId]:
        """Owner filter for list queries: None (everyone) for administrators."""
        return None if self.is_admin else self.user_id
