"""Store protocols. Services depend on these, not on MongoDB.

``owner_id=None`` means "every owner" (administrator scope) wherever a method
accepts it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from bson import ObjectId

from schemas.models.click import ClickDoc
from schemas.models.url import ShortLinkDoc


class LinkStore(Protocol):
    async def find_by_alias(self, alias: str) -> Optional[ShortLinkDoc]: ...

    async def alias_exists(self, alias: str) -> bool: ...

    async def insert(self, doc: ShortLinkDoc) -> ShortLinkDoc: ...

    async def increment_clicks(self, url_id: ObjectId, clicked_at: datetime) -> None: ...

    async def find_page(
        self, owner_id: Optional[ObjectId], skip: int, limit: int
    ) -> list[ShortLinkDoc]: ...

    async def count(
        self, owner_id: Optional[ObjectId] = None, active_only: bool = False
    ) -> int: ...

    async def sum_clicks(self, owner_id: Optional[ObjectId] = None) -> int: ...

    async def list_ids(self, owner_id: Optional[ObjectId] = None) -> list[ObjectId]: ...

    async def delete_by_alias(self, alias: str) -> bool: ...


class ClickStore(Protocol):
    async def insert(self, click: ClickDoc) -> ClickDoc: ...

    async def delete_by_url(self, url_id: ObjectId) -> int: ...

    async def find_by_url(
        self,
        url_id: ObjectId,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[ClickDoc]: ...

    async def aggregate_by_dimension(
        self,
        field: str,
        url_ids: Optional[Sequence[ObjectId]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 10,
    ) -> list[tuple[str, int]]: ...
