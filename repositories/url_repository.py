"""MongoDB repository for the `links` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from errors import DuplicateCodeError
from schemas.models.url import ShortLinkDoc
from shared.logging import get_logger

log = get_logger(__name__)


def _owner_filter(owner_id: Optional[ObjectId], active_only: bool = False) -> dict:
    query: dict = {}
    if owner_id is not None:
        query["owner_id"] = owner_id
    if active_only:
        query["is_active"] = True
    return query


class UrlRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def find_by_alias(self, alias: str) -> Optional[ShortLinkDoc]:
        doc = await self._col.find_one({"alias": alias})
        return ShortLinkDoc.from_mongo(doc)

    async def alias_exists(self, alias: str) -> bool:
        doc = await self._col.find_one({"alias": alias}, {"_id": 1})
        return doc is not None

    async def insert(self, doc: ShortLinkDoc) -> ShortLinkDoc:
        """Insert *doc*; a unique-index collision on alias raises DuplicateCodeError."""
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except DuplicateKeyError as e:
            log.info("alias_insert_conflict", alias=doc.alias)
            raise DuplicateCodeError(
                f"Code already exists: {doc.alias}", field="code"
            ) from e
        return doc.model_copy(update={"id": result.inserted_id})

    async def increment_clicks(self, url_id: ObjectId, clicked_at: datetime) -> None:
        """Atomic server-side increment; never read-modify-write."""
        await self._col.update_one(
            {"_id": url_id},
            {"$inc": {"total_clicks": 1}, "$max": {"last_click": clicked_at}},
        )

    async def find_page(
        self, owner_id: Optional[ObjectId], skip: int, limit: int
    ) -> list[ShortLinkDoc]:
        cursor = (
            self._col.find(_owner_filter(owner_id))
            .sort("created_at", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [ShortLinkDoc.from_mongo(doc) for doc in await cursor.to_list(length=None)]

    async def count(
        self, owner_id: Optional[ObjectId] = None, active_only: bool = False
    ) -> int:
        return await self._col.count_documents(_owner_filter(owner_id, active_only))

    async def sum_clicks(self, owner_id: Optional[ObjectId] = None) -> int:
        pipeline = [
            {"$match": _owner_filter(owner_id)},
            {"$group": {"_id": None, "total": {"$sum": "$total_clicks"}}},
        ]
        cursor = await self._col.aggregate(pipeline)
        rows = await cursor.to_list(length=None)
        return int(rows[0]["total"]) if rows else 0

    async def list_ids(self, owner_id: Optional[ObjectId] = None) -> list[ObjectId]:
        cursor = self._col.find(_owner_filter(owner_id), {"_id": 1})
        return [doc["_id"] for doc in await cursor.to_list(length=None)]

    async def delete_by_alias(self, alias: str) -> bool:
        result = await self._col.delete_one({"alias": alias})
        return result.deleted_count == 1
