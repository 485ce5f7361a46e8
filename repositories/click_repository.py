"""MongoDB repository for the `clicks` time-series collection.

Click documents are append-only. Reads return events newest first.
``aggregate_by_dimension`` pushes a group-and-count down to MongoDB so
owner-wide dashboards need not load every event.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.click import ClickDoc

# Dimensions that may be grouped server-side.
GROUPABLE_FIELDS = frozenset(
    {"country", "city", "browser", "os", "device_type", "referrer"}
)


def _time_filter(
    start: Optional[datetime], end: Optional[datetime]
) -> Optional[dict]:
    bounds: dict = {}
    if start is not None:
        bounds["$gte"] = start
    if end is not None:
        bounds["$lte"] = end
    return bounds or None


class ClickRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def insert(self, click: ClickDoc) -> ClickDoc:
        result = await self._col.insert_one(click.to_mongo())
        return click.model_copy(update={"id": result.inserted_id})

    async def delete_by_url(self, url_id: ObjectId) -> int:
        """Drop every event of one link; filters on the time-series meta field."""
        result = await self._col.delete_many({"meta.url_id": url_id})
        return result.deleted_count

    async def find_by_url(
        self,
        url_id: ObjectId,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[ClickDoc]:
        query: dict = {"meta.url_id": url_id}
        clicked_at = _time_filter(start, end)
        if clicked_at:
            query["clicked_at"] = clicked_at
        cursor = self._col.find(query).sort("clicked_at", DESCENDING)
        return [ClickDoc.from_mongo(doc) for doc in await cursor.to_list(length=None)]

    async def aggregate_by_dimension(
        self,
        field: str,
        url_ids: Optional[Sequence[ObjectId]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 10,
    ) -> list[tuple[str, int]]:
        """Return ``(value, count)`` pairs for *field*, highest count first.

        Null and empty values are excluded; ties are ordered by value.
        """
        if field not in GROUPABLE_FIELDS:
            raise ValueError(f"cannot group clicks by {field!r}")

        match: dict = {field: {"$nin": [None, ""]}}
        if url_ids is not None:
            match["meta.url_id"] = {"$in": list(url_ids)}
        clicked_at = _time_filter(start, end)
        if clicked_at:
            match["clicked_at"] = clicked_at

        pipeline = [
            {"$match": match},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
            {"$limit": limit},
        ]
        cursor = await self._col.aggregate(pipeline)
        rows = await cursor.to_list(length=None)
        return [(row["_id"], int(row["count"])) for row in rows]
