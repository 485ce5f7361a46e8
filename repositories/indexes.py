"""Collection bootstrap: unique alias index and the clicks time-series collection."""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import CollectionInvalid

from shared.logging import get_logger

log = get_logger(__name__)

LINKS_COLLECTION = "links"
CLICKS_COLLECTION = "clicks"


async def ensure_indexes(db: AsyncDatabase) -> None:
    links = db[LINKS_COLLECTION]
    await links.create_index([("alias", ASCENDING)], unique=True)
    await links.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])

    try:
        await db.create_collection(
            CLICKS_COLLECTION,
            timeseries={
                "timeField": "clicked_at",
                "metaField": "meta",
                "granularity": "seconds",
            },
        )
    except CollectionInvalid:
        # Already exists
        pass

    clicks = db[CLICKS_COLLECTION]
    await clicks.create_index([("meta.url_id", ASCENDING), ("clicked_at", DESCENDING)])
    await clicks.create_index([("meta.owner_id", ASCENDING), ("clicked_at", DESCENDING)])
    log.info("indexes_ensured", collections=[LINKS_COLLECTION, CLICKS_COLLECTION])
