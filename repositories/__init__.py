from repositories.click_repository import ClickRepository
from repositories.indexes import CLICKS_COLLECTION, LINKS_COLLECTION, ensure_indexes
from repositories.protocol import ClickStore, LinkStore
from repositories.url_repository import UrlRepository

__all__ = [
    "CLICKS_COLLECTION",
    "LINKS_COLLECTION",
    "ClickRepository",
    "ClickStore",
    "LinkStore",
    "UrlRepository",
    "ensure_indexes",
]
