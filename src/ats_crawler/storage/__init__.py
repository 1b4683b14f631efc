"""Storage and persistence layer."""

from ats_crawler.storage.database import Database
from ats_crawler.storage.host_registry import HostRegistry
from ats_crawler.storage.posting_store import PostingStore

__all__ = ["Database", "HostRegistry", "PostingStore"]
