from datetime import datetime, timedelta

from loguru import logger

from ats_crawler.storage import PostingStore


def reap_stale_postings(store: PostingStore, retention_days: int = 7, now: datetime | None = None) -> int:
    """Close postings nobody has seen for retention_days. Running it twice closes nothing new."""
    closed = store.close_stale(timedelta(days=retention_days), now=now)
    logger.info(f"Closed {closed} postings not seen in the last {retention_days} days")
    return closed
