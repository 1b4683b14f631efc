from datetime import timedelta

from ats_crawler.reaper import reap_stale_postings
from ats_crawler.schema import PostingStatus
from tests.conftest import T0, make_job


def test_reaper_closes_stale_and_leaves_fresh(store):
    store.upsert(make_job("https://x.com/jobs/1"), seen_at=T0 - timedelta(days=8))
    store.upsert(make_job("https://x.com/jobs/2"), seen_at=T0 - timedelta(days=2))

    assert reap_stale_postings(store, retention_days=7, now=T0) == 1
    assert store.get("https://x.com/jobs/1").status is PostingStatus.closed
    assert store.get("https://x.com/jobs/2").status is PostingStatus.open


def test_second_pass_changes_nothing(store):
    store.upsert(make_job("https://x.com/jobs/1"), seen_at=T0 - timedelta(days=30))
    reap_stale_postings(store, retention_days=7, now=T0)
    assert reap_stale_postings(store, retention_days=7, now=T0) == 0


def test_posting_seen_exactly_at_cutoff_stays_open(store):
    store.upsert(make_job(), seen_at=T0 - timedelta(days=7))
    assert reap_stale_postings(store, retention_days=7, now=T0) == 0


def test_empty_store(store):
    assert reap_stale_postings(store) == 0
