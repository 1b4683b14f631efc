from datetime import timedelta

from ats_crawler.schema import PostingStatus, UpsertResult
from ats_crawler.urls import url_hash
from tests.conftest import T0, make_job


# ── upsert ───────────────────────────────────────────────────────────────────

def test_insert_new_posting_is_open(store):
    assert store.upsert(make_job(), seen_at=T0) is UpsertResult.inserted
    posting = store.get("https://boards.greenhouse.io/vercel/jobs/1")
    assert posting.status is PostingStatus.open
    assert posting.discovered_at == T0
    assert posting.last_seen_at == T0
    assert posting.url_hash == url_hash(posting.url)
    assert posting.job_title == "Software Engineer"


def test_same_url_keeps_one_row_and_identity(store):
    store.upsert(make_job(), seen_at=T0)
    first = store.get("https://boards.greenhouse.io/vercel/jobs/1")

    later = T0 + timedelta(days=1)
    result = store.upsert(make_job(html="<h1>Senior Software Engineer</h1>", job_title="Senior"), seen_at=later)

    second = store.get("https://boards.greenhouse.io/vercel/jobs/1")
    assert result is UpsertResult.updated
    assert store.count() == 1
    assert second.id == first.id
    assert second.discovered_at == T0
    assert second.last_seen_at == later
    assert second.job_title == "Senior"


def test_unchanged_content(store):
    store.upsert(make_job(), seen_at=T0)
    assert store.upsert(make_job(), seen_at=T0 + timedelta(hours=1)) is UpsertResult.unchanged


def test_last_seen_never_moves_backwards(store):
    store.upsert(make_job(), seen_at=T0)
    store.upsert(make_job(), seen_at=T0 - timedelta(days=2))
    assert store.get(make_job().url).last_seen_at == T0


def test_urls_differing_only_in_tracking_params_are_separate_rows(store):
    store.upsert(make_job("https://x.com/jobs/1?gh_jid=5&utm_source=a"))
    store.upsert(make_job("https://x.com/jobs/1?gh_jid=5&utm_source=b"))
    assert store.count() == 2
    assert len(store.find_by_url_hash(url_hash("https://x.com/jobs/1?gh_jid=5"))) == 2


def test_missing_optional_fields_do_not_erase_known_ones(store):
    store.upsert(make_job(department="Engineering", job_family="Engineering"), seen_at=T0)
    store.upsert(make_job(html="<p>changed</p>"), seen_at=T0 + timedelta(hours=1))
    posting = store.get(make_job().url)
    assert posting.department == "Engineering"
    assert posting.job_family == "Engineering"


def test_upsert_never_reopens_closed_posting(store):
    store.upsert(make_job(), seen_at=T0)
    store.close_stale(timedelta(days=7), now=T0 + timedelta(days=8))
    store.upsert(make_job(), seen_at=T0 + timedelta(days=9))
    assert store.get(make_job().url).status is PostingStatus.closed


# ── versions ─────────────────────────────────────────────────────────────────

def test_version_written_per_distinct_content(store):
    store.upsert(make_job(), seen_at=T0)
    store.upsert(make_job(), seen_at=T0 + timedelta(hours=1))
    store.upsert(make_job(html="<h1>v2</h1>"), seen_at=T0 + timedelta(hours=2))
    posting = store.get(make_job().url)
    versions = store.versions(posting.id)
    assert len(versions) == 2
    assert versions[-1].html_hash == posting.html_hash


# ── close_stale ──────────────────────────────────────────────────────────────

def test_close_stale_counts(store):
    store.upsert(make_job("https://x.com/jobs/old"), seen_at=T0)
    store.upsert(make_job("https://x.com/jobs/new"), seen_at=T0 + timedelta(days=6))
    now = T0 + timedelta(days=8)

    assert store.close_stale(timedelta(days=7), now=now) == 1
    assert store.count(PostingStatus.closed) == 1
    assert store.count(PostingStatus.open) == 1


# ── page crawl and rendered listing on the same url ──────────────────────────

def _rendered(**overrides):
    return make_job(html="<div>Software Engineer</div>", location=None, **overrides)


def test_rendered_sightings_do_not_add_versions(store):
    for day in range(3):
        seen = T0 + timedelta(days=day)
        store.upsert(make_job(), seen_at=seen)
        store.upsert(_rendered(), seen_at=seen + timedelta(hours=1), track_content=False)

    posting = store.get(make_job().url)
    assert len(store.versions(posting.id)) == 1
    assert posting.location == "Austin, TX"
    assert posting.html_hash == store.versions(posting.id)[0].html_hash
    assert posting.last_seen_at == T0 + timedelta(days=2, hours=1)


def test_rendered_sighting_fills_gaps_only(store):
    store.upsert(make_job(location=None, department="Platform"), seen_at=T0)
    result = store.upsert(
        make_job(html="<div/>", job_title="Engineer", location="Remote, US", department="Infra"),
        seen_at=T0,
        track_content=False,
    )
    posting = store.get(make_job().url)
    assert result is UpsertResult.unchanged
    assert posting.location == "Remote, US"
    assert posting.department == "Platform"
    assert posting.job_title == "Software Engineer"


def test_rendered_result_for_new_url_is_inserted(store):
    assert store.upsert(_rendered(), seen_at=T0, track_content=False) is UpsertResult.inserted
    posting = store.get(make_job().url)
    assert len(store.versions(posting.id)) == 1


def test_static_recrawl_without_location_keeps_it(store):
    store.upsert(make_job(), seen_at=T0)
    store.upsert(make_job(html="<h1>v2</h1>", location=None), seen_at=T0 + timedelta(days=1))
    assert store.get(make_job().url).location == "Austin, TX"
