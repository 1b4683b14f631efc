from datetime import UTC, datetime

import pytest

from ats_crawler.schema import ExtractedJob
from ats_crawler.storage import Database, HostRegistry, PostingStore

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def db(tmp_path):
    with Database(tmp_path / "ats.db") as database:
        yield database


@pytest.fixture
def registry(db):
    return HostRegistry(db)


@pytest.fixture
def store(db):
    return PostingStore(db)


def make_job(url: str = "https://boards.greenhouse.io/vercel/jobs/1", **overrides) -> ExtractedJob:
    fields = {
        "url": url,
        "html": "<html><h1>Software Engineer</h1></html>",
        "job_title": "Software Engineer",
        "company": "vercel",
        "location": "Austin, TX",
    }
    return ExtractedJob(**{**fields, **overrides})
