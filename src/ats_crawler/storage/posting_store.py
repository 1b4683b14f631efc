"""Catalog of observed job postings, keyed by literal URL."""

import sqlite3
from datetime import datetime, timedelta

from loguru import logger

from ats_crawler.exceptions import PersistenceError
from ats_crawler.schema import ExtractedJob, JobPosting, JobPostingVersion, PostingStatus, UpsertResult
from ats_crawler.storage.database import Database, to_db_time, utcnow
from ats_crawler.urls import sha256, url_hash

_UPSERT = """
INSERT INTO job_postings (
    ats_host_id, url, url_hash, html_hash, job_title, company, location,
    department, job_family, status, posting_date, discovered_at, last_seen_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 'open', ?, ?, ?)
ON CONFLICT(url) DO UPDATE SET
    html_hash    = excluded.html_hash,
    job_title    = excluded.job_title,
    location     = COALESCE(excluded.location, job_postings.location),
    url_hash     = excluded.url_hash,
    department   = COALESCE(excluded.department, job_postings.department),
    job_family   = COALESCE(excluded.job_family, job_postings.job_family),
    posting_date = COALESCE(excluded.posting_date, job_postings.posting_date),
    ats_host_id  = COALESCE(job_postings.ats_host_id, excluded.ats_host_id),
    last_seen_at = MAX(job_postings.last_seen_at, excluded.last_seen_at)
"""

# Re-sighting without page content: html_hash, title and versions stay as the
# page crawl left them; only gaps are filled.
_SIGHTING = """
UPDATE job_postings SET
    location     = COALESCE(location, ?),
    department   = COALESCE(department, ?),
    job_family   = COALESCE(job_family, ?),
    ats_host_id  = COALESCE(ats_host_id, ?),
    last_seen_at = MAX(last_seen_at, ?)
WHERE id = ?
"""


class PostingStore:
    """Both crawl paths write here through `upsert`; only `close_stale` changes status."""

    def __init__(self, db: Database):
        self._db = db

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, job: ExtractedJob, seen_at: datetime | None = None, track_content: bool = True) -> UpsertResult:
        """Record one observation of job.url.

        A new url is inserted as open. A known url gets its content fields
        refreshed and last_seen_at advanced (never moved backwards); id,
        discovered_at and status are left alone. A content snapshot is kept
        whenever the page hash is new for this posting.

        With track_content=False (rendered listing results, whose html is a
        fragment rather than the job page) a known url is only marked as seen:
        its hash, title and snapshots are not touched and the result is
        `unchanged`.
        Raises:
            PersistenceError
        """
        seen = to_db_time(seen_at or utcnow())
        html_hash = sha256(job.html)
        try:
            with self._db.transaction() as conn:
                existing = conn.execute(
                    "SELECT id, html_hash FROM job_postings WHERE url = ?", (job.url,)
                ).fetchone()
                if existing is not None and not track_content:
                    conn.execute(
                        _SIGHTING,
                        (job.location, job.department, job.job_family, job.ats_host_id, seen, existing["id"]),
                    )
                    return UpsertResult.unchanged

                conn.execute(
                    _UPSERT,
                    (
                        job.ats_host_id,
                        job.url,
                        url_hash(job.url),
                        html_hash,
                        job.job_title,
                        job.company,
                        job.location,
                        job.department,
                        job.job_family,
                        job.posting_date,
                        seen,
                        seen,
                    ),
                )
                if existing is not None and existing["html_hash"] == html_hash:
                    return UpsertResult.unchanged

                posting_id = existing["id"] if existing else conn.execute(
                    "SELECT id FROM job_postings WHERE url = ?", (job.url,)
                ).fetchone()[0]
                conn.execute(
                    "INSERT INTO job_posting_versions (job_posting_id, html_hash, job_title, location, snapshot_at)"
                    " VALUES (?, ?, ?, ?, ?)",
                    (posting_id, html_hash, job.job_title, job.location, seen),
                )
        except (sqlite3.Error, ValueError) as e:
            raise PersistenceError(f"could not upsert {job.url}: {e}") from e
        return UpsertResult.inserted if existing is None else UpsertResult.updated

    def close_stale(self, retention: timedelta, now: datetime | None = None) -> int:
        """Close every non-closed posting last seen before now - retention. Returns rows closed."""
        cutoff = to_db_time((now or utcnow()) - retention)
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE job_postings SET status = ? WHERE last_seen_at < ? AND status != ?",
                (str(PostingStatus.closed), cutoff, str(PostingStatus.closed)),
            )
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, url: str) -> JobPosting | None:
        row = self._db.connection.execute("SELECT * FROM job_postings WHERE url = ?", (url,)).fetchone()
        return JobPosting.model_validate(dict(row)) if row else None

    def find_by_url_hash(self, hash_: str) -> list[JobPosting]:
        rows = self._db.connection.execute(
            "SELECT * FROM job_postings WHERE url_hash = ? ORDER BY id", (hash_,)
        ).fetchall()
        return [JobPosting.model_validate(dict(r)) for r in rows]

    def count(self, status: PostingStatus | None = None) -> int:
        if status is None:
            row = self._db.connection.execute("SELECT COUNT(*) FROM job_postings").fetchone()
        else:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM job_postings WHERE status = ?", (str(status),)
            ).fetchone()
        return row[0]

    def versions(self, posting_id: int) -> list[JobPostingVersion]:
        rows = self._db.connection.execute(
            "SELECT * FROM job_posting_versions WHERE job_posting_id = ? ORDER BY id", (posting_id,)
        ).fetchall()
        return [JobPostingVersion.model_validate(dict(r)) for r in rows]

    def log_counts(self) -> None:
        logger.info(
            f"Postings: {self.count(PostingStatus.open)} open | "
            f"{self.count(PostingStatus.closed)} closed | {self.count()} total"
        )
