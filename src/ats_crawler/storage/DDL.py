_DDL = """
CREATE TABLE IF NOT EXISTS ats_hosts (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    company       TEXT NOT NULL,
    domain        TEXT NOT NULL UNIQUE,
    ats_type      TEXT,
    is_active     INTEGER NOT NULL DEFAULT 1,
    discovered_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS job_postings (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    ats_host_id   INTEGER REFERENCES ats_hosts (id),
    url           TEXT NOT NULL UNIQUE,
    url_hash      TEXT NOT NULL,
    html_hash     TEXT NOT NULL,
    job_title     TEXT,
    company       TEXT,
    location      TEXT,
    department    TEXT,
    job_family    TEXT,
    status        TEXT NOT NULL DEFAULT 'open',
    posting_date  TEXT,
    discovered_at TEXT NOT NULL,
    last_seen_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_job_postings_url_hash ON job_postings (url_hash);
CREATE INDEX IF NOT EXISTS idx_job_postings_status_seen ON job_postings (status, last_seen_at);

CREATE TABLE IF NOT EXISTS job_posting_versions (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    job_posting_id INTEGER NOT NULL REFERENCES job_postings (id),
    html_hash      TEXT NOT NULL,
    job_title      TEXT,
    location       TEXT,
    snapshot_at    TEXT NOT NULL
);
"""
