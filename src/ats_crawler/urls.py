"""URL normalization and hashing.

The literal URL is the identity of a posting. The normalized form is only a
secondary lookup key: query parameters outside ALLOWED_QUERY_PARAMS are
dropped, path and query are lower-cased, and the scheme/host are discarded.
"""

import hashlib
from urllib.parse import parse_qsl, urlencode, urlsplit

# vendor job-id parameters that identify a posting and therefore survive normalization
ALLOWED_QUERY_PARAMS = frozenset({"gh_jid", "jobid"})


def sha256(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def normalize_url(url: str) -> str:
    """Return `/path[?query]` for url, lower-cased, keeping only allow-listed params.

    Idempotent: normalize_url(normalize_url(u)) == normalize_url(u).
    """
    parts = urlsplit(url)
    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() in ALLOWED_QUERY_PARAMS
    ]
    # a leading "//" would be read back as a netloc
    path = "/" + parts.path.lstrip("/")
    query = urlencode(kept)
    normalized = path + (f"?{query}" if query else "")
    return normalized.lower()


def url_hash(url: str) -> str:
    return sha256(normalize_url(url))


def domain_of(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()
