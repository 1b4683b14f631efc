from datetime import datetime
from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field


class AtsType(StrEnum):
    workday = "Workday"
    icims = "iCIMS"
    greenhouse = "Greenhouse"
    lever = "Lever"
    ashby = "Ashby"
    workable = "Workable"


class PostingStatus(StrEnum):
    open = "open"
    closed = "closed"


class UpsertResult(StrEnum):
    inserted = "inserted"
    updated = "updated"
    unchanged = "unchanged"


class AtsHost(BaseModel):
    id: int
    company: str
    domain: str
    ats_type: AtsType | None = None
    is_active: bool = True
    discovered_at: datetime


class ExtractedJob(BaseModel):
    """One job as produced by either crawl path, before it is persisted."""

    url: str
    html: str
    job_title: str | None = None
    company: str | None = None
    location: str | None = None
    department: str | None = None
    job_family: str | None = None
    posting_date: str | None = None
    ats_host_id: int | None = None


class JobPosting(BaseModel):
    id: int
    ats_host_id: int | None = None
    url: str
    url_hash: str
    html_hash: str
    job_title: str | None = None
    company: str | None = None
    location: str | None = None
    department: str | None = None
    job_family: str | None = None
    status: PostingStatus = PostingStatus.open
    posting_date: str | None = None
    discovered_at: datetime
    last_seen_at: datetime


class JobPostingVersion(BaseModel):
    id: int
    job_posting_id: int
    html_hash: str
    job_title: str | None = None
    location: str | None = None
    snapshot_at: datetime


# ── Run statistics ────────────────────────────────────────────────────────────

class DiscoveryStats(BaseModel):
    candidates: int = 0
    probed: int = 0
    failed_probes: int = 0
    matched: int = 0
    registered: int = 0
    registration_errors: int = 0
    by_vendor: dict[str, int] = Field(default_factory=dict)
    timed_out: bool = False
    abandoned: int = 0


class CrawlStats(BaseModel):
    hosts_visited: int = 0
    listing_pages_fetched: int = 0
    job_pages_attempted: int = 0
    jobs_inserted: int = 0
    jobs_updated: int = 0
    errors_by_domain: dict[str, int] = Field(default_factory=dict)

    @property
    def jobs_stored(self) -> int:
        return self.jobs_inserted + self.jobs_updated

    def add_error(self, domain: str, count: int = 1) -> None:
        self.errors_by_domain[domain] = self.errors_by_domain.get(domain, 0) + count


class RenderStats(BaseModel):
    pages_visited: int = 0
    pages_failed: int = 0
    results_found: int = 0
    results_kept: int = 0
    stored: int = 0
    store_errors: int = 0
    by_vendor: dict[str, int] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    """Trigger payload. Accepts both snake_case and the camelCase names used by callers."""

    run_discovery: bool = Field(default=True, validation_alias=AliasChoices("run_discovery", "runDiscovery"))
    run_crawling: bool = Field(default=True, validation_alias=AliasChoices("run_crawling", "runCrawling"))
    max_discovery_time_ms: int = Field(
        default=300_000,
        ge=0,
        validation_alias=AliasChoices("max_discovery_time_ms", "maxDiscoveryTimeMs"),
    )

    @property
    def max_discovery_seconds(self) -> float | None:
        return self.max_discovery_time_ms / 1000 if self.max_discovery_time_ms else None


class PipelineReport(BaseModel):
    hosts_seeded: int = 0
    discovery: DiscoveryStats | None = None
    crawl: CrawlStats | None = None
