"""Static crawl of registered ATS hosts.

For each active host the listing paths are fetched one after another (never
more than one listing request in flight per host). Job-detail candidates found
on a listing page are fetched in parallel, capped by a per-host semaphore, and
upserted into the posting store. Failures are tallied per host domain and
never stop the run; the crawler never closes postings or deactivates hosts.
"""
import asyncio
from collections.abc import Iterable
from typing import Any, Self

import httpx
from loguru import logger

from ats_crawler.config import CrawlerConfig
from ats_crawler.crawler.extract import extract_job, extract_job_links
from ats_crawler.crawler.fetcher import HttpFetcher
from ats_crawler.exceptions import FetchError, PersistenceError
from ats_crawler.schema import AtsHost, CrawlStats, UpsertResult
from ats_crawler.storage import PostingStore
from ats_crawler.utils import log_resources
from ats_crawler.vendors import VendorProfile, company_for_posting, profile_for


class CrawlEngine:
    def __init__(
        self,
        store: PostingStore,
        config: CrawlerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store = store
        self._config = config or CrawlerConfig()
        self._fetcher = HttpFetcher(
            user_agent=self._config.user_agent,
            timeout=self._config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        await self._fetcher.__aenter__()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._fetcher.__aexit__(*exc)

    def listing_paths(self, profile: VendorProfile) -> list[str]:
        return list(dict.fromkeys([*self._config.listing_paths, *profile.listing_paths]))

    async def crawl(self, hosts: Iterable[AtsHost]) -> CrawlStats:
        """Crawl every host in order and return the aggregated run statistics."""
        hosts = list(hosts)
        stats = CrawlStats()
        log_resources()

        for index, host in enumerate(hosts, start=1):
            stats.hosts_visited += 1
            logger.info(f"Crawling host {host.domain} ({index}/{len(hosts)}) as {host.ats_type or 'Generic'}...")
            try:
                await self.crawl_host(host, stats)
            except Exception:
                # containment boundary: one broken host must not end the run
                logger.exception(f"Error crawling host {host.domain}")
                stats.add_error(host.domain)

            if index % 5 == 0:
                log_resources()

        self._log_stats(stats)
        return stats

    async def crawl_host(self, host: AtsHost, stats: CrawlStats) -> None:
        profile = profile_for(host.ats_type)
        semaphore = asyncio.Semaphore(self._config.job_concurrency)
        attempted: set[str] = set()
        rate_limit_streak = 0

        for path in self.listing_paths(profile):
            listing_url = f"https://{host.domain}{path}"
            try:
                html = await self._fetcher.get_text(listing_url)
            except FetchError as e:
                stats.add_error(host.domain)
                if not e.is_rate_limited:
                    logger.debug(f"Skipping listing {listing_url}: {e}")
                    continue
                rate_limit_streak += 1
                logger.warning(
                    f"Host {host.domain} rate-limit streak "
                    f"{rate_limit_streak}/{self._config.max_rate_limit_streak} on {path} ({e.status_code})"
                )
                if rate_limit_streak >= self._config.max_rate_limit_streak:
                    logger.error(f"Host {host.domain} keeps refusing us. Skipping it for this run.")
                    return
                continue

            rate_limit_streak = 0
            stats.listing_pages_fetched += 1

            links = extract_job_links(html, listing_url, profile)
            if len(links) < self._config.min_job_links:
                logger.debug(f"Skipping listing {listing_url}: only {len(links)} job links")
                continue
            new_links = [url for url in links if url not in attempted]
            attempted.update(new_links)
            stats.job_pages_attempted += len(new_links)
            logger.info(f"{listing_url}: {len(links)} job links | {len(new_links)} new this run")

            outcomes = await asyncio.gather(
                *(self._crawl_job(host, profile, url, semaphore) for url in new_links)
            )
            # aggregate only after every worker for this page has settled
            for outcome in outcomes:
                match outcome:
                    case UpsertResult.inserted:
                        stats.jobs_inserted += 1
                    case UpsertResult.updated | UpsertResult.unchanged:
                        stats.jobs_updated += 1
                    case None:
                        stats.add_error(host.domain)

    async def _crawl_job(
        self,
        host: AtsHost,
        profile: VendorProfile,
        url: str,
        semaphore: asyncio.Semaphore,
    ) -> UpsertResult | None:
        """Fetch, extract and upsert one job page. None means the page was skipped."""
        async with semaphore:
            try:
                html = await self._fetcher.get_text(url)
            except FetchError as e:
                logger.debug(f"Skipping job page: {e}")
                return None

        job = extract_job(url, html, profile)
        job.ats_host_id = host.id
        job.company = company_for_posting(host.company, host.ats_type, url)
        try:
            return self._store.upsert(job)
        except PersistenceError as e:
            logger.error(str(e))
            return None

    @staticmethod
    def _log_stats(stats: CrawlStats) -> None:
        logger.info("--- Crawl statistics ---")
        logger.info(f"Hosts visited: {stats.hosts_visited}")
        logger.info(f"Listing pages fetched: {stats.listing_pages_fetched}")
        logger.info(f"Job pages attempted: {stats.job_pages_attempted}")
        logger.info(f"Jobs stored: {stats.jobs_inserted} new | {stats.jobs_updated} re-observed")
        if not stats.errors_by_domain:
            logger.info("Errors by host: none")
        for domain, count in stats.errors_by_domain.items():
            logger.info(f"  {domain}: {count} errors")
