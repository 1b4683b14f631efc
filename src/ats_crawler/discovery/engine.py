import asyncio
from collections.abc import Iterable
from typing import Any, Self

import httpx
from loguru import logger

from ats_crawler.config import DiscoveryConfig
from ats_crawler.crawler.fetcher import HttpFetcher
from ats_crawler.discovery.candidates import generate_candidates
from ats_crawler.discovery.fingerprint import fingerprint
from ats_crawler.exceptions import FetchError, PersistenceError
from ats_crawler.schema import DiscoveryStats
from ats_crawler.storage import HostRegistry
from ats_crawler.vendors import PROBE_USER_AGENT


class DomainDiscovery:
    """Probe candidate subdomains, fingerprint the vendor and register matches.

    Probes run in a bounded pool. Each candidate is handled start to finish by
    one task (probe paths in order, fingerprint, register), so one candidate
    failing never touches another.
    """

    def __init__(
        self,
        registry: HostRegistry,
        config: DiscoveryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or DiscoveryConfig()
        self._fetcher = HttpFetcher(
            user_agent=PROBE_USER_AGENT,
            timeout=self._config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        await self._fetcher.__aenter__()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._fetcher.__aexit__(*exc)

    async def probe(self, domain: str) -> str | None:
        """Body of the first probe path answering exactly 200, or None."""
        for path in self._config.probe_paths:
            url = f"https://{domain}{path}"
            try:
                resp = await self._fetcher.get(url)
            except FetchError as e:
                logger.debug(f"Probe failed: {e}")
                continue
            if resp.status_code == 200:
                return resp.text
            logger.debug(f"Probe to {url} returned status {resp.status_code}")
        return None

    async def run(
        self,
        candidates: Iterable[str] | None = None,
        max_duration: float | None = None,
    ) -> DiscoveryStats:
        """Probe every candidate. With max_duration set, whatever has not
        finished when it runs out is cancelled and its result dropped."""
        domains = list(candidates) if candidates is not None else generate_candidates()
        stats = DiscoveryStats(candidates=len(domains))
        logger.info(f"Generated {len(domains)} unique candidate domains to probe")
        if not domains:
            return stats

        semaphore = asyncio.Semaphore(self._config.concurrency)
        tasks = [asyncio.create_task(self._discover(domain, semaphore, stats)) for domain in domains]
        done, pending = await asyncio.wait(tasks, timeout=max_duration)

        if pending:
            logger.warning(
                f"Discovery budget of {max_duration}s exhausted: abandoning {len(pending)} unfinished candidates"
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            stats.timed_out = True
            stats.abandoned = len(pending)

        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.opt(exception=task.exception()).error("A probing task failed")

        self._log_stats(stats)
        return stats

    async def _discover(self, domain: str, semaphore: asyncio.Semaphore, stats: DiscoveryStats) -> None:
        async with semaphore:
            body = await self.probe(domain)
        stats.probed += 1
        if body is None:
            stats.failed_probes += 1
            return

        ats_type = fingerprint(domain, body)
        if ats_type is None:
            logger.debug(f"{domain} did not match any ATS fingerprint")
            return
        stats.matched += 1
        try:
            self._registry.register(domain, ats_type)
        except PersistenceError as e:
            stats.registration_errors += 1
            logger.error(str(e))
            return
        stats.registered += 1
        stats.by_vendor[str(ats_type)] = stats.by_vendor.get(str(ats_type), 0) + 1
        logger.info(f"Fingerprinted {domain} as {ats_type}")

    @staticmethod
    def _log_stats(stats: DiscoveryStats) -> None:
        logger.info("--- Discovery statistics ---")
        logger.info(f"Candidates: {stats.candidates} | probed: {stats.probed} | unreachable: {stats.failed_probes}")
        logger.info(f"Matched: {stats.matched} | registered: {stats.registered} | errors: {stats.registration_errors}")
        for vendor, count in stats.by_vendor.items():
            logger.info(f"  {vendor}: {count}")
        if stats.timed_out:
            logger.info(f"Abandoned after timeout: {stats.abandoned}")
