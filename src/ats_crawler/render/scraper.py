"""Render-based fallback for boards whose listings only exist after JavaScript runs."""

from collections.abc import Iterable
from urllib.parse import urljoin

from loguru import logger
from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ats_crawler.config import RenderConfig
from ats_crawler.exceptions import PersistenceError, SourceParsingError
from ats_crawler.render.browser import Browser
from ats_crawler.render.strategies import FALLBACK_LINK_MARKERS, SEED_PAGES, STRATEGIES, RenderStrategy, SeedPage
from ats_crawler.schema import ExtractedJob, RenderStats
from ats_crawler.storage import HostRegistry, PostingStore
from ats_crawler.urls import domain_of
from ats_crawler.utils import RateLimiter
from ats_crawler.vendors import classify_job_family, is_engineering_role


async def _text(element: ElementHandle) -> str:
    return " ".join((await element.text_content() or "").split())


async def first_text(container: ElementHandle, selectors: Iterable[str]) -> str | None:
    for selector in selectors:
        element = await container.query_selector(selector)
        if element is None:
            continue
        if value := await _text(element):
            return value
    return None


async def container_url(container: ElementHandle, page_url: str) -> str | None:
    """The container's own href, else its first descendant anchor's, made absolute."""
    href = await container.get_attribute("href")
    if not href:
        anchor = await container.query_selector("a")
        href = await anchor.get_attribute("href") if anchor else None
    return urljoin(page_url, href) if href else None


async def find_containers(page: Page, strategy: RenderStrategy, timeout_ms: int) -> list[ElementHandle]:
    for selector in strategy.container_selectors:
        try:
            await page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug(f"Selector {selector} not found, trying next...")
            continue
        elements = await page.query_selector_all(selector)
        if elements:
            logger.debug(f"Found {len(elements)} job elements using selector: {selector}")
            return elements

    matches = []
    for anchor in await page.query_selector_all("a"):
        href = await anchor.get_attribute("href") or ""
        if any(marker in href for marker in FALLBACK_LINK_MARKERS) and is_engineering_role(await _text(anchor)):
            matches.append(anchor)
    logger.debug(f"Fallback found {len(matches)} potential job links")
    return matches


async def parse_container(
    container: ElementHandle,
    strategy: RenderStrategy,
    page_url: str,
    company: str,
) -> ExtractedJob | None:
    """Fields of one rendered result. None when it is not an engineering role.
    Raises:
        SourceParsingError
    """
    title = await first_text(container, strategy.title_selectors) or await _text(container)
    url = await container_url(container, page_url)
    if not title or not url:
        raise SourceParsingError(f"result on {page_url} has no title or link")
    if not is_engineering_role(title):
        return None
    return ExtractedJob(
        url=url,
        html=await container.evaluate("el => el.outerHTML"),
        job_title=title,
        company=company,
        location=await first_text(container, strategy.location_selectors),
        department=await first_text(container, strategy.department_selectors),
        job_family=classify_job_family(title),
    )


class RenderScraper:
    def __init__(
        self,
        store: PostingStore,
        registry: HostRegistry,
        config: RenderConfig | None = None,
        browser: Browser | None = None,
    ):
        self._store = store
        self._registry = registry
        self._config = config or RenderConfig()
        self._browser = browser or Browser(
            headless=self._config.headless,
            navigation_timeout_ms=self._config.navigation_timeout_ms,
        )
        self._rate_limiter = RateLimiter(delay=self._config.page_delay)

    async def scrape_page(self, page: Page, seed: SeedPage, stats: RenderStats) -> list[ExtractedJob]:
        strategy = STRATEGIES[seed.vendor]
        await page.goto(seed.url, wait_until="networkidle", timeout=self._config.navigation_timeout_ms)
        containers = await find_containers(page, strategy, self._config.selector_timeout_ms)
        stats.results_found += len(containers)

        jobs = []
        for container in containers:
            try:
                job = await parse_container(container, strategy, page.url or seed.url, seed.company)
            except (SourceParsingError, PlaywrightError) as e:
                logger.warning(f"Error parsing job element: {e}")
                continue
            if job is not None:
                jobs.append(job)
        stats.results_kept += len(jobs)
        logger.info(f"Found {len(jobs)} engineering jobs from {seed.url}")
        return jobs

    def save(self, job: ExtractedJob, stats: RenderStats) -> None:
        host = self._registry.get(domain_of(job.url))
        job.ats_host_id = host.id if host else None
        try:
            self._store.upsert(job, track_content=False)
        except PersistenceError as e:
            stats.store_errors += 1
            logger.error(str(e))
            return
        stats.stored += 1

    async def run(self, seeds: Iterable[SeedPage] = SEED_PAGES) -> RenderStats:
        stats = RenderStats()
        async with self._browser as browser:
            for seed in seeds:
                await self._rate_limiter.wait()
                stats.pages_visited += 1
                logger.info(f"Rendering {seed.vendor} board {seed.url}")
                try:
                    async with browser.new_session() as page:
                        jobs = await self.scrape_page(page, seed, stats)
                except PlaywrightError as e:
                    stats.pages_failed += 1
                    logger.error(f"Error scraping {seed.url}: {e}")
                    continue
                for job in jobs:
                    self.save(job, stats)
                stats.by_vendor[str(seed.vendor)] = stats.by_vendor.get(str(seed.vendor), 0) + len(jobs)

        self._log_stats(stats)
        return stats

    @staticmethod
    def _log_stats(stats: RenderStats) -> None:
        logger.info("--- Render statistics ---")
        logger.info(f"Pages: {stats.pages_visited} visited | {stats.pages_failed} failed")
        logger.info(f"Results: {stats.results_found} found | {stats.results_kept} engineering roles")
        logger.info(f"Stored: {stats.stored} | store errors: {stats.store_errors}")
        for vendor, count in stats.by_vendor.items():
            logger.info(f"  {vendor}: {count}")
