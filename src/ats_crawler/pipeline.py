"""Discovery then crawl, as one run against one store connection."""

import asyncio
from pathlib import Path

import httpx
from loguru import logger

from ats_crawler.config import Config, settings
from ats_crawler.crawler import CrawlEngine
from ats_crawler.discovery import DomainDiscovery
from ats_crawler.schema import PipelineConfig, PipelineReport
from ats_crawler.storage import Database, HostRegistry, PostingStore


async def run_pipeline(
    pipeline: PipelineConfig,
    config: Config | None = None,
    database_path: Path | str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PipelineReport:
    """Seed core hosts, optionally discover new ones, optionally crawl every active host.
    Raises:
        StoreUnavailable
    """
    config = config or settings.load_config()
    report = PipelineReport()

    with Database(database_path or settings.database_path) as db:
        registry = HostRegistry(db)
        store = PostingStore(db)

        report.hosts_seeded = registry.seed_core_hosts()
        registry.log_summary()

        if pipeline.run_discovery:
            logger.info("=" * 10)
            logger.info("Discovering ATS domains")
            logger.info("-" * 10)
            async with DomainDiscovery(registry, config.discovery, transport=transport) as discovery:
                report.discovery = await discovery.run(max_duration=pipeline.max_discovery_seconds)
            registry.log_summary()

        if pipeline.run_crawling:
            logger.info("=" * 10)
            logger.info("Crawling active ATS hosts")
            logger.info("-" * 10)
            async with CrawlEngine(store, config.crawler, transport=transport) as engine:
                report.crawl = await engine.crawl(registry.active_hosts())
            store.log_counts()

    logger.info("Pipeline complete")
    return report


# the loop keeps only weak references to tasks
_running: set[asyncio.Task] = set()


def _log_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.warning("Pipeline run was cancelled")
    elif (exc := task.exception()) is not None:
        logger.opt(exception=exc).error(f"Pipeline run failed: {exc}")


def trigger_pipeline(pipeline: PipelineConfig) -> asyncio.Task:
    """Start a pipeline run in the background and return without waiting for it.

    Must be called from a running event loop. The outcome only shows up in logs
    and in the store.
    """
    logger.info(f"Pipeline triggered: {pipeline.model_dump()}")
    task = asyncio.create_task(run_pipeline(pipeline))
    _running.add(task)
    task.add_done_callback(_running.discard)
    task.add_done_callback(_log_outcome)
    return task
