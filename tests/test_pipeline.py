import asyncio

import httpx
import pytest
from loguru import logger

from ats_crawler import pipeline as pipeline_module
from ats_crawler.config import Config
from ats_crawler.exceptions import StoreUnavailable
from ats_crawler.pipeline import run_pipeline, trigger_pipeline
from ats_crawler.schema import PipelineConfig
from ats_crawler.storage import Database, HostRegistry
from ats_crawler.vendors import CORE_HOSTS


def _counting_404():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(404)
    return httpx.MockTransport(handler), requests


# ── run_pipeline ─────────────────────────────────────────────────────────────

async def test_crawl_only_run_seeds_and_visits_core_hosts(tmp_path):
    transport, _ = _counting_404()
    report = await run_pipeline(
        PipelineConfig(run_discovery=False), Config(), database_path=tmp_path / "ats.db", transport=transport
    )

    assert report.hosts_seeded == len(CORE_HOSTS)
    assert report.discovery is None
    assert report.crawl.hosts_visited == len(CORE_HOSTS)
    with Database(tmp_path / "ats.db") as db:
        assert len(HostRegistry(db).active_hosts()) == len(CORE_HOSTS)


async def test_discovery_only_run(tmp_path):
    transport, requests = _counting_404()
    pipeline = PipelineConfig(runDiscovery=True, runCrawling=False, maxDiscoveryTimeMs=60_000)

    report = await run_pipeline(pipeline, Config(), database_path=tmp_path / "ats.db", transport=transport)

    assert report.crawl is None
    assert report.discovery.candidates > 0
    assert report.discovery.registered == 0
    assert requests


async def test_unavailable_store_aborts_before_any_request(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    transport, requests = _counting_404()

    with pytest.raises(StoreUnavailable):
        await run_pipeline(PipelineConfig(), Config(), database_path=blocker / "ats.db", transport=transport)
    assert requests == []


def test_zero_budget_means_unbounded():
    assert PipelineConfig(max_discovery_time_ms=0).max_discovery_seconds is None
    assert PipelineConfig(max_discovery_time_ms=1500).max_discovery_seconds == 1.5


# ── trigger_pipeline ─────────────────────────────────────────────────────────

async def test_trigger_returns_before_run_finishes(monkeypatch):
    release = asyncio.Event()
    seen = []

    async def fake_run(config):
        seen.append(config)
        await release.wait()

    monkeypatch.setattr(pipeline_module, "run_pipeline", fake_run)

    task = trigger_pipeline(PipelineConfig(run_crawling=False))
    assert not task.done()

    release.set()
    await task
    assert seen[0].run_crawling is False


async def test_trigger_failure_is_logged(monkeypatch):
    errors = []
    sink = logger.add(lambda message: errors.append(message.record["message"]), level="ERROR")

    async def failing_run(config):
        raise StoreUnavailable("cannot open store")

    monkeypatch.setattr(pipeline_module, "run_pipeline", failing_run)
    try:
        task = trigger_pipeline(PipelineConfig())
        await asyncio.gather(task, return_exceptions=True)
        await asyncio.sleep(0)
    finally:
        logger.remove(sink)

    assert any("cannot open store" in message for message in errors)
