"""Command-line entry point.

Sub-commands:
  - discover: probe candidate subdomains and register ATS hosts
  - crawl: static crawl of every active host into the posting store
  - reap: close postings not seen within the retention window
  - render: headless-browser crawl of the seed job boards
  - run: discovery then crawl (the scheduled entrypoint)
  - hosts: print the host registry summary
  - serve: start the trigger API
"""

import argparse
import asyncio
import sys

from loguru import logger

from ats_crawler.api.main import serve
from ats_crawler.config import Config, settings
from ats_crawler.crawler import CrawlEngine
from ats_crawler.discovery import DomainDiscovery
from ats_crawler.exceptions import StoreUnavailable
from ats_crawler.pipeline import run_pipeline
from ats_crawler.reaper import reap_stale_postings
from ats_crawler.render import RenderScraper
from ats_crawler.schema import PipelineConfig
from ats_crawler.storage import Database, HostRegistry, PostingStore
from ats_crawler.utils import setup_logger

COMMANDS = ("discover", "crawl", "reap", "render", "run", "hosts", "serve")


async def discover_main(config: Config, max_duration: float | None) -> None:
    with Database(settings.database_path) as db:
        registry = HostRegistry(db)
        registry.log_summary()
        async with DomainDiscovery(registry, config.discovery) as discovery:
            await discovery.run(max_duration=max_duration)
        registry.log_summary()


async def crawl_main(config: Config, domains: list[str] | None = None) -> None:
    with Database(settings.database_path) as db:
        registry = HostRegistry(db)
        store = PostingStore(db)
        hosts = registry.active_hosts()
        if domains:
            wanted = {d.lower() for d in domains}
            hosts = [h for h in hosts if h.domain in wanted]
        if not hosts:
            logger.info("No active hosts to crawl. Run 'discover' or 'run' first.")
            return
        async with CrawlEngine(store, config.crawler) as engine:
            await engine.crawl(hosts)
        store.log_counts()


def reap_main(config: Config, retention_days: int | None = None) -> None:
    with Database(settings.database_path) as db:
        store = PostingStore(db)
        reap_stale_postings(store, retention_days or config.reaper.retention_days)
        store.log_counts()


async def render_main(config: Config, headless: bool = True) -> None:
    render_config = config.render.model_copy(update={"headless": headless})
    with Database(settings.database_path) as db:
        scraper = RenderScraper(PostingStore(db), HostRegistry(db), render_config)
        await scraper.run()


def hosts_main() -> None:
    with Database(settings.database_path) as db:
        registry = HostRegistry(db)
        registry.log_summary()
        for host in registry.all_hosts():
            state = "active" if host.is_active else "inactive"
            logger.info(f"  {host.domain} | {host.ats_type or 'Unknown'} | {host.company} | {state}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="ats-crawler",
        description="Discover ATS-hosted job boards and keep a catalog of their postings",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # discover
    discover_parser = subparsers.add_parser("discover", help="Probe candidate domains and register ATS hosts")
    discover_parser.add_argument(
        "--max-duration", type=float, help="Seconds before unfinished probes are abandoned (default from config)"
    )

    # crawl
    crawl_parser = subparsers.add_parser("crawl", help="Crawl active hosts into the posting store")
    crawl_parser.add_argument("--domain", dest="domains", nargs="*", help="Only crawl these host domains")

    # reap
    reap_parser = subparsers.add_parser("reap", help="Close postings not seen recently")
    reap_parser.add_argument("--retention-days", type=int, help="Override reaper.retention_days")

    # render
    render_parser = subparsers.add_parser("render", help="Crawl the seed boards with a headless browser")
    render_parser.add_argument("--no-headless", dest="headless", action="store_false")

    # run: cron entrypoint
    run_parser = subparsers.add_parser("run", help="Discovery then crawl")
    run_parser.add_argument("--no-discovery", dest="run_discovery", action="store_false")
    run_parser.add_argument("--no-crawl", dest="run_crawling", action="store_false")
    run_parser.add_argument(
        "--max-discovery-time-ms", type=int, default=300_000, help="0 disables the discovery budget"
    )

    subparsers.add_parser("hosts", help="Show the host registry")
    subparsers.add_parser("serve", help="Start the trigger API")

    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> None:
    """Main async entry point."""
    config = settings.load_config()

    match args.command:
        case "discover":
            max_duration = args.max_duration if args.max_duration is not None else config.discovery.max_duration
            await discover_main(config, max_duration or None)
        case "crawl":
            await crawl_main(config, args.domains)
        case "reap":
            reap_main(config, args.retention_days)
        case "render":
            await render_main(config, headless=args.headless)
        case "run":
            pipeline = PipelineConfig(
                run_discovery=args.run_discovery,
                run_crawling=args.run_crawling,
                max_discovery_time_ms=args.max_discovery_time_ms,
            )
            await run_pipeline(pipeline, config)
        case "hosts":
            hosts_main()
        case _:
            logger.error(f"Unknown command. Use one of: {', '.join(COMMANDS)}")


def cli() -> None:
    """CLI entry point."""
    args = parse_args()
    setup_logger(settings.log_level, settings.logs_dir)

    if not args.command:
        parse_args(["--help"])

    if args.command == "serve":
        serve()
        return

    try:
        asyncio.run(main(args))
    except StoreUnavailable as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    cli()
