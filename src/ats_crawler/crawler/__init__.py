"""Static HTTP crawl of registered hosts."""

from ats_crawler.crawler.engine import CrawlEngine
from ats_crawler.crawler.fetcher import HttpFetcher

__all__ = ["CrawlEngine", "HttpFetcher"]
