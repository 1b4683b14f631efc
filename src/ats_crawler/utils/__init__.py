"""Utility modules."""

from ats_crawler.utils.logger import setup_logger
from ats_crawler.utils.rate_limiter import RateLimiter
from ats_crawler.utils.resources import log_resources
from ats_crawler.utils.scraper import text

__all__ = ["RateLimiter", "log_resources", "setup_logger", "text"]
