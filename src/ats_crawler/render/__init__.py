"""Headless-browser fallback for JavaScript-rendered job boards."""

from ats_crawler.render.browser import Browser
from ats_crawler.render.scraper import RenderScraper
from ats_crawler.render.strategies import SEED_PAGES, STRATEGIES

__all__ = ["SEED_PAGES", "STRATEGIES", "Browser", "RenderScraper"]
