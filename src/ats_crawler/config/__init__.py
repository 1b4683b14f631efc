"""Configuration."""

from ats_crawler.config.settings import (
    Config,
    CrawlerConfig,
    DiscoveryConfig,
    ReaperConfig,
    RenderConfig,
    Settings,
    settings,
)

__all__ = [
    "Config",
    "CrawlerConfig",
    "DiscoveryConfig",
    "ReaperConfig",
    "RenderConfig",
    "Settings",
    "settings",
]
