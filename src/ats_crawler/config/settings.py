"""Application settings and configuration."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ats_crawler import vendors


class DiscoveryConfig(BaseModel):
    concurrency: int = Field(default=10, ge=1)
    request_timeout: float = Field(default=8.0, gt=0)
    probe_paths: list[str] = Field(default_factory=lambda: list(vendors.PROBE_PATHS))
    max_duration: float | None = Field(default=300.0, description="Seconds; None disables the budget")


class CrawlerConfig(BaseModel):
    job_concurrency: int = Field(default=4, ge=1)
    request_timeout: float = Field(default=8.0, gt=0)
    listing_paths: list[str] = Field(default_factory=lambda: list(vendors.LISTING_PATHS))
    min_job_links: int = Field(default=1, ge=1)
    max_rate_limit_streak: int = Field(default=3, ge=1)
    user_agent: str = vendors.CRAWLER_USER_AGENT


class ReaperConfig(BaseModel):
    retention_days: int = Field(default=7, ge=1)


class RenderConfig(BaseModel):
    headless: bool = True
    page_delay: float = Field(default=3.0, ge=0)
    navigation_timeout_ms: int = 30_000
    selector_timeout_ms: int = 5_000


class Config(BaseModel):
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    reaper: ReaperConfig = Field(default_factory=ReaperConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Backing store
    database_path: Path = Field(default=Path("data/ats.db"), description="SQLite file holding hosts and postings")

    # Sentry
    sentry_dsn: str = Field(default="", description="Sentry DSN, empty string disables Sentry")
    sentry_environment: str = Field(default="development", description="Sentry environment tag (e.g. production, development)")

    # Trigger API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Paths
    config_file: Path = Field(default=Path("config.yaml"), description="Path to config file")
    logs_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    log_level: str = "INFO"

    def load_config(self) -> Config:
        """Load crawl tuning from the YAML file. Missing sections fall back to defaults."""
        if not self.config_file.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_file}")

        with open(self.config_file) as f:
            data = yaml.safe_load(f) or {}
            return Config.model_validate(data)


settings = Settings()  # type: ignore
