"""Logging configuration."""
import sys
from pathlib import Path

import sentry_sdk
from loguru import logger

from ats_crawler.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
LOG_FILE = "ats-crawler.log"


def _sentry_sink(message) -> None:
    record = message.record
    if record["exception"]:
        sentry_sdk.capture_exception(record["exception"].value)
        return
    with sentry_sdk.new_scope() as scope:
        # discovery / crawler / render / storage, taken from the module path
        scope.set_tag("component", record["name"].split(".")[1] if "." in record["name"] else record["name"])
        scope.set_extra("function", record["function"])
        scope.set_extra("line", record["line"])
        sentry_sdk.capture_message(record["message"], level="error", scope=scope)


def setup_logger(log_level: str = "INFO", logs_dir: Path | None = None) -> Path | None:
    """Console sink, a rotating file sink under logs_dir, and a Sentry sink for errors.

    Returns the log file path, or None when file logging is off.
    """
    logger.remove()

    # Console / journalctl
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    log_file = None
    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / LOG_FILE
        # one file per day, a week kept
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention="7 days",
        )

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment,
        )
        logger.add(_sentry_sink, level="ERROR")

    logger.debug(f"Logger initialized (file: {log_file or 'off'})")
    return log_file
