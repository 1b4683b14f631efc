import sys

import pytest
from loguru import logger

from ats_crawler.config import settings
from ats_crawler.utils import setup_logger


@pytest.fixture(autouse=True)
def restore_logger(monkeypatch):
    monkeypatch.setattr(settings, "sentry_dsn", "")
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_sink_written_under_logs_dir(tmp_path):
    log_file = setup_logger("INFO", tmp_path / "logs")

    logger.info("crawl finished")
    logger.debug("kept in the file, not on the console")

    assert log_file == tmp_path / "logs" / "ats-crawler.log"
    content = log_file.read_text()
    assert "crawl finished" in content
    assert "kept in the file" in content


def test_no_logs_dir_means_console_only(tmp_path):
    assert setup_logger("WARNING") is None
    assert list(tmp_path.iterdir()) == []
