import os

import psutil
from loguru import logger


def log_resources() -> None:
    """Log current process CPU and memory usage."""
    proc = psutil.Process(os.getpid())
    mem = proc.memory_info().rss / 1024 / 1024  # MB
    cpu = proc.cpu_percent(interval=0.1)
    logger.info(f"[resources] CPU: {cpu:.0f}% | RAM: {mem:.0f}MB")
