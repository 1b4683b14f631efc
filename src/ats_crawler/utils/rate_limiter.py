"""Rate limiting and politeness utilities."""

import asyncio
import time


class RateLimiter:
    """Enforces a minimum gap between consecutive visits to the same target.

    The first call returns immediately; later calls sleep only for whatever is
    left of `delay` since the previous call returned.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._last_request: float | None = None

    async def wait(self) -> None:
        """Wait appropriate time before next request."""
        if self._last_request is not None:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self.delay:
                await asyncio.sleep(self.delay - elapsed)
        self._last_request = time.monotonic()
