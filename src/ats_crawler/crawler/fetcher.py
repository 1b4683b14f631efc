"""Thin async HTTP client shared by discovery probes and the crawl engine."""
import asyncio
from types import MappingProxyType
from typing import Any, Self

import httpx
from loguru import logger

from ats_crawler.exceptions import FetchError


class HttpFetcher:
    """httpx.AsyncClient wrapper: no retries, redirects followed, a hard timeout per request.

    Every failure (transport error, timeout, invalid URL, non-2xx) is raised
    as FetchError so callers have a single thing to catch.
    """

    HEADERS: MappingProxyType[str, str] = MappingProxyType({
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
    })
    MAX_REDIRECTS = 5

    def __init__(
        self,
        user_agent: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            headers={**self.HEADERS, "User-Agent": self._user_agent},
            follow_redirects=True,
            max_redirects=self.MAX_REDIRECTS,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, *_: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str) -> httpx.Response:
        """GET url and return the response if it is 2xx.
        Raises:
            RuntimeError if not used as context manager
            FetchError
        """
        if not self._client:
            raise RuntimeError("Use 'async with HttpFetcher(...) as f:' context manager.")
        try:
            # httpx timeouts are per phase; this bounds the whole request
            async with asyncio.timeout(self._timeout):
                resp = await self._client.get(url)
            resp.raise_for_status()
        except TimeoutError as e:
            raise FetchError(url, f"error fetching {url}: no complete response within {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"{url} returned status {e.response.status_code}", e.response.status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = str(e).split("\n")[0] or type(e).__name__
            raise FetchError(url, f"error fetching {url}: {message}") from e
        logger.trace(f"GET {url} -> {resp.status_code}")
        return resp

    async def get_text(self, url: str) -> str:
        return (await self.get(url)).text
