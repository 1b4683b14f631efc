"""Headless Chromium wrapper handing out isolated sessions."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from playwright.async_api import Browser as PlaywrightBrowser
from playwright.async_api import Page, Playwright, async_playwright

from ats_crawler.vendors import BROWSER_USER_AGENT


class Browser:
    """One Chromium process per run; every `new_session()` gets a fresh context.

    Contexts share nothing (cookies, storage), so a page that misbehaves on
    one board cannot leak state into the next.
    """

    def __init__(self, headless: bool = True, navigation_timeout_ms: int = 30_000):
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self._playwright: Playwright | None = None
        self._browser: PlaywrightBrowser | None = None

    async def start(self) -> None:
        logger.info("Starting browser...")
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--disable-dev-shm-usage",
                ],
            )
        except BaseException:
            # __aexit__ never runs when __aenter__ raises
            await self.stop()
            raise
        logger.info("Browser started successfully")

    async def stop(self) -> None:
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser stopped")

    @asynccontextmanager
    async def new_session(self) -> AsyncIterator[Page]:
        """Yield a page in a brand-new context; the context is closed on exit."""
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")
        context = await self._browser.new_context(
            user_agent=BROWSER_USER_AGENT,
            viewport={"width": 1920, "height": 1080},
            locale="en-US",
            timezone_id="America/New_York",
        )
        # Stealth: hide webdriver flag
        await context.add_init_script("""
            Object.defineProperty(navigator, 'webdriver', {
                get: () => undefined
            });
        """)
        context.set_default_navigation_timeout(self.navigation_timeout_ms)
        try:
            yield await context.new_page()
        finally:
            await context.close()

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
