"""
Headless browser sessions for the scraper fetchers.

One Chromium process is launched lazily and shared; every fetch gets its own
BrowserContext + Page from ``session()``, which closes the context on every
exit path (success, error, timeout or cancellation).
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from playwright.async_api import Browser, Page, Playwright, Route, async_playwright

from app.config import settings
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

BLOCKED_RESOURCE_TYPES = {"image", "stylesheet", "font", "media"}

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class BrowserSessions(Protocol):
    def session(self) -> AbstractAsyncContextManager[Page]: ...


async def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class BrowserSessionFactory:
    """Hands out isolated, exclusively owned pages on a shared browser."""

    def __init__(
        self,
        headless: bool | None = None,
        max_concurrency: int | None = None,
        user_agent: str | None = None,
    ):
        self.headless = settings.SCRAPER_HEADLESS if headless is None else headless
        self.user_agent = user_agent or settings.SCRAPER_USER_AGENT
        self._semaphore = asyncio.Semaphore(max_concurrency or settings.SCRAPER_MAX_CONCURRENCY)
        self._launch_lock = asyncio.Lock()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def _ensure_browser(self) -> Browser:
        if self._browser and self._browser.is_connected():
            return self._browser

        async with self._launch_lock:
            if self._browser and self._browser.is_connected():
                return self._browser
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            logger.info("Launching headless Chromium", headless=self.headless)
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=CHROMIUM_ARGS
            )
            return self._browser

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Page]:
        async with self._semaphore:
            browser = await self._ensure_browser()
            context = await browser.new_context(
                user_agent=self.user_agent,
                viewport={"width": 1366, "height": 900},
            )
            try:
                page = await context.new_page()
                await page.route("**/*", _block_heavy_resources)
                yield page
            finally:
                try:
                    await context.close()
                except Exception as e:
                    # The browser may already be gone; the context is unusable either way.
                    logger.warning("Failed to close browser context", error=str(e))

    async def close(self) -> None:
        """Shut down the shared browser (application shutdown)."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Headless browser closed")
