"""
Shared plumbing for browser-based fetchers.

Subclasses implement ``scrape(page, username)``; this class owns the session
lifecycle, the overall time budget and the mapping of browser failures to
UPSTREAM_ERROR. Field helpers return None instead of raising so one missing
element never fails the whole profile.
"""

import asyncio
from abc import abstractmethod

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import FetchOutcome, ProfileSource
from app.services.fetchers.base import ProfileFetcher
from app.services.fetchers.browser import BrowserSessions

logger = get_logger(__name__)


class PageScraperFetcher(ProfileFetcher):
    source = ProfileSource.SCRAPER

    def __init__(
        self,
        sessions: BrowserSessions,
        navigation_timeout_s: float | None = None,
        total_timeout_s: float | None = None,
    ):
        self.sessions = sessions
        self.navigation_timeout_s = (
            navigation_timeout_s
            if navigation_timeout_s is not None
            else settings.SCRAPER_NAVIGATION_TIMEOUT_SECONDS
        )
        self.total_timeout_s = (
            total_timeout_s if total_timeout_s is not None else settings.SCRAPER_TOTAL_TIMEOUT_SECONDS
        )

    @abstractmethod
    async def scrape(self, page: Page, username: str) -> FetchOutcome: ...

    async def fetch_profile(self, username: str) -> FetchOutcome:
        try:
            # Budget covers the scrape only, not the wait for a browser slot.
            async with self.sessions.session() as page:
                return await asyncio.wait_for(
                    self.scrape(page, username), timeout=self.total_timeout_s
                )
        except (TimeoutError, PlaywrightTimeoutError):
            logger.warning(
                "Profile scrape timed out",
                platform=self.platform.value,
                username=username,
                timeout_s=self.total_timeout_s,
            )
            return FetchOutcome.upstream_error(f"{self.platform.value} page timed out")
        except PlaywrightError as e:
            logger.warning(
                "Profile scrape failed", platform=self.platform.value, username=username, error=str(e)
            )
            return FetchOutcome.upstream_error(f"Failed to scrape {self.platform.value} profile")

    async def navigate(self, page: Page, url: str) -> int | None:
        """Open url and return the HTTP status of the main document (None if unknown)."""
        logger.debug("Navigating", platform=self.platform.value, url=url)
        response = await page.goto(
            url, wait_until="domcontentloaded", timeout=int(self.navigation_timeout_s * 1000)
        )
        return response.status if response else None

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def text_of(page: Page, selector: str) -> str | None:
        try:
            element = await page.query_selector(selector)
            if element is None:
                return None
            text = (await element.inner_text()).strip()
            return text or None
        except PlaywrightError:
            return None

    @staticmethod
    async def attr_of(page: Page, selector: str, attribute: str) -> str | None:
        try:
            element = await page.query_selector(selector)
            if element is None:
                return None
            return await element.get_attribute(attribute)
        except PlaywrightError:
            return None

    async def first_text(self, page: Page, selectors: tuple[str, ...]) -> str | None:
        for selector in selectors:
            value = await self.text_of(page, selector)
            if value:
                return value
        return None

    @staticmethod
    def to_int(value: str | None) -> int | str | None:
        """'1,234' -> 1234; anything non-numeric is returned unchanged."""
        if value is None:
            return None
        cleaned = value.replace(",", "").strip()
        return int(cleaned) if cleaned.isdigit() else value
