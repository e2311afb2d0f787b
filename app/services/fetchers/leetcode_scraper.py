"""LeetCode profile scraper, used when the GraphQL API errors."""

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import FetchOutcome, Platform
from app.services.fetchers.browser import BrowserSessions
from app.services.fetchers.scraper import PageScraperFetcher
from app.services.fetchers.selectors import CURRENT_LEETCODE_SELECTORS, LeetCodeSelectors

logger = get_logger(__name__)

READY_TIMEOUT_MS = 8000


class LeetCodeProfileScraper(PageScraperFetcher):
    platform = Platform.LEETCODE

    def __init__(
        self,
        sessions: BrowserSessions,
        base_url: str | None = None,
        selectors: LeetCodeSelectors = CURRENT_LEETCODE_SELECTORS,
        **kwargs,
    ):
        super().__init__(sessions, **kwargs)
        self.base_url = (base_url or settings.LEETCODE_BASE_URL).rstrip("/")
        self.selectors = selectors

    async def scrape(self, page: Page, username: str) -> FetchOutcome:
        sel = self.selectors

        status = await self.navigate(page, f"{self.base_url}/{username}/")
        if status == 404:
            return FetchOutcome.not_found("LeetCode user not found")

        try:
            await page.wait_for_selector(sel.ready, timeout=READY_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            # Client-rendered page; read whatever has rendered so far.
            logger.debug("LeetCode profile not fully rendered", username=username)

        handle = await self.first_text(page, sel.username)
        name = await self.first_text(page, sel.name)
        if handle is None and name is None:
            return FetchOutcome.not_found("LeetCode user not found")

        image = None
        for selector, attribute in sel.image:
            image = await self.attr_of(page, selector, attribute)
            if image:
                break

        payload = {
            "username": handle,
            "name": name,
            "image": image,
            "rank": await self.first_text(page, sel.rank),
            "totalQuestions": await self.first_text(page, sel.total_questions),
        }
        return self._success(username, payload)
