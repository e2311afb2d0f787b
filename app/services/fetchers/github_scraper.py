"""
GitHub profile scraper.

GitHub has no structured source wired in here, so this is the only GitHub
strategy. Reads the profile page, then the repositories tab.
"""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import FetchOutcome, Platform
from app.services.fetchers.browser import BrowserSessions
from app.services.fetchers.scraper import PageScraperFetcher
from app.services.fetchers.selectors import CURRENT_GITHUB_SELECTORS, GitHubSelectors

logger = get_logger(__name__)


class GitHubProfileScraper(PageScraperFetcher):
    platform = Platform.GITHUB

    def __init__(
        self,
        sessions: BrowserSessions,
        base_url: str | None = None,
        selectors: GitHubSelectors = CURRENT_GITHUB_SELECTORS,
        **kwargs,
    ):
        super().__init__(sessions, **kwargs)
        self.base_url = (base_url or settings.GITHUB_BASE_URL).rstrip("/")
        self.selectors = selectors

    async def scrape(self, page: Page, username: str) -> FetchOutcome:
        sel = self.selectors
        profile_url = f"{self.base_url}/{username}"

        status = await self.navigate(page, profile_url)
        if status == 404:
            return FetchOutcome.not_found("GitHub user not found")
        if await page.query_selector(sel.anchor) is None:
            logger.info("GitHub profile anchor missing", username=username, selectors=sel.version)
            return FetchOutcome.not_found("GitHub user not found")

        payload = {
            "username": await self.text_of(page, sel.nickname),
            "name": await self.text_of(page, sel.name),
            "bio": await self.text_of(page, sel.bio),
            "links": await self._links(page),
            "followers": await self._followers(page),
            "profileUrl": profile_url,
        }
        payload.update(await self._repositories(page, profile_url))

        return self._success(username, payload)

    async def _links(self, page: Page) -> list[dict]:
        links = []
        try:
            for element in await page.query_selector_all(self.selectors.links):
                text = (await element.inner_text() or "").strip()
                links.append(
                    {"linkText": text or None, "linkUrl": await element.get_attribute("href")}
                )
        except PlaywrightError as e:
            logger.debug("GitHub links unavailable", error=str(e))
        return links

    async def _followers(self, page: Page) -> list[str]:
        followers = []
        try:
            for element in await page.query_selector_all(self.selectors.followers):
                text = (await element.inner_text() or "").strip()
                if text:
                    followers.append(" ".join(text.split()))
        except PlaywrightError as e:
            logger.debug("GitHub followers unavailable", error=str(e))
        return followers

    async def _repositories(self, page: Page, profile_url: str) -> dict:
        """Repositories tab; failures leave the counters empty instead of failing the profile."""
        sel = self.selectors
        result = {"totalRepos": None, "repos": []}
        try:
            await self.navigate(page, f"{profile_url}?tab=repositories")
            result["totalRepos"] = self.to_int(await self.text_of(page, sel.repo_counter))
            for item in await page.query_selector_all(sel.repo_items):
                link = await item.query_selector(sel.repo_link)
                if link is None:
                    continue
                result["repos"].append(
                    {
                        "repoName": (await link.inner_text() or "").strip() or None,
                        "repoLink": await link.get_attribute("href"),
                    }
                )
        except PlaywrightError as e:
            logger.warning("GitHub repositories tab unavailable", url=profile_url, error=str(e))
        return result
