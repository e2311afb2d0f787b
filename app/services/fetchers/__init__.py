"""Upstream profile fetchers and the fallback chain that orders them."""

from app.services.fetchers.base import FetchStrategyChain, ProfileFetcher
from app.services.fetchers.browser import BrowserSessionFactory
from app.services.fetchers.github_scraper import GitHubProfileScraper
from app.services.fetchers.leetcode_api import LeetCodeGraphQLFetcher
from app.services.fetchers.leetcode_scraper import LeetCodeProfileScraper

__all__ = [
    "BrowserSessionFactory",
    "FetchStrategyChain",
    "GitHubProfileScraper",
    "LeetCodeGraphQLFetcher",
    "LeetCodeProfileScraper",
    "ProfileFetcher",
]
