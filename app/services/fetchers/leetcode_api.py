"""
LeetCode profile fetcher using the public GraphQL endpoint.
Primary LeetCode strategy; the scraper is only used when this one errors.
"""

from datetime import UTC, datetime
from typing import Any

import httpx

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import FetchOutcome, Platform, ProfileSource
from app.services.fetchers.base import ProfileFetcher
from app.services.fetchers.selectors import CURRENT_LEETCODE_QUERY, GraphQLQuery

logger = get_logger(__name__)


class LeetCodeResponseError(Exception):
    """GraphQL response did not have the expected shape."""


class LeetCodeGraphQLFetcher(ProfileFetcher):
    platform = Platform.LEETCODE
    source = ProfileSource.API

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        query: GraphQLQuery = CURRENT_LEETCODE_QUERY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint or settings.LEETCODE_GRAPHQL_URL
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self.query = query
        self._transport = transport

    async def fetch_profile(self, username: str) -> FetchOutcome:
        body = {"query": self.query.document, "variables": {"username": username}}

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=body, headers=self.query.headers)
        except httpx.TimeoutException:
            logger.warning("LeetCode GraphQL timed out", username=username, timeout=self.timeout)
            return FetchOutcome.upstream_error("LeetCode API timed out")
        except httpx.RequestError as e:
            logger.warning("LeetCode GraphQL request failed", username=username, error=str(e))
            return FetchOutcome.upstream_error(f"LeetCode API request failed: {e}")

        if response.status_code == 404:
            return FetchOutcome.not_found("LeetCode user not found")
        if response.status_code >= 400:
            return FetchOutcome.upstream_error(
                f"LeetCode API returned HTTP {response.status_code}"
            )

        try:
            data = response.json().get("data")
            if not isinstance(data, dict):
                raise LeetCodeResponseError("missing 'data' object")
            matched_user = data.get("matchedUser")
            if matched_user is None:
                return FetchOutcome.not_found("LeetCode user not found")
            payload = self._shape_profile(matched_user, data.get("recentAcSubmissionList"))
        except (ValueError, AttributeError, TypeError, LeetCodeResponseError) as e:
            logger.warning("Unexpected LeetCode GraphQL response", username=username, error=str(e))
            return FetchOutcome.upstream_error(f"Malformed LeetCode API response: {e}")

        return self._success(username, payload)

    def _shape_profile(self, user: dict[str, Any], recent: list | None) -> dict[str, Any]:
        profile = user.get("profile") or {}
        solved = self._solved_by_difficulty(user.get("submitStats"))
        handle = user.get("username")

        return {
            "username": handle,
            "name": profile.get("realName") or handle,
            "image": profile.get("userAvatar"),
            "rank": profile.get("ranking") or None,
            "reputation": profile.get("reputation") or 0,
            "solvedProblems": solved,
            "totalSolved": solved["total"],
            "easySolved": solved["easy"],
            "mediumSolved": solved["medium"],
            "hardSolved": solved["hard"],
            "recentSubmissions": [
                self._shape_submission(sub)
                for sub in (recent or [])[: self.query.recent_submissions_limit]
            ],
            "badges": [
                {"name": badge.get("displayName"), "icon": badge.get("icon")}
                for badge in (user.get("badges") or [])[: self.query.badges_limit]
            ],
        }

    @staticmethod
    def _solved_by_difficulty(stats: dict | None) -> dict[str, int]:
        solved = {"easy": 0, "medium": 0, "hard": 0, "total": 0}
        for item in (stats or {}).get("acSubmissionNum") or []:
            difficulty = str(item.get("difficulty", "")).lower()
            count = item.get("count") or 0
            if difficulty == "all":
                solved["total"] = count
            elif difficulty in solved:
                solved[difficulty] = count
        return solved

    @staticmethod
    def _shape_submission(sub: dict[str, Any]) -> dict[str, Any]:
        timestamp = sub.get("timestamp")
        try:
            date = datetime.fromtimestamp(int(timestamp), UTC).date().isoformat()
        except (TypeError, ValueError, OverflowError):
            date = None
        return {
            "title": sub.get("title"),
            "titleSlug": sub.get("titleSlug"),
            "timestamp": timestamp,
            "date": date,
        }
