"""GitHub + LeetCode for one username, fetched side by side."""

import asyncio

from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import CombinedProfile, Platform, ProfileQuery
from app.services.profile_service import ProfileService

logger = get_logger(__name__)


class CombinedProfileService:
    def __init__(self, profile_service: ProfileService):
        self.profile_service = profile_service

    async def resolve_combined(self, username: str) -> CombinedProfile:
        """Each side fails independently; a failed side is reported as None."""
        queries = {
            platform: ProfileQuery.build(platform, username)
            for platform in (Platform.GITHUB, Platform.LEETCODE)
        }
        results = await asyncio.gather(
            *(self.profile_service.resolve_profile(q) for q in queries.values()),
            return_exceptions=True,
        )

        payloads = {}
        for platform, result in zip(queries, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Combined profile side raised",
                    platform=platform.value,
                    username=username,
                    error=f"{type(result).__name__}: {result}",
                )
                payloads[platform.value] = None
            elif result.outcome.is_success:
                payloads[platform.value] = result.outcome.payload
            else:
                payloads[platform.value] = None

        return CombinedProfile(username=queries[Platform.GITHUB].username, **payloads)
