"""
Batch lookups: one platform, up to BATCH_MAX_USERNAMES usernames, resolved
concurrently. Results keep input order and one failing item never affects
the others.
"""

import asyncio

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import (
    BatchItemResult,
    BatchResolution,
    BatchSummary,
    FetchOutcome,
    Platform,
    ProfileQuery,
    ProfileQueryError,
)
from app.services.profile_service import ProfileService

logger = get_logger(__name__)


class BatchValidationError(ValueError):
    """Batch request rejected before any upstream call was made."""


class BatchCoordinator:
    def __init__(self, profile_service: ProfileService, max_usernames: int | None = None):
        self.profile_service = profile_service
        self.max_usernames = max_usernames or settings.BATCH_MAX_USERNAMES

    def validate(self, platform: str | None, usernames: list[str] | None) -> Platform:
        if not usernames:
            raise BatchValidationError("usernames must be a non-empty array")
        if len(usernames) > self.max_usernames:
            raise BatchValidationError(
                f"Maximum {self.max_usernames} usernames allowed per batch request"
            )
        try:
            return Platform.parse(platform)
        except ProfileQueryError as e:
            raise BatchValidationError(str(e)) from e

    async def resolve_batch(self, platform: str | None, usernames: list[str] | None) -> BatchResolution:
        resolved_platform = self.validate(platform, usernames)

        logger.info("Batch started", platform=resolved_platform.value, size=len(usernames))

        # gather() preserves argument order regardless of completion order
        results = await asyncio.gather(
            *(self._resolve_item(resolved_platform, username) for username in usernames),
            return_exceptions=True,
        )

        items: list[BatchItemResult] = []
        for username, result in zip(usernames, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Batch item raised",
                    platform=resolved_platform.value,
                    username=username,
                    error=f"{type(result).__name__}: {result}",
                )
                result = BatchItemResult(
                    username=username,
                    outcome=FetchOutcome.upstream_error("Failed to fetch profile"),
                )
            items.append(result)

        successful = sum(1 for item in items if item.outcome.is_success)
        summary = BatchSummary(total=len(items), successful=successful, failed=len(items) - successful)

        logger.info(
            "Batch completed",
            platform=resolved_platform.value,
            total=summary.total,
            successful=summary.successful,
            failed=summary.failed,
        )
        return BatchResolution(platform=resolved_platform, items=items, summary=summary)

    async def _resolve_item(self, platform: Platform, username: str) -> BatchItemResult:
        try:
            query = ProfileQuery.build(platform, username)
        except ProfileQueryError as e:
            return BatchItemResult(
                username=username, outcome=FetchOutcome.validation_error(str(e))
            )

        resolution = await self.profile_service.resolve_profile(query)
        return BatchItemResult(
            username=username, outcome=resolution.outcome, cached=resolution.cached
        )
