"""
Fetcher contract and the ordered fallback chain.

A chain tries its strategies in order and moves on only when a strategy
reports UPSTREAM_ERROR. NOT_FOUND is authoritative and ends the chain.
"""

import time
from abc import ABC, abstractmethod

from app.infrastructure.observability.logging import get_logger, log_fetch_outcome
from app.models.domain.profile_domain import (
    FetchOutcome,
    OutcomeKind,
    Platform,
    ProfileQuery,
    ProfileResult,
    ProfileSource,
)

logger = get_logger(__name__)


class ProfileFetcher(ABC):
    """Fetch one platform's profile by username."""

    platform: Platform
    source: ProfileSource

    @abstractmethod
    async def fetch_profile(self, username: str) -> FetchOutcome:
        """Return SUCCESS, NOT_FOUND or UPSTREAM_ERROR. Should not raise."""
        ...

    def _success(self, username: str, payload: dict) -> FetchOutcome:
        return FetchOutcome.success(
            ProfileResult(
                query=ProfileQuery(platform=self.platform, username=username),
                payload=payload,
                source=self.source,
            )
        )


class FetchStrategyChain:
    """Ordered strategies for one platform, e.g. [GraphQL API, scraper]."""

    def __init__(self, platform: Platform, strategies: list[ProfileFetcher]):
        if not strategies:
            raise ValueError(f"No fetch strategies configured for {platform.value}")
        self.platform = platform
        self.strategies = list(strategies)

    async def fetch(self, username: str) -> FetchOutcome:
        outcome = FetchOutcome.upstream_error("No strategy attempted")

        for index, strategy in enumerate(self.strategies):
            started = time.perf_counter()
            try:
                outcome = await strategy.fetch_profile(username)
            except Exception as e:
                logger.exception(
                    "Fetch strategy raised unexpectedly",
                    platform=self.platform.value,
                    source=strategy.source.value,
                    username=username,
                )
                outcome = FetchOutcome.upstream_error(f"{type(e).__name__}: {e}")

            log_fetch_outcome(
                platform=self.platform.value,
                username=username,
                source=strategy.source.value,
                kind=outcome.kind.value,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

            if outcome.kind is not OutcomeKind.UPSTREAM_ERROR:
                return outcome

            if index + 1 < len(self.strategies):
                logger.info(
                    "Falling back to next fetch strategy",
                    platform=self.platform.value,
                    failed_source=strategy.source.value,
                    next_source=self.strategies[index + 1].source.value,
                    error=outcome.message,
                )

        return outcome
