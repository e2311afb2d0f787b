"""
Profile Service - cache-aside orchestration for a single profile lookup.

Flow for resolve_profile():
    1. Build the cache key from the normalized query
    2. Cache hit  -> return it (cached=True)
    3. Cache miss -> run the platform's fetch chain (API -> scraper fallback)
    4. Validate the payload; only non-empty successes are written back

Cache outages never fail a request: reads degrade to a miss and write
failures are logged.
"""

from typing import Any

from pydantic import ValidationError

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.profile_domain import (
    FetchOutcome,
    Platform,
    ProfileQuery,
    ProfileResolution,
    ProfileResult,
    ProfileSource,
)
from app.services.cache.cache_port import CacheStore, CacheUnavailableError
from app.services.fetchers.base import FetchStrategyChain

logger = get_logger(__name__)


def _has_content(payload: Any) -> bool:
    if not isinstance(payload, dict) or not payload:
        return False
    return any(value not in (None, "", [], {}) for value in payload.values())


class ProfileService:
    def __init__(
        self,
        cache: CacheStore,
        chains: dict[Platform, FetchStrategyChain],
        ttl_seconds: int | None = None,
        key_prefix: str | None = None,
    ):
        self.cache = cache
        self.chains = chains
        self.ttl_seconds = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.key_prefix = key_prefix or settings.CACHE_KEY_PREFIX
        if self.ttl_seconds <= 0:
            raise ValueError("Cache TTL must be positive")

    def cache_key(self, query: ProfileQuery) -> str:
        return query.cache_key(self.key_prefix)

    def platform_prefix(self, platform: Platform) -> str:
        return f"{self.key_prefix}:{platform.value}:"

    async def resolve_profile(self, query: ProfileQuery) -> ProfileResolution:
        key = self.cache_key(query)

        cached = await self._read_cache(key)
        if cached is not None:
            logger.info("Profile cache hit", platform=query.platform.value, username=query.username)
            return ProfileResolution(outcome=FetchOutcome.success(cached), cached=True)

        chain = self.chains.get(query.platform)
        if chain is None:
            return ProfileResolution(
                outcome=FetchOutcome.validation_error(
                    f"No fetcher configured for {query.platform.value}"
                )
            )

        outcome = await chain.fetch(query.username)

        if outcome.is_success:
            if not _has_content(outcome.payload):
                logger.warning(
                    "Upstream returned empty profile",
                    platform=query.platform.value,
                    username=query.username,
                    source=outcome.result.source.value,
                )
                return ProfileResolution(
                    outcome=FetchOutcome.validation_error("Profile data is empty")
                )
            await self._write_cache(key, outcome.result)

        return ProfileResolution(outcome=outcome, cached=False)

    async def invalidate(self, query: ProfileQuery) -> bool:
        key = self.cache_key(query)
        try:
            deleted = await self.cache.delete(key)
        except CacheUnavailableError as e:
            logger.warning("Cache delete skipped, store unavailable", key=key, error=str(e))
            return False
        logger.info("Profile cache entry deleted", key=key, deleted=deleted)
        return deleted > 0

    async def invalidate_platform(self, platform: Platform) -> int:
        prefix = self.platform_prefix(platform)
        try:
            keys = await self.cache.scan_prefix(prefix)
            deleted = await self.cache.delete_many(keys) if keys else 0
        except CacheUnavailableError as e:
            logger.warning("Cache flush skipped, store unavailable", prefix=prefix, error=str(e))
            return 0
        logger.info("Platform cache cleared", platform=platform.value, deleted=deleted)
        return deleted

    async def _read_cache(self, key: str) -> ProfileResult | None:
        try:
            raw = await self.cache.get(key)
        except CacheUnavailableError as e:
            logger.warning("Cache read failed, treating as miss", key=key, error=str(e))
            return None
        if raw is None:
            return None

        try:
            result = ProfileResult.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable cache entry", key=key, error_count=e.error_count())
            return None
        if not _has_content(result.payload):
            logger.warning("Discarding empty cache entry", key=key)
            return None

        return result.model_copy(update={"source": ProfileSource.CACHE})

    async def _write_cache(self, key: str, result: ProfileResult) -> None:
        try:
            await self.cache.set_with_ttl(key, result.model_dump_json(), self.ttl_seconds)
        except CacheUnavailableError as e:
            logger.warning("Cache write failed, serving uncached result", key=key, error=str(e))
