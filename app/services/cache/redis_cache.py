# app/services/cache/redis_cache.py
import asyncio
import time

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.services.cache.cache_port import CacheUnavailableError

logger = get_logger(__name__)

SCAN_BATCH_SIZE = 200
DELETE_CHUNK_SIZE = 500
INIT_RETRY_BACKOFF_SECONDS = 5.0


class RedisCacheStore:
    """CacheStore backed by a pooled redis.asyncio client."""

    def __init__(self, redis_url: str | None = None, client: redis.Redis | None = None):
        self.redis_url = redis_url or settings.REDIS_URL
        self.pool = None
        self.client = client
        self._initialized = client is not None
        self._init_lock = asyncio.Lock()
        self._retry_after = 0.0

    async def initialize(self):
        """Initialize connection pool on startup"""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return
            try:
                pool_config = settings.get_redis_pool_config()
                logger.info("Attempting Redis connection", url_preview=self.redis_url[:20] + "...")

                self.pool = ConnectionPool.from_url(
                    self.redis_url,
                    retry_on_timeout=True,
                    health_check_interval=30,
                    decode_responses=True,
                    **pool_config,
                )
                self.client = redis.Redis(connection_pool=self.pool)

                result = await self.client.ping()
                logger.info("Redis ping successful", result=result)

                self._initialized = True
                logger.info(
                    "Redis cache initialized",
                    max_connections=pool_config["max_connections"],
                )

            except (redis.RedisError, OSError) as e:
                logger.error(
                    "Failed to initialize Redis cache",
                    error=str(e),
                    retry_in_s=INIT_RETRY_BACKOFF_SECONDS,
                )
                await self._discard_pool()
                self._initialized = False
                self._retry_after = time.monotonic() + INIT_RETRY_BACKOFF_SECONDS
                raise CacheUnavailableError("Redis initialization failed", "initialize") from e

    async def _discard_pool(self):
        pool, self.pool, self.client = self.pool, None, None
        if pool is not None:
            try:
                await pool.disconnect()
            except (redis.RedisError, OSError) as e:
                logger.warning("Error disconnecting failed Redis pool", error=str(e))

    async def close(self):
        """Clean shutdown"""
        try:
            if self.client:
                await self.client.aclose()
            if self.pool:
                await self.pool.disconnect()
            self._initialized = False
            logger.info("Redis cache closed")
        except (redis.RedisError, OSError) as e:
            logger.error("Error closing Redis client", error=str(e))

    async def _ensure_initialized(self):
        if self._initialized:
            return
        if time.monotonic() < self._retry_after:
            raise CacheUnavailableError("Redis unavailable, retry backoff in effect", "initialize")
        logger.warning("Redis not initialized, attempting to initialize")
        await self.initialize()

    async def ping(self) -> bool:
        """Test Redis connection"""
        try:
            await self._ensure_initialized()
            return bool(await self.client.ping())
        except (CacheUnavailableError, redis.RedisError, OSError) as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def get(self, key: str) -> str | None:
        await self._ensure_initialized()
        try:
            result = await self.client.get(key)
        except (redis.RedisError, OSError) as e:
            logger.error("Redis GET failed", key=key, error=str(e))
            raise CacheUnavailableError(f"GET failed: {e}", "get") from e
        except UnicodeDecodeError as e:
            # Not written by this service; undecodable values read as a miss.
            logger.warning("Redis value is not valid UTF-8", key=key, error=str(e))
            return None
        return result if result else None

    async def set_with_ttl(self, key: str, value: str, ttl_s: int) -> bool:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be positive")
        await self._ensure_initialized()
        try:
            result = await self.client.setex(key, ttl_s, value)
        except (redis.RedisError, OSError) as e:
            logger.error("Redis SETEX failed", key=key, error=str(e))
            raise CacheUnavailableError(f"SETEX failed: {e}", "set_with_ttl") from e
        return bool(result)

    async def delete(self, key: str) -> int:
        await self._ensure_initialized()
        try:
            return int(await self.client.delete(key))
        except (redis.RedisError, OSError) as e:
            logger.error("Redis DELETE failed", key=key, error=str(e))
            raise CacheUnavailableError(f"DELETE failed: {e}", "delete") from e

    async def scan_prefix(self, prefix: str) -> list[str]:
        """List keys starting with prefix using SCAN (never KEYS)."""
        await self._ensure_initialized()
        try:
            return [
                key
                async for key in self.client.scan_iter(match=f"{prefix}*", count=SCAN_BATCH_SIZE)
            ]
        except (redis.RedisError, OSError) as e:
            logger.error("Redis SCAN failed", prefix=prefix, error=str(e))
            raise CacheUnavailableError(f"SCAN failed: {e}", "scan_prefix") from e

    async def delete_many(self, keys: list[str]) -> int:
        if not keys:
            return 0
        await self._ensure_initialized()
        deleted = 0
        try:
            for start in range(0, len(keys), DELETE_CHUNK_SIZE):
                deleted += int(await self.client.delete(*keys[start : start + DELETE_CHUNK_SIZE]))
        except (redis.RedisError, OSError) as e:
            logger.error("Redis bulk DELETE failed", key_count=len(keys), error=str(e))
            raise CacheUnavailableError(f"bulk DELETE failed: {e}", "delete_many") from e
        return deleted
