"""
RedisCacheStore error translation and key operations, with the redis client mocked.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from app.services.cache.cache_port import CacheUnavailableError
from app.services.cache.redis_cache import RedisCacheStore


def _store(client) -> RedisCacheStore:
    return RedisCacheStore(redis_url="redis://test:6379/0", client=client)


@pytest.mark.asyncio
async def test_set_uses_setex_with_ttl():
    client = AsyncMock()
    client.setex.return_value = True

    assert await _store(client).set_with_ttl("user:github:octocat", "{}", 3600) is True
    client.setex.assert_awaited_once_with("user:github:octocat", 3600, "{}")


@pytest.mark.asyncio
async def test_non_positive_ttl_is_rejected():
    with pytest.raises(ValueError):
        await _store(AsyncMock()).set_with_ttl("k", "v", 0)


@pytest.mark.asyncio
async def test_get_translates_connection_errors():
    client = AsyncMock()
    client.get.side_effect = redis.ConnectionError("Connection refused")

    with pytest.raises(CacheUnavailableError) as exc_info:
        await _store(client).get("user:github:octocat")

    assert exc_info.value.operation == "get"


@pytest.mark.asyncio
async def test_delete_returns_removed_count():
    client = AsyncMock()
    client.delete.return_value = 0

    assert await _store(client).delete("user:github:nobody") == 0


@pytest.mark.asyncio
async def test_scan_prefix_collects_matching_keys():
    async def scan_iter(match=None, count=None):
        assert match == "user:leetcode:*"
        for key in ["user:leetcode:a", "user:leetcode:b"]:
            yield key

    client = MagicMock()
    client.scan_iter = scan_iter

    assert await _store(client).scan_prefix("user:leetcode:") == ["user:leetcode:a", "user:leetcode:b"]


@pytest.mark.asyncio
async def test_delete_many_chunks_and_sums():
    client = AsyncMock()
    client.delete.side_effect = lambda *keys: len(keys)
    keys = [f"user:github:{i}" for i in range(1200)]

    assert await _store(client).delete_many(keys) == 1200
    assert client.delete.await_count == 3


@pytest.mark.asyncio
async def test_delete_many_with_no_keys_skips_redis():
    client = AsyncMock()

    assert await _store(client).delete_many([]) == 0
    client.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_ping_reports_false_instead_of_raising():
    client = AsyncMock()
    client.ping.side_effect = redis.TimeoutError("timed out")

    assert await _store(client).ping() is False


@pytest.mark.asyncio
async def test_undecodable_value_reads_as_miss():
    client = AsyncMock()
    client.get.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    assert await _store(client).get("user:github:octocat") is None


@pytest.fixture
def unreachable_redis(monkeypatch):
    """Pool factory whose client never answers PING."""
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    pool_cls = MagicMock()
    pool_cls.from_url.return_value = pool
    client = AsyncMock()
    client.ping.side_effect = redis.ConnectionError("Connection refused")

    monkeypatch.setattr("app.services.cache.redis_cache.ConnectionPool", pool_cls)
    monkeypatch.setattr("app.services.cache.redis_cache.redis.Redis", MagicMock(return_value=client))
    return pool_cls, pool


@pytest.mark.asyncio
async def test_failed_initialize_disconnects_pool(unreachable_redis):
    pool_cls, pool = unreachable_redis
    store = RedisCacheStore(redis_url="redis://test:6379/0")

    with pytest.raises(CacheUnavailableError) as exc_info:
        await store.initialize()

    assert exc_info.value.operation == "initialize"
    pool.disconnect.assert_awaited_once()
    assert store.pool is None
    assert store.client is None


@pytest.mark.asyncio
async def test_operations_fail_fast_while_reconnect_is_backing_off(unreachable_redis):
    pool_cls, _ = unreachable_redis
    store = RedisCacheStore(redis_url="redis://test:6379/0")

    for _ in range(5):
        with pytest.raises(CacheUnavailableError):
            await store.get("user:github:octocat")
        with pytest.raises(CacheUnavailableError):
            await store.set_with_ttl("user:github:octocat", "{}", 3600)

    assert pool_cls.from_url.call_count == 1
    assert await store.ping() is False
    assert pool_cls.from_url.call_count == 1


@pytest.mark.asyncio
async def test_reconnect_is_attempted_after_backoff(unreachable_redis):
    pool_cls, _ = unreachable_redis
    store = RedisCacheStore(redis_url="redis://test:6379/0")
    with pytest.raises(CacheUnavailableError):
        await store.get("user:github:octocat")

    store._retry_after = 0.0
    with pytest.raises(CacheUnavailableError):
        await store.get("user:github:octocat")

    assert pool_cls.from_url.call_count == 2
