from app.services.cache.cache_port import CacheStore, CacheUnavailableError
from app.services.cache.redis_cache import RedisCacheStore

__all__ = ["CacheStore", "CacheUnavailableError", "RedisCacheStore"]
