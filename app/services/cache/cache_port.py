"""
Key/value cache contract used by the profile orchestrator.

Implementations store plain strings with a TTL. Every operation except
``ping`` raises CacheUnavailableError when the backing store cannot be
reached; callers decide how to degrade.
"""

from typing import Protocol


class CacheUnavailableError(Exception):
    """Raised when the cache store cannot serve a request."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class CacheStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set_with_ttl(self, key: str, value: str, ttl_s: int) -> bool: ...

    async def delete(self, key: str) -> int: ...

    async def scan_prefix(self, prefix: str) -> list[str]: ...

    async def delete_many(self, keys: list[str]) -> int: ...

    async def ping(self) -> bool: ...
