import asyncio

import pytest
from fastapi.testclient import TestClient

from app.models.domain.profile_domain import FetchOutcome, Platform, ProfileSource
from app.services.batch_service import BatchCoordinator
from app.services.cache.cache_port import CacheUnavailableError
from app.services.combined_profile_service import CombinedProfileService
from app.services.dependencies import ServiceContainer
from app.services.fetchers.base import FetchStrategyChain, ProfileFetcher
from app.services.profile_service import ProfileService


class FakeCacheStore:
    """In-memory CacheStore. Flip ``available`` to simulate a Redis outage."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.available = True
        self.writes: list[str] = []

    def _check(self, operation: str):
        if not self.available:
            raise CacheUnavailableError("connection refused", operation)

    async def get(self, key: str) -> str | None:
        self._check("get")
        return self.store.get(key)

    async def set_with_ttl(self, key: str, value: str, ttl_s: int) -> bool:
        self._check("set_with_ttl")
        self.store[key] = value
        self.ttls[key] = ttl_s
        self.writes.append(key)
        return True

    async def delete(self, key: str) -> int:
        self._check("delete")
        self.ttls.pop(key, None)
        return 1 if self.store.pop(key, None) is not None else 0

    async def scan_prefix(self, prefix: str) -> list[str]:
        self._check("scan_prefix")
        return [key for key in self.store if key.startswith(prefix)]

    async def delete_many(self, keys: list[str]) -> int:
        self._check("delete_many")
        return sum([1 for key in keys if self.store.pop(key, None) is not None])

    async def ping(self) -> bool:
        return self.available


class StubFetcher(ProfileFetcher):
    """
    Scripted fetcher. Usernames in ``payloads`` succeed, in ``errors`` return
    UPSTREAM_ERROR, in ``raises`` raise; anything else is NOT_FOUND.
    """

    def __init__(
        self,
        platform: Platform,
        source: ProfileSource = ProfileSource.API,
        payloads: dict | None = None,
        errors: dict | None = None,
        raises: dict | None = None,
        delays: dict | None = None,
    ):
        self.platform = platform
        self.source = source
        self.payloads = payloads or {}
        self.errors = errors or {}
        self.raises = raises or {}
        self.delays = delays or {}
        self.calls: list[str] = []

    async def fetch_profile(self, username: str) -> FetchOutcome:
        self.calls.append(username)
        if username in self.delays:
            await asyncio.sleep(self.delays[username])
        if username in self.raises:
            raise self.raises[username]
        if username in self.errors:
            return FetchOutcome.upstream_error(self.errors[username])
        if username in self.payloads:
            return self._success(username, self.payloads[username])
        return FetchOutcome.not_found()


@pytest.fixture
def fake_cache():
    return FakeCacheStore()


@pytest.fixture
def stub_fetcher():
    return StubFetcher


@pytest.fixture
def make_profile_service(fake_cache):
    def _make(github: list[ProfileFetcher] | None = None, leetcode: list[ProfileFetcher] | None = None):
        chains = {}
        if github:
            chains[Platform.GITHUB] = FetchStrategyChain(Platform.GITHUB, github)
        if leetcode:
            chains[Platform.LEETCODE] = FetchStrategyChain(Platform.LEETCODE, leetcode)
        return ProfileService(cache=fake_cache, chains=chains, ttl_seconds=3600, key_prefix="user")

    return _make


@pytest.fixture
def api_client(fake_cache, make_profile_service):
    """TestClient over app.main with services built from fakes (lifespan not run)."""
    from app.main import app

    def _client(github: list[ProfileFetcher] | None = None, leetcode: list[ProfileFetcher] | None = None):
        service = make_profile_service(github=github, leetcode=leetcode)
        app.state.services = ServiceContainer(
            cache=fake_cache,
            profile_service=service,
            batch_coordinator=BatchCoordinator(service, max_usernames=20),
            combined_service=CombinedProfileService(service),
        )
        return TestClient(app, raise_server_exceptions=False)

    yield _client

    app.dependency_overrides.clear()
    if hasattr(app.state, "services"):
        del app.state.services
