"""
Service wiring.

build_services() assembles the object graph once at startup and stores it
on app.state; routes receive pieces through the FastAPI dependencies below,
which tests replace with app.dependency_overrides.
"""

from dataclasses import dataclass

from fastapi import Request

from app.config import settings
from app.models.domain.profile_domain import Platform
from app.services.batch_service import BatchCoordinator
from app.services.cache.cache_port import CacheStore
from app.services.combined_profile_service import CombinedProfileService
from app.services.fetchers import (
    FetchStrategyChain,
    GitHubProfileScraper,
    LeetCodeGraphQLFetcher,
    LeetCodeProfileScraper,
)
from app.services.fetchers.browser import BrowserSessions
from app.services.profile_service import ProfileService


@dataclass
class ServiceContainer:
    cache: CacheStore
    profile_service: ProfileService
    batch_coordinator: BatchCoordinator
    combined_service: CombinedProfileService


def build_fetch_chains(sessions: BrowserSessions) -> dict[Platform, FetchStrategyChain]:
    return {
        Platform.GITHUB: FetchStrategyChain(
            Platform.GITHUB, [GitHubProfileScraper(sessions)]
        ),
        Platform.LEETCODE: FetchStrategyChain(
            Platform.LEETCODE,
            [LeetCodeGraphQLFetcher(), LeetCodeProfileScraper(sessions)],
        ),
    }


def build_services(cache: CacheStore, sessions: BrowserSessions) -> ServiceContainer:
    profile_service = ProfileService(
        cache=cache,
        chains=build_fetch_chains(sessions),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        key_prefix=settings.CACHE_KEY_PREFIX,
    )
    return ServiceContainer(
        cache=cache,
        profile_service=profile_service,
        batch_coordinator=BatchCoordinator(profile_service, settings.BATCH_MAX_USERNAMES),
        combined_service=CombinedProfileService(profile_service),
    )


def _container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "services", None)
    if container is None:
        raise RuntimeError("Services not initialized")
    return container


def get_cache_store(request: Request) -> CacheStore:
    return _container(request).cache


def get_profile_service(request: Request) -> ProfileService:
    return _container(request).profile_service


def get_batch_coordinator(request: Request) -> BatchCoordinator:
    return _container(request).batch_coordinator


def get_combined_service(request: Request) -> CombinedProfileService:
    return _container(request).combined_service
