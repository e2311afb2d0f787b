"""
cache.py
--------
Manual cache invalidation.

    DELETE /cache/{platform}/{username} - drop one cached profile
    DELETE /cache/{platform}            - drop every cached profile of a platform
"""

from fastapi import APIRouter, Depends

from app.infrastructure.observability.logging import get_logger
from app.models.api.profile_response import (
    CacheEntryDeleteResponse,
    CachePlatformDeleteResponse,
)
from app.models.domain.profile_domain import Platform, ProfileQuery
from app.services.dependencies import get_profile_service
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/cache", tags=["cache"])
logger = get_logger(__name__)


@router.delete("/{platform}/{username}", response_model=CacheEntryDeleteResponse)
async def delete_cached_profile(
    platform: str, username: str, service: ProfileService = Depends(get_profile_service)
):
    query = ProfileQuery.build(platform, username)
    deleted = await service.invalidate(query)

    message = (
        f"Cache cleared for {query.platform.value}:{query.username}"
        if deleted
        else f"No cache entry for {query.platform.value}:{query.username}"
    )
    return CacheEntryDeleteResponse(status=True, message=message, deleted=deleted)


@router.delete("/{platform}", response_model=CachePlatformDeleteResponse)
async def delete_platform_cache(
    platform: str, service: ProfileService = Depends(get_profile_service)
):
    resolved = Platform.parse(platform)
    deleted = await service.invalidate_platform(resolved)

    logger.info("Platform cache flush requested", platform=resolved.value, deleted=deleted)
    return CachePlatformDeleteResponse(
        status=True,
        message=f"Cleared {deleted} cached {resolved.value} profiles",
        deleted=deleted,
    )
