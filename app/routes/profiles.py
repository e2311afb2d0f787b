"""
profiles.py
-----------
Single-profile endpoints.

Usage:
    1. GET /github/{username}   - GitHub profile (scraped)
    2. GET /leetcode/{username} - LeetCode profile (GraphQL, scraper fallback)
    3. GET /profile/{username}  - Both platforms side by side

Blank usernames are rejected with 400 by the ProfileQueryError handler in
app.main. Not found and upstream failures both map to 404.
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.infrastructure.observability.logging import get_logger
from app.models.api.profile_response import (
    CombinedProfileData,
    CombinedProfileResponse,
    ProfileResponse,
)
from app.models.domain.profile_domain import OutcomeKind, Platform, ProfileQuery
from app.services.combined_profile_service import CombinedProfileService
from app.services.dependencies import get_combined_service, get_profile_service
from app.services.profile_service import ProfileService
from app.utils.timing import format_response_time

router = APIRouter(tags=["profiles"])
logger = get_logger(__name__)

PLATFORM_LABELS = {Platform.GITHUB: "GitHub", Platform.LEETCODE: "LeetCode"}


async def _platform_profile(platform: Platform, username: str, service: ProfileService):
    started = time.perf_counter()
    label = PLATFORM_LABELS[platform]

    query = ProfileQuery.build(platform, username)
    resolution = await service.resolve_profile(query)
    outcome = resolution.outcome

    if outcome.is_success:
        return ProfileResponse(
            status=True,
            message=f"{label} data fetched successfully",
            data=outcome.payload,
            cached=resolution.cached,
            source=outcome.result.source.value,
            response_time=format_response_time(started),
        )

    if outcome.kind is OutcomeKind.NOT_FOUND:
        message = f"{label} user not found"
    else:
        message = f"{label} user not found or failed to fetch: {outcome.message}"

    logger.info(
        "Profile lookup unsuccessful",
        platform=platform.value,
        username=query.username,
        outcome=outcome.kind.value,
    )
    body = ProfileResponse(
        status=False,
        message=message,
        response_time=format_response_time(started),
    )
    return JSONResponse(status_code=404, content=body.to_json())


@router.get("/github/{username}", response_model=ProfileResponse)
async def get_github_profile(
    username: str, service: ProfileService = Depends(get_profile_service)
):
    """
    Get a GitHub profile, served from cache when available.

    Raises:
        400: Blank username
        404: User not found or GitHub could not be scraped
    """
    return await _platform_profile(Platform.GITHUB, username, service)


@router.get("/leetcode/{username}", response_model=ProfileResponse)
async def get_leetcode_profile(
    username: str, service: ProfileService = Depends(get_profile_service)
):
    """
    Get a LeetCode profile, served from cache when available.

    Raises:
        400: Blank username
        404: User not found or LeetCode unavailable
    """
    return await _platform_profile(Platform.LEETCODE, username, service)


@router.get("/profile/{username}", response_model=CombinedProfileResponse)
async def get_combined_profile(
    username: str, service: CombinedProfileService = Depends(get_combined_service)
):
    """GitHub and LeetCode for the same username. A failed side is null; never 404."""
    started = time.perf_counter()
    combined = await service.resolve_combined(username)

    return CombinedProfileResponse(
        status=True,
        message="Profile data fetched",
        data=CombinedProfileData(
            username=combined.username,
            github=combined.github,
            leetcode=combined.leetcode,
        ),
        response_time=format_response_time(started),
    )
