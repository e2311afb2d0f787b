"""
batch.py
--------
POST /batch - look up to 20 usernames on one platform concurrently.
Per-item failures are reported inline; only an invalid request is a 400.
"""

import time

from fastapi import APIRouter, Depends

from app.models.api.profile_request import BatchProfileRequest
from app.models.api.profile_response import (
    BatchItemResponse,
    BatchResponse,
    BatchSummaryResponse,
)
from app.models.domain.profile_domain import OutcomeKind
from app.services.batch_service import BatchCoordinator
from app.services.dependencies import get_batch_coordinator
from app.utils.timing import format_response_time

router = APIRouter(tags=["batch"])


@router.post("/batch", response_model=BatchResponse)
async def batch_profiles(
    request: BatchProfileRequest,
    coordinator: BatchCoordinator = Depends(get_batch_coordinator),
):
    """
    Raises:
        400: usernames missing, empty or longer than the limit; unknown platform
    """
    started = time.perf_counter()
    resolution = await coordinator.resolve_batch(request.platform, request.usernames)

    results = []
    for item in resolution.items:
        outcome = item.outcome
        if outcome.is_success:
            results.append(
                BatchItemResponse(
                    username=item.username, data=outcome.payload, cached=item.cached, status=True
                )
            )
        else:
            error = "User not found" if outcome.kind is OutcomeKind.NOT_FOUND else outcome.message
            results.append(BatchItemResponse(username=item.username, error=error, status=False))

    return BatchResponse(
        status=True,
        message=f"Processed {resolution.summary.total} {resolution.platform.value} profiles",
        platform=resolution.platform.value,
        summary=BatchSummaryResponse(
            total=resolution.summary.total,
            successful=resolution.summary.successful,
            failed=resolution.summary.failed,
            response_time=format_response_time(started),
        ),
        results=results,
    )
