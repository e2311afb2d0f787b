# app/routes/health.py
"""
Service metadata and health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from app.config import settings
from app.models.api.profile_response import ServiceInfoResponse
from app.services.cache.cache_port import CacheStore
from app.services.dependencies import get_cache_store

router = APIRouter(tags=["health"])

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /healthz",
    "GET /readyz",
    "GET /github/{username}",
    "GET /leetcode/{username}",
    "GET /profile/{username}",
    "POST /batch",
    "DELETE /cache/{platform}/{username}",
    "DELETE /cache/{platform}",
]


@router.get("/", response_model=ServiceInfoResponse)
async def service_info():
    """Service metadata and the list of routes."""
    return ServiceInfoResponse(
        message="Profile stats API is running",
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        endpoints=AVAILABLE_ENDPOINTS,
    )


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": True, "message": "ok", "service": settings.SERVICE_NAME}


@router.get("/readyz")
async def readyz(cache: CacheStore = Depends(get_cache_store)):
    """
    Readiness check. The service still answers without Redis (uncached), so a
    failed ping marks the cache as degraded rather than the service as down.
    """
    checks = {}

    t0 = time.time()
    try:
        redis_ok = await cache.ping()
        checks["redis"] = {"ok": bool(redis_ok), "latency_ms": round((time.time() - t0) * 1000, 1)}
    except Exception as e:
        checks["redis"] = {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }

    cache_ok = checks["redis"]["ok"]
    return {
        "status": True,
        "message": "ready" if cache_ok else "ready (cache degraded)",
        "overall_ok": cache_ok,
        "checks": checks,
        "environment": settings.environment,
        "timestamp": time.time(),
    }
