"""
Application entrypoint: lifespan wiring, middleware and error envelopes.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.infrastructure.observability.logging import get_logger, log_request, setup_logging
from app.middleware import RequestContextMiddleware
from app.models.api.profile_response import ErrorResponse
from app.models.domain.profile_domain import ProfileQueryError
from app.routes import batch, cache, health, profiles
from app.routes.health import AVAILABLE_ENDPOINTS
from app.services.batch_service import BatchValidationError
from app.services.cache import CacheUnavailableError, RedisCacheStore
from app.services.dependencies import build_services
from app.services.fetchers import BrowserSessionFactory

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire services on startup; release Redis and the browser on shutdown."""

    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    redis_cache = RedisCacheStore(settings.REDIS_URL)
    browser_sessions = BrowserSessionFactory()

    try:
        await redis_cache.initialize()
    except CacheUnavailableError as e:
        # Requests fall through to upstream fetches; the client retries on use.
        logger.warning("Starting without Redis cache", error=str(e))

    app.state.services = build_services(redis_cache, browser_sessions)
    logger.info("All services initialized")

    yield

    logger.info("Application shutting down")

    shutdown_errors = []

    try:
        await browser_sessions.close()
    except Exception as e:
        logger.error("Error closing headless browser", error=str(e))
        shutdown_errors.append(f"Browser: {e}")

    try:
        await redis_cache.close()
    except Exception as e:
        logger.error("Error closing Redis", error=str(e))
        shutdown_errors.append(f"Redis: {e}")

    if shutdown_errors:
        logger.warning("Some services had shutdown errors", errors=shutdown_errors)
    else:
        logger.info("All services closed successfully")


app = FastAPI(
    title="Profile Stats API",
    description="Cached GitHub and LeetCode profile statistics",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(profiles.router)
app.include_router(batch.router)
app.include_router(cache.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


# =================================================================
# ERROR ENVELOPES - every error body is {status: false, message, ...}
# =================================================================


@app.exception_handler(ProfileQueryError)
async def profile_query_error_handler(request: Request, exc: ProfileQueryError):
    return JSONResponse(status_code=400, content=ErrorResponse(message=str(exc)).to_json())


@app.exception_handler(BatchValidationError)
async def batch_validation_error_handler(request: Request, exc: BatchValidationError):
    return JSONResponse(status_code=400, content=ErrorResponse(message=str(exc)).to_json())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=400, content=ErrorResponse(message=f"Invalid request: {detail}").to_json()
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # A known path with the wrong method is still an unmatched route.
    if exc.status_code in (404, 405):
        body = ErrorResponse(
            message=f"Route {request.method} {request.url.path} not found",
            available_endpoints=AVAILABLE_ENDPOINTS,
        )
        return JSONResponse(status_code=404, content=body.to_json())
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.to_json(), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    message = str(exc) if settings.is_development() else "Internal server error"
    return JSONResponse(status_code=500, content=ErrorResponse(message=message).to_json())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
