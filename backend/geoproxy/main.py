"""GeoProxy FastAPI Application.

Main entry point for the geolocation proxy server.
"""

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from geoproxy.api import router
from geoproxy.config import Settings, load_settings
from geoproxy.models import GeoProxyError
from geoproxy.services import GeolocationService, GeoProxyService, GoogleGeolocationService
from geoproxy.utils import LocationCache, SlidingWindowRateLimiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    geolocation_service: GeolocationService | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Build the application and its process-lifetime stores.

    Args:
        settings: Configuration to use. Loaded from the environment if omitted.
        geolocation_service: Provider client. Defaults to the Google client
            built from ``settings``.
        clock: Source of "now" in epoch seconds, shared by cache and limiter.
    """
    if settings is None:
        settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    if geolocation_service is None:
        geolocation_service = GoogleGeolocationService(
            api_key=settings.google_api_key,
            url=settings.geolocation_api_url,
            timeout=settings.upstream_timeout_s,
        )

    proxy_service = GeoProxyService(
        settings=settings,
        geolocation=geolocation_service,
        cache=LocationCache(),
        rate_limiter=SlidingWindowRateLimiter(),
        clock=clock,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info(
            f"[APP] Ready: cache_ttl={settings.cache_ttl_hours}h, "
            f"max_requests_per_day={settings.max_requests_per_day}"
        )
        yield
        await geolocation_service.close()

    app = FastAPI(
        title="GeoProxy API",
        description="WiFi scan to location proxy with per-client cache and daily quota",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.proxy_service = proxy_service

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        """Log method, path, status and latency for every request."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"[HTTP] {request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms)"
        )
        return response

    @app.exception_handler(GeoProxyError)
    async def geo_proxy_exception_handler(request: Request, exc: GeoProxyError):
        """Render proxy errors as plain text with their mapped status."""
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        logger.exception(f"[APP] Unhandled error on {request.url.path}")
        return PlainTextResponse(f"Internal error: {exc}", status_code=500)

    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = load_settings()
    logger.info(f"[APP] Server running at http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
