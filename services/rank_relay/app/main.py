"""Rank Relay Service - FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.rank_relay.app.api import health_router, promote_router
from services.rank_relay.app.api.health import HEALTH_METHODS
from services.rank_relay.app.api.promote import PROMOTE_METHODS
from services.rank_relay.app.api.responses import error_json, relay_json
from services.rank_relay.app.config import get_settings
from services.rank_relay.app.core.errors import MethodNotAllowedError, unhandled_response
from services.rank_relay.app.middleware import CorrelationMiddleware
from shared.utils.logging import configure_logging, get_logger
from shared.utils.metrics import MetricsMiddleware, metrics_endpoint

VERSION = "0.1.0"

settings = get_settings()

# Configure logging
configure_logging(
    service_name=settings.SERVICE_NAME,
    log_level=settings.LOG_LEVEL,
    json_format=settings.LOG_JSON,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "starting_service",
        service=settings.SERVICE_NAME,
        open_cloud_key_configured=settings.has_open_cloud_key,
        cloud_api=settings.CLOUD_API_BASE_URL,
        groups_api=settings.GROUPS_API_BASE_URL,
    )
    if not settings.has_open_cloud_key:
        logger.warning("open_cloud_key_missing")

    yield

    logger.info("service_shutdown_complete")


app = FastAPI(
    title="Rank Relay",
    description="Relays group rank changes to the Open Cloud v2 or Groups v1 API",
    version=VERSION,
    lifespan=lifespan,
)

# Add correlation ID middleware
app.add_middleware(CorrelationMiddleware)

# Add metrics middleware
app.add_middleware(MetricsMiddleware)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer verbs the router rejects the same way the routes do."""
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await http_exception_handler(request, exc)

    allowed = HEALTH_METHODS if request.url.path.endswith("/health") else PROMOTE_METHODS
    return error_json(MethodNotAllowedError(request.method, allowed), allowed_methods=allowed)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for faults raised outside the route bodies."""
    logger.exception(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
    )
    return relay_json(
        unhandled_response(exc),
        status_code=500,
        allowed_methods=PROMOTE_METHODS,
    )


# Routes are served both under the API prefix and at the root
app.include_router(health_router, prefix=settings.API_PREFIX)
app.include_router(promote_router, prefix=settings.API_PREFIX)
app.include_router(health_router)
app.include_router(promote_router)

# Add metrics endpoint
app.add_route("/metrics", metrics_endpoint)


@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": settings.SERVICE_NAME,
        "version": VERSION,
        "status": "Rank relay running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.rank_relay.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
