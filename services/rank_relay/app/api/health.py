"""Health check route."""

from fastapi import APIRouter, Request, Response, status

from services.rank_relay.app.api.responses import empty_response, error_json, relay_json
from services.rank_relay.app.core.errors import MethodNotAllowedError
from services.rank_relay.app.dependencies import AppSettings

router = APIRouter(tags=["Health"])

HEALTH_METHODS = ("GET", "HEAD", "OPTIONS")
NO_STORE = {"cache-control": "no-store"}


@router.api_route(
    "/health",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def health_check(request: Request, settings: AppSettings) -> Response:
    """Liveness check that reports whether the upstream credential is configured.

    Does not contact the upstream APIs.
    """
    if request.method == "OPTIONS":
        return empty_response(status.HTTP_204_NO_CONTENT, HEALTH_METHODS, NO_STORE)
    if request.method == "HEAD":
        return empty_response(status.HTTP_200_OK, HEALTH_METHODS, NO_STORE)
    if request.method != "GET":
        error = MethodNotAllowedError(request.method, HEALTH_METHODS)
        return error_json(error, allowed_methods=HEALTH_METHODS, extra_headers=NO_STORE)

    return relay_json(
        {"ok": True, "env": settings.has_open_cloud_key},
        status_code=status.HTTP_200_OK,
        allowed_methods=HEALTH_METHODS,
        extra_headers=NO_STORE,
    )
