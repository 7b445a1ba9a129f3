"""JSON responses carrying the relay's fixed CORS headers."""

from fastapi import Response
from fastapi.responses import JSONResponse

from services.rank_relay.app.core.errors import RelayError
from services.rank_relay.app.core.schemas import RelayResponse

CORS_ALLOW_HEADERS = "content-type, x-requested-with"


def cors_headers(
    allowed_methods: tuple[str, ...],
    include_allow: bool = False,
) -> dict[str, str]:
    """Build the headers every reply carries.

    Args:
        allowed_methods: Methods the endpoint accepts
        include_allow: Also set the ``allow`` header (405 and preflight replies)
    """
    methods = ", ".join(allowed_methods)
    headers = {
        "access-control-allow-origin": "*",
        "access-control-allow-headers": CORS_ALLOW_HEADERS,
        "access-control-allow-methods": methods,
    }
    if include_allow:
        headers["allow"] = methods
    return headers


def relay_json(
    body: RelayResponse | dict,
    status_code: int,
    allowed_methods: tuple[str, ...],
    include_allow: bool = False,
    extra_headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render a relay reply as JSON with CORS headers."""
    content = body.to_wire() if isinstance(body, RelayResponse) else body
    headers = cors_headers(allowed_methods, include_allow=include_allow)
    if extra_headers:
        headers.update(extra_headers)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def error_json(
    error: RelayError,
    allowed_methods: tuple[str, ...],
    extra_headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render a RelayError with its own status code."""
    # allow is disclosed on client errors, not on upstream or server failures
    include_allow = 400 <= error.status_code < 500
    return relay_json(
        error.to_response(),
        status_code=error.status_code,
        allowed_methods=allowed_methods,
        include_allow=include_allow,
        extra_headers=extra_headers,
    )


def empty_response(
    status_code: int,
    allowed_methods: tuple[str, ...],
    extra_headers: dict[str, str] | None = None,
) -> Response:
    """Bodyless reply with CORS headers (HEAD, 204 preflight)."""
    headers = cors_headers(allowed_methods, include_allow=True)
    if extra_headers:
        headers.update(extra_headers)
    return Response(status_code=status_code, headers=headers)
