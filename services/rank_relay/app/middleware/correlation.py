"""Correlation ID middleware for request tracing."""

from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.utils.logging import set_correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Tag each request, its log lines and its response with a correlation ID."""

    CORRELATION_ID_HEADER = "X-Correlation-ID"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Process request with correlation ID.

        Reuses the caller's X-Correlation-ID header when present, otherwise
        generates one. Method and path are bound to the log context for the
        lifetime of the request.
        """
        correlation_id = set_correlation_id(request.headers.get(self.CORRELATION_ID_HEADER))
        request.state.correlation_id = correlation_id

        with structlog.contextvars.bound_contextvars(
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)

        response.headers[self.CORRELATION_ID_HEADER] = correlation_id
        return response
