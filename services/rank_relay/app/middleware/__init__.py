"""Middleware components for Rank Relay."""

from services.rank_relay.app.middleware.correlation import CorrelationMiddleware

__all__ = [
    "CorrelationMiddleware",
]
