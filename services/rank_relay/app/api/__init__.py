"""API routes for Rank Relay."""

from services.rank_relay.app.api.health import router as health_router
from services.rank_relay.app.api.promote import router as promote_router

__all__ = [
    "health_router",
    "promote_router",
]
