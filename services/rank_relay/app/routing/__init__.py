"""Upstream attempt construction and execution."""

from services.rank_relay.app.routing.attempts import ATTEMPT_TEMPLATES, AttemptTemplate, build_attempts
from services.rank_relay.app.routing.upstream import UpstreamClient

__all__ = [
    "ATTEMPT_TEMPLATES",
    "AttemptTemplate",
    "UpstreamClient",
    "build_attempts",
]
