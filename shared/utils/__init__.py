"""Shared utilities for the rank relay service."""

from shared.utils.logging import configure_logging, get_correlation_id, get_logger, set_correlation_id
from shared.utils.metrics import MetricsMiddleware, metrics_endpoint, record_upstream_attempt

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "MetricsMiddleware",
    "metrics_endpoint",
    "record_upstream_attempt",
]
