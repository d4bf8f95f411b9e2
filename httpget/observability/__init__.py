"""Observability module for logging and metrics."""

from httpget.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from httpget.observability.metrics import TransferMetrics


__all__ = [
    "TransferMetrics",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
]
