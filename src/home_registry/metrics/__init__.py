"""Metrics module."""

from .registry import (
    record_connection_closed,
    record_connection_opened,
    record_dispatch_latency,
    record_lock_hold,
    record_request,
    start_metrics_server,
)

__all__ = [
    "record_connection_closed",
    "record_connection_opened",
    "record_dispatch_latency",
    "record_lock_hold",
    "record_request",
    "start_metrics_server",
]
