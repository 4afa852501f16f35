"""Prometheus metrics registry for the home registry server."""

import threading
from typing import Final

from prometheus_client import (  # type: ignore[import-untyped]
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

# Metric definitions
home_registry_requests_total: Final = Counter(  # type: ignore[assignment]
    "home_registry_requests_total",
    "Total protocol requests dispatched",
    ["command", "outcome"],
)

home_registry_dispatch_seconds: Final = Histogram(  # type: ignore[assignment]
    "home_registry_dispatch_seconds",
    "Time from parsed request to formatted response",
    ["command"],
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5),
)

home_registry_lock_hold_seconds: Final = Histogram(  # type: ignore[assignment]
    "home_registry_lock_hold_seconds",
    "Registry lock hold duration in seconds",
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)

home_registry_connections_total: Final = Counter(  # type: ignore[assignment]
    "home_registry_connections_total",
    "Total client connections by how they ended",
    ["outcome"],
)

home_registry_active_connections: Final = Gauge(  # type: ignore[assignment]
    "home_registry_active_connections",
    "Currently open client connections",
)

_server_state = {"started": False}
_server_lock = threading.Lock()


def start_metrics_server(port: int) -> None:
    """Start Prometheus HTTP metrics server (idempotent)."""
    with _server_lock:
        if not _server_state["started"]:
            start_http_server(port)  # type: ignore[no-untyped-call]
            _server_state["started"] = True


def record_request(command: str, outcome: str) -> None:
    """Record a dispatched request; outcome is "ok" or "error"."""
    home_registry_requests_total.labels(command=command, outcome=outcome).inc()  # type: ignore[no-untyped-call]


def record_dispatch_latency(command: str, seconds: float) -> None:
    home_registry_dispatch_seconds.labels(command=command).observe(seconds)  # type: ignore[no-untyped-call]


def record_lock_hold(hold_seconds: float) -> None:
    home_registry_lock_hold_seconds.observe(hold_seconds)  # type: ignore[no-untyped-call]


def record_connection_opened() -> None:
    home_registry_active_connections.inc()  # type: ignore[no-untyped-call]


def record_connection_closed(outcome: str) -> None:
    """Record a connection ending; outcome is "eof", "line_too_long", "reset", "cancelled" or "error"."""
    home_registry_active_connections.dec()  # type: ignore[no-untyped-call]
    home_registry_connections_total.labels(outcome=outcome).inc()  # type: ignore[no-untyped-call]
