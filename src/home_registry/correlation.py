"""
Correlation ids for request tracing.

Each accepted connection gets a connection id and every request line served on
it gets ``<connection id>-<sequence>``. The id lives in a context variable so
the logger can stamp it on every record emitted while the request is handled,
without threading it through the registry API.
"""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Generator
from contextlib import contextmanager

__all__ = [
    "correlation_context",
    "generate_connection_id",
    "get_correlation_id",
    "request_correlation_id",
    "set_correlation_id",
]

CONNECTION_ID_LENGTH = 8

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)


def generate_connection_id() -> str:
    """Return a short random hex id for a new connection."""
    return uuid.uuid4().hex[:CONNECTION_ID_LENGTH]


def request_correlation_id(connection_id: str, sequence: int) -> str:
    """Build the id for the ``sequence``-th request served on ``connection_id``."""
    return f"{connection_id}-{sequence:04d}"


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str]:
    """
    Scope a correlation id to a block, restoring the previous one on exit.

    A fresh connection-style id is generated when none is given.

    Example:
        with correlation_context(request_correlation_id(conn_id, 3)):
            dispatcher.handle_line(line)
    """
    token = _correlation_id.set(correlation_id or generate_connection_id())
    try:
        yield _correlation_id.get() or ""
    finally:
        _correlation_id.reset(token)
