"""
Timing of registry operations.

``timed`` wraps a synchronous callable, logs how long it took and warns when
it exceeded ``HOME_REGISTRY_PERF_THRESHOLD_MS``. It can be switched off with
``HOME_REGISTRY_PERF_TRACKING=0``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from home_registry.logging_abstraction import RegistryLogger, get_logger

__all__ = [
    "measure_time",
    "timed",
]

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)


def measure_time(start_time: float) -> float:
    """Milliseconds elapsed since ``start_time`` (a ``time.perf_counter()`` value)."""
    return (time.perf_counter() - start_time) * 1000


def timed(operation_name: str | None = None) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator timing a synchronous function.

    Example:
        @timed("dispatch")
        def handle_line(self, line):
            ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            from home_registry.const import (  # noqa: PLC0415
                HOME_REGISTRY_PERF_THRESHOLD_MS,
                HOME_REGISTRY_PERF_TRACKING,
            )

            if not HOME_REGISTRY_PERF_TRACKING:
                return func(*args, **kwargs)

            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _log_timing(logger, op_name, measure_time(start_time), HOME_REGISTRY_PERF_THRESHOLD_MS)

        return wrapper

    return decorator


def _log_timing(log: RegistryLogger, operation_name: str, elapsed_ms: float, threshold_ms: int) -> None:
    context = {
        "operation": operation_name,
        "duration_ms": round(elapsed_ms, 2),
        "threshold_ms": threshold_ms,
        "exceeded_threshold": elapsed_ms > threshold_ms,
    }
    if elapsed_ms > threshold_ms:
        log.warning(
            "[%s] completed in %.1fms (threshold: %dms)",
            operation_name,
            elapsed_ms,
            threshold_ms,
            extra=context,
        )
    else:
        log.debug("[%s] completed in %.1fms", operation_name, elapsed_ms, extra=context)
