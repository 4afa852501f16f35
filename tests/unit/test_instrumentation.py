"""Unit tests for timing instrumentation."""

from __future__ import annotations

import logging
import time

import pytest

from home_registry import const
from home_registry.instrumentation import measure_time, timed


def test_measure_time_in_milliseconds():
    """Test elapsed time is reported in milliseconds."""
    start = time.perf_counter() - 0.05
    assert measure_time(start) >= 50


def test_timed_returns_result_and_logs(caplog, monkeypatch):
    """Test the wrapped value passes through and timing is logged."""
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_TRACKING", True)
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_THRESHOLD_MS", 10_000)

    @timed("square")
    def square(x: int) -> int:
        return x * x

    with caplog.at_level(logging.DEBUG, logger="home_registry.instrumentation"):
        assert square(4) == 16
    assert any("[square] completed" in r.getMessage() for r in caplog.records)


def test_timed_warns_over_threshold(caplog, monkeypatch):
    """Test operations slower than the threshold log a warning."""
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_TRACKING", True)
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_THRESHOLD_MS", 0)

    @timed()
    def slow() -> None:
        time.sleep(0.01)

    slow()
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings
    assert warnings[-1].extra_data["operation"] == "slow"
    assert warnings[-1].extra_data["exceeded_threshold"] is True


def test_timed_disabled(caplog, monkeypatch):
    """Test nothing is logged when tracking is off."""
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_TRACKING", False)

    @timed("quiet")
    def quiet() -> str:
        return "done"

    with caplog.at_level(logging.DEBUG, logger="home_registry.instrumentation"):
        assert quiet() == "done"
    assert not any("[quiet]" in r.getMessage() for r in caplog.records)


def test_timed_propagates_exceptions(monkeypatch):
    """Test exceptions from the wrapped function are not swallowed."""
    monkeypatch.setattr(const, "HOME_REGISTRY_PERF_TRACKING", True)

    @timed("boom")
    def boom() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    with pytest.raises(RuntimeError, match="boom"):
        boom()
