"""Unit tests for the logging abstraction."""

from __future__ import annotations

import json
import logging

from home_registry.correlation import correlation_context
from home_registry.logging_abstraction import (
    HumanReadableFormatter,
    JSONFormatter,
    RegistryLogger,
    get_logger,
    open_log_target,
)


def make_record(msg: str = "Device turned on", extra: dict[str, object] | None = None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="home_registry.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    if extra is not None:
        record.extra_data = extra
    return record


class TestFormatters:
    """Tests for JSON and human formatters."""

    def test_json_includes_context_and_correlation(self):
        """Test JSON records carry the message, context and correlation id."""
        with correlation_context("abcd1234-0001"):
            line = JSONFormatter().format(make_record(extra={"device": "s1"}))
        data = json.loads(line)
        assert data["message"] == "Device turned on"
        assert data["level"] == "INFO"
        assert data["correlation_id"] == "abcd1234-0001"
        assert data["context"] == {"device": "s1"}
        assert data["connection_id"] == "abcd1234"
        assert data["request_seq"] == 1

    def test_human_appends_context(self):
        """Test human lines end with key=value context."""
        with correlation_context("abcd1234-0001"):
            line = HumanReadableFormatter().format(make_record(extra={"device": "s1", "room": "r1"}))
        assert "[abcd1234-0001]" in line
        assert line.endswith("> Device turned on | device=s1 | room=r1")

    def test_human_without_correlation(self):
        """Test a placeholder is shown outside any correlation context."""
        line = HumanReadableFormatter().format(make_record())
        assert "[--------]" in line


class TestRegistryLogger:
    """Tests for the logger facade."""

    def test_json_file_output(self, tmp_path):
        """Test json format writes one object per line to the file."""
        log_file = tmp_path / "logs" / "registry.json"
        log = RegistryLogger("home_registry.test_json_file", log_format="json", json_file=log_file)
        log.info("Request rejected", extra={"reason": "unknown command"})
        for handler in log.handlers:
            handler.flush()

        data = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert data["message"] == "Request rejected"
        assert data["context"] == {"reason": "unknown command"}

    def test_handlers_not_duplicated(self):
        """Test repeated get_logger calls reuse the configured handlers."""
        first = get_logger("home_registry.test_dedup", log_format="human")
        second = get_logger("home_registry.test_dedup", log_format="human")
        assert len(second.handlers) == len(first.handlers) == 1

    def test_set_level_updates_handlers(self):
        """Test set_level applies to the logger and its handlers."""
        log = get_logger("home_registry.test_level", log_format="human")
        log.set_level(logging.DEBUG)
        assert log.logger.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in log.handlers)

    def test_extra_reaches_records(self, caplog):
        """Test structured context is attached to emitted records."""
        log = get_logger("home_registry.test_extra", log_format="human")
        with caplog.at_level(logging.INFO, logger="home_registry.test_extra"):
            log.warning("Slow dispatch", extra={"duration_ms": 150})
        record = caplog.records[-1]
        assert record.getMessage() == "Slow dispatch"
        assert record.extra_data == {"duration_ms": 150}


class TestOpenLogTarget:
    """Tests for resolving log targets to handlers."""

    def test_standard_streams(self):
        """Test stdout and stderr map to stream handlers."""
        assert isinstance(open_log_target("stdout"), logging.StreamHandler)
        assert isinstance(open_log_target("stderr"), logging.StreamHandler)

    def test_file_target_creates_directory(self, tmp_path):
        """Test a path target creates missing parent directories."""
        handler = open_log_target(tmp_path / "nested" / "registry.log")
        try:
            assert isinstance(handler, logging.FileHandler)
            assert (tmp_path / "nested").is_dir()
        finally:
            handler.close()

    def test_unwritable_target_falls_back_to_stderr(self, tmp_path):
        """Test a logger whose target cannot be opened still gets a handler."""
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        log = RegistryLogger("home_registry.test_fallback", human_output=str(blocker / "sub" / "x.log"))
        assert len(log.handlers) == 1
        assert isinstance(log.handlers[0], logging.StreamHandler)
