"""Logging abstraction layer for the home registry.

Wraps stdlib logging with two formatters (JSON lines for machines, a compact
text line for humans), both stamped with the current request correlation id,
and a small logger facade that accepts structured context via ``extra``.

Output is selected with ``HOME_REGISTRY_LOG_FORMAT``:

- ``human``: text lines to ``HOME_REGISTRY_LOG_HUMAN_OUTPUT``
- ``json``: JSON lines to ``HOME_REGISTRY_LOG_JSON_FILE``
- ``both``: both of the above
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import cast, override

from home_registry.correlation import get_correlation_id

__all__ = [
    "HumanReadableFormatter",
    "JSONFormatter",
    "RegistryLogger",
    "get_logger",
    "open_log_target",
]

NO_CORRELATION = "[--------]"
HUMAN_DATEFMT = "%m/%d/%y %H:%M:%S"


def _context_of(record: logging.LogRecord) -> Mapping[str, object] | None:
    context = getattr(record, "extra_data", None)
    if isinstance(context, Mapping) and context:
        return cast("Mapping[str, object]", context)
    return None


def _split_correlation(correlation_id: str | None) -> tuple[str | None, int | None]:
    """``"ab12cd34-0007"`` → ``("ab12cd34", 7)``; a bare connection id has no sequence."""
    if not correlation_id:
        return None, None
    connection, _, sequence = correlation_id.partition("-")
    return connection, int(sequence) if sequence.isdigit() else None


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the connection and request sequence split out."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        correlation_id = get_correlation_id()
        connection_id, request_seq = _split_correlation(correlation_id)
        entry: dict[str, object] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "line": record.lineno,
            "message": record.getMessage(),
            "correlation_id": correlation_id,
            "connection_id": connection_id,
            "request_seq": request_seq,
        }
        if (context := _context_of(record)) is not None:
            entry["context"] = dict(context)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """``timestamp level [module:line] [correlation] > message | k=v``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(module)s:%(lineno)d] %(correlation_id)s > %(message)s",
            datefmt=HUMAN_DATEFMT,
        )

    @override
    def format(self, record: logging.LogRecord) -> str:
        correlation_id = get_correlation_id()
        record.correlation_id = f"[{correlation_id}]" if correlation_id else NO_CORRELATION
        line = super().format(record)
        if (context := _context_of(record)) is None:
            return line
        return " | ".join([line, *(f"{key}={value}" for key, value in context.items())])


def open_log_target(target: str | Path) -> logging.Handler:
    """Handler writing to ``"stdout"``, ``"stderr"`` or an appended file.

    Raises:
        OSError: the file or its directory cannot be created
    """
    if target == "stdout":
        return logging.StreamHandler(sys.stdout)
    if target == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


class RegistryLogger:
    """Logger facade taking structured context through ``extra``.

    Handlers are attached once per logger name, so repeated ``get_logger``
    calls for the same module do not duplicate output.
    """

    def __init__(
        self,
        name: str,
        log_format: str = "human",
        json_file: str | Path | None = None,
        human_output: str | None = "stdout",
        level: int = logging.INFO,
    ) -> None:
        self.name: str = name
        self.log_format: str = log_format
        self.logger: logging.Logger = logging.getLogger(name)
        self.logger.setLevel(level)
        if not self.logger.handlers:
            for target, formatter in self._outputs(json_file, human_output):
                self._attach(target, formatter)

    def _outputs(
        self,
        json_file: str | Path | None,
        human_output: str | None,
    ) -> list[tuple[str | Path, logging.Formatter]]:
        outputs: list[tuple[str | Path, logging.Formatter]] = []
        if self.log_format in ("json", "both") and json_file:
            outputs.append((json_file, JSONFormatter()))
        if self.log_format in ("human", "both"):
            outputs.append((human_output or "stdout", HumanReadableFormatter()))
        return outputs

    def _attach(self, target: str | Path, formatter: logging.Formatter) -> None:
        try:
            handler = open_log_target(target)
        except OSError as e:
            print(f"Warning: cannot open log target {target}: {e}; using stderr", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        handler.setLevel(self.logger.level)
        self.logger.addHandler(handler)

    def _log(self, level: int, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        payload = {"extra_data": dict(extra)} if extra else None
        self.logger.log(level, msg, *args, extra=payload, stacklevel=3)

    def debug(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.DEBUG, msg, *args, extra=extra)

    def info(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.INFO, msg, *args, extra=extra)

    def warning(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.WARNING, msg, *args, extra=extra)

    def error(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.ERROR, msg, *args, extra=extra)

    def exception(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        """Log at ERROR with the active exception's traceback."""
        payload = {"extra_data": dict(extra)} if extra else None
        self.logger.exception(msg, *args, extra=payload, stacklevel=2)

    def set_level(self, level: int) -> None:
        """Set the level on the logger and every attached handler."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    @property
    def handlers(self) -> list[logging.Handler]:
        return self.logger.handlers


def get_logger(
    name: str,
    log_format: str | None = None,
    json_file: str | Path | None = None,
    human_output: str | None = None,
) -> RegistryLogger:
    """Get a RegistryLogger configured from ``HOME_REGISTRY_LOG_*`` unless overridden."""
    from home_registry.const import (  # noqa: PLC0415
        HOME_REGISTRY_DEBUG,
        HOME_REGISTRY_LOG_FORMAT,
        HOME_REGISTRY_LOG_HUMAN_OUTPUT,
        HOME_REGISTRY_LOG_JSON_FILE,
    )

    return RegistryLogger(
        name=name,
        log_format=log_format or HOME_REGISTRY_LOG_FORMAT,
        json_file=json_file or HOME_REGISTRY_LOG_JSON_FILE,
        human_output=human_output or HOME_REGISTRY_LOG_HUMAN_OUTPUT,
        level=logging.DEBUG if HOME_REGISTRY_DEBUG else logging.INFO,
    )
