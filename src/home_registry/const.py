import logging
import os

from home_registry import __version__

__all__ = [
    "DEFAULT_ENCODING",
    "FOREIGN_LOG_FORMATTER",
    "HOME_REGISTRY_CONFIG",
    "HOME_REGISTRY_DEBUG",
    "HOME_REGISTRY_HOST",
    "HOME_REGISTRY_LOG_FORMAT",
    "HOME_REGISTRY_LOG_HUMAN_OUTPUT",
    "HOME_REGISTRY_LOG_JSON_FILE",
    "HOME_REGISTRY_MAX_LINE",
    "HOME_REGISTRY_METRICS_PORT",
    "HOME_REGISTRY_PERF_THRESHOLD_MS",
    "HOME_REGISTRY_PERF_TRACKING",
    "HOME_REGISTRY_PORT",
    "HOME_REGISTRY_VERSION",
    "NAME_SEPARATOR",
    "RECORD_SEPARATOR",
    "RESPONSE_SEPARATOR",
    "SERVER_START_TASK_NAME",
    "YES_ANSWER",
]

YES_ANSWER = ("true", "1", "yes", "y", "t", 1, "on", "o")
HOME_REGISTRY_VERSION: str = __version__

# adds logger name
FOREIGN_LOG_FORMATTER = logging.Formatter(
    "%(asctime)s.%(msecs)d %(levelname)s <%(name)s> [%(module)s:%(lineno)d] > %(message)s",
    "%m/%d/%y %H:%M:%S",
)

# Wire protocol
DEFAULT_ENCODING = "utf-8"
RESPONSE_SEPARATOR = "::"
RECORD_SEPARATOR = ";;;"
NAME_SEPARATOR = ", "
SERVER_START_TASK_NAME = "RegistryServer_START"

HOME_REGISTRY_HOST: str = os.environ.get("HOME_REGISTRY_HOST", "127.0.0.1")
_port = os.environ.get("HOME_REGISTRY_PORT", "9871")
try:
    _port_value: int = int(_port) if _port else 9871
except ValueError:
    _port_value = 9871
HOME_REGISTRY_PORT: int = _port_value
HOME_REGISTRY_CONFIG: str = os.environ.get("HOME_REGISTRY_CONFIG", "home.yaml")

_max_line = os.environ.get("HOME_REGISTRY_MAX_LINE", "4096")
HOME_REGISTRY_MAX_LINE: int = int(_max_line) if _max_line and _max_line.isdigit() else 4096

HOME_REGISTRY_DEBUG: bool = os.environ.get("HOME_REGISTRY_DEBUG", "0").casefold() in YES_ANSWER

# Logging Configuration
HOME_REGISTRY_LOG_FORMAT: str = os.environ.get("HOME_REGISTRY_LOG_FORMAT", "human")  # "json", "human", or "both"
_json_file = os.environ.get("HOME_REGISTRY_LOG_JSON_FILE")
HOME_REGISTRY_LOG_JSON_FILE: str | None = _json_file if _json_file else None
# "stdout", "stderr", or file path
HOME_REGISTRY_LOG_HUMAN_OUTPUT: str = os.environ.get("HOME_REGISTRY_LOG_HUMAN_OUTPUT", "stdout")

# Performance Instrumentation
HOME_REGISTRY_PERF_TRACKING: bool = os.environ.get("HOME_REGISTRY_PERF_TRACKING", "1").casefold() in YES_ANSWER
_perf_threshold = os.environ.get("HOME_REGISTRY_PERF_THRESHOLD_MS", "100")
HOME_REGISTRY_PERF_THRESHOLD_MS: int = (
    int(_perf_threshold) if _perf_threshold and _perf_threshold.isdigit() else 100
)

_metrics_port = os.environ.get("HOME_REGISTRY_METRICS_PORT", "0")
HOME_REGISTRY_METRICS_PORT: int = int(_metrics_port) if _metrics_port and _metrics_port.isdigit() else 0
