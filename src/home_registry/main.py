"""Entry point and lifecycle for the home registry server."""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import signal
import sys
from pathlib import Path
from typing import Protocol, cast, runtime_checkable

import dotenv

from home_registry import const
from home_registry.config import load_layout
from home_registry.correlation import correlation_context
from home_registry.dispatcher import Dispatcher
from home_registry.exceptions import ConfigError
from home_registry.logging_abstraction import get_logger
from home_registry.metrics import start_metrics_server
from home_registry.server import RegistryServer

if sys.platform != "win32":
    import uvloop

logger = get_logger(__name__)

# asyncio and uvloop report through stdlib logging
_foreign_handler = logging.StreamHandler(sys.stdout)
_foreign_handler.setFormatter(const.FOREIGN_LOG_FORMATTER)
for _name in ("asyncio", "uvloop"):
    _foreign_logger = logging.getLogger(_name)
    _foreign_logger.setLevel(logging.WARNING)
    _foreign_logger.propagate = False
    _foreign_logger.addHandler(_foreign_handler)

MIN_PY_VERSION = (3, 12)


@runtime_checkable
class _CLIArgs(Protocol):
    config: Path | None
    host: str | None
    port: int | None
    env: Path | None
    debug: bool


def check_python_version() -> None:
    if sys.version_info < MIN_PY_VERSION:
        version_message = (
            f"Home registry requires Python {MIN_PY_VERSION[0]}.{MIN_PY_VERSION[1]} or newer; "
            f"detected {sys.version_info.major}.{sys.version_info.minor}"
        )
        raise RuntimeError(version_message)


def enable_debug() -> None:
    """Switch every already-created ``home_registry`` logger and its handlers to DEBUG."""
    for name, existing in logging.root.manager.loggerDict.items():
        if not name.startswith("home_registry") or not isinstance(existing, logging.Logger):
            continue
        existing.setLevel(logging.DEBUG)
        for handler in existing.handlers:
            handler.setLevel(logging.DEBUG)


def load_env_file(env_file: Path) -> bool:
    """Load ``env_file`` over the process environment and re-read settings.

    Returns:
        True if any variable was loaded
    """
    env_path = env_file.expanduser().resolve()
    if not env_path.exists():
        logger.error("Environment file not found", extra={"path": str(env_path)})
        return False
    loaded_any = dotenv.load_dotenv(env_path, override=True)
    if not loaded_any:
        logger.warning("No environment variables loaded from file", extra={"path": str(env_path)})
        return False
    _ = importlib.reload(const)
    logger.info("Environment variables loaded", extra={"source": str(env_path)})
    return True


def parse_cli(argv: list[str] | None = None) -> _CLIArgs:
    """Parse CLI arguments. Options left unset fall back to ``HOME_REGISTRY_*`` settings."""
    parser = argparse.ArgumentParser(prog="home-registry", description="Home device registry server")
    _ = parser.add_argument("--config", type=Path, default=None, help="Path to the home layout YAML file")
    _ = parser.add_argument("--host", default=None, help="Address to listen on")
    _ = parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    _ = parser.add_argument("--env", type=Path, default=None, help="Path to the environment file")
    _ = parser.add_argument("-D", "--debug", action="store_true", help="Enable debug mode")
    args = cast("_CLIArgs", cast("object", parser.parse_args(argv)))

    if args.env:
        _ = load_env_file(args.env)
    if args.debug:
        enable_debug()
        logger.info("Debug mode enabled via CLI argument")
    return args


class RegistryApp:
    """Owns the event loop, the Home and the server for one process run."""

    def __init__(self, args: _CLIArgs) -> None:
        self.config_file = (args.config or Path(const.HOME_REGISTRY_CONFIG)).expanduser().resolve()
        self.host = args.host or const.HOME_REGISTRY_HOST
        self.port = args.port if args.port is not None else const.HOME_REGISTRY_PORT
        self.server: RegistryServer | None = None

        if sys.platform != "win32":
            self.loop: asyncio.AbstractEventLoop = uvloop.new_event_loop()
        else:
            self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        if sys.platform != "win32":
            self.loop.add_signal_handler(signal.SIGINT, self.signal_handler, signal.SIGINT)
            self.loop.add_signal_handler(signal.SIGTERM, self.signal_handler, signal.SIGTERM)
            logger.debug("Signal handlers configured for SIGINT & SIGTERM")

    def signal_handler(self, signum: int) -> None:
        logger.info("Intercepted signal", extra={"signal": signal.Signals(signum).name})
        if self.server is not None:
            _ = self.loop.create_task(self.server.stop())

    async def start(self) -> None:
        """Load the layout, bind and serve until stopped.

        Raises:
            ConfigError: the layout file is invalid
            OSError: the listening address could not be bound
        """
        logger.info("Loading home layout", extra={"config_path": str(self.config_file)})
        home = load_layout(self.config_file)

        if const.HOME_REGISTRY_METRICS_PORT:
            start_metrics_server(const.HOME_REGISTRY_METRICS_PORT)
            logger.info("Metrics server started", extra={"port": const.HOME_REGISTRY_METRICS_PORT})

        self.server = RegistryServer(
            Dispatcher(home),
            host=self.host,
            port=self.port,
            max_line=const.HOME_REGISTRY_MAX_LINE,
        )
        await self.server.start()
        self.server.start_task = asyncio.Task(self.server.serve_forever(), name=const.SERVER_START_TASK_NAME)
        try:
            await self.server.start_task
        except asyncio.CancelledError:
            logger.info("Registry server task finished")

    def run(self) -> None:
        try:
            self.loop.run_until_complete(self.start())
        finally:
            if not self.loop.is_closed():
                self.loop.close()


def main() -> None:
    """Run the home registry server. Exits with status 1 on startup failure."""
    with correlation_context():
        logger.info("Starting home registry", extra={"version": const.HOME_REGISTRY_VERSION})
        args = parse_cli()
        if const.HOME_REGISTRY_DEBUG:
            enable_debug()
            logger.info("Debug logging enabled via configuration")

        check_python_version()
        app = RegistryApp(args)
        try:
            app.run()
        except ConfigError as e:
            logger.error("Invalid home layout", extra={"error": e.reason})
            sys.exit(1)
        except OSError as e:
            logger.error("Could not start server", extra={"host": app.host, "port": app.port, "error": str(e)})
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received, shutting down...")
        else:
            logger.info("Home registry stopped gracefully")
        finally:
            logger.info("Home registry shutdown complete")


if __name__ == "__main__":
    main()
