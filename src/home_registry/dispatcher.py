"""Per-request command execution against a Home.

The dispatcher is stateless across requests: one line in, one response line
out. Executing a command, report rendering included, runs under a single
registry lock, so concurrent transports never interleave a read-modify-write
on the same device.
"""

from __future__ import annotations

import threading
import time

from home_registry.const import NAME_SEPARATOR, RECORD_SEPARATOR
from home_registry.exceptions import ProtocolError, RegistryError
from home_registry.instrumentation import timed
from home_registry.logging_abstraction import get_logger
from home_registry.metrics import record_dispatch_latency, record_lock_hold, record_request
from home_registry.protocol import Command, CommandKind, Response, parse_request
from home_registry.protocol.request import MISSING_DEVICE_NAME
from home_registry.registry import DeviceLocator, Home

__all__ = [
    "INTERNAL_ERROR",
    "Dispatcher",
]

logger = get_logger(__name__)

INTERNAL_ERROR = "internal error"


class Dispatcher:
    """Executes protocol commands against one explicitly owned Home.

    Devices are addressed by name only. When several rooms hold a device with
    the same name, the first room in insertion order wins.
    """

    def __init__(self, home: Home) -> None:
        self._home = home
        self._lock = threading.Lock()

    @property
    def home(self) -> Home:
        return self._home

    @timed("dispatch")
    def handle_line(self, line: str) -> str:
        """Parse, execute and format one request line. Never raises on client input."""
        return self.execute(parse_request(line)).format()

    def execute(self, command: Command) -> Response:
        started = time.perf_counter()
        with self._lock:
            locked_at = time.perf_counter()
            try:
                response = self._execute_locked(command)
            except RegistryError as e:
                response = Response.error(e.reason)
            except Exception:
                logger.exception("Unexpected failure executing command", extra={"command": command.kind.value})
                response = Response.error(INTERNAL_ERROR)
            finally:
                record_lock_hold(time.perf_counter() - locked_at)

        outcome = "ok" if response.success else "error"
        record_request(command.kind.value, outcome)
        record_dispatch_latency(command.kind.value, time.perf_counter() - started)
        if not response.success:
            logger.info(
                "Request rejected",
                extra={"command": command.kind.value, "device": command.device_name, "reason": response.reason},
            )
        return response

    def _execute_locked(self, command: Command) -> Response:
        match command.kind:
            case CommandKind.LIST_DEVICES:
                return Response.ok(NAME_SEPARATOR.join(self._home.device_names()))
            case CommandKind.STATUS_ALL:
                return Response.ok(RECORD_SEPARATOR.join(device.report() for device in self._home.devices()))
            case CommandKind.STATUS_DEVICE:
                return Response.ok(self._home.device_report(self._locate(command)))
            case CommandKind.TURN_ON:
                locator = self._locate(command)
                self._home.turn_on(locator)
                logger.info("Device turned on", extra={"device": locator.device_name, "room": locator.room_name})
                return Response.ok()
            case CommandKind.TURN_OFF:
                locator = self._locate(command)
                self._home.turn_off(locator)
                logger.info("Device turned off", extra={"device": locator.device_name, "room": locator.room_name})
                return Response.ok()
            case CommandKind.ERROR:
                return Response.error(command.reason)

    def _locate(self, command: Command) -> DeviceLocator:
        if command.device_name is None:
            raise ProtocolError(MISSING_DEVICE_NAME)
        return self._home.locate(command.device_name)
