"""Async client for the registry's token protocol."""

from __future__ import annotations

import asyncio
import time
from types import TracebackType

from home_registry.const import HOME_REGISTRY_HOST, HOME_REGISTRY_PORT, NAME_SEPARATOR, RECORD_SEPARATOR
from home_registry.exceptions import RemoteError
from home_registry.logging_abstraction import get_logger
from home_registry.protocol import Command, CommandKind, Response, decode_response, encode_request

__all__ = ["HomeClient"]

logger = get_logger(__name__)


class HomeClient:
    """One TCP connection to a registry server.

    Use as an async context manager::

        async with HomeClient("127.0.0.1", 9871) as client:
            await client.turn_on("socket1")
            print(await client.status_device("socket1"))

    Every call sends one request line and waits for its response line.
    ``Error::<reason>`` responses raise ``RemoteError`` carrying the reason.
    """

    def __init__(
        self,
        host: str = HOME_REGISTRY_HOST,
        port: int = HOME_REGISTRY_PORT,
        connect_timeout: float = 2.0,
        io_timeout: float = 5.0,
    ) -> None:
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.io_timeout = io_timeout
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """Open the connection.

        Raises:
            OSError: connection refused or unreachable
            TimeoutError: no connection within ``connect_timeout``
        """
        start_time = time.perf_counter()
        self.reader, self.writer = await asyncio.wait_for(
            asyncio.open_connection(self.host, self.port),
            timeout=self.connect_timeout,
        )
        logger.debug(
            "Connected to registry",
            extra={
                "host": self.host,
                "port": self.port,
                "elapsed_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )

    async def close(self) -> None:
        if self.writer is None:
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except ConnectionError as e:
            logger.debug("Connection already gone on close", extra={"error": str(e)})
        finally:
            self.reader = None
            self.writer = None

    async def __aenter__(self) -> HomeClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def request(self, line: str) -> Response:
        """Send a raw request line and return the parsed response, success or not.

        Raises:
            ConnectionError: not connected, or the server closed the connection
            ResponseParseError: the server sent something that is not a response
        """
        if self.reader is None or self.writer is None:
            msg = "HomeClient is not connected"
            raise ConnectionError(msg)
        async with self._lock:
            self.writer.write(encode_request(line))
            await asyncio.wait_for(self.writer.drain(), timeout=self.io_timeout)
            raw = await asyncio.wait_for(self.reader.readline(), timeout=self.io_timeout)
        if not raw:
            msg = "Registry server closed the connection"
            raise ConnectionError(msg)
        return Response.parse(decode_response(raw))

    async def _call(self, command: Command) -> str | None:
        response = await self.request(command.to_line())
        if not response.success:
            raise RemoteError(response.reason)
        return response.payload

    async def get_device_names(self) -> list[str]:
        payload = await self._call(Command(CommandKind.LIST_DEVICES))
        return payload.split(NAME_SEPARATOR) if payload else []

    async def status_all(self) -> list[str]:
        """Reports of every device in the home, in registry order."""
        payload = await self._call(Command(CommandKind.STATUS_ALL))
        return payload.split(RECORD_SEPARATOR) if payload else []

    async def status_device(self, device_name: str) -> str:
        return await self._call(Command(CommandKind.STATUS_DEVICE, device_name=device_name)) or ""

    async def turn_on(self, device_name: str) -> None:
        _ = await self._call(Command(CommandKind.TURN_ON, device_name=device_name))

    async def turn_off(self, device_name: str) -> None:
        _ = await self._call(Command(CommandKind.TURN_OFF, device_name=device_name))
