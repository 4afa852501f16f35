"""TCP line server exposing a Dispatcher over the token protocol."""

from __future__ import annotations

import asyncio
import contextlib
from typing import cast

from home_registry.const import HOME_REGISTRY_HOST, HOME_REGISTRY_MAX_LINE, HOME_REGISTRY_PORT
from home_registry.correlation import (
    correlation_context,
    generate_connection_id,
    request_correlation_id,
)
from home_registry.dispatcher import Dispatcher
from home_registry.logging_abstraction import get_logger
from home_registry.metrics import record_connection_closed, record_connection_opened
from home_registry.protocol import Response, decode_request, encode_response

__all__ = [
    "REQUEST_TOO_LONG",
    "RegistryServer",
]

logger = get_logger(__name__)

REQUEST_TOO_LONG = "request too long"


class RegistryServer:
    """Serve one request line → one response line per connection, until EOF.

    Each connection keeps reading requests in order; a request line longer than
    ``max_line`` bytes is answered with ``Error::request too long`` and the
    connection is closed.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        host: str = HOME_REGISTRY_HOST,
        port: int = HOME_REGISTRY_PORT,
        max_line: int = HOME_REGISTRY_MAX_LINE,
    ) -> None:
        self.dispatcher = dispatcher
        self.host = host
        self.port = port
        self.max_line = max_line
        self.running = False
        self.start_task: asyncio.Task[None] | None = None
        self._server: asyncio.Server | None = None
        self._connections: set[asyncio.Task[None]] = set()

    @property
    def bound_port(self) -> int | None:
        """Port actually bound, useful when started with port 0."""
        if self._server is None or not self._server.sockets:
            return None
        return cast("tuple[str, int]", self._server.sockets[0].getsockname())[1]

    async def start(self) -> None:
        """Bind the listening socket.

        Raises:
            OSError: the address could not be bound
        """
        try:
            self._server = await asyncio.start_server(
                self._handle_connection,
                host=self.host,
                port=self.port,
                limit=self.max_line,
            )
        except OSError as e:
            logger.error(
                "Failed to bind registry server",
                extra={"host": self.host, "port": self.port, "error": str(e)},
            )
            raise
        self.running = True
        logger.info(
            "Registry server listening",
            extra={"host": self.host, "port": self.bound_port, "home": self.dispatcher.home.name},
        )

    async def serve_forever(self) -> None:
        """Start if needed and serve until cancelled or stopped."""
        if self._server is None:
            await self.start()
        server = cast("asyncio.Server", self._server)
        try:
            async with server:
                await server.serve_forever()
        except asyncio.CancelledError:
            logger.debug("Registry server task cancelled")
            raise
        finally:
            self.running = False

    async def stop(self) -> None:
        """Stop accepting connections and close the open ones."""
        if self._server is None:
            logger.debug("Server not running")
            return
        self._server.close()
        for task in list(self._connections):
            _ = task.cancel()
        if self._connections:
            _ = await asyncio.gather(*self._connections, return_exceptions=True)
        await self._server.wait_closed()
        self._server = None
        self.running = False
        if self.start_task is not None and not self.start_task.done():
            _ = self.start_task.cancel()
        logger.info("Registry server stopped")

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._connections.add(task)
        connection_id = generate_connection_id()
        peername = cast("tuple[str, int] | None", writer.get_extra_info("peername"))
        client_addr = f"{peername[0]}:{peername[1]}" if peername else "unknown"
        record_connection_opened()
        outcome = "error"

        with correlation_context(connection_id):
            logger.info("Client connected", extra={"client_addr": client_addr})
            try:
                outcome = await self._serve_requests(connection_id, reader, writer)
            except (ConnectionResetError, BrokenPipeError):
                outcome = "reset"
                logger.info("Client connection reset", extra={"client_addr": client_addr})
            except asyncio.CancelledError:
                outcome = "cancelled"
                raise
            except Exception as e:
                logger.exception("Connection handler failed", extra={"client_addr": client_addr, "error": str(e)})
            finally:
                record_connection_closed(outcome)
                if task is not None:
                    self._connections.discard(task)
                writer.close()
                with contextlib.suppress(ConnectionError):
                    await writer.wait_closed()
                logger.info("Client disconnected", extra={"client_addr": client_addr, "outcome": outcome})

    async def _serve_requests(
        self,
        connection_id: str,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> str:
        """Run the request loop for one connection and return how it ended."""
        sequence = 0
        while True:
            try:
                raw = await reader.readline()
            except ValueError:
                # StreamReader signals a line over ``limit`` as ValueError
                logger.warning("Request line too long, closing connection", extra={"max_line": self.max_line})
                writer.write(encode_response(Response.error(REQUEST_TOO_LONG).format()))
                await writer.drain()
                return "line_too_long"
            if not raw:
                return "eof"

            sequence += 1
            with correlation_context(request_correlation_id(connection_id, sequence)):
                line = decode_request(raw)
                logger.debug("Request received", extra={"request": line[:64]})
                reply = self.dispatcher.handle_line(line)
                writer.write(encode_response(reply))
                await writer.drain()
