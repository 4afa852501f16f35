"""Fixtures running a real registry server on an ephemeral port."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from home_registry.devices import Socket, Thermometer
from home_registry.dispatcher import Dispatcher
from home_registry.registry import Home
from home_registry.server import RegistryServer

MAX_LINE = 256


@pytest.fixture
def home() -> Home:
    home = Home("home")
    home.add_room("room1")
    home.add_device("room1", Socket("socket1", measure=lambda: 42))
    home.add_device("room1", Thermometer("thermo1", measure=lambda: 21))
    return home


@pytest_asyncio.fixture
async def server(home: Home) -> AsyncGenerator[RegistryServer]:
    server = RegistryServer(Dispatcher(home), host="127.0.0.1", port=0, max_line=MAX_LINE)
    await server.start()
    server.start_task = asyncio.create_task(server.serve_forever())
    try:
        yield server
    finally:
        await server.stop()
