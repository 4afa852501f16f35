"""Shared fixtures for unit tests.

Devices built here use fixed measurement functions so reports are deterministic.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from home_registry.devices import Measure, Socket, Thermometer
from home_registry.dispatcher import Dispatcher
from home_registry.registry import Home

SOCKET_POWER = 42
THERMOMETER_TEMPERATURE = 21


def fixed(value: int) -> Measure:
    """Measurement function always returning ``value``."""
    return lambda: value


class CountingMeasure:
    """Measurement function recording how often it was sampled."""

    def __init__(self, value: int) -> None:
        self.value = value
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.value


@pytest.fixture
def counting_measure_factory() -> Callable[[int], CountingMeasure]:
    return CountingMeasure


@pytest.fixture
def socket1() -> Socket:
    return Socket("socket1", measure=fixed(SOCKET_POWER))


@pytest.fixture
def thermo1() -> Thermometer:
    return Thermometer("thermo1", measure=fixed(THERMOMETER_TEMPERATURE))


@pytest.fixture
def home(socket1: Socket, thermo1: Thermometer) -> Home:
    """Home "home" with room1 = [socket1, thermo1] and an empty room2."""
    home = Home("home")
    home.add_room("room1")
    home.add_room("room2")
    home.add_device("room1", socket1)
    home.add_device("room1", thermo1)
    return home


@pytest.fixture
def dispatcher(home: Home) -> Dispatcher:
    return Dispatcher(home)
