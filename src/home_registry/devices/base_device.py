"""Device capability shared by every controllable unit in a room."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum
from typing import ClassVar

from home_registry.const import RECORD_SEPARATOR, RESPONSE_SEPARATOR

Measure = Callable[[], int]

_WHITESPACE = re.compile(r"\s")


class DeviceState(StrEnum):
    ON = "On"
    OFF = "Off"


def validate_device_name(name: str) -> str:
    """Reject names the token protocol could not address or render.

    Raises:
        ValueError: empty name, whitespace, or a reserved protocol separator
    """
    if not name:
        msg = "Device name must not be empty"
        raise ValueError(msg)
    if _WHITESPACE.search(name):
        msg = f"Device name {name!r} must not contain whitespace"
        raise ValueError(msg)
    for separator in (RESPONSE_SEPARATOR, RECORD_SEPARATOR):
        if separator in name:
            msg = f"Device name {name!r} must not contain {separator!r}"
            raise ValueError(msg)
    return name


class Device(ABC):
    """A named unit with an on/off state and a status report.

    Subclasses provide the report label, the measurement caption and a default
    measurement function. The measurement is sampled only while the device is
    on, and exactly once per report.
    """

    kind: ClassVar[str]
    label: ClassVar[str]
    measurement_caption: ClassVar[str]

    def __init__(self, name: str, measure: Measure | None = None, state: DeviceState = DeviceState.OFF) -> None:
        self._name = validate_device_name(name)
        self._state = DeviceState(state)
        self._measure: Measure = measure if measure is not None else self.default_measure
        # set and cleared by the DeviceArena holding the device
        self.owner: object | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def registered(self) -> bool:
        return self.owner is not None

    @property
    def state(self) -> DeviceState:
        return self._state

    @property
    def is_on(self) -> bool:
        return self._state is DeviceState.ON

    def turn_on(self) -> None:
        self._state = DeviceState.ON

    def turn_off(self) -> None:
        self._state = DeviceState.OFF

    def measurement(self) -> int:
        """Current reading, or 0 while the device is off."""
        if not self.is_on:
            return 0
        return self._measure()

    @staticmethod
    @abstractmethod
    def default_measure() -> int:
        """Reading used when no measurement function was injected."""

    def report(self) -> str:
        return (
            f"{self.label} name: {self._name}\n"
            f"state: {self._state}\n"
            f"{self.measurement_caption}: {self.measurement()}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, state={self._state.value})"
