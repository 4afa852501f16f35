"""Switchable power socket."""

from __future__ import annotations

import random
from typing import ClassVar, override

from .base_device import Device

POWER_MIN = 1
POWER_MAX = 100  # exclusive


class Socket(Device):
    """Reports its current power draw while on."""

    kind: ClassVar[str] = "socket"
    label: ClassVar[str] = "Socket"
    measurement_caption: ClassVar[str] = "current power"

    @staticmethod
    @override
    def default_measure() -> int:
        return random.randrange(POWER_MIN, POWER_MAX)
