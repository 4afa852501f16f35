"""Room thermometer."""

from __future__ import annotations

import random
from typing import ClassVar, override

from .base_device import Device

TEMPERATURE_MIN = -30
TEMPERATURE_MAX = 40  # exclusive


class Thermometer(Device):
    """Reports the measured temperature while on."""

    kind: ClassVar[str] = "thermometer"
    label: ClassVar[str] = "Thermometer"
    measurement_caption: ClassVar[str] = "current temperature"

    @staticmethod
    @override
    def default_measure() -> int:
        return random.randrange(TEMPERATURE_MIN, TEMPERATURE_MAX)
