"""Ownership tree: Home → Room → Device, with devices stored in an arena."""

from .arena import DeviceArena, DeviceHandle
from .home import Home
from .room import Room
from .types import DeviceLocator, ReportResult

__all__ = [
    "DeviceArena",
    "DeviceHandle",
    "DeviceLocator",
    "Home",
    "ReportResult",
    "Room",
]
