"""Value types passed across the Home API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DeviceLocator:
    """Addresses one device as (device name, room name)."""

    device_name: str
    room_name: str


@dataclass
class ReportResult:
    """Outcome of one entry of a batch report request.

    Attributes:
        locator: The locator this result answers
        success: Whether the device was found
        report: Device report if success=True (empty string otherwise)
        reason: Error reason if success=False (empty string if success=True)
        missing: "room" or "device" when success=False, telling which lookup failed
    """

    locator: DeviceLocator
    success: bool
    report: str = ""
    reason: str = ""
    missing: str = ""
