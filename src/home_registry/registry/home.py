"""Top of the ownership tree: a home owning uniquely named rooms."""

from __future__ import annotations

from collections.abc import Iterable

from home_registry.devices import Device
from home_registry.exceptions import DeviceNotFoundError, DuplicateRoomError, NotFoundError, RoomNotFoundError
from home_registry.logging_abstraction import get_logger

from .arena import DeviceArena, DeviceHandle
from .room import Room
from .types import DeviceLocator, ReportResult

logger = get_logger(__name__)


class Home:
    """Rooms keyed by name, each owning its devices.

    Every device-level operation takes a ``DeviceLocator`` and resolves the
    room first. A missing room raises ``RoomNotFoundError``; a missing device
    inside an existing room raises ``DeviceNotFoundError``. Both derive from
    ``NotFoundError`` and expose ``kind`` for callers that only catch the base.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._arena = DeviceArena()
        self._rooms: dict[str, Room] = {}

    @property
    def name(self) -> str:
        return self._name

    # ---- rooms ----

    def add_room(self, room_name: str) -> Room:
        """Create and store an empty room.

        Raises:
            DuplicateRoomError: a room with that name already exists
        """
        if room_name in self._rooms:
            raise DuplicateRoomError(room_name)
        room = Room(room_name, arena=self._arena)
        self._rooms[room_name] = room
        logger.debug("Room added", extra={"home": self._name, "room": room_name})
        return room

    def remove_room(self, room_name: str) -> None:
        """Remove a room together with every device it owns.

        Raises:
            RoomNotFoundError: no room with that name
        """
        room = self._rooms.pop(room_name, None)
        if room is None:
            raise RoomNotFoundError(room_name)
        released = room.release()
        logger.debug(
            "Room removed",
            extra={"home": self._name, "room": room_name, "devices_released": len(released)},
        )

    def room(self, room_name: str) -> Room:
        """Raises RoomNotFoundError if the room does not exist."""
        room = self._rooms.get(room_name)
        if room is None:
            raise RoomNotFoundError(room_name)
        return room

    def room_names(self) -> list[str]:
        return list(self._rooms)

    def rooms(self) -> list[Room]:
        return list(self._rooms.values())

    # ---- devices ----

    def add_device(self, room_name: str, device: Device) -> DeviceHandle:
        """Move ``device`` into the named room.

        Raises:
            RoomNotFoundError: no room with that name
            DuplicateDeviceError: the room already has a device with that name
            DeviceAlreadyOwnedError: the device object already belongs to a room
        """
        return self.room(room_name).add_device(device)

    def remove_device(self, locator: DeviceLocator) -> Device:
        return self.room(locator.room_name).remove_device(locator.device_name)

    def find_device(self, locator: DeviceLocator) -> Device:
        return self.room(locator.room_name).find(locator.device_name)

    def device_report(self, locator: DeviceLocator) -> str:
        return self.room(locator.room_name).device_report(locator.device_name)

    def turn_on(self, locator: DeviceLocator) -> None:
        self.room(locator.room_name).turn_on(locator.device_name)

    def turn_off(self, locator: DeviceLocator) -> None:
        self.room(locator.room_name).turn_off(locator.device_name)

    def devices_in_room(self, room_name: str) -> list[str]:
        return self.room(room_name).device_names()

    def batch_device_reports(self, locators: Iterable[DeviceLocator]) -> list[ReportResult]:
        """One result per locator, in input order.

        Each entry is resolved independently: a missing room or device fails
        only its own entry.
        """
        results: list[ReportResult] = []
        for locator in locators:
            try:
                report = self.device_report(locator)
            except NotFoundError as e:
                results.append(ReportResult(locator=locator, success=False, reason=e.reason, missing=e.kind))
            else:
                results.append(ReportResult(locator=locator, success=True, report=report))
        return results

    # ---- whole-home queries ----

    def locate(self, device_name: str) -> DeviceLocator:
        """Locator of the first room, in insertion order, owning ``device_name``.

        Raises:
            DeviceNotFoundError: no room owns a device with that name
        """
        for room in self._rooms.values():
            if device_name in room:
                return DeviceLocator(device_name=device_name, room_name=room.name)
        raise DeviceNotFoundError(device_name)

    def device_names(self) -> list[str]:
        """All device names, room by room, each room in insertion order."""
        return [name for room in self._rooms.values() for name in room.device_names()]

    def devices(self) -> list[Device]:
        return [device for room in self._rooms.values() for device in room.devices()]

    def device_count(self) -> int:
        return len(self._arena)

    def report(self) -> str:
        rooms_report = "".join(room.report() for room in self._rooms.values())
        return f"Home name: {self._name}\nrooms: [\n{rooms_report}]"

    def __contains__(self, room_name: object) -> bool:
        return room_name in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __repr__(self) -> str:
        return f"Home(name={self._name!r}, rooms={self.room_names()!r})"
