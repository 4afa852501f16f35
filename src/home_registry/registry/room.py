"""A named room owning an ordered set of uniquely named devices."""

from __future__ import annotations

from home_registry.devices import Device
from home_registry.exceptions import DeviceNotFoundError, DuplicateDeviceError
from home_registry.logging_abstraction import get_logger

from .arena import DeviceArena, DeviceHandle

logger = get_logger(__name__)


class Room:
    """Devices keyed by name, reported in insertion order.

    The devices themselves live in ``arena``; the room only keeps the handles.
    Rooms created by a ``Home`` share the home's arena, a standalone room gets
    its own.
    """

    def __init__(self, name: str, arena: DeviceArena | None = None) -> None:
        self._name = name
        self._arena = arena if arena is not None else DeviceArena()
        self._handles: dict[str, DeviceHandle] = {}

    @property
    def name(self) -> str:
        return self._name

    def add_device(self, device: Device) -> DeviceHandle:
        """Take ownership of ``device``.

        Raises:
            DuplicateDeviceError: a device with the same name is already in this room
            DeviceAlreadyOwnedError: the device object already belongs to a room
        """
        if device.name in self._handles:
            raise DuplicateDeviceError(device.name, room_name=self._name)
        handle = self._arena.insert(device)
        self._handles[device.name] = handle
        logger.debug(
            "Device added",
            extra={"room": self._name, "device": device.name, "kind": device.kind},
        )
        return handle

    def remove_device(self, name: str) -> Device:
        """Remove the device and hand it back to the caller.

        Raises:
            DeviceNotFoundError: no device with that name
        """
        handle = self._handles.pop(name, None)
        if handle is None:
            raise DeviceNotFoundError(name, room_name=self._name)
        logger.debug("Device removed", extra={"room": self._name, "device": name})
        return self._arena.remove(handle)

    def find(self, name: str) -> Device:
        """Return the device registered under ``name``.

        Raises:
            DeviceNotFoundError: no device with that name
        """
        handle = self._handles.get(name)
        if handle is None:
            raise DeviceNotFoundError(name, room_name=self._name)
        return self._arena.get(handle)

    def device_names(self) -> list[str]:
        return list(self._handles)

    def devices(self) -> list[Device]:
        return [self._arena.get(handle) for handle in self._handles.values()]

    def turn_on(self, name: str) -> None:
        self.find(name).turn_on()

    def turn_off(self, name: str) -> None:
        self.find(name).turn_off()

    def device_report(self, name: str) -> str:
        return self.find(name).report()

    def release(self) -> list[Device]:
        """Give up every device, emptying the room, and return them in order."""
        released = [self._arena.remove(handle) for handle in self._handles.values()]
        self._handles.clear()
        return released

    def report(self) -> str:
        reports = "".join(f"{device.report()}\n" for device in self.devices())
        return f"Room name: {self._name}\n\tdevices: [\n{reports}]\n"

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"Room(name={self._name!r}, devices={self.device_names()!r})"
