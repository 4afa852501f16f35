"""Slot storage for registered devices.

Rooms never hold device objects directly; they hold ``DeviceHandle`` values
issued by the arena that owns the devices. A handle is a slot index plus the
slot's generation at insert time. Removing a device bumps the generation, so
a handle kept past removal can never resolve to whatever device reuses the slot.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from home_registry.devices import Device
from home_registry.exceptions import DeviceAlreadyOwnedError


@dataclass(frozen=True, slots=True)
class DeviceHandle:
    index: int
    generation: int


@dataclass(slots=True)
class _Slot:
    generation: int = 0
    device: Device | None = None


class DeviceArena:
    """Owns device objects and hands out generational handles to them."""

    def __init__(self) -> None:
        self._slots: list[_Slot] = []
        self._free: list[int] = []

    def insert(self, device: Device) -> DeviceHandle:
        """Take ownership of ``device``, reusing a freed slot if one exists.

        Raises:
            DeviceAlreadyOwnedError: ``device`` is held by this or another arena
        """
        if device.owner is not None:
            raise DeviceAlreadyOwnedError(device.name)
        device.owner = self
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
        else:
            index = len(self._slots)
            slot = _Slot()
            self._slots.append(slot)
        slot.device = device
        return DeviceHandle(index, slot.generation)

    def get(self, handle: DeviceHandle) -> Device:
        """Resolve a handle.

        Raises:
            KeyError: the handle is stale or was never issued by this arena
        """
        slot = self._slot_for(handle)
        if slot.device is None:
            raise KeyError(handle)
        return slot.device

    def remove(self, handle: DeviceHandle) -> Device:
        """Drop ownership of the device behind ``handle`` and return it.

        Raises:
            KeyError: the handle is stale or was never issued by this arena
        """
        device = self.get(handle)
        slot = self._slots[handle.index]
        slot.device = None
        slot.generation += 1
        device.owner = None
        self._free.append(handle.index)
        return device

    def __contains__(self, handle: object) -> bool:
        if not isinstance(handle, DeviceHandle):
            return False
        try:
            self.get(handle)
        except KeyError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._slots) - len(self._free)

    def __iter__(self) -> Iterator[Device]:
        return (slot.device for slot in self._slots if slot.device is not None)

    def _slot_for(self, handle: DeviceHandle) -> _Slot:
        if not 0 <= handle.index < len(self._slots):
            raise KeyError(handle)
        slot = self._slots[handle.index]
        if slot.generation != handle.generation:
            raise KeyError(handle)
        return slot
