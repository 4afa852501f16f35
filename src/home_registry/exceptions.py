"""Exception hierarchy for registry and protocol errors.

Every error carries a human-readable ``reason``; that string is exactly what a
client sees after ``Error::`` on the wire, so it must never contain the
``::`` response separator.
"""

from __future__ import annotations

from typing import Literal

EntityKind = Literal["room", "device"]


class RegistryError(Exception):
    """Base exception for all home registry errors.

    Attributes:
        reason: Message rendered to protocol clients
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class DuplicateNameError(RegistryError):
    """An add used a name that is already taken in the owning container.

    Attributes:
        kind: Which container rejected the name ("room" in a Home, "device" in a Room)
        name: The duplicated name
    """

    def __init__(self, kind: EntityKind, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} with name '{name}' already exists")


class DuplicateRoomError(DuplicateNameError):
    def __init__(self, name: str):
        super().__init__("room", name)


class DuplicateDeviceError(DuplicateNameError):
    def __init__(self, name: str, room_name: str | None = None):
        self.room_name = room_name
        super().__init__("device", name)


class DeviceAlreadyOwnedError(RegistryError):
    """The device object is already registered in a room.

    Attributes:
        name: Name of the device that was added a second time
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Device '{name}' is already registered in a room")


class NotFoundError(RegistryError):
    """A lookup, mutation or removal addressed an absent name.

    ``kind`` tells the caller which lookup failed, so a Home-level miss on the
    room is distinguishable from a miss on the device inside an existing room.

    Attributes:
        kind: "room" or "device"
        name: The name that was not found
    """

    def __init__(self, kind: EntityKind, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} with name '{name}' does not exist")


class RoomNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__("room", name)


class DeviceNotFoundError(NotFoundError):
    def __init__(self, name: str, room_name: str | None = None):
        self.room_name = room_name
        super().__init__("device", name)


class ProtocolError(RegistryError):
    """A request line reached the parser with no recognizable command.

    The request parser never lets this escape; it is downgraded into an Error
    command so the dispatcher always has something to execute.

    Attributes:
        line: The offending request line, truncated to 64 characters
    """

    def __init__(self, reason: str, line: str = ""):
        self.line = line[:64]
        super().__init__(reason)


class ResponseParseError(RegistryError):
    """A response line is neither ``Ok[::payload]`` nor ``Error::reason``."""

    def __init__(self, line: str):
        self.line = line[:64]
        super().__init__(f"malformed response '{self.line}'")


class RemoteError(RegistryError):
    """The server answered a client request with ``Error::<reason>``."""


class ConfigError(RegistryError):
    """The home layout file is unreadable or inconsistent.

    Attributes:
        path: Location of the problem inside the layout (e.g. ``home.rooms[1].devices[0]``)
    """

    def __init__(self, reason: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {reason}" if path else reason)
