"""Command kinds of the token protocol and the parsed Command value.

Request words on the wire:

- ``get_device_names``         → LIST_DEVICES
- ``status_all``               → STATUS_ALL
- ``status_device <device>``   → STATUS_DEVICE
- ``turn_on <device>``         → TURN_ON
- ``turn_off <device>``        → TURN_OFF

Anything else parses to an ERROR command carrying the reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CommandKind(StrEnum):
    LIST_DEVICES = "list_devices"
    STATUS_ALL = "status_all"
    STATUS_DEVICE = "status_device"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"
    ERROR = "error"


# Request word → command kind
REQUEST_WORDS: dict[str, CommandKind] = {
    "get_device_names": CommandKind.LIST_DEVICES,
    "status_all": CommandKind.STATUS_ALL,
    "status_device": CommandKind.STATUS_DEVICE,
    "turn_on": CommandKind.TURN_ON,
    "turn_off": CommandKind.TURN_OFF,
}

# Kinds that address a single device and need a second token
DEVICE_COMMANDS: frozenset[CommandKind] = frozenset(
    {CommandKind.STATUS_DEVICE, CommandKind.TURN_ON, CommandKind.TURN_OFF},
)


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed request.

    Attributes:
        kind: What to execute
        device_name: Target device for STATUS_DEVICE / TURN_ON / TURN_OFF, else None
        reason: Why parsing produced an ERROR command, else empty
    """

    kind: CommandKind
    device_name: str | None = None
    reason: str = ""

    @classmethod
    def error(cls, reason: str) -> Command:
        return cls(CommandKind.ERROR, reason=reason)

    @property
    def is_error(self) -> bool:
        return self.kind is CommandKind.ERROR

    def to_line(self) -> str:
        """Render back to a request line (used by the client).

        Raises:
            ValueError: ERROR commands have no request form
        """
        if self.is_error:
            msg = "Error commands cannot be sent"
            raise ValueError(msg)
        word = next(w for w, k in REQUEST_WORDS.items() if k is self.kind)
        return f"{word} {self.device_name}" if self.kind in DEVICE_COMMANDS else word
