"""Device kinds known to the registry.

``DEVICE_KINDS`` maps the kind names used in layout files to device classes.
"""

from .base_device import Device, DeviceState, Measure, validate_device_name
from .socket import Socket
from .thermometer import Thermometer

DEVICE_KINDS: dict[str, type[Device]] = {
    Socket.kind: Socket,
    Thermometer.kind: Thermometer,
}

__all__ = [
    "DEVICE_KINDS",
    "Device",
    "DeviceState",
    "Measure",
    "Socket",
    "Thermometer",
    "validate_device_name",
]
