"""Home layout configuration.

The layout file is YAML::

    home:
      name: home
      rooms:
        - name: kitchen
          devices:
            - {name: socket1, kind: socket}
            - {name: thermo1, kind: thermometer, state: "On"}

It is validated with pydantic and then replayed through the normal Home API,
so duplicate names are rejected by the same checks the protocol relies on.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from home_registry.devices import DEVICE_KINDS, DeviceState
from home_registry.exceptions import ConfigError, DuplicateNameError
from home_registry.logging_abstraction import get_logger
from home_registry.registry import Home

logger = get_logger(__name__)

DEFAULT_HOME_NAME = "home"


class DeviceConfig(BaseModel):
    name: str
    kind: str
    state: DeviceState = DeviceState.OFF

    @field_validator("kind")
    @classmethod
    def _known_kind(cls, value: str) -> str:
        kind = value.casefold()
        if kind not in DEVICE_KINDS:
            msg = f"unknown device kind '{value}' (expected one of: {', '.join(sorted(DEVICE_KINDS))})"
            raise ValueError(msg)
        return kind

    @field_validator("state", mode="before")
    @classmethod
    def _yaml_bool_state(cls, value: object) -> object:
        # YAML 1.1 reads a bare On/Off as a boolean
        if isinstance(value, bool):
            return DeviceState.ON if value else DeviceState.OFF
        return value


class RoomConfig(BaseModel):
    name: str = Field(min_length=1)
    devices: list[DeviceConfig] = Field(default_factory=list)


class HomeConfig(BaseModel):
    name: str = DEFAULT_HOME_NAME
    rooms: list[RoomConfig] = Field(default_factory=list)


def load_config(config_file: Path) -> HomeConfig:
    """Read and validate a layout file.

    A missing file yields an empty home and a warning.

    Raises:
        ConfigError: unreadable YAML or a layout that fails validation
    """
    if not config_file.exists():
        logger.warning("Layout file not found, starting with an empty home", extra={"config_path": str(config_file)})
        return HomeConfig()

    try:
        with config_file.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read layout: {e}", path=str(config_file)) from e

    return parse_config(raw or {})


def parse_config(raw: object) -> HomeConfig:
    """Validate already-loaded YAML data.

    Raises:
        ConfigError: data does not describe a home layout
    """
    if not isinstance(raw, dict):
        msg = "layout must be a mapping"
        raise ConfigError(msg)
    home_data = raw.get("home", {})
    try:
        return HomeConfig.model_validate(home_data or {})
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigError(first["msg"], path=_format_location(("home", *first["loc"]))) from e


def _format_location(loc: tuple[int | str, ...]) -> str:
    path = ""
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
    return path


def build_home(config: HomeConfig) -> Home:
    """Create a Home populated from ``config``.

    Raises:
        ConfigError: duplicate room names, or duplicate device names within a room
    """
    home = Home(config.name)
    for room_index, room_config in enumerate(config.rooms):
        try:
            home.add_room(room_config.name)
        except DuplicateNameError as e:
            raise ConfigError(e.reason, path=f"home.rooms[{room_index}]") from e

        for device_index, device_config in enumerate(room_config.devices):
            path = f"home.rooms[{room_index}].devices[{device_index}]"
            device_cls = DEVICE_KINDS[device_config.kind]
            try:
                device = device_cls(device_config.name, state=device_config.state)
                home.add_device(room_config.name, device)
            except ValueError as e:
                raise ConfigError(str(e), path=path) from e
            except DuplicateNameError as e:
                raise ConfigError(e.reason, path=path) from e

    logger.info(
        "Home built from layout",
        extra={"home": home.name, "room_count": len(home), "device_count": home.device_count()},
    )
    return home


def load_layout(config_file: Path) -> Home:
    """Load ``config_file`` and build the Home it describes."""
    return build_home(load_config(config_file))
