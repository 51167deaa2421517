"""SmartLife device model.

Translates raw Tuya device payloads into the canonical Device and semantic
commands back into vendor command entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from enum import StrEnum
import math
import re
from typing import Any

import voluptuous as vol

from .const import (
    BRIGHTNESS_DPCODES,
    DEFAULT_BRIGHTNESS,
    DEFAULT_DEVICE_NAME,
    DEFAULT_TEMPERATURE,
    POWER_DPCODES,
    TEMPERATURE_DPCODES,
    DeviceCategory,
)


class DeviceType(StrEnum):
    """Canonical device types."""

    LIGHT = "light"
    PLUG = "plug"
    THERMOSTAT = "thermostat"
    SWITCH = "switch"
    FAN = "fan"
    CAMERA = "camera"
    LOCK = "lock"
    SENSOR = "sensor"
    DEFAULT = "default"


CATEGORY_TYPES: dict[str, DeviceType] = {
    DeviceCategory.DJ: DeviceType.LIGHT,
    DeviceCategory.CZ: DeviceType.PLUG,
    DeviceCategory.WK: DeviceType.THERMOSTAT,
    DeviceCategory.KG: DeviceType.SWITCH,
    DeviceCategory.FS: DeviceType.FAN,
    DeviceCategory.SP: DeviceType.CAMERA,
    DeviceCategory.MS: DeviceType.LOCK,
    DeviceCategory.MCS: DeviceType.SENSOR,
}

_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")
_INT_RE = re.compile(r"\s*[+-]?\d+\s*")


def category_to_type(category: Any) -> DeviceType:
    """Map a vendor category to a device type."""
    if not isinstance(category, str):
        return DeviceType.DEFAULT
    return CATEGORY_TYPES.get(category, DeviceType.DEFAULT)


def parse_int(value: Any, default: int) -> int:
    """Parse an integer leniently, falling back to default.

    Strings parse their leading integer ("42abc" -> 42), floats truncate.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = _INT_PREFIX_RE.match(value)
        if match:
            return int(match.group(1))
    return default


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _command_int(value: Any) -> int:
    """Accept an integer or an integer string, nothing else."""
    if isinstance(value, bool):
        raise vol.Invalid("expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value)
    raise vol.Invalid(f"expected an integer, got {value!r}")


COMMAND_SCHEMA = vol.Schema(
    {
        vol.Optional("power"): vol.Any(None, bool),
        vol.Optional("brightness"): vol.Any(
            None, vol.All(_command_int, vol.Range(min=0, max=100))
        ),
        vol.Optional("temperature"): vol.Any(None, _command_int),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class DeviceCommand:
    """Semantic command; None fields are not sent."""

    power: bool | None = None
    brightness: int | None = None
    temperature: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeviceCommand:
        """Validate and create a DeviceCommand from a UI command mapping.

        Raises ValueError on a malformed field.
        """
        try:
            validated = COMMAND_SCHEMA(dict(data))
        except vol.Invalid as exc:
            raise ValueError(f"Invalid device command: {exc}") from exc
        return cls(
            power=validated.get("power"),
            brightness=validated.get("brightness"),
            temperature=validated.get("temperature"),
        )

    @property
    def is_empty(self) -> bool:
        """Return True if no field is set."""
        return (
            self.power is None
            and self.brightness is None
            and self.temperature is None
        )

    def changes(self) -> dict[str, Any]:
        """Return the fields this command sets."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class Device:
    """Canonical SmartLife device."""

    id: str
    name: str = DEFAULT_DEVICE_NAME
    type: DeviceType = DeviceType.DEFAULT
    online: bool = False
    power: bool = False
    brightness: int = DEFAULT_BRIGHTNESS
    temperature: int = DEFAULT_TEMPERATURE
    category: str = ""
    product_id: str = ""
    model: str = ""

    def apply_command(self, command: DeviceCommand) -> Device:
        """Return a copy with the fields the command changed."""
        return replace(self, **command.changes())

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the device cache."""
        return {
            "id": self.id,
            "name": self.name,
            "type": str(self.type),
            "online": self.online,
            "power": self.power,
            "brightness": self.brightness,
            "temperature": self.temperature,
            "category": self.category,
            "productId": self.product_id,
            "model": self.model,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Device:
        """Deserialize a cached device, applying defaults to bad fields."""
        type_value = data.get("type")
        try:
            device_type = DeviceType(type_value)
        except ValueError:
            device_type = category_to_type(data.get("category"))
        return cls(
            id=_as_str(data.get("id")),
            name=_as_str(data.get("name")) or DEFAULT_DEVICE_NAME,
            type=device_type,
            online=data.get("online") is True,
            power=data.get("power") is True,
            brightness=parse_int(data.get("brightness"), DEFAULT_BRIGHTNESS),
            temperature=parse_int(data.get("temperature"), DEFAULT_TEMPERATURE),
            category=_as_str(data.get("category")),
            product_id=_as_str(data.get("productId")),
            model=_as_str(data.get("model")),
        )


def normalize_device(vendor_device: Any) -> Device:
    """Translate a raw vendor device into a Device. Never raises."""
    if not isinstance(vendor_device, Mapping):
        return Device(id="")

    power = False
    brightness = DEFAULT_BRIGHTNESS
    temperature = DEFAULT_TEMPERATURE

    status = vendor_device.get("status")
    if isinstance(status, list):
        # Later entries win for the same field
        for entry in status:
            if not isinstance(entry, Mapping):
                continue
            code = entry.get("code")
            value = entry.get("value")
            if code in POWER_DPCODES:
                power = value is True or value == "true"
            elif code in BRIGHTNESS_DPCODES:
                brightness = parse_int(value, DEFAULT_BRIGHTNESS) or DEFAULT_BRIGHTNESS
            elif code in TEMPERATURE_DPCODES:
                temperature = parse_int(value, DEFAULT_TEMPERATURE) or DEFAULT_TEMPERATURE

    category = vendor_device.get("category")
    device_id = vendor_device.get("id")
    return Device(
        id=str(device_id) if device_id is not None else "",
        name=_as_str(vendor_device.get("name")) or DEFAULT_DEVICE_NAME,
        type=category_to_type(category),
        online=bool(vendor_device.get("online", False)),
        power=power,
        brightness=brightness,
        temperature=temperature,
        category=_as_str(category),
        product_id=_as_str(vendor_device.get("product_id")),
        model=_as_str(vendor_device.get("model")),
    )


def denormalize_command(
    command: DeviceCommand | Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Translate a semantic command into vendor command entries.

    Every known code variant is sent with the same value; the cloud drops the
    codes a device does not support.
    """
    if not isinstance(command, DeviceCommand):
        command = DeviceCommand.from_dict(command)

    commands: list[dict[str, Any]] = []
    for codes, value in (
        (POWER_DPCODES, command.power),
        (BRIGHTNESS_DPCODES, command.brightness),
        (TEMPERATURE_DPCODES, command.temperature),
    ):
        if value is None:
            continue
        commands.extend({"code": str(code), "value": value} for code in codes)
    return commands
