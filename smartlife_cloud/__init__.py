"""SmartLife Cloud — Tuya OpenAPI control panel core."""

from .bridge import ControlPanel
from .client import CloudClient
from .config import CloudConfig
from .customerapi import CustomerApi, SmartLifeTokenInfo
from .customerlogging import logger
from .device import (
    Device,
    DeviceCommand,
    DeviceType,
    category_to_type,
    denormalize_command,
    normalize_device,
)
from .dispatcher import CommandDispatcher, CommandResult
from .errors import (
    CommandRejectedError,
    FetchError,
    NotConfiguredError,
    SmartLifeAPIError,
    SmartLifeError,
    TransportError,
    VendorPermissionError,
    VendorRateLimitError,
    VendorRegionError,
    VendorSignatureError,
)
from .manager import ConnectionResult, DeviceDirectory, DeviceListener
from .store import JsonFileStore
from .version import VERSION

__all__ = [
    "CloudClient",
    "CloudConfig",
    "CommandDispatcher",
    "CommandRejectedError",
    "CommandResult",
    "ConnectionResult",
    "ControlPanel",
    "CustomerApi",
    "Device",
    "DeviceCommand",
    "DeviceDirectory",
    "DeviceListener",
    "DeviceType",
    "FetchError",
    "JsonFileStore",
    "NotConfiguredError",
    "SmartLifeAPIError",
    "SmartLifeError",
    "SmartLifeTokenInfo",
    "TransportError",
    "VendorPermissionError",
    "VendorRateLimitError",
    "VendorRegionError",
    "VendorSignatureError",
    "category_to_type",
    "denormalize_command",
    "logger",
    "normalize_device",
]

__version__ = VERSION
