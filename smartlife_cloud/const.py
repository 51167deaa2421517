"""Constants for the SmartLife cloud client."""

from __future__ import annotations

from enum import StrEnum

# Store keys
STORE_DEVICES = "devices"
STORE_API_KEY = "apiKey"
STORE_API_SECRET = "apiSecret"
STORE_ENDPOINT = "endpoint"

DEFAULT_ENDPOINT = "https://openapi.tuyaus.com"

# Request timeout in seconds
REQUEST_TIMEOUT = 15

REGION_ENDPOINTS: dict[str, str] = {
    "us": "https://openapi.tuyaus.com",
    "ueaz": "https://openapi-ueaz.tuyaus.com",
    "eu": "https://openapi.tuyaeu.com",
    "weaz": "https://openapi-weaz.tuyaeu.com",
    "cn": "https://openapi.tuyacn.com",
    "in": "https://openapi.tuyain.com",
}


class DPCode(StrEnum):
    """Data Point Codes understood by the device normalizer.

    https://developer.tuya.com/en/docs/iot/standarddescription?id=K9i5ql6waswzq
    """

    # Power
    SWITCH_LED = "switch_led"
    SWITCH = "switch"
    SWITCH_1 = "switch_1"

    # Brightness
    BRIGHT_VALUE = "bright_value"
    BRIGHTNESS = "brightness"

    # Temperature
    TEMP_SET = "temp_set"
    TEMPERATURE = "temperature"


class DeviceCategory(StrEnum):
    """Tuya device categories with a dedicated device type."""

    DJ = "dj"
    """Light"""
    CZ = "cz"
    """Socket"""
    WK = "wk"
    """Thermostat"""
    KG = "kg"
    """Switch"""
    FS = "fs"
    """Fan"""
    SP = "sp"
    """Camera"""
    MS = "ms"
    """Lock"""
    MCS = "mcs"
    """Contact sensor"""


# Vendor codes for each semantic field, in broadcast order
POWER_DPCODES: list[str] = [DPCode.SWITCH_LED, DPCode.SWITCH, DPCode.SWITCH_1]
BRIGHTNESS_DPCODES: list[str] = [DPCode.BRIGHT_VALUE, DPCode.BRIGHTNESS]
TEMPERATURE_DPCODES: list[str] = [DPCode.TEMP_SET, DPCode.TEMPERATURE]

DEFAULT_DEVICE_NAME = "Unknown Device"
DEFAULT_BRIGHTNESS = 50
DEFAULT_TEMPERATURE = 72
