"""Cloud credential configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    DEFAULT_ENDPOINT,
    REGION_ENDPOINTS,
    STORE_API_KEY,
    STORE_API_SECRET,
    STORE_ENDPOINT,
)
from .store import JsonFileStore


def _endpoint(value: Any) -> str:
    """Validate an endpoint URL or region shortcut."""
    value = vol.Coerce(str)(value).strip()
    if value.lower() in REGION_ENDPOINTS:
        return REGION_ENDPOINTS[value.lower()]
    if not value.startswith(("https://", "http://")):
        raise vol.Invalid(f"Endpoint must be an http(s) URL or region, got {value!r}")
    return vol.Url()(value).rstrip("/")


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(STORE_API_KEY, default=""): vol.All(vol.Coerce(str), str.strip),
        vol.Optional(STORE_API_SECRET, default=""): vol.All(vol.Coerce(str), str.strip),
        vol.Optional(STORE_ENDPOINT, default=DEFAULT_ENDPOINT): _endpoint,
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class CloudConfig:
    """Tuya cloud credentials."""

    api_key: str = ""
    api_secret: str = ""
    endpoint: str = DEFAULT_ENDPOINT

    @property
    def is_configured(self) -> bool:
        """Return True if both key and secret are set."""
        return bool(self.api_key) and bool(self.api_secret)

    def to_dict(self) -> dict[str, str]:
        """Serialize using the store keys."""
        return {
            STORE_API_KEY: self.api_key,
            STORE_API_SECRET: self.api_secret,
            STORE_ENDPOINT: self.endpoint,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CloudConfig:
        """Validate and create a CloudConfig.

        Raises voluptuous.Invalid on a malformed endpoint.
        """
        validated = CONFIG_SCHEMA(dict(data))
        return cls(
            api_key=validated[STORE_API_KEY],
            api_secret=validated[STORE_API_SECRET],
            endpoint=validated[STORE_ENDPOINT],
        )


def load_config(store: JsonFileStore) -> CloudConfig:
    """Load credentials from the store."""
    return CloudConfig(
        api_key=store.get(STORE_API_KEY, ""),
        api_secret=store.get(STORE_API_SECRET, ""),
        endpoint=store.get(STORE_ENDPOINT, DEFAULT_ENDPOINT) or DEFAULT_ENDPOINT,
    )


def save_config(store: JsonFileStore, config: CloudConfig) -> None:
    """Persist credentials to the store."""
    for key, value in config.to_dict().items():
        store.set(key, value)
