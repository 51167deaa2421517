"""SmartLife device directory.

Keeps the cached device list and refreshes it from the cloud.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .client import CloudClient
from .customerlogging import logger
from .device import Device, normalize_device
from .errors import (
    FetchError,
    NotConfiguredError,
    SmartLifeAPIError,
    SmartLifeError,
    error_for_response,
    translate_error,
)


@dataclass(frozen=True)
class ConnectionResult:
    """Outcome of a connection test."""

    success: bool
    message: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the presentation layer."""
        return {"success": self.success, "message": self.message, "error": self.error}


class DeviceListener:
    """Listener for device list updates."""

    def update_devices(self, devices: list[Device]) -> None:
        """Called when the cached device list is replaced."""


def _device_list(result: Any) -> list[dict[str, Any]]:
    """Extract raw devices from a listing result (list or paginated page)."""
    if isinstance(result, dict):
        result = result.get("list") or result.get("devices")
    if isinstance(result, list):
        return [item for item in result if isinstance(item, dict)]
    return []


class DeviceDirectory:
    """Cached collection of devices refreshed from the cloud."""

    def __init__(
        self,
        client: CloudClient,
        devices: Iterable[Device] = (),
        uid: str | None = None,
    ) -> None:
        """Initialize the device directory."""
        self.client = client
        self.uid = uid
        self.devices: list[Device] = list(devices)
        self.device_listeners: list[DeviceListener] = []

    def add_device_listener(self, listener: DeviceListener) -> None:
        """Register a device listener."""
        self.device_listeners.append(listener)

    def get_cached(self, device_id: str) -> Device | None:
        """Return a cached device by id."""
        for device in self.devices:
            if device.id == device_id:
                return device
        return None

    def replace_device(self, device: Device) -> None:
        """Replace one cached device, keeping list order."""
        self._set_devices(
            [device if cached.id == device.id else cached for cached in self.devices]
        )

    def _set_devices(self, devices: list[Device]) -> None:
        self.devices = devices
        for listener in self.device_listeners:
            listener.update_devices(devices)

    # ── Listing strategies ──────────────────────────────

    async def _list_user_devices(self) -> list[dict[str, Any]]:
        uid = self.uid or self.client.uid
        if not uid:
            logger.debug("No user id known, skipping per-user device listing")
            return []
        response = await self.client.get_user_devices(uid)
        if not response.get("success"):
            raise error_for_response(response)
        return _device_list(response.get("result"))

    async def _list_project_devices(self) -> list[dict[str, Any]]:
        response = await self.client.get_devices()
        if not response.get("success"):
            raise error_for_response(response)
        return _device_list(response.get("result"))

    def _strategies(
        self,
    ) -> list[tuple[str, Callable[[], Awaitable[list[dict[str, Any]]]]]]:
        return [
            ("user devices", self._list_user_devices),
            ("project devices", self._list_project_devices),
        ]

    # ── Operations ──────────────────────────────────────

    async def refresh_devices(self) -> list[Device]:
        """Fetch devices from the cloud and replace the cache.

        Returns the cache untouched when credentials are not configured.
        Raises FetchError when no strategy yields devices; transport errors
        propagate.
        """
        if not self.client.config.is_configured:
            logger.debug("Credentials not configured, returning cached devices")
            return self.devices

        await self.client.ensure_initialized()
        await self.client.authenticate()

        last_error: SmartLifeAPIError | None = None
        raw_devices: list[dict[str, Any]] = []
        for name, strategy in self._strategies():
            try:
                raw_devices = await strategy()
            except SmartLifeAPIError as exc:
                logger.warning("Failed to get %s: %s", name, exc)
                last_error = exc
                continue
            if raw_devices:
                logger.debug("Found %d devices via %s", len(raw_devices), name)
                break

        if not raw_devices:
            raise FetchError(
                "Failed to fetch devices: no devices found. Possible causes: "
                "invalid API credentials, no devices linked to the cloud "
                "project, or missing API permissions."
            ) from last_error

        devices = [normalize_device(raw) for raw in raw_devices]
        self._set_devices(devices)
        return devices

    async def get_device_details(self, device_id: str) -> Device:
        """Fetch and normalize a single device."""
        self._require_configured()
        response = await self.client.get_device_info(device_id)
        if response.get("success") and response.get("result"):
            return normalize_device(response["result"])
        raise FetchError(
            f"Failed to get device details for {device_id}: "
            f"{response.get('msg', 'Unknown error')}"
        )

    async def get_device_status(self, device_id: str) -> list[dict[str, Any]]:
        """Fetch the raw status entries of a device."""
        self._require_configured()
        response = await self.client.get_device_status(device_id)
        result = response.get("result")
        if response.get("success") and isinstance(result, list):
            return result
        return []

    async def test_connection(self) -> ConnectionResult:
        """Validate credentials and reachability with a one-item listing."""
        if not self.client.config.is_configured:
            return ConnectionResult(
                False, NotConfiguredError.hint, NotConfiguredError.__name__
            )

        try:
            response = await self.client.get_devices({"page_no": 1, "page_size": 1})
        except Exception as exc:
            error = translate_error(exc)
            logger.error("Connection test failed: %s", error)
            if not isinstance(error, SmartLifeError):
                return ConnectionResult(
                    False, f"Connection failed: {error}", type(error).__name__
                )
            return self._failure(error)

        if response.get("success") is True:
            return ConnectionResult(True, "Connected to the Tuya cloud successfully")
        return self._failure(error_for_response(response))

    @staticmethod
    def _failure(error: SmartLifeError) -> ConnectionResult:
        return ConnectionResult(
            False, f"{error.hint} ({error})", type(error).__name__
        )

    def _require_configured(self) -> None:
        if not self.client.config.is_configured:
            raise NotConfiguredError(NotConfiguredError.hint)
