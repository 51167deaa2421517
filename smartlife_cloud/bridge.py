"""Presentation-facing operations of the SmartLife control panel.

Every operation is a request/response pair returning plain JSON-ready data.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .client import CloudClient
from .config import CloudConfig, load_config, save_config
from .const import STORE_DEVICES
from .customerlogging import logger
from .device import Device, DeviceCommand
from .dispatcher import CommandDispatcher
from .manager import DeviceDirectory, DeviceListener
from .store import JsonFileStore


class _CachePersister(DeviceListener):
    """Writes the device list to the store whenever it changes."""

    def __init__(self, store: JsonFileStore) -> None:
        self.store = store

    def update_devices(self, devices: list[Device]) -> None:
        self.store.set(STORE_DEVICES, [device.to_dict() for device in devices])


def _load_devices(raw: Any) -> list[Device]:
    if not isinstance(raw, list):
        return []
    return [Device.from_dict(item) for item in raw if isinstance(item, Mapping)]


class ControlPanel:
    """Control panel operations backed by a store and a cloud client."""

    def __init__(
        self,
        store: JsonFileStore,
        client: CloudClient | None = None,
    ) -> None:
        """Initialize the control panel."""
        self.store = store
        self.client = client or CloudClient()
        self.client.reconfigure(load_config(store))
        self.directory = DeviceDirectory(
            self.client, _load_devices(store.get(STORE_DEVICES, []))
        )
        self.directory.add_device_listener(_CachePersister(store))
        self.dispatcher = CommandDispatcher(self.client)

    async def __aenter__(self) -> ControlPanel:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the cloud session."""
        await self.client.close()

    # ── Devices ─────────────────────────────────────────

    async def get_devices(self) -> list[dict[str, Any]]:
        """Return devices from the cloud, or the cache when that fails."""
        try:
            devices = await self.directory.refresh_devices()
        except Exception as exc:
            logger.warning("Error fetching devices, using cache: %s", exc)
            devices = self.directory.devices
        return [device.to_dict() for device in devices]

    async def save_devices(self, devices: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """Persist a device list supplied by the UI."""
        self.directory.devices = _load_devices(list(devices))
        self.store.set(
            STORE_DEVICES, [device.to_dict() for device in self.directory.devices]
        )
        return {"success": True}

    async def get_device_details(self, device_id: str) -> dict[str, Any]:
        """Return one device fresh from the cloud."""
        device = await self.directory.get_device_details(device_id)
        return device.to_dict()

    async def get_device_status(self, device_id: str) -> list[dict[str, Any]]:
        """Return the raw status entries of a device."""
        return await self.directory.get_device_status(device_id)

    async def control_device(
        self, device_id: str, command: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Send a command and optimistically update the cached device."""
        device_command = DeviceCommand.from_dict(command)
        result = await self.dispatcher.control_device(device_id, device_command)
        if cached := self.directory.get_cached(device_id):
            self.directory.replace_device(cached.apply_command(device_command))
        return result.to_dict()

    # ── Configuration ───────────────────────────────────

    async def get_user_config(self) -> dict[str, str]:
        """Return the stored credentials."""
        return load_config(self.store).to_dict()

    async def save_user_config(self, config: Mapping[str, Any]) -> dict[str, Any]:
        """Validate, persist and apply new credentials."""
        cloud_config = CloudConfig.from_dict(config)
        save_config(self.store, cloud_config)
        self.client.reconfigure(cloud_config)
        return {"success": True}

    async def test_connection(self) -> dict[str, Any]:
        """Check the stored credentials against the cloud."""
        result = await self.directory.test_connection()
        return result.to_dict()
