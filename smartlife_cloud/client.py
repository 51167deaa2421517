"""Cloud client owning the swappable API session handle."""

from __future__ import annotations

from typing import Any

import aiohttp

from .config import CloudConfig
from .const import REQUEST_TIMEOUT
from .customerapi import CustomerApi
from .customerlogging import logger
from .errors import NotConfiguredError


class CloudClient:
    """Owns the credentials and the current CustomerApi handle.

    Reconfiguring swaps the config and drops the handle; the next request
    builds a fresh one. Requests capture the handle when they start, so an
    in-flight request keeps the credentials it was signed with.
    """

    def __init__(
        self,
        config: CloudConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the cloud client."""
        self._config = config or CloudConfig()
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._api: CustomerApi | None = None

    @property
    def config(self) -> CloudConfig:
        """Return the current credentials."""
        return self._config

    @property
    def uid(self) -> str:
        """Return the uid bound to the current access token, if any."""
        return self._api.uid if self._api else ""

    def is_connected(self) -> bool:
        """Return True if a session handle is ready."""
        return self._api is not None

    def reconfigure(self, config: CloudConfig) -> None:
        """Replace the credentials; the handle is rebuilt on next use."""
        if config == self._config:
            return
        logger.debug("Cloud credentials changed, dropping session handle")
        self._config = config
        self._api = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure an aiohttp session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def initialize(self, config: CloudConfig | None = None) -> bool:
        """Build a new session handle for the given (or current) config."""
        await self._build_api(config)
        return True

    async def _build_api(self, config: CloudConfig | None = None) -> CustomerApi:
        if config is not None:
            self._config = config
        config = self._config
        if not config.api_key or not config.api_secret or not config.endpoint:
            self._api = None
            raise NotConfiguredError(
                "Missing required configuration: apiKey, apiSecret, or endpoint"
            )
        session = await self._ensure_session()
        api = CustomerApi(config, session, self._timeout)
        self._api = api
        logger.info("Tuya API initialized for %s", config.endpoint)
        return api

    async def ensure_initialized(self) -> CustomerApi:
        """Return the current handle, building it if needed."""
        api = self._api
        if api is None or api.config != self._config:
            api = await self._build_api()
        return api

    async def request(
        self,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue a signed request and return the response envelope."""
        api = await self.ensure_initialized()
        return await api.request(method, path, query, body)

    async def authenticate(self) -> None:
        """Acquire a token up front so the uid is known."""
        api = await self.ensure_initialized()
        await api.ensure_token()

    async def close(self) -> None:
        """Close the session if we own it."""
        self._api = None
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    # ── High-Level API Methods ──────────────────────────

    async def get_user_devices(self, uid: str) -> dict[str, Any]:
        """Get device list for a user.

        GET /v1.0/users/{uid}/devices
        """
        return await self.request("GET", f"/v1.0/users/{uid}/devices")

    async def get_devices(
        self, query: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Get the device list of the cloud project.

        GET /v1.0/devices
        """
        return await self.request("GET", "/v1.0/devices", query)

    async def get_device_info(self, device_id: str) -> dict[str, Any]:
        """Get device information.

        GET /v1.0/devices/{device_id}
        """
        return await self.request("GET", f"/v1.0/devices/{device_id}")

    async def get_device_status(self, device_id: str) -> dict[str, Any]:
        """Get latest device status.

        GET /v1.0/devices/{device_id}/status
        """
        return await self.request("GET", f"/v1.0/devices/{device_id}/status")

    async def send_device_commands(
        self,
        device_id: str,
        commands: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Send commands to a device.

        POST /v1.0/devices/{device_id}/commands
        Body: {"commands": [{"code": "...", "value": ...}]}
        """
        return await self.request(
            "POST",
            f"/v1.0/devices/{device_id}/commands",
            None,
            {"commands": commands},
        )
