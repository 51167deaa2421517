"""Semantic device command dispatch."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .client import CloudClient
from .customerlogging import logger
from .device import DeviceCommand, denormalize_command
from .errors import CommandRejectedError, NotConfiguredError


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a successful device command."""

    success: bool
    message: str
    commands: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the presentation layer."""
        return {"success": self.success, "message": self.message}


class CommandDispatcher:
    """Sends semantic commands to devices through the cloud client.

    The dispatcher does not own device state; callers merge the command into
    their own copy of the device after a successful result.
    """

    def __init__(self, client: CloudClient) -> None:
        """Initialize the dispatcher."""
        self.client = client

    async def control_device(
        self,
        device_id: str,
        command: DeviceCommand | Mapping[str, Any],
    ) -> CommandResult:
        """Send a command to a device as one batched request."""
        if not self.client.config.is_configured:
            raise NotConfiguredError(NotConfiguredError.hint)

        if not isinstance(command, DeviceCommand):
            command = DeviceCommand.from_dict(command)
        if command.is_empty:
            raise ValueError(
                "Command must set at least one of power, brightness or temperature"
            )

        commands = denormalize_command(command)
        logger.debug("Sending commands for device %s: %s", device_id, commands)
        response = await self.client.send_device_commands(device_id, commands)

        if response.get("success") is True:
            return CommandResult(True, "Command sent successfully", commands)

        message = response.get("msg") or "Failed to send command"
        logger.error("Failed to control device %s: %s", device_id, message)
        raise CommandRejectedError(
            f"Failed to control device: {message}", code=response.get("code")
        )
