"""SmartLife control panel command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import voluptuous as vol

from .bridge import ControlPanel
from .const import REGION_ENDPOINTS, STORE_API_KEY, STORE_API_SECRET, STORE_ENDPOINT
from .errors import SmartLifeError
from .store import JsonFileStore, default_store_path


def _on_off(value: str) -> bool:
    value = value.lower()
    if value in ("on", "true", "1"):
        return True
    if value in ("off", "false", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected on or off, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="smartlife", description="Control Tuya smart-home devices"
    )
    parser.add_argument(
        "--store",
        default=str(default_store_path()),
        help="Path of the settings and device cache file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("devices", help="List devices (falls back to cache)")
    sub.add_parser("test", help="Test the API connection")

    config_parser = sub.add_parser("config", help="Show or update API credentials")
    config_parser.add_argument("--api-key", help="Access ID")
    config_parser.add_argument("--api-secret", help="Access Secret")
    endpoint = config_parser.add_mutually_exclusive_group()
    endpoint.add_argument("--endpoint", help="API endpoint URL")
    endpoint.add_argument("--region", choices=sorted(REGION_ENDPOINTS), help="Data center")

    control_parser = sub.add_parser("control", help="Send a command to a device")
    control_parser.add_argument("device", help="Device id")
    control_parser.add_argument("--power", type=_on_off, help="on or off")
    control_parser.add_argument("--brightness", type=int, help="Brightness 0-100")
    control_parser.add_argument("--temperature", type=int, help="Target temperature")

    details_parser = sub.add_parser("details", help="Show device details")
    details_parser.add_argument("device", help="Device id")

    status_parser = sub.add_parser("status", help="Show raw device status")
    status_parser.add_argument("device", help="Device id")

    return parser


async def _update_config(panel: ControlPanel, args: argparse.Namespace) -> Any:
    config = await panel.get_user_config()
    updates = {
        STORE_API_KEY: args.api_key,
        STORE_API_SECRET: args.api_secret,
        STORE_ENDPOINT: args.region or args.endpoint,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    if updates:
        await panel.save_user_config({**config, **updates})
        config = await panel.get_user_config()
    if config[STORE_API_SECRET]:
        config[STORE_API_SECRET] = "********"
    return config


async def run(args: argparse.Namespace) -> Any:
    """Run one command and return its JSON-ready result."""
    async with ControlPanel(JsonFileStore(args.store)) as panel:
        if args.command == "devices":
            return await panel.get_devices()
        if args.command == "test":
            return await panel.test_connection()
        if args.command == "config":
            return await _update_config(panel, args)
        if args.command == "control":
            command = {
                "power": args.power,
                "brightness": args.brightness,
                "temperature": args.temperature,
            }
            return await panel.control_device(
                args.device, {k: v for k, v in command.items() if v is not None}
            )
        if args.command == "details":
            return await panel.get_device_details(args.device)
        if args.command == "status":
            return await panel.get_device_status(args.device)
    raise ValueError(f"Unknown command {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Entry point of the smartlife command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Suppress overly verbose logs
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    try:
        result = asyncio.run(run(args))
    except (SmartLifeError, ValueError, vol.Invalid) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0
