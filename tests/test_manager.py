"""Tests for the device directory."""

import pytest

from smartlife_cloud.config import CloudConfig
from smartlife_cloud.device import Device, DeviceType, normalize_device
from smartlife_cloud.errors import FetchError, TransportError, VendorSignatureError
from smartlife_cloud.manager import DeviceDirectory, DeviceListener

from .conftest import LIGHT, THERMOSTAT, FakeCloudClient

CACHED = [Device(id="cached-1", name="Old Plug", type=DeviceType.PLUG)]


class RecordingListener(DeviceListener):
    def __init__(self):
        self.updates = []

    def update_devices(self, devices):
        self.updates.append(devices)


async def test_unconfigured_returns_cache_without_network():
    client = FakeCloudClient(config=CloudConfig())
    directory = DeviceDirectory(client, CACHED)

    devices = await directory.refresh_devices()

    assert devices == CACHED
    assert client.network_calls == 0


async def test_user_listing_is_tried_first():
    client = FakeCloudClient(
        uid="uid-1",
        responses={
            ("GET", "/v1.0/users/uid-1/devices"): {"success": True, "result": [LIGHT]},
            ("GET", "/v1.0/devices"): {"success": True, "result": [THERMOSTAT]},
        },
    )
    directory = DeviceDirectory(client, CACHED)

    devices = await directory.refresh_devices()

    assert [d.id for d in devices] == ["dev-light"]
    assert [r[1] for r in client.requests] == ["/v1.0/users/uid-1/devices"]
    assert directory.devices == devices


async def test_falls_back_to_project_listing():
    client = FakeCloudClient(
        uid="uid-1",
        responses={
            ("GET", "/v1.0/users/uid-1/devices"): {"success": True, "result": []},
            ("GET", "/v1.0/devices"): {
                "success": True,
                "result": {"list": [LIGHT, THERMOSTAT], "total": 2},
            },
        },
    )
    directory = DeviceDirectory(client)

    devices = await directory.refresh_devices()

    assert devices == [normalize_device(LIGHT), normalize_device(THERMOSTAT)]
    assert devices[1].temperature == 68


async def test_user_listing_skipped_without_uid():
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices"): {"success": True, "result": [LIGHT]}}
    )
    directory = DeviceDirectory(client)

    await directory.refresh_devices()

    assert [r[1] for r in client.requests] == ["/v1.0/devices"]


async def test_explicit_uid_overrides_token_uid():
    client = FakeCloudClient(
        uid="token-uid",
        responses={("GET", "/v1.0/users/me/devices"): {"success": True, "result": [LIGHT]}},
    )
    directory = DeviceDirectory(client, uid="me")

    devices = await directory.refresh_devices()

    assert devices[0].id == "dev-light"


async def test_both_strategies_empty_raises_fetch_error():
    client = FakeCloudClient(
        uid="uid-1",
        responses={
            ("GET", "/v1.0/users/uid-1/devices"): {
                "success": False,
                "code": 1106,
                "msg": "permission deny",
            },
            ("GET", "/v1.0/devices"): {"success": True, "result": []},
        },
    )
    directory = DeviceDirectory(client, CACHED)

    with pytest.raises(FetchError) as exc_info:
        await directory.refresh_devices()

    message = str(exc_info.value)
    assert "credentials" in message
    assert "permissions" in message
    assert directory.devices == CACHED


async def test_transport_errors_propagate():
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices"): TransportError("network down")}
    )
    directory = DeviceDirectory(client, CACHED)

    with pytest.raises(TransportError):
        await directory.refresh_devices()
    assert directory.devices == CACHED


async def test_listeners_see_replaced_list():
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices"): {"success": True, "result": [LIGHT]}}
    )
    directory = DeviceDirectory(client)
    listener = RecordingListener()
    directory.add_device_listener(listener)

    devices = await directory.refresh_devices()

    assert listener.updates == [devices]


async def test_get_device_details():
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices/dev-wk"): {"success": True, "result": THERMOSTAT}}
    )
    directory = DeviceDirectory(client)

    device = await directory.get_device_details("dev-wk")

    assert device.type is DeviceType.THERMOSTAT
    assert device.temperature == 68


async def test_get_device_details_failure():
    directory = DeviceDirectory(FakeCloudClient())

    with pytest.raises(FetchError):
        await directory.get_device_details("missing")


async def test_get_device_status():
    status = [{"code": "switch_1", "value": True}]
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices/dev-1/status"): {"success": True, "result": status}}
    )
    directory = DeviceDirectory(client)

    assert await directory.get_device_status("dev-1") == status
    assert await directory.get_device_status("other") == []


async def test_connection_success_uses_single_item_page():
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices"): {"success": True, "result": {"list": []}}}
    )
    result = await DeviceDirectory(client).test_connection()

    assert result.success is True
    assert client.requests[0][2] == {"page_no": 1, "page_size": 1}


async def test_connection_unconfigured():
    client = FakeCloudClient(config=CloudConfig())
    result = await DeviceDirectory(client).test_connection()

    assert result.success is False
    assert result.error == "NotConfiguredError"
    assert client.network_calls == 0


class NodeStyleError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


async def test_connection_dns_error_differs_from_signature_error():
    dns_client = FakeCloudClient(
        responses={
            ("GET", "/v1.0/devices"): NodeStyleError(
                "getaddrinfo ENOTFOUND openapi.tuyaus.com", "ENOTFOUND"
            )
        }
    )
    sign_client = FakeCloudClient(
        responses={
            ("GET", "/v1.0/devices"): {"success": False, "code": 1004, "msg": "sign invalid"}
        }
    )

    dns = await DeviceDirectory(dns_client).test_connection()
    sign = await DeviceDirectory(sign_client).test_connection()

    assert dns.success is False and sign.success is False
    assert dns.error == "TransportError"
    assert sign.error == "VendorSignatureError"
    assert TransportError.hint in dns.message
    assert VendorSignatureError.hint in sign.message
    assert dns.message != sign.message


@pytest.mark.parametrize(
    ("code", "error"),
    [
        (1106, "VendorPermissionError"),
        (1010, "VendorRegionError"),
        (28841105, "VendorRateLimitError"),
        (500, "SmartLifeAPIError"),
    ],
)
async def test_connection_vendor_codes(code, error):
    client = FakeCloudClient(
        responses={("GET", "/v1.0/devices"): {"success": False, "code": code, "msg": "nope"}}
    )
    result = await DeviceDirectory(client).test_connection()

    assert result.error == error


async def test_connection_unknown_exception_keeps_message():
    client = FakeCloudClient(responses={("GET", "/v1.0/devices"): KeyError("result")})
    result = await DeviceDirectory(client).test_connection()

    assert result.success is False
    assert result.error == "KeyError"
    assert "result" in result.message
