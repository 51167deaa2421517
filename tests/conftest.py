"""Shared fixtures for SmartLife tests."""

from __future__ import annotations

from typing import Any

import pytest

from smartlife_cloud.client import CloudClient
from smartlife_cloud.config import CloudConfig
from smartlife_cloud.store import JsonFileStore

CONFIGURED = CloudConfig(
    api_key="access-id", api_secret="access-secret", endpoint="https://openapi.tuyaus.com"
)

LIGHT = {
    "id": "dev-light",
    "name": "Desk Lamp",
    "category": "dj",
    "product_id": "prod-1",
    "online": True,
    "status": [
        {"code": "switch_led", "value": True},
        {"code": "bright_value", "value": 80},
    ],
}

THERMOSTAT = {
    "id": "dev-wk",
    "name": "Hall Thermostat",
    "category": "wk",
    "product_id": "prod-2",
    "online": False,
    "status": [{"code": "temp_set", "value": "68"}],
}


class FakeCloudClient(CloudClient):
    """Cloud client answering from a table of canned responses."""

    def __init__(
        self,
        config: CloudConfig | None = CONFIGURED,
        responses: dict[tuple[str, str], Any] | None = None,
        uid: str = "",
    ) -> None:
        super().__init__(config)
        self.responses = responses or {}
        self.requests: list[tuple[str, str, Any, Any]] = []
        self.init_calls = 0
        self.fake_uid = uid

    @property
    def uid(self) -> str:
        return self.fake_uid

    @property
    def network_calls(self) -> int:
        return self.init_calls + len(self.requests)

    async def ensure_initialized(self) -> None:
        self.init_calls += 1

    async def authenticate(self) -> None:
        self.init_calls += 1

    async def request(
        self,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.requests.append((method, path, query, body))
        response = self.responses.get(
            (method, path), {"success": False, "code": 2001, "msg": "not found"}
        )
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fake_client() -> FakeCloudClient:
    return FakeCloudClient()


@pytest.fixture
def store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "config.json")


@pytest.fixture
def configured_store(store: JsonFileStore) -> JsonFileStore:
    for key, value in CONFIGURED.to_dict().items():
        store.set(key, value)
    return store
