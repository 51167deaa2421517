"""Tests for credential config and the JSON store."""

import pytest
import voluptuous as vol

from smartlife_cloud.config import CloudConfig, load_config, save_config
from smartlife_cloud.const import DEFAULT_ENDPOINT
from smartlife_cloud.store import JsonFileStore


@pytest.mark.parametrize(
    ("key", "secret", "configured"),
    [("k", "s", True), ("k", "", False), ("", "s", False), ("", "", False)],
)
def test_is_configured(key, secret, configured):
    assert CloudConfig(key, secret).is_configured is configured


def test_from_dict_defaults_and_extra_keys():
    config = CloudConfig.from_dict({"apiKey": "k", "devices": []})
    assert config == CloudConfig(api_key="k", api_secret="", endpoint=DEFAULT_ENDPOINT)


def test_from_dict_strips_trailing_slash():
    config = CloudConfig.from_dict({"endpoint": "https://openapi.tuyacn.com/"})
    assert config.endpoint == "https://openapi.tuyacn.com"


@pytest.mark.parametrize("endpoint", ["openapi.tuyaus.com", "https://", "mars"])
def test_from_dict_rejects_bad_endpoint(endpoint):
    with pytest.raises(vol.Invalid):
        CloudConfig.from_dict({"endpoint": endpoint})


def test_save_and_load(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "config.json")
    config = CloudConfig("key", "secret", "https://openapi.tuyain.com")

    save_config(store, config)

    assert load_config(JsonFileStore(store.path)) == config


def test_store_get_default(tmp_path):
    store = JsonFileStore(tmp_path / "config.json")
    assert store.get("devices", []) == []
    assert not store.path.exists()


def test_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileStore(path)
    assert store.get("apiKey", "") == ""

    store.set("apiKey", "k")
    assert JsonFileStore(path).get("apiKey") == "k"
    assert [p.name for p in tmp_path.iterdir()] == ["config.json"]
