from __future__ import annotations

from pathlib import Path

import pytest

from pycarha.config import CarConfig
from pycarha.exceptions import CarConfigError

_ENV_KEYS = (
    "CARHA_VIN",
    "CARHA_UNIT_CACHE_DIR",
    "CARHA_TOKEN_LOCATION",
    "CARHA_STATE_CACHE_ENABLED",
    "CARHA_DISCOVERY_PREFIX",
    "CARHA_NAME_PREFIX",
    "CARHA_LIST_ALL_SENSORS_TOGETHER",
    "CARHA_MQTT_HOST",
    "CARHA_MQTT_PORT",
    "CARHA_MQTT_USERNAME",
    "CARHA_MQTT_PASSWORD",
    "CARHA_MQTT_TLS",
    "CARHA_MQTT_KEEPALIVE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_defaults() -> None:
    config = CarConfig.from_env()

    assert config.vin == "default"
    assert config.state_cache_enabled is False
    assert config.discovery_prefix == "homeassistant"
    assert config.name_prefix is None
    assert config.mqtt_port == 1883
    assert config.mqtt_keepalive == 60


def test_from_env_reads_variables(monkeypatch) -> None:
    monkeypatch.setenv("CARHA_VIN", "1G1FY6S07N4100000")
    monkeypatch.setenv("CARHA_STATE_CACHE_ENABLED", "true")
    monkeypatch.setenv("CARHA_MQTT_PORT", "8883")
    monkeypatch.setenv("CARHA_NAME_PREFIX", "Bolt")

    config = CarConfig.from_env()

    assert config.vin == "1G1FY6S07N4100000"
    assert config.state_cache_enabled is True
    assert config.mqtt_port == 8883
    assert config.name_prefix == "Bolt"


def test_from_env_overrides_win(monkeypatch) -> None:
    monkeypatch.setenv("CARHA_STATE_CACHE_ENABLED", "true")
    monkeypatch.setenv("CARHA_MQTT_PORT", "8883")

    config = CarConfig.from_env(state_cache_enabled=False, mqtt_port=1884)

    assert config.state_cache_enabled is False
    assert config.mqtt_port == 1884


def test_from_env_invalid_port_raises(monkeypatch) -> None:
    monkeypatch.setenv("CARHA_MQTT_PORT", "not-a-port")

    with pytest.raises(CarConfigError):
        CarConfig.from_env()


def test_resolve_cache_dir_order(tmp_path: Path) -> None:
    cache_dir = tmp_path / "cache"
    tokens = tmp_path / "tokens"

    assert CarConfig(cache_dir=str(cache_dir), token_location=str(tokens)).resolve_cache_dir() == cache_dir
    assert CarConfig(token_location=str(tokens)).resolve_cache_dir() == tokens
    assert CarConfig().resolve_cache_dir() == Path.cwd()
