from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import paho.mqtt.client as mqtt
import pytest

from pycarha.config import CarConfig
from pycarha.discovery import DiscoveryMessage
from pycarha.exceptions import CarPublishError
from pycarha.publisher import MqttPublisher, encode_payload


class FakeClient:
    instances: list[FakeClient] = []

    def __init__(self, *, callback_api_version: Any, client_id: str) -> None:
        self.callback_api_version = callback_api_version
        self.client_id = client_id
        self.credentials: tuple[str, str | None] | None = None
        self.tls = False
        self.will: tuple[str, str, int, bool] | None = None
        self.connected_to: tuple[str, int, int] | None = None
        self.loop_running = False
        self.disconnected = False
        self.published: list[tuple[str, str, int, bool]] = []
        self.next_rc = mqtt.MQTT_ERR_SUCCESS
        self.on_connect = None
        self.on_disconnect = None
        FakeClient.instances.append(self)

    def enable_logger(self, logger: Any) -> None:
        self.logger = logger

    def username_pw_set(self, username: str, password: str | None = None) -> None:
        self.credentials = (username, password)

    def tls_set(self) -> None:
        self.tls = True

    def will_set(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> None:
        self.will = (topic, payload, qos, retain)

    def connect(self, host: str, port: int, keepalive: int = 60) -> None:
        self.connected_to = (host, port, keepalive)

    def loop_start(self) -> None:
        self.loop_running = True

    def loop_stop(self) -> None:
        self.loop_running = False

    def disconnect(self) -> None:
        self.disconnected = True

    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> SimpleNamespace:
        self.published.append((topic, payload, qos, retain))
        return SimpleNamespace(rc=self.next_rc)


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> type[FakeClient]:
    FakeClient.instances = []
    monkeypatch.setattr("pycarha.publisher.mqtt.Client", FakeClient)
    return FakeClient


@pytest.fixture
def publisher(config: CarConfig, fake_client: type[FakeClient]) -> MqttPublisher:
    publisher = MqttPublisher(config)
    publisher.start()
    return publisher


def _client() -> FakeClient:
    return FakeClient.instances[-1]


def test_encode_payload() -> None:
    assert encode_payload("true") == "true"
    assert encode_payload({"a": 1}) == '{"a": 1}'
    assert encode_payload(30000) == "30000"
    assert encode_payload(None) == "null"


class TestLifecycle:
    def test_start_configures_client(self, fake_client: type[FakeClient], tmp_path) -> None:
        config = CarConfig(
            vin="XXX",
            cache_dir=str(tmp_path),
            mqtt_host="broker.local",
            mqtt_port=8883,
            mqtt_username="user",
            mqtt_password="secret",
            mqtt_tls=True,
            mqtt_keepalive=30,
        )

        publisher = MqttPublisher(config)
        publisher.start()

        client = _client()
        assert publisher.is_running
        assert client.client_id == "pycarha_XXX"
        assert client.callback_api_version == mqtt.CallbackAPIVersion.VERSION2
        assert client.credentials == ("user", "secret")
        assert client.tls is True
        assert client.will == ("homeassistant/XXX/available", "false", 1, True)
        assert client.connected_to == ("broker.local", 8883, 30)
        assert client.loop_running is True

    def test_anonymous_plain_connection(self, publisher: MqttPublisher) -> None:
        client = _client()

        assert client.credentials is None
        assert client.tls is False

    def test_stop(self, publisher: MqttPublisher) -> None:
        client = _client()

        publisher.stop()

        assert not publisher.is_running
        assert client.disconnected is True
        assert client.loop_running is False
        publisher.stop()

    def test_restart_replaces_client(self, publisher: MqttPublisher) -> None:
        first = _client()

        publisher.start()

        assert first.disconnected is True
        assert len(FakeClient.instances) == 2


class TestPublish:
    def test_publish_honours_retain(self, publisher: MqttPublisher) -> None:
        publisher.publish(DiscoveryMessage("a/config", {"name": "A"}, retain=True))
        publisher.publish(DiscoveryMessage("a/state", {"a": 1}))

        assert _client().published == [
            ("a/config", '{"name": "A"}', 1, True),
            ("a/state", '{"a": 1}', 1, False),
        ]

    def test_publish_all_counts(self, publisher: MqttPublisher) -> None:
        count = publisher.publish_all(DiscoveryMessage(f"t/{i}", "x") for i in range(3))

        assert count == 3
        assert [p[0] for p in _client().published] == ["t/0", "t/1", "t/2"]

    def test_publish_availability(self, publisher: MqttPublisher) -> None:
        publisher.publish_availability(True)
        publisher.publish_availability(False)

        assert _client().published == [
            ("homeassistant/XXX/available", "true", 1, True),
            ("homeassistant/XXX/available", "false", 1, True),
        ]

    def test_rejected_publish_raises(self, publisher: MqttPublisher) -> None:
        _client().next_rc = mqtt.MQTT_ERR_NO_CONN

        with pytest.raises(CarPublishError) as excinfo:
            publisher.publish(DiscoveryMessage("a/state", {"a": 1}))

        assert excinfo.value.topic == "a/state"
        assert excinfo.value.rc == mqtt.MQTT_ERR_NO_CONN

    def test_publish_before_start_raises(self, config: CarConfig) -> None:
        with pytest.raises(CarPublishError):
            MqttPublisher(config).publish(DiscoveryMessage("a/state", "x"))

    def test_published_payload_is_json(self, publisher: MqttPublisher) -> None:
        publisher.publish(DiscoveryMessage("a/state", {"ambient_air_temperature": 15, "unit": "°C"}))

        assert json.loads(_client().published[0][1]) == {"ambient_air_temperature": 15, "unit": "°C"}
