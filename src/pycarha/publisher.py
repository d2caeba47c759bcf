"""paho-mqtt adapter that forwards discovery messages to the broker."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, cast

import paho.mqtt.client as mqtt

from pycarha._constants import PAYLOAD_AVAILABLE, PAYLOAD_NOT_AVAILABLE
from pycarha._redact import redact_for_log
from pycarha.config import CarConfig
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.topics import DiscoveryTopics
from pycarha.exceptions import CarPublishError

PUBLISH_QOS = 1


def encode_payload(payload: Any) -> str:
    """Wire form of a message payload.

    Strings go out as-is; everything else is JSON-encoded.
    """
    if isinstance(payload, str):
        return payload
    return json.dumps(payload)


class MqttPublisher:
    """Threaded paho-mqtt client publishing :class:`DiscoveryMessage` values.

    Reconnection is left to paho's network loop.
    """

    def __init__(
        self,
        config: CarConfig,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._topics = DiscoveryTopics(config.discovery_prefix, config.vin)
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the network loop is running."""
        return self._running

    def start(self) -> None:
        """Connect to the broker and start the network loop."""
        self.stop()
        config = self._config
        self._logger.debug(
            "MQTT publisher start requested host=%s port=%s tls=%s",
            config.mqtt_host,
            config.mqtt_port,
            config.mqtt_tls,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=f"pycarha_{config.vin}",
        )
        client.enable_logger(self._logger)
        if config.mqtt_username:
            client.username_pw_set(config.mqtt_username, config.mqtt_password)
        if config.mqtt_tls:
            client.tls_set()
        client.will_set(self._topics.availability, PAYLOAD_NOT_AVAILABLE, qos=PUBLISH_QOS, retain=True)

        def on_connect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        client.connect(config.mqtt_host, config.mqtt_port, keepalive=config.mqtt_keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Disconnect and stop the network loop if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def publish(self, message: DiscoveryMessage) -> None:
        """Publish one message with QoS 1, honouring its ``retain`` flag.

        Raises
        ------
        CarPublishError
            If the publisher is not started or paho rejects the message.
        """
        client = self._client
        if client is None:
            raise CarPublishError("MQTT publisher is not started", topic=message.topic)
        self._logger.debug(
            "Publishing topic=%s retain=%s payload=%s",
            message.topic,
            message.retain,
            redact_for_log(message.payload),
        )
        info = client.publish(
            message.topic,
            encode_payload(message.payload),
            qos=PUBLISH_QOS,
            retain=message.retain,
        )
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise CarPublishError(
                f"Publish to {message.topic} rejected: {mqtt.error_string(info.rc)}",
                topic=message.topic,
                rc=info.rc,
            )

    def publish_all(self, messages: Iterable[DiscoveryMessage]) -> int:
        """Publish *messages* in order and return how many were sent."""
        count = 0
        for message in messages:
            self.publish(message)
            count += 1
        return count

    def publish_availability(self, online: bool) -> None:
        """Mark every entity of the vehicle available or unavailable."""
        payload = PAYLOAD_AVAILABLE if online else PAYLOAD_NOT_AVAILABLE
        self.publish(DiscoveryMessage(topic=self._topics.availability, payload=payload, retain=True))
