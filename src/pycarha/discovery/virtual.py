"""Entities that do not come from a diagnostic element.

Command status monitors, polling-status sensors, command buttons and
per-element message sensors.  None of them go through the classifier.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pycarha.discovery._base import EntityFactory
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.topics import TIRE_FRIENDLY_NAMES, convert_name
from pycarha.models.diagnostic import Diagnostic

_WHITESPACE_RE = re.compile(r"\s+")

#: Button label → (command, icon).
BUTTONS: dict[str, tuple[str, str]] = {
    "Alert": ("alert", "mdi:alert"),
    "Alert Flash": ("alertFlash", "mdi:car-light-alert"),
    "Alert Honk": ("alertHonk", "mdi:bullhorn"),
    "Cancel Alert": ("cancelAlert", "mdi:alert-remove"),
    "Lock Doors": ("lockDoor", "mdi:car-door-lock"),
    "Unlock Doors": ("unlockDoor", "mdi:car-door-lock-open"),
    "Lock Trunk": ("lockTrunk", "mdi:lock"),
    "Unlock Trunk": ("unlockTrunk", "mdi:lock-open"),
    "Start": ("startVehicle", "mdi:car-emergency"),
    "Cancel Start": ("cancelStartVehicle", "mdi:car-off"),
    "Flash Lights": ("flashLights", "mdi:car-parking-lights"),
    "Stop Lights": ("stopLights", "mdi:car-light-dimmed"),
    "Charge Override": ("chargeOverride", "mdi:ev-station"),
    "Cancel Charge Override": ("cancelChargeOverride", "mdi:battery-off"),
    "Stop Charging": ("stopCharging", "mdi:battery-charging-outline"),
    "Get Location": ("getLocation", "mdi:map-marker"),
    "Diagnostics": ("diagnostics", "mdi:car-info"),
    "Engine RPM": ("enginerpm", "mdi:engine"),
    "Get Charging Profile": ("getChargingProfile", "mdi:battery-charging-wireless"),
    "Get EV Charging Metrics": ("getEVChargingMetrics", "mdi:ev-plug-type1"),
    "Refresh EV Charging Metrics": ("refreshEVChargingMetrics", "mdi:refresh"),
    "Get Vehicle Recall Info": ("getVehicleRecallInfo", "mdi:alert-octagon"),
}


def _button_unique_id(text: str) -> str:
    return _WHITESPACE_RE.sub("-", text).lower()


def _message_name(component: str) -> str:
    """``"weekend_end_time_message"`` → ``"Weekend End Time Message"``.

    Only first letters are raised, so ``"testSensor"`` keeps its inner
    capital.
    """
    base = component[: -len("_message")] if component.endswith("_message") else component
    tire = TIRE_FRIENDLY_NAMES.get(base.replace("_", " ").upper())
    if tire is not None:
        return f"{tire} Message"
    words = [word[:1].upper() + word[1:] for word in base.split("_") if word]
    return " ".join(words + ["Message"])


class VirtualEntities(EntityFactory):
    """Builders for monitor, button and message entities."""

    # ------------------------------------------------------------------
    # Command status
    # ------------------------------------------------------------------

    def command_status_sensor(self, command: str, list_all_together: bool | None = None) -> DiscoveryMessage:
        """Sensor showing the last error message of *command*."""
        payload: dict[str, Any] = {
            "availability": self.availability_payload(),
            "device": self.virtual_device_payload(list_all_together),
            "icon": "mdi:message-alert",
            "name": f"Command {command} Status Monitor",
            "state_topic": self.topics.command_state(command),
            "unique_id": f"{self.vehicle.vin.lower()}_{command}_command_status_monitor",
            "value_template": "{{ value_json.command.error.message }}",
        }
        return self.config_message(f"{self.topics.prefix}/sensor/{self.vehicle.vin}/{command}_status_monitor/config", payload)

    def command_status_timestamp_sensor(
        self, command: str, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        """Timestamp of the last completion of *command*."""
        payload: dict[str, Any] = {
            "availability": self.availability_payload(),
            "device": self.virtual_device_payload(list_all_together),
            "device_class": "timestamp",
            "icon": "mdi:calendar-clock",
            "name": f"Command {command} Status Monitor Timestamp",
            "state_topic": self.topics.command_state(command),
            "unique_id": f"{self.vehicle.vin.lower()}_{command}_command_status_timestamp_monitor",
            "value_template": "{{ value_json.completionTimestamp }}",
        }
        return self.config_message(
            f"{self.topics.prefix}/sensor/{self.vehicle.vin}/{command}_status_timestamp/config", payload
        )

    # ------------------------------------------------------------------
    # Polling status
    # ------------------------------------------------------------------

    @property
    def polling_status_state_topic(self) -> str:
        return f"{self.topics.polling_status}/state"

    @property
    def polling_status_tf_state_topic(self) -> str:
        return f"{self.topics.polling_status}_tf/state"

    def _polling_sensor(
        self,
        component: str,
        name: str,
        state_topic: str,
        list_all_together: bool | None,
        kind: str = "sensor",
        unique_suffix: str | None = None,
        **extra: Any,
    ) -> DiscoveryMessage:
        payload: dict[str, Any] = {
            "device": self.virtual_device_payload(list_all_together),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin.lower()}_{unique_suffix or component}",
            "name": name,
            "state_topic": state_topic,
        }
        payload.update(extra)
        return self.config_message(f"{self.topics.prefix}/{kind}/{self.vehicle.vin}/{component}/config", payload)

    def polling_status_message_sensor(
        self, state_topic: str | None = None, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        return self._polling_sensor(
            "polling_status_message",
            "Polling Status Message",
            state_topic or self.polling_status_state_topic,
            list_all_together,
            value_template="{{ value_json.error.message }}",
            icon="mdi:message-alert",
        )

    def polling_status_code_sensor(
        self, state_topic: str | None = None, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        return self._polling_sensor(
            "polling_status_code",
            "Polling Status Code",
            state_topic or self.polling_status_state_topic,
            list_all_together,
            value_template="{{ value_json.error.response.status | int(0) }}",
            icon="mdi:sync-alert",
        )

    def polling_status_timestamp_sensor(
        self, state_topic: str | None = None, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        return self._polling_sensor(
            "polling_status_timestamp",
            "Polling Status Timestamp",
            state_topic or self.polling_status_state_topic,
            list_all_together,
            value_template="{{ value_json.completionTimestamp }}",
            device_class="timestamp",
            icon="mdi:calendar-clock",
        )

    def polling_refresh_interval_sensor(
        self, state_topic: str | None = None, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        return self._polling_sensor(
            "polling_refresh_interval",
            "Polling Refresh Interval",
            state_topic or self.topics.refresh_interval_current_val,
            list_all_together,
            value_template="{{ value | int(0) }}",
            icon="mdi:timer-check-outline",
            unit_of_measurement="ms",
            state_class="measurement",
            device_class="duration",
        )

    def polling_status_successful_sensor(
        self, state_topic: str | None = None, list_all_together: bool | None = None
    ) -> DiscoveryMessage:
        """Problem sensor: ``"false"`` on the TF topic means the last poll failed."""
        return self._polling_sensor(
            "polling_status_tf",
            "Polling Status Successful",
            state_topic or self.polling_status_tf_state_topic,
            list_all_together,
            kind="binary_sensor",
            unique_suffix="polling_status_successful",
            payload_on="false",
            payload_off="true",
            device_class="problem",
            icon="mdi:sync-alert",
        )

    def polling_status_sensors(self, list_all_together: bool | None = None) -> list[DiscoveryMessage]:
        return [
            self.polling_status_message_sensor(list_all_together=list_all_together),
            self.polling_status_code_sensor(list_all_together=list_all_together),
            self.polling_status_timestamp_sensor(list_all_together=list_all_together),
            self.polling_refresh_interval_sensor(list_all_together=list_all_together),
            self.polling_status_successful_sensor(list_all_together=list_all_together),
        ]

    # ------------------------------------------------------------------
    # Buttons
    # ------------------------------------------------------------------

    def _button(self, label: str, monitor: bool) -> DiscoveryMessage:
        command, icon = BUTTONS[label]
        component = convert_name(label)
        unique_id = f"{self.vehicle.vin}_Command_{label}"
        if monitor:
            component = f"{component}_monitor"
            unique_id = f"{unique_id}_Monitor"
        payload: dict[str, Any] = {
            "device": self.monitor_device_payload() if monitor else self.device_payload(),
            "availability": self.availability_payload(),
            "unique_id": _button_unique_id(unique_id),
            "name": f"Command {label}",
            "icon": icon,
            "command_topic": self.topics.command,
            "payload_press": json.dumps({"command": command}),
            "qos": 2,
            "enabled_by_default": False,
        }
        return self.config_message(f"{self.topics.prefix}/button/{self.vehicle.vin}/{component}/config", payload)

    def button_configs(self) -> list[DiscoveryMessage]:
        """One disabled-by-default button per remote command."""
        return [self._button(label, monitor=False) for label in BUTTONS]

    def monitor_button_configs(self) -> list[DiscoveryMessage]:
        """Button variants attached to the command status monitor device."""
        return [self._button(label, monitor=True) for label in BUTTONS]

    # ------------------------------------------------------------------
    # Message sensors
    # ------------------------------------------------------------------

    def sensor_message_config(
        self, sensor: str, component: str | None = None, icon: str | None = None
    ) -> DiscoveryMessage:
        """Text sensor exposing ``<component>`` of *sensor*'s state document.

        *component* defaults to ``<sensor>_message``.
        """
        component = component or f"{sensor}_message"
        payload: dict[str, Any] = {
            "device": self.device_payload(),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin.lower()}_{component}",
            "name": self.add_name_prefix(_message_name(component)),
            "state_topic": f"{self.topics.prefix}/sensor/{self.vehicle.vin}/{sensor}/state",
            "value_template": f"{{{{ value_json.{component} }}}}",
            "icon": icon,
        }
        return self.config_message(f"{self.topics.prefix}/sensor/{self.vehicle.vin}/{component}/config", payload)

    def tire_message_configs(self, diagnostic: Diagnostic) -> list[DiscoveryMessage]:
        """Message sensors for the wheels of a tire pressure group that carry a message."""
        if diagnostic.name != "TIRE PRESSURE":
            return []
        sensor = convert_name(diagnostic.name)
        return [
            self.sensor_message_config(sensor, f"{convert_name(element.name)}_message", icon="mdi:car-tire-alert")
            for element in diagnostic.elements
            if element.name in TIRE_FRIENDLY_NAMES and element.message is not None
        ]
