from __future__ import annotations

import dataclasses
import json

import pytest

from pycarha.config import CarConfig
from pycarha.discovery import VirtualEntities
from pycarha.discovery.virtual import BUTTONS
from pycarha.models.diagnostic import Diagnostic, DiagnosticElement
from pycarha.models.vehicle import Vehicle

MONITOR_DEVICE = {
    "identifiers": ["XXX_Command_Status_Monitor"],
    "manufacturer": "foo",
    "model": "2020 bar",
    "name": "2020 foo bar Command Status Monitor Sensors",
    "suggested_area": "2020 foo bar Command Status Monitor Sensors",
}

VEHICLE_DEVICE = {
    "identifiers": ["XXX"],
    "manufacturer": "foo",
    "model": "2020 bar",
    "name": "2020 foo bar",
    "suggested_area": "2020 foo bar",
}

AVAILABILITY = {
    "topic": "homeassistant/XXX/available",
    "payload_available": "true",
    "payload_not_available": "false",
}


@pytest.fixture
def virtual(vehicle: Vehicle, config: CarConfig) -> VirtualEntities:
    return VirtualEntities(vehicle, config)


# ------------------------------------------------------------------
# Command status monitors
# ------------------------------------------------------------------


class TestCommandStatus:
    def test_status_sensor(self, virtual: VirtualEntities) -> None:
        message = virtual.command_status_sensor("lock")

        assert message.topic == "homeassistant/sensor/XXX/lock_status_monitor/config"
        assert message.retain is True
        assert message.payload == {
            "availability": AVAILABILITY,
            "device": MONITOR_DEVICE,
            "icon": "mdi:message-alert",
            "name": "Command lock Status Monitor",
            "state_topic": "homeassistant/XXX/command/lock/state",
            "unique_id": "xxx_lock_command_status_monitor",
            "value_template": "{{ value_json.command.error.message }}",
        }

    def test_timestamp_sensor(self, virtual: VirtualEntities) -> None:
        message = virtual.command_status_timestamp_sensor("lock")

        assert message.topic == "homeassistant/sensor/XXX/lock_status_timestamp/config"
        assert message.payload["device_class"] == "timestamp"
        assert message.payload["unique_id"] == "xxx_lock_command_status_timestamp_monitor"
        assert message.payload["value_template"] == "{{ value_json.completionTimestamp }}"

    def test_list_all_together_uses_vehicle_device(self, virtual: VirtualEntities) -> None:
        assert virtual.command_status_sensor("lock", list_all_together=True).payload["device"] == VEHICLE_DEVICE

    def test_config_default_for_device(self, vehicle: Vehicle, config: CarConfig) -> None:
        together = VirtualEntities(vehicle, dataclasses.replace(config, list_all_sensors_together=True))

        assert together.command_status_sensor("lock").payload["device"] == VEHICLE_DEVICE


# ------------------------------------------------------------------
# Polling status
# ------------------------------------------------------------------


class TestPollingStatus:
    def test_message_sensor(self, virtual: VirtualEntities) -> None:
        message = virtual.polling_status_message_sensor()

        assert message.topic == "homeassistant/sensor/XXX/polling_status_message/config"
        assert message.payload == {
            "device": MONITOR_DEVICE,
            "availability": AVAILABILITY,
            "unique_id": "xxx_polling_status_message",
            "name": "Polling Status Message",
            "state_topic": "homeassistant/XXX/polling_status/state",
            "value_template": "{{ value_json.error.message }}",
            "icon": "mdi:message-alert",
        }

    def test_code_sensor(self, virtual: VirtualEntities) -> None:
        payload = virtual.polling_status_code_sensor().payload

        assert payload["value_template"] == "{{ value_json.error.response.status | int(0) }}"

    def test_custom_state_topic(self, virtual: VirtualEntities) -> None:
        payload = virtual.polling_status_timestamp_sensor(state_topic="custom/state").payload

        assert payload["state_topic"] == "custom/state"
        assert payload["device_class"] == "timestamp"

    def test_refresh_interval_sensor(self, virtual: VirtualEntities) -> None:
        message = virtual.polling_refresh_interval_sensor()

        assert message.topic == "homeassistant/sensor/XXX/polling_refresh_interval/config"
        assert message.payload["state_topic"] == "homeassistant/XXX/refresh_interval_current_val"
        assert message.payload["unit_of_measurement"] == "ms"
        assert message.payload["device_class"] == "duration"

    def test_successful_sensor_is_problem_binary(self, virtual: VirtualEntities) -> None:
        message = virtual.polling_status_successful_sensor()

        assert message.topic == "homeassistant/binary_sensor/XXX/polling_status_tf/config"
        assert message.payload["unique_id"] == "xxx_polling_status_successful"
        assert message.payload["state_topic"] == "homeassistant/XXX/polling_status_tf/state"
        assert message.payload["payload_on"] == "false"
        assert message.payload["payload_off"] == "true"
        assert message.payload["device_class"] == "problem"

    def test_all_polling_sensors(self, virtual: VirtualEntities) -> None:
        messages = virtual.polling_status_sensors()

        assert len(messages) == 5
        assert all(m.retain for m in messages)


# ------------------------------------------------------------------
# Buttons
# ------------------------------------------------------------------


class TestButtons:
    def test_one_button_per_command(self, virtual: VirtualEntities) -> None:
        messages = virtual.button_configs()

        assert len(messages) == len(BUTTONS) == 22
        assert len({m.payload["unique_id"] for m in messages}) == 22

    def test_lock_doors(self, virtual: VirtualEntities) -> None:
        message = next(m for m in virtual.button_configs() if m.payload["name"] == "Command Lock Doors")

        assert message.topic == "homeassistant/button/XXX/lock_doors/config"
        assert message.payload == {
            "device": VEHICLE_DEVICE,
            "availability": AVAILABILITY,
            "unique_id": "xxx_command_lock-doors",
            "name": "Command Lock Doors",
            "icon": "mdi:car-door-lock",
            "command_topic": "homeassistant/XXX/command",
            "payload_press": '{"command": "lockDoor"}',
            "qos": 2,
            "enabled_by_default": False,
        }
        assert json.loads(message.payload["payload_press"]) == {"command": "lockDoor"}

    def test_monitor_buttons(self, virtual: VirtualEntities) -> None:
        message = next(m for m in virtual.monitor_button_configs() if m.payload["name"] == "Command Lock Doors")

        assert message.topic == "homeassistant/button/XXX/lock_doors_monitor/config"
        assert message.payload["unique_id"] == "xxx_command_lock-doors_monitor"
        assert message.payload["device"] == MONITOR_DEVICE


# ------------------------------------------------------------------
# Message sensors
# ------------------------------------------------------------------


class TestMessageSensors:
    def test_default_component(self, virtual: VirtualEntities) -> None:
        message = virtual.sensor_message_config("testSensor")

        assert message.topic == "homeassistant/sensor/XXX/testSensor_message/config"
        assert message.payload == {
            "device": VEHICLE_DEVICE,
            "availability": AVAILABILITY,
            "unique_id": "xxx_testSensor_message",
            "name": "TestSensor Message",
            "state_topic": "homeassistant/sensor/XXX/testSensor/state",
            "value_template": "{{ value_json.testSensor_message }}",
        }

    def test_words_are_capitalized(self, virtual: VirtualEntities) -> None:
        message = virtual.sensor_message_config("charge_prefs", "weekend_end_time", icon="mdi:clock")

        assert message.payload["name"] == "Weekend End Time Message"
        assert message.payload["icon"] == "mdi:clock"
        assert message.payload["value_template"] == "{{ value_json.weekend_end_time }}"

    def test_tire_message_name(self, virtual: VirtualEntities) -> None:
        message = virtual.sensor_message_config("tire_pressure", "tire_pressure_lf_message")

        assert message.payload["name"] == "Tire Pressure: Left Front Message"

    def test_tire_message_configs(self, virtual: VirtualEntities) -> None:
        tires = Diagnostic(
            name="TIRE PRESSURE",
            elements=(
                DiagnosticElement(name="TIRE PRESSURE LF", value="240", unit="kPa", message="YELLOW"),
                DiagnosticElement(name="TIRE PRESSURE RR", value="240", unit="kPa"),
                DiagnosticElement(name="TIRE PRESSURE LF PSI", value=34.8, unit="psi", message="YELLOW"),
                DiagnosticElement(name="TIRE PRESSURE PLACARD FRONT", value="262", unit="kPa", message="na"),
            ),
        )

        messages = virtual.tire_message_configs(tires)

        assert [m.topic for m in messages] == ["homeassistant/sensor/XXX/tire_pressure_lf_message/config"]
        assert messages[0].payload["state_topic"] == "homeassistant/sensor/XXX/tire_pressure/state"
        assert messages[0].payload["value_template"] == "{{ value_json.tire_pressure_lf_message }}"
        assert messages[0].payload["icon"] == "mdi:car-tire-alert"

    def test_other_groups_have_no_message_sensors(self, virtual: VirtualEntities) -> None:
        oil = Diagnostic(name="OIL LIFE", elements=(DiagnosticElement(name="OIL LIFE", value="80", message="na"),))

        assert virtual.tire_message_configs(oil) == []
