from __future__ import annotations

from typing import Any

import pytest

from pycarha.cache.state import StateMergeCache
from pycarha.config import CarConfig
from pycarha.discovery import AdvancedDiagnosticsEntities
from pycarha.discovery.advanced import DEFAULT_SYSTEM_ICON, system_icon
from pycarha.ingestion.advanced import parse_advanced_diagnostics
from pycarha.models.advanced import AdvancedDiagnostics
from pycarha.models.vehicle import Vehicle


def _subsystem(label: str, color: str = "GREEN", dtcs: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "subSystemName": label.replace("_", " ").title(),
        "subSystemLabel": label,
        "subSystemStatus": "NO ACTION REQUIRED" if color == "GREEN" else "ACTION REQUIRED",
        "subSystemStatusColor": color,
        "subSystemDescription": "Subsystem description",
        "dtcs": dtcs or [],
    }


PAYLOAD: dict[str, Any] = {
    "advDiagnostics": {
        "cts": "2026-01-01T00:00:00Z",
        "diagnosticSystems": [
            {
                "systemId": "1",
                "systemName": "Engine and Transmission System",
                "systemLabel": "ENGINE_AND_TRANSMISSION_SYSTEM",
                "systemStatus": "NO ACTION REQUIRED",
                "systemStatusColor": "GREEN",
                "systemDescription": "Engine description",
                "subSystems": [_subsystem("DISPLACEMENT_ON_DEMAND_SUBSYSTEM")],
            },
            {
                "systemId": "2",
                "systemName": "Antilock Braking System",
                "systemLabel": "ANTILOCK_BRAKING_SYSTEM",
                "systemStatus": "ACTION REQUIRED",
                "systemStatusColor": "RED",
                "subSystems": [
                    _subsystem("BRAKE_MODULE_SUBSYSTEM", "RED"),
                    _subsystem("WHEEL_SPEED_SUBSYSTEM", dtcs=[{"dtcCode": "C0035", "dtcDescription": "Sensor"}]),
                    _subsystem("PUMP_SUBSYSTEM"),
                ],
            },
        ],
    }
}


@pytest.fixture
def diagnostics() -> AdvancedDiagnostics:
    parsed = parse_advanced_diagnostics(PAYLOAD)
    assert parsed is not None
    return parsed


@pytest.fixture
def entities(vehicle: Vehicle, config: CarConfig) -> AdvancedDiagnosticsEntities:
    return AdvancedDiagnosticsEntities(vehicle, config)


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


class TestParsing:
    def test_systems_and_subsystems(self, diagnostics: AdvancedDiagnostics) -> None:
        assert diagnostics.cts == "2026-01-01T00:00:00Z"
        assert [s.key for s in diagnostics.systems] == ["engine_and_transmission_system", "antilock_braking_system"]
        abs_system = diagnostics.systems[1]
        assert [s.key for s in abs_system.subsystems_with_issues] == [
            "brake_module_subsystem",
            "wheel_speed_subsystem",
        ]
        assert abs_system.subsystems[1].dtcs[0].code == "C0035"
        assert abs_system.subsystems[1].dtc_count == 1

    def test_envelopes(self) -> None:
        section = PAYLOAD["advDiagnostics"]

        assert parse_advanced_diagnostics(section) is not None
        assert parse_advanced_diagnostics({"data": {"advDiagnostics": section}}) is not None
        assert parse_advanced_diagnostics({"response": {"data": {"advDiagnostics": section}}}) is not None

    @pytest.mark.parametrize("payload", [None, [], {}, {"advDiagnostics": {"diagnosticSystems": "x"}}])
    def test_missing_or_malformed(self, payload: Any) -> None:
        assert parse_advanced_diagnostics(payload) is None


# ------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------


class TestEntities:
    def test_system_config(self, entities: AdvancedDiagnosticsEntities, diagnostics: AdvancedDiagnostics) -> None:
        message = entities.config(diagnostics.systems[0])

        assert message.topic == "homeassistant/sensor/XXX/engine_and_transmission_system/config"
        assert message.retain is True
        payload = message.payload
        assert payload["unique_id"] == "XXX-engine_and_transmission_system"
        assert payload["name"] == "Engine and Transmission System"
        assert payload["icon"] == "mdi:engine"
        assert payload["state_topic"] == "homeassistant/XXX/adv_diag/state"
        assert payload["value_template"] == "{{ value_json.engine_and_transmission_system }}"
        assert payload["json_attributes_template"] == (
            "{{ value_json.engine_and_transmission_system_attr | tojson }}"
        )
        assert payload["device"]["suggested_area"] == "2020 foo bar Sensors"

    def test_unknown_system_icon(self, diagnostics: AdvancedDiagnostics) -> None:
        system = diagnostics.systems[0].model_copy(update={"label": "NEW_SYSTEM", "name": "New"})

        assert system_icon(system) == DEFAULT_SYSTEM_ICON

    def test_state_payload(self, entities: AdvancedDiagnosticsEntities, diagnostics: AdvancedDiagnostics) -> None:
        state = entities.state_payload(diagnostics)

        assert state["engine_and_transmission_system"] == "NO ACTION REQUIRED"
        assert state["engine_and_transmission_system_attr"] == {
            "status_color": "GREEN",
            "last_updated": "2026-01-01T00:00:00Z",
            "dtc_count": 0,
            "description": "Engine description",
            "displacement_on_demand_subsystem": {
                "name": "Displacement On Demand Subsystem",
                "status": "NO ACTION REQUIRED",
                "status_color": "GREEN",
                "description": "Subsystem description",
                "dtc_count": 0,
            },
        }
        abs_attr = state["antilock_braking_system_attr"]
        assert abs_attr["subsystems_with_issues"] == ["Brake Module Subsystem", "Wheel Speed Subsystem"]
        assert abs_attr["wheel_speed_subsystem"]["dtc_count"] == 1

    def test_build_all(self, entities: AdvancedDiagnosticsEntities, diagnostics: AdvancedDiagnostics) -> None:
        messages = entities.build_all(diagnostics)

        assert len(messages) == 3
        assert messages[-1].topic == "homeassistant/XXX/adv_diag/state"
        assert messages[-1].retain is False

    def test_build_all_without_systems(self, entities: AdvancedDiagnosticsEntities) -> None:
        assert entities.build_all(AdvancedDiagnostics()) == []

    def test_state_goes_through_cache(
        self,
        vehicle: Vehicle,
        config: CarConfig,
        state_cache: StateMergeCache,
        diagnostics: AdvancedDiagnostics,
    ) -> None:
        cached = AdvancedDiagnosticsEntities(vehicle, config, state_cache)
        cached.build_state(diagnostics)

        partial = AdvancedDiagnostics(diagnosticSystems=[PAYLOAD["advDiagnostics"]["diagnosticSystems"][0]])
        message = cached.build_state(partial)

        assert "antilock_braking_system" in message.payload
        assert message.payload["_cache_updated_at"] == "2026-01-01T00:00:00+00:00"
