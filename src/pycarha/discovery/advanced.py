"""Advanced diagnostics: one sensor per vehicle system.

Every system sensor reads the shared ``<prefix>/<vin>/adv_diag/state``
document: ``<key>`` holds the system status and ``<key>_attr`` the
attributes (colour, DTC count, per-subsystem details).
"""

from __future__ import annotations

import logging
from typing import Any

from pycarha.cache.state import StateMergeCache
from pycarha.config import CarConfig
from pycarha.discovery._base import EntityFactory
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.models.advanced import AdvancedDiagnostics, AdvancedDiagnosticSystem
from pycarha.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_ICON = "mdi:car-info"

SYSTEM_ICONS: dict[str, str] = {
    "ENGINE_AND_TRANSMISSION_SYSTEM": "mdi:engine",
    "ANTILOCK_BRAKING_SYSTEM": "mdi:car-brake-abs",
    "STABILITRAK_STABILITY_CONTROL_SYSTEM": "mdi:car-esp",
    "AIRBAG_SYSTEM": "mdi:airbag",
    "EMISSIONS_SYSTEM": "mdi:smoke",
    "ONSTAR_SYSTEM": "mdi:car-connected",
    "ELECTRIC_LAMP_SYSTEM": "mdi:lightbulb-group",
}


def system_icon(system: AdvancedDiagnosticSystem) -> str:
    label = (system.label or system.name).upper().replace(" ", "_")
    return SYSTEM_ICONS.get(label, DEFAULT_SYSTEM_ICON)


def system_attributes(system: AdvancedDiagnosticSystem, last_updated: str | None = None) -> dict[str, Any]:
    """Attribute document for one system."""
    attributes: dict[str, Any] = {
        "status_color": system.status_color,
        "last_updated": last_updated,
        "dtc_count": system.dtc_count,
        "description": system.description,
    }
    for subsystem in system.subsystems:
        attributes[subsystem.key] = {
            "name": subsystem.name,
            "status": subsystem.status,
            "status_color": subsystem.status_color,
            "description": subsystem.description,
            "dtc_count": subsystem.dtc_count,
        }
    with_issues = system.subsystems_with_issues
    if with_issues:
        attributes["subsystems_with_issues"] = [sub.name or sub.label for sub in with_issues]
    return attributes


class AdvancedDiagnosticsEntities(EntityFactory):
    """Config and state messages for advanced diagnostics."""

    def __init__(
        self,
        vehicle: Vehicle,
        config: CarConfig,
        state_cache: StateMergeCache | None = None,
    ) -> None:
        super().__init__(vehicle, config)
        self._state_cache = state_cache

    @property
    def state_topic(self) -> str:
        return self.topics.advanced_diagnostics_state

    def config(self, system: AdvancedDiagnosticSystem) -> DiscoveryMessage:
        key = system.key
        payload: dict[str, Any] = {
            "device": self.device_payload(f"{self.vehicle} Sensors"),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin}-{key}",
            "name": self.add_name_prefix(system.name or key),
            "icon": system_icon(system),
            "state_topic": self.state_topic,
            "value_template": f"{{{{ value_json.{key} }}}}",
            "json_attributes_topic": self.state_topic,
            "json_attributes_template": f"{{{{ value_json.{key}_attr | tojson }}}}",
        }
        return self.config_message(f"{self.topics.prefix}/sensor/{self.vehicle.vin}/{key}/config", payload)

    def state_payload(self, diagnostics: AdvancedDiagnostics) -> dict[str, Any]:
        state: dict[str, Any] = {}
        for system in diagnostics.systems:
            key = system.key
            if not key:
                continue
            state[key] = system.status
            state[f"{key}_attr"] = system_attributes(system, diagnostics.cts)
        return state

    def build_state(self, diagnostics: AdvancedDiagnostics) -> DiscoveryMessage:
        payload = self.state_payload(diagnostics)
        if self._state_cache is not None:
            payload = self._state_cache.merge(self.state_topic, payload)
        return DiscoveryMessage(topic=self.state_topic, payload=payload, retain=False)

    def build_all(self, diagnostics: AdvancedDiagnostics) -> list[DiscoveryMessage]:
        """Config per system, then the shared state message."""
        messages = [self.config(system) for system in diagnostics.systems if system.key]
        if not messages:
            _logger.debug("No advanced diagnostic systems to publish")
            return []
        messages.append(self.build_state(diagnostics))
        return messages
