"""Shared device and availability blocks for discovery payloads."""

from __future__ import annotations

from typing import Any

from pycarha._constants import PAYLOAD_AVAILABLE, PAYLOAD_NOT_AVAILABLE
from pycarha.config import CarConfig
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.topics import DiscoveryTopics
from pycarha.models.vehicle import Vehicle

MONITOR_DEVICE_SUFFIX = "Command Status Monitor"


def drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is ``None`` (Home Assistant treats them as set)."""
    return {key: value for key, value in payload.items() if value is not None}


class EntityFactory:
    """Base for the discovery builders of one vehicle."""

    def __init__(self, vehicle: Vehicle, config: CarConfig) -> None:
        self.vehicle = vehicle
        self.config = config
        self.topics = DiscoveryTopics(config.discovery_prefix, vehicle.vin)

    def add_name_prefix(self, name: str | None) -> str:
        """Prepend the configured name prefix, if any."""
        name = name or ""
        if not self.config.name_prefix:
            return name
        return f"{self.config.name_prefix} {name}"

    def device_payload(self, suggested_area: str | None = None) -> dict[str, Any]:
        """Device block grouping every entity of the vehicle."""
        return {
            "identifiers": [self.vehicle.vin],
            "manufacturer": self.vehicle.make,
            "model": f"{self.vehicle.year} {self.vehicle.model}",
            "name": str(self.vehicle),
            "suggested_area": suggested_area if suggested_area is not None else str(self.vehicle),
        }

    def monitor_device_payload(self) -> dict[str, Any]:
        """Separate device for command and polling monitor entities."""
        name = f"{self.vehicle} {MONITOR_DEVICE_SUFFIX} Sensors"
        return {
            "identifiers": [f"{self.vehicle.vin}_Command_Status_Monitor"],
            "manufacturer": self.vehicle.make,
            "model": f"{self.vehicle.year} {self.vehicle.model}",
            "name": name,
            "suggested_area": name,
        }

    def virtual_device_payload(self, list_all_together: bool | None = None) -> dict[str, Any]:
        if list_all_together is None:
            list_all_together = self.config.list_all_sensors_together
        return self.device_payload() if list_all_together else self.monitor_device_payload()

    def availability_payload(self) -> dict[str, str]:
        """Availability block used by entities outside the diagnostic groups."""
        return {
            "topic": self.topics.availability,
            "payload_available": PAYLOAD_AVAILABLE,
            "payload_not_available": PAYLOAD_NOT_AVAILABLE,
        }

    @staticmethod
    def config_message(topic: str, payload: dict[str, Any]) -> DiscoveryMessage:
        return DiscoveryMessage(topic=topic, payload=drop_none(payload), retain=True)
