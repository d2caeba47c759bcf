"""Vehicle-level entities: recalls, image and EV charging metrics."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from pycarha.discovery._base import EntityFactory
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.models.recall import Recall

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _dig(payload: Any, *path: str) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


@dataclasses.dataclass(frozen=True)
class EvMetric:
    """One field of the EV charging-metrics response."""

    field: str
    key: str
    name: str
    binary: bool = False
    device_class: str | None = None
    unit: str | None = None
    state_class: str | None = None
    icon: str | None = None


EV_METRICS: tuple[EvMetric, ...] = (
    EvMetric("tcl", "ev_target_charge_level", "EV Target Charge Level", device_class="battery", unit="%",
             state_class="measurement", icon="mdi:battery-charging-80"),
    EvMetric("kwh", "ev_battery_capacity", "EV Battery Capacity", device_class="energy_storage", unit="kWh",
             state_class="measurement", icon="mdi:battery"),
    EvMetric("tripodo", "ev_trip_odometer", "EV Trip Odometer", device_class="distance", unit="km",
             state_class="total_increasing", icon="mdi:counter"),
    EvMetric("tripcons", "ev_trip_consumption", "EV Trip Consumption", unit="kWh/100km",
             state_class="measurement", icon="mdi:lightning-bolt"),
    EvMetric("lifecons", "ev_lifetime_consumption", "EV Lifetime Consumption", unit="kWh/100km",
             state_class="measurement", icon="mdi:lightning-bolt-outline"),
    EvMetric("cmode", "ev_charge_mode", "EV Charge Mode", icon="mdi:ev-station"),
    EvMetric("clocSet", "ev_charge_location_set", "EV Charge Location Set", binary=True, icon="mdi:map-marker-check"),
    EvMetric("clocAt", "ev_at_charge_location", "EV At Charge Location", binary=True, icon="mdi:home-lightning-bolt"),
    EvMetric("disEnabled", "ev_discharge_enabled", "EV Discharge Enabled", binary=True, icon="mdi:transmission-tower-export"),
    EvMetric("disMinSoc", "ev_discharge_min_soc", "EV Discharge Minimum SoC", device_class="battery", unit="%",
             state_class="measurement", icon="mdi:battery-arrow-down"),
)


@dataclasses.dataclass(frozen=True)
class MetricEntity:
    """Config message of one metric with the value for its state topic."""

    topic: str
    payload: dict[str, Any]
    state: Any
    state_topic: str

    def messages(self) -> list[DiscoveryMessage]:
        return [
            DiscoveryMessage(topic=self.topic, payload=self.payload, retain=True),
            DiscoveryMessage(topic=self.state_topic, payload=self.state, retain=True),
        ]


def parse_recalls(payload: Any) -> list[Recall]:
    """Recalls from a recall-info response (``data.vehicleDetails.recallInfo``)."""
    items = _dig(payload, "data", "vehicleDetails", "recallInfo")
    if not isinstance(items, list):
        return []
    recalls: list[Recall] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            recalls.append(Recall.model_validate(item))
        except ValidationError as exc:
            _logger.warning("Skipping unparseable recall %r: %s", item.get("recallId"), exc)
    return recalls


class VehicleInfoEntities(EntityFactory):
    """Builders for entities describing the vehicle as a whole."""

    # ------------------------------------------------------------------
    # Recalls
    # ------------------------------------------------------------------

    @property
    def recall_state_topic(self) -> str:
        return f"{self.topics.prefix}/sensor/{self.vehicle.vin}/vehicle_recalls/state"

    def recall_config(self) -> DiscoveryMessage:
        state_topic = self.recall_state_topic
        payload: dict[str, Any] = {
            "device": self.device_payload(),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin}_vehicle_recalls",
            "name": self.add_name_prefix("Vehicle Recalls"),
            "icon": "mdi:alert-octagon",
            "state_topic": state_topic,
            "json_attributes_topic": state_topic,
            "json_attributes_template": "{{ value_json.attributes | tojson }}",
            "value_template": "{{ value_json.unrepaired_active_recall_count }}",
        }
        return self.config_message(f"{self.topics.prefix}/sensor/{self.vehicle.vin}/vehicle_recalls/config", payload)

    def recall_state(
        self,
        payload: Any,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> dict[str, Any]:
        """Recall counters plus the full recall list as attributes.

        The sensor value counts unrepaired recalls of active or expired
        campaigns.  Missing data yields zero counts.
        """
        recalls = parse_recalls(payload)
        active = [r for r in recalls if r.is_active]
        incomplete = [r for r in recalls if r.is_repair_incomplete]
        unrepaired = [r for r in recalls if r.is_unrepaired_active]
        return {
            "recall_count": len(recalls),
            "active_recalls_count": len(active),
            "incomplete_repairs_count": len(incomplete),
            "unrepaired_active_recall_count": len(unrepaired),
            "attributes": {
                "has_active_recalls": bool(active),
                "has_unrepaired_active_recalls": bool(unrepaired),
                "last_updated": clock().isoformat(),
                "recalls": [r.to_attributes() for r in recalls],
            },
        }

    def recall_messages(self, payload: Any, *, clock: Callable[[], datetime] = _utcnow) -> list[DiscoveryMessage]:
        return [
            self.recall_config(),
            DiscoveryMessage(topic=self.recall_state_topic, payload=self.recall_state(payload, clock=clock), retain=True),
        ]

    # ------------------------------------------------------------------
    # Image
    # ------------------------------------------------------------------

    @property
    def image_state_topic(self) -> str:
        return f"{self.topics.prefix}/image/{self.vehicle.vin}/vehicle_image/state"

    def image_config(self) -> DiscoveryMessage:
        payload: dict[str, Any] = {
            "device": self.device_payload(),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin}_vehicle_image",
            "name": self.add_name_prefix("Vehicle Image"),
            "icon": "mdi:car",
            "url_topic": self.image_state_topic,
        }
        return self.config_message(f"{self.topics.prefix}/image/{self.vehicle.vin}/vehicle_image/config", payload)

    def image_state(self, vehicle_payload: Any = None) -> str:
        """Image URL from an account-vehicle record, or the vehicle's own."""
        if vehicle_payload is None:
            return self.vehicle.image_url
        url = _dig(vehicle_payload, "imageUrl")
        return url if isinstance(url, str) else ""

    def image_messages(self, vehicle_payload: Any = None) -> list[DiscoveryMessage]:
        return [
            self.image_config(),
            DiscoveryMessage(topic=self.image_state_topic, payload=self.image_state(vehicle_payload), retain=True),
        ]

    # ------------------------------------------------------------------
    # EV charging metrics
    # ------------------------------------------------------------------

    def _metric_payload(self, metric: EvMetric, state_topic: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "device": self.device_payload(),
            "availability": self.availability_payload(),
            "unique_id": f"{self.vehicle.vin}_{metric.key}".lower(),
            "name": self.add_name_prefix(metric.name),
            "state_topic": state_topic,
            "icon": metric.icon,
            "device_class": metric.device_class,
        }
        if metric.binary:
            payload["payload_on"] = True
            payload["payload_off"] = False
        else:
            payload["unit_of_measurement"] = metric.unit
            payload["state_class"] = metric.state_class
        return payload

    def ev_charging_metrics(self, payload: Any) -> list[MetricEntity]:
        """One entity per metric present in ``data.results[0]``.

        Missing and ``None`` values are skipped.
        """
        results = _dig(payload, "data", "results")
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            return []
        result = results[0]
        entities: list[MetricEntity] = []
        for metric in EV_METRICS:
            value = result.get(metric.field)
            if value is None:
                continue
            kind = "binary_sensor" if metric.binary else "sensor"
            base = f"{self.topics.prefix}/{kind}/{self.vehicle.vin}/{metric.key}"
            state_topic = f"{base}/state"
            config = self.config_message(f"{base}/config", self._metric_payload(metric, state_topic))
            entities.append(
                MetricEntity(topic=config.topic, payload=config.payload, state=value, state_topic=state_topic)
            )
        return entities
