"""Discovery payload synthesis for diagnostic groups.

Each element of a :class:`Diagnostic` becomes one Home Assistant entity
whose config message points at the group's shared state topic.  The
group publishes a single state document carrying every element's value
and auxiliary fields (``<name>_message``, ``<name>_status``...).
"""

from __future__ import annotations

import logging
from typing import Any

from pycarha._constants import PAYLOAD_AVAILABLE, PAYLOAD_NOT_AVAILABLE
from pycarha.cache.state import StateMergeCache
from pycarha.classify import EntityKind, SensorClassification, classify, coerce_value
from pycarha.classify.rules import COMPANION_SUFFIXES
from pycarha.config import CarConfig
from pycarha.discovery._base import EntityFactory, drop_none
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.topics import convert_friendly_name, convert_name
from pycarha.ingestion.normalize import correct_unit
from pycarha.models.diagnostic import Diagnostic, DiagnosticElement
from pycarha.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

_TIRE_POSITIONS = {"LF": "front", "RF": "front", "LR": "rear", "RR": "rear"}
_STATUS_ATTRIBUTE_SENSORS = frozenset(
    {"FUEL LEVEL", "BATT SAVER MODE COUNTER", "BATT SAVER MODE SEV LVL", "EOL READ"}
)
_MESSAGE_ATTRIBUTE_SENSORS = frozenset({"OIL LIFE"})


def _base_name(name: str) -> str:
    for suffix in COMPANION_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def _tire_position(name: str) -> str | None:
    base = _base_name(name)
    if not base.startswith("TIRE PRESSURE "):
        return None
    return _TIRE_POSITIONS.get(base[len("TIRE PRESSURE ") :])


def json_attributes_template(name: str | None) -> str:
    """Template exposing the element's auxiliary fields as attributes.

    ``last_updated`` is always listed; tire pressures add the placard
    recommendation and message, a few sensors add status and colour.
    """
    key = convert_name(name)
    name = name or ""
    attributes: list[tuple[str, str]] = []
    position = _tire_position(name)
    if position is not None:
        attributes.append(("recommendation", f"tire_pressure_placard_{position}"))
        attributes.append(("message", f"{key}_message"))
    elif name in _MESSAGE_ATTRIBUTE_SENSORS:
        attributes.append(("message", f"{key}_message"))
    elif name in _STATUS_ATTRIBUTE_SENSORS:
        attributes.append(("status", f"{key}_status"))
        attributes.append(("status_color", f"{key}_status_color"))
    attributes.append(("last_updated", f"{key}_last_updated"))
    body = ", ".join(f"'{attr}': value_json.{field}" for attr, field in attributes)
    return "{{ {" + body + "} | tojson }}"


class DiscoverySynthesizer(EntityFactory):
    """Build config and state messages for one vehicle's diagnostics.

    Parameters
    ----------
    vehicle : Vehicle
        Vehicle the entities belong to.
    config : CarConfig
        Discovery prefix and naming options.
    state_cache : StateMergeCache or None
        State documents go through ``state_cache.merge`` before being
        returned.  ``None`` publishes them as built.
    """

    def __init__(
        self,
        vehicle: Vehicle,
        config: CarConfig,
        state_cache: StateMergeCache | None = None,
    ) -> None:
        super().__init__(vehicle, config)
        self._state_cache = state_cache

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def config_topic(self, target: Diagnostic | DiagnosticElement) -> str:
        """Config topic of a group or element, under its own entity kind."""
        kind = classify(target.name).entity_kind
        if kind is EntityKind.DEVICE_TRACKER:
            return self.topics.device_tracker_config
        return self.topics.config_topic(target.name, kind)

    def state_topic(self, target: Diagnostic | DiagnosticElement) -> str:
        """State topic; for an element this is its own topic, not the group's."""
        return self.topics.state_topic(target.name, classify(target.name).entity_kind)

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------

    def _unit(self, element: DiagnosticElement, classification: SensorClassification) -> str | None:
        if not classification.has_unit:
            return None
        if classification.unit_override is not None:
            return classification.unit_override
        return correct_unit(element.unit)

    def config_payload(self, diagnostic: Diagnostic, element: DiagnosticElement) -> dict[str, Any]:
        """Discovery config for *element*, reading state from the group topic."""
        classification = classify(element.name)
        key = convert_name(element.name)
        state_topic = self.state_topic(diagnostic)
        payload: dict[str, Any] = {
            "availability_topic": self.topics.availability,
            "device": self.device_payload(f"{self.vehicle} Sensors"),
            "state_class": classification.state_class,
            "device_class": classification.device_class,
            "icon": classification.icon,
            "json_attributes_template": json_attributes_template(element.name),
            "json_attributes_topic": state_topic,
            "name": self.add_name_prefix(convert_friendly_name(element.name)),
            "payload_available": PAYLOAD_AVAILABLE,
            "payload_not_available": PAYLOAD_NOT_AVAILABLE,
            "state_topic": state_topic,
            "unique_id": f"{self.vehicle.vin}-{key}".replace("_", "-").lower(),
            "value_template": f"{{{{ value_json.{key} }}}}",
        }
        if classification.entity_kind is EntityKind.BINARY_SENSOR:
            payload["payload_on"] = True
            payload["payload_off"] = False
            payload["state_class"] = None
        elif classification.entity_kind is EntityKind.DEVICE_TRACKER:
            payload["source_type"] = "gps"
            payload["state_class"] = None
        else:
            payload["unit_of_measurement"] = self._unit(element, classification)
        return drop_none(payload)

    def state_payload(self, diagnostic: Diagnostic) -> dict[str, Any]:
        """One state document for every element of the group."""
        state: dict[str, Any] = {}
        for element in diagnostic.elements:
            key = convert_name(element.name)
            state[key] = coerce_value(element.name, element.value)
            if element.message is not None:
                state[f"{key}_message"] = element.message
            if element.status is not None:
                state[f"{key}_status"] = element.status
            if element.status_color is not None:
                state[f"{key}_status_color"] = element.status_color
            if element.timestamp is not None:
                state[f"{key}_last_updated"] = element.timestamp
        return state

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def build_config(self, diagnostic: Diagnostic, element: DiagnosticElement) -> DiscoveryMessage:
        return DiscoveryMessage(
            topic=self.config_topic(element),
            payload=self.config_payload(diagnostic, element),
            retain=True,
        )

    def build_state(self, diagnostic: Diagnostic) -> DiscoveryMessage:
        topic = self.state_topic(diagnostic)
        payload = self.state_payload(diagnostic)
        if self._state_cache is not None:
            payload = self._state_cache.merge(topic, payload)
        return DiscoveryMessage(topic=topic, payload=payload, retain=False)

    def build_all(self, diagnostic: Diagnostic) -> list[DiscoveryMessage]:
        """Config messages for every element, then the group's state message."""
        messages = [self.build_config(diagnostic, element) for element in diagnostic.elements]
        messages.append(self.build_state(diagnostic))
        _logger.debug("Built %d messages for %s", len(messages), diagnostic.name)
        return messages
