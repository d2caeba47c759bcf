"""Poll-to-messages orchestration.

:class:`DiagnosticsBridge` wires the parser, the caches and the
discovery builders for one vehicle.  Every method turns one upstream
response into the ordered list of messages to hand to the bus client.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pycarha._constants import PAYLOAD_AVAILABLE, PAYLOAD_NOT_AVAILABLE
from pycarha._redact import redact_for_log
from pycarha.cache.state import StateMergeCache
from pycarha.cache.units import UnitCache
from pycarha.config import CarConfig
from pycarha.discovery.advanced import AdvancedDiagnosticsEntities
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.synthesizer import DiscoverySynthesizer
from pycarha.discovery.vehicle_info import VehicleInfoEntities
from pycarha.discovery.virtual import VirtualEntities
from pycarha.ingestion.advanced import parse_advanced_diagnostics
from pycarha.ingestion.diagnostic import DiagnosticParser
from pycarha.ingestion.errors import polling_status_payload
from pycarha.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DiagnosticsBridge:
    """Turn vehicle-cloud responses into discovery and state messages.

    Usage::

        bridge = DiagnosticsBridge(CarConfig.from_env(), vehicle)
        publisher.publish_all(bridge.diagnostics_messages(response))

    Parameters
    ----------
    config : CarConfig
        Bridge configuration.
    vehicle : Vehicle
        Vehicle the messages describe.
    unit_cache : UnitCache or None
        Shared unit cache; built from *config* when omitted.
    state_cache : StateMergeCache or None
        Shared state cache; built from *config* when omitted.
    clock : callable
        Source of the timestamps in polling and recall state.
    """

    def __init__(
        self,
        config: CarConfig,
        vehicle: Vehicle,
        *,
        unit_cache: UnitCache | None = None,
        state_cache: StateMergeCache | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._vehicle = vehicle
        self._clock = clock
        if unit_cache is None:
            unit_cache = UnitCache.from_config(config)
        if state_cache is None:
            state_cache = StateMergeCache.from_config(config, clock=clock)
        self.unit_cache = unit_cache
        self.state_cache = state_cache
        self._parser = DiagnosticParser(self.unit_cache)
        self.synthesizer = DiscoverySynthesizer(vehicle, config, self.state_cache)
        self._advanced = AdvancedDiagnosticsEntities(vehicle, config, self.state_cache)
        self._virtual = VirtualEntities(vehicle, config)
        self._vehicle_info = VehicleInfoEntities(vehicle, config)

    @property
    def vehicle(self) -> Vehicle:
        return self._vehicle

    def diagnostics_messages(self, payload: Any) -> list[DiscoveryMessage]:
        """Config and state messages for every diagnostic group in *payload*.

        Tire pressure wheels carrying a message also get a message sensor.
        A group whose synthesis fails is logged and skipped.
        """
        _logger.debug("Diagnostics payload: %s", redact_for_log(payload))
        messages: list[DiscoveryMessage] = []
        for diagnostic in self._parser.parse_response(payload):
            try:
                group_messages = self.synthesizer.build_all(diagnostic)
                group_messages.extend(self._virtual.tire_message_configs(diagnostic))
                messages.extend(group_messages)
            except Exception:
                _logger.warning("Skipping diagnostic %s: synthesis failed", diagnostic.name, exc_info=True)
        return messages

    def advanced_diagnostics_messages(self, payload: Any) -> list[DiscoveryMessage]:
        diagnostics = parse_advanced_diagnostics(payload)
        if diagnostics is None:
            _logger.debug("No advanced diagnostics in payload")
            return []
        try:
            return self._advanced.build_all(diagnostics)
        except Exception:
            _logger.warning("Skipping advanced diagnostics: synthesis failed", exc_info=True)
            return []

    def polling_status_messages(
        self,
        error: BaseException | None = None,
        refresh_interval_ms: int | None = None,
    ) -> list[DiscoveryMessage]:
        """Polling-status entities and their state after one poll.

        *error* is the exception the poll failed with, ``None`` on success.
        """
        if error is not None:
            _logger.debug("Publishing polling failure: %s", error)
        virtual = self._virtual
        messages = virtual.polling_status_sensors()
        messages.append(
            DiscoveryMessage(
                topic=virtual.polling_status_state_topic,
                payload=polling_status_payload(error, clock=self._clock),
                retain=True,
            )
        )
        messages.append(
            DiscoveryMessage(
                topic=virtual.polling_status_tf_state_topic,
                payload=PAYLOAD_NOT_AVAILABLE if error is not None else PAYLOAD_AVAILABLE,
                retain=True,
            )
        )
        if refresh_interval_ms is not None:
            messages.append(
                DiscoveryMessage(
                    topic=virtual.topics.refresh_interval_current_val,
                    payload=str(refresh_interval_ms),
                    retain=True,
                )
            )
        return messages

    def command_messages(self, commands: list[str] | None = None) -> list[DiscoveryMessage]:
        """Buttons plus a status and timestamp monitor per supported command."""
        virtual = self._virtual
        messages = virtual.button_configs()
        if not self._config.list_all_sensors_together:
            messages.extend(virtual.monitor_button_configs())
        for command in self._vehicle.get_supported_commands(list(commands or [])):
            messages.append(virtual.command_status_sensor(command))
            messages.append(virtual.command_status_timestamp_sensor(command))
        return messages

    def vehicle_info_messages(
        self,
        recall_payload: Any = None,
        vehicle_payload: Any = None,
        metrics_payload: Any = None,
    ) -> list[DiscoveryMessage]:
        """Image entity, plus recall and EV metrics when their payloads are given."""
        info = self._vehicle_info
        messages = info.image_messages(vehicle_payload)
        if recall_payload is not None:
            messages.extend(info.recall_messages(recall_payload, clock=self._clock))
        if metrics_payload is not None:
            for entity in info.ev_charging_metrics(metrics_payload):
                messages.extend(entity.messages())
        return messages
